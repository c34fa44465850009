from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formportal.db.base import Base, new_id


class FormResponse(Base):
    """One user's answers to one section; at most one row per (user, section)."""

    __tablename__ = "form_responses"
    __table_args__ = (
        UniqueConstraint("user_id", "section_id", name="uq_form_responses_user_section"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True)
    section_id: Mapped[str] = mapped_column(ForeignKey("sections.id"), index=True)
    bank_id: Mapped[str] = mapped_column(ForeignKey("banks.id"), index=True)

    # [{"questionId": ..., "value": ...}]
    responses_json: Mapped[str] = mapped_column(Text, default="[]")

    is_submitted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="responses")
    section = relationship("Section", back_populates="responses")
    bank = relationship("Bank")

    @property
    def responses(self) -> list[dict]:
        try:
            v = json.loads(self.responses_json or "[]")
        except ValueError:
            return []
        return v if isinstance(v, list) else []
