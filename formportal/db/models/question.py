from __future__ import annotations

import enum
import json
from datetime import datetime

from sqlalchemy import String, Text, Integer, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formportal.db.base import Base, new_id


class QuestionType(str, enum.Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    MCQ = "mcq"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"
    NUMBER = "number"
    DATE = "date"
    EMAIL = "email"
    PHONE = "phone"


CHOICE_TYPES = (QuestionType.MCQ, QuestionType.CHECKBOX, QuestionType.DROPDOWN)


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    section_id: Mapped[str] = mapped_column(ForeignKey("sections.id"), index=True)

    type: Mapped[QuestionType] = mapped_column(Enum(QuestionType))
    label: Mapped[str] = mapped_column(String(500))
    placeholder: Mapped[str | None] = mapped_column(String(500), nullable=True)
    required: Mapped[bool] = mapped_column(Boolean, default=False)

    # [{"id": ..., "label": ..., "value": ...}] for choice types, stored as JSON text.
    options_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    section = relationship("Section", back_populates="questions")

    @property
    def options(self) -> list[dict] | None:
        if not self.options_json:
            return None
        try:
            v = json.loads(self.options_json)
        except ValueError:
            return None
        return v if isinstance(v, list) else None

    @options.setter
    def options(self, value: list[dict] | None) -> None:
        self.options_json = json.dumps(value, ensure_ascii=False) if value is not None else None

    @property
    def option_values(self) -> list[str]:
        return [str(o.get("value")) for o in (self.options or []) if isinstance(o, dict)]
