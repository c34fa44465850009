import enum
from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from formportal.db.base import Base, new_id

class Role(str, enum.Enum):
    ADMIN = "admin"
    AGENT = "agent"
    USER = "user"

ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.AGENT: "Insurance Agent",
    Role.USER: "User",
}

class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120))
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(30), default="")
    password_hash: Mapped[str] = mapped_column(String(255))

    role: Mapped[Role] = mapped_column(Enum(Role), index=True)

    # Agents only
    bank_id: Mapped[str | None] = mapped_column(ForeignKey("banks.id"), nullable=True, index=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bank = relationship("Bank", back_populates="agents")
    responses = relationship("FormResponse", back_populates="user", cascade="all, delete-orphan")

    @property
    def role_label(self) -> str:
        return ROLE_LABELS.get(self.role, self.role.value)
