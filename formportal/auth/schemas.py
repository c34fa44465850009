from __future__ import annotations

from pydantic import EmailStr, Field, field_validator

from formportal.db.models.user import Role
from formportal.modules.users.schemas import UserOut
from formportal.utils.api import CamelModel


class RegisterIn(CamelModel):
    name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=10)
    password: str = Field(min_length=6)
    role: Role = Role.USER
    bank_id: str | None = None

    @field_validator("email", mode="after")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()


class LoginIn(CamelModel):
    email: str
    password: str
    role: Role | None = None


class AuthOut(CamelModel):
    user: UserOut
    token: str
