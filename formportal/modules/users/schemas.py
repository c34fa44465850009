from __future__ import annotations

from datetime import datetime

from formportal.db.models.user import Role
from formportal.utils.api import CamelModel


class UserOut(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    role: Role
    role_label: str
    bank_id: str | None = None
    is_active: bool
    created_at: datetime


class UserUpdate(CamelModel):
    name: str | None = None
    phone: str | None = None
    role: Role | None = None
    bank_id: str | None = None
    is_active: bool | None = None
