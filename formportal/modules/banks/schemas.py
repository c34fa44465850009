from __future__ import annotations

from datetime import datetime

from formportal.utils.api import CamelModel


class BankIn(CamelModel):
    name: str
    logo: str = ""
    description: str | None = None
    is_active: bool = True


class BankUpdate(CamelModel):
    name: str | None = None
    logo: str | None = None
    description: str | None = None
    is_active: bool | None = None


class BankOut(CamelModel):
    id: str
    name: str
    logo: str
    description: str | None = None
    is_active: bool
    created_at: datetime
