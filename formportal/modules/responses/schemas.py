from __future__ import annotations

from datetime import datetime
from typing import Any

from formportal.utils.api import CamelModel


class SaveResponseIn(CamelModel):
    # Optional here so a missing field is reported as "Missing required fields".
    section_id: str | None = None
    bank_id: str | None = None
    responses: list[Any] | None = None


class ResponseOut(CamelModel):
    id: str
    user_id: str
    section_id: str
    bank_id: str
    responses: list[Any]
    is_submitted: bool
    submitted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ResponseUserOut(CamelModel):
    id: str
    name: str
    email: str
    phone: str


class ResponseSectionOut(CamelModel):
    id: str
    title: str
    description: str | None = None


class ResponseBankOut(CamelModel):
    id: str
    name: str
    logo: str


class ResponseDetailOut(ResponseOut):
    user: ResponseUserOut
    section: ResponseSectionOut
    bank: ResponseBankOut
