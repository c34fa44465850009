from __future__ import annotations

from datetime import datetime

from formportal.modules.questions.schemas import QuestionOut
from formportal.utils.api import CamelModel


class SectionIn(CamelModel):
    bank_id: str
    title: str
    description: str | None = None
    order: int = 0
    is_active: bool = True


class SectionUpdate(CamelModel):
    title: str | None = None
    description: str | None = None
    order: int | None = None
    is_active: bool | None = None


class SectionOut(CamelModel):
    id: str
    bank_id: str
    title: str
    description: str | None = None
    order: int
    is_active: bool
    questions: list[QuestionOut] = []
    created_at: datetime
