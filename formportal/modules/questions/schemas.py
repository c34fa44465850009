from __future__ import annotations

from datetime import datetime

from formportal.db.models.question import QuestionType
from formportal.utils.api import CamelModel


class QuestionOption(CamelModel):
    id: str | None = None
    label: str
    value: str


class QuestionIn(CamelModel):
    type: QuestionType
    label: str
    placeholder: str | None = None
    required: bool = False
    options: list[QuestionOption] | None = None
    order: int = 0


class QuestionUpdate(CamelModel):
    """Partial update; omitted or null fields keep their stored value."""

    type: QuestionType | None = None
    label: str | None = None
    placeholder: str | None = None
    required: bool | None = None
    options: list[QuestionOption] | None = None
    order: int | None = None


class QuestionOut(CamelModel):
    id: str
    section_id: str
    type: QuestionType
    label: str
    placeholder: str | None = None
    required: bool
    options: list[QuestionOption] | None = None
    order: int
    created_at: datetime
