from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_MISSING = object()


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; readable from ORM rows."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def dump(model: BaseModel) -> dict:
    return model.model_dump(by_alias=True, mode="json")


def ok(data: Any = _MISSING, message: str | None = None) -> dict:
    """Success envelope: {success, data?, message?}. `data=None` is kept as null."""
    body: dict = {"success": True}
    if data is not _MISSING:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def fail(message: str) -> dict:
    return {"success": False, "message": message}
