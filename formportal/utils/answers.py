from __future__ import annotations

import re as _re
from datetime import datetime

from pydantic import EmailStr, TypeAdapter, ValidationError

from formportal.db.base import new_id
from formportal.db.models.question import Question, QuestionType, CHOICE_TYPES

_EMAIL = TypeAdapter(EmailStr)
_PHONE_RE = _re.compile(r"^\+?[0-9\s\-()]{7,20}$")
_DATE_RE = _re.compile(r"^\d{4}-\d{2}-\d{2}$")
_PHONE_MIN_DIGITS = 7


def _is_empty(val) -> bool:
    return val is None or val == "" or (isinstance(val, list) and len(val) == 0)


def _text(q: Question, val) -> str | None:
    if not isinstance(val, str):
        return f"'{q.label}' must be text."
    return None


def _email(q: Question, val) -> str | None:
    if not isinstance(val, str):
        return f"'{q.label}' must be a valid email address."
    try:
        _EMAIL.validate_python(val.strip())
    except ValidationError:
        return f"'{q.label}' must be a valid email address."
    return None


def _phone(q: Question, val) -> str | None:
    if (
        not isinstance(val, str)
        or not _PHONE_RE.match(val.strip())
        or sum(c.isdigit() for c in val) < _PHONE_MIN_DIGITS
    ):
        return f"'{q.label}' must be a valid phone number."
    return None


def _number(q: Question, val) -> str | None:
    if isinstance(val, bool):
        return f"'{q.label}' must be a number."
    try:
        float(val)
    except (TypeError, ValueError):
        return f"'{q.label}' must be a number."
    return None


def _date(q: Question, val) -> str | None:
    if not isinstance(val, str):
        return f"'{q.label}' must be a date."
    # strptime alone accepts unpadded months and days
    if not _DATE_RE.match(val):
        return f"'{q.label}' must be a date in YYYY-MM-DD format."
    try:
        datetime.strptime(val, "%Y-%m-%d")
    except ValueError:
        return f"'{q.label}' must be a date in YYYY-MM-DD format."
    return None


def _single_choice(q: Question, val) -> str | None:
    if not isinstance(val, str) or val not in q.option_values:
        return f"'{q.label}' must be one of the defined options."
    return None


def _multi_choice(q: Question, val) -> str | None:
    if not isinstance(val, list):
        return f"'{q.label}' must be a list."
    allowed = set(q.option_values)
    if any(not isinstance(v, str) or v not in allowed for v in val):
        return f"'{q.label}' contains an invalid option."
    return None


VALIDATORS = {
    QuestionType.TEXT: _text,
    QuestionType.TEXTAREA: _text,
    QuestionType.EMAIL: _email,
    QuestionType.PHONE: _phone,
    QuestionType.NUMBER: _number,
    QuestionType.DATE: _date,
    QuestionType.MCQ: _single_choice,
    QuestionType.DROPDOWN: _single_choice,
    QuestionType.CHECKBOX: _multi_choice,
}


def normalize_answers(answers) -> tuple[list[dict], list[str]]:
    """Check the shape of a `responses` payload: a list of {questionId, value}.

    Later entries for the same question replace earlier ones.
    """
    if not isinstance(answers, list):
        return [], ["responses must be a list."]

    errors: list[str] = []
    by_qid: dict[str, dict] = {}
    for i, a in enumerate(answers):
        if not isinstance(a, dict) or not a.get("questionId"):
            errors.append(f"responses[{i}] must have a questionId.")
            continue
        qid = str(a["questionId"])
        by_qid[qid] = {"questionId": qid, "value": a.get("value")}
    return list(by_qid.values()), errors


def validate_answers(questions: list[Question], answers: list[dict]) -> list[str]:
    """Per-type validation of answers against the section's questions.

    Empty values are accepted (partial auto-save). Answers for ids that are not
    in `questions` are left alone.
    """
    errors: list[str] = []
    qmap = {q.id: q for q in questions}
    for a in answers:
        q = qmap.get(a.get("questionId"))
        if q is None:
            continue
        val = a.get("value")
        if _is_empty(val):
            continue
        err = VALIDATORS[q.type](q, val)
        if err:
            errors.append(err)
    return errors


def missing_required(questions: list[Question], answers: list[dict]) -> list[str]:
    given = {a.get("questionId"): a.get("value") for a in answers if isinstance(a, dict)}
    return [q.label for q in questions if q.required and _is_empty(given.get(q.id))]


def validate_question(qtype: QuestionType, options: list[dict] | None) -> list[str]:
    errors: list[str] = []
    if qtype in CHOICE_TYPES:
        if not options:
            errors.append(f"Questions of type '{qtype.value}' need at least one option.")
            return errors
        seen: set[str] = set()
        for i, o in enumerate(options):
            if not isinstance(o, dict) or _is_empty(o.get("value")) or _is_empty(o.get("label")):
                errors.append(f"options[{i}] needs a label and a value.")
                continue
            v = str(o.get("value"))
            if v in seen:
                errors.append(f"Duplicate option value '{v}'.")
            seen.add(v)
    return errors


def normalize_options(options: list[dict] | None) -> list[dict] | None:
    """Give every option an id; options arrive without one from new forms."""
    if options is None:
        return None
    return [{**o, "id": o.get("id") or new_id()} for o in options]
