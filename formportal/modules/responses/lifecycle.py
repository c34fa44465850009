"""Create-or-update-then-submit progression of one user's answers to a section.

A response row is created by the first save, replaced wholesale by every
following save (auto-save, last write wins), and frozen by submit.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime

from sqlalchemy import false, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from formportal.core.errors import Conflict, ResponseNotFound, ResponseNotOwned
from formportal.core.rbac import require
from formportal.db.base import new_id
from formportal.db.models.form_response import FormResponse
from formportal.db.models.section import Section
from formportal.utils.answers import normalize_answers, validate_answers, missing_required

logger = logging.getLogger("formportal.responses")


def get_for_user_section(db: Session, user_id: str, section_id: str) -> FormResponse | None:
    return (
        db.query(FormResponse)
        .filter(FormResponse.user_id == user_id, FormResponse.section_id == section_id)
        .populate_existing()
        .first()
    )


def _upsert_stmt(dialect: str, values: dict):
    """Single-statement insert-or-update on (user_id, section_id).

    Rows already submitted are left untouched.
    """
    if dialect in ("sqlite", "postgresql"):
        if dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            from sqlalchemy.dialects.postgresql import insert
        stmt = insert(FormResponse).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[FormResponse.user_id, FormResponse.section_id],
            set_={
                "responses_json": stmt.excluded.responses_json,
                "updated_at": stmt.excluded.updated_at,
            },
            where=FormResponse.is_submitted == false(),
        )

    if dialect in ("mysql", "mariadb"):
        from sqlalchemy.dialects.mysql import insert

        stmt = insert(FormResponse).values(**values)
        return stmt.on_duplicate_key_update(
            responses_json=func.if_(
                FormResponse.is_submitted, FormResponse.responses_json, stmt.inserted.responses_json
            ),
            updated_at=func.if_(FormResponse.is_submitted, FormResponse.updated_at, stmt.inserted.updated_at),
        )

    return None


def _check_then_write(db: Session, values: dict) -> None:
    # Dialects without an upsert statement: the unique constraint decides races.
    existing = get_for_user_section(db, values["user_id"], values["section_id"])
    if existing is None:
        db.add(FormResponse(**values))
    elif not existing.is_submitted:
        existing.responses_json = values["responses_json"]
        existing.updated_at = values["updated_at"]
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise Conflict("Response was saved concurrently, retry")


def save(db: Session, user_id: str, section_id: str | None, bank_id: str | None, responses) -> FormResponse:
    require(bool(section_id) and bool(bank_id) and responses is not None, "Missing required fields", 400)

    section = db.get(Section, section_id)
    require(section is not None, "Section not found", 404)
    require(section.bank_id == bank_id, "Section does not belong to this bank", 400)
    require(section.is_active and section.bank.is_active, "Section is not accepting responses", 400)

    answers, errors = normalize_answers(responses)
    errors += validate_answers(section.questions, answers)
    require(not errors, "; ".join(errors), 400)

    existing = get_for_user_section(db, user_id, section_id)
    if existing is not None and existing.is_submitted:
        raise Conflict("Response already submitted")

    now = datetime.utcnow()
    values = {
        "id": new_id(),
        "user_id": user_id,
        "section_id": section_id,
        "bank_id": bank_id,
        "responses_json": json.dumps(answers, ensure_ascii=False),
        "is_submitted": False,
        "created_at": now,
        "updated_at": now,
    }

    stmt = _upsert_stmt(db.get_bind().dialect.name, values)
    if stmt is not None:
        db.execute(stmt)
    else:
        _check_then_write(db, values)
    db.commit()

    row = get_for_user_section(db, user_id, section_id)
    if row.is_submitted and row.responses_json != values["responses_json"]:
        # a submit landed between our check and the upsert
        raise Conflict("Response already submitted")
    logger.debug("Saved response %s (user=%s section=%s)", row.id, user_id, section_id)
    return row


def submit(db: Session, response_id: str, user_id: str) -> FormResponse:
    row = db.get(FormResponse, response_id)
    if row is None:
        raise ResponseNotFound()
    if row.user_id != user_id:
        raise ResponseNotOwned()

    if row.is_submitted:
        return row

    missing = missing_required(row.section.questions, row.responses)
    require(not missing, "Required questions unanswered: " + ", ".join(missing), 400)

    now = datetime.utcnow()
    updated = (
        db.query(FormResponse)
        .filter(
            FormResponse.id == response_id,
            FormResponse.user_id == user_id,
            FormResponse.is_submitted == false(),
        )
        .update(
            {"is_submitted": True, "submitted_at": now, "updated_at": now},
            synchronize_session=False,
        )
    )
    db.commit()
    db.refresh(row)
    if updated:
        logger.info("Response %s submitted by user %s", row.id, user_id)
    return row
