from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formportal.db.session import get_db
from formportal.auth.deps import require_roles
from formportal.core.rbac import require
from formportal.core.security import Identity
from formportal.db.models.question import Question
from formportal.db.models.user import Role
from formportal.modules.questions.schemas import QuestionUpdate, QuestionOut
from formportal.utils.answers import validate_question, normalize_options
from formportal.utils.api import ok, dump

logger = logging.getLogger("formportal.questions")

router = APIRouter(prefix="/questions", tags=["questions"])


@router.put("/{question_id}")
def update(
    question_id: str,
    body: QuestionUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    q = db.get(Question, question_id)
    require(q is not None, "Question not found", 404)

    # COALESCE semantics: null never clears a stored value
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}

    qtype = changes.get("type", q.type)
    options = changes["options"] if "options" in changes else q.options
    errors = validate_question(qtype, options)
    if "label" in changes and not changes["label"].strip():
        errors.append("Label cannot be empty.")
    require(not errors, "; ".join(errors), 400)

    for field in ("type", "label", "placeholder", "required", "order"):
        if field in changes:
            setattr(q, field, changes[field])
    if "options" in changes:
        q.options = normalize_options(changes["options"])

    db.commit()
    db.refresh(q)
    return ok(dump(QuestionOut.model_validate(q)))


@router.delete("/{question_id}")
def delete(
    question_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    q = db.get(Question, question_id)
    require(q is not None, "Question not found", 404)
    db.delete(q)
    db.commit()
    logger.info("Question %s deleted by %s", question_id, identity.user_id)
    return ok(message="Question deleted successfully")
