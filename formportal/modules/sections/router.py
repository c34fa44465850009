from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, selectinload

from formportal.db.session import get_db
from formportal.auth.deps import get_current_identity, require_roles
from formportal.core.rbac import is_admin, require
from formportal.core.security import Identity
from formportal.db.models.bank import Bank
from formportal.db.models.question import Question
from formportal.db.models.section import Section
from formportal.db.models.user import Role
from formportal.modules.questions.schemas import QuestionIn, QuestionOut
from formportal.modules.sections.schemas import SectionIn, SectionUpdate, SectionOut
from formportal.utils.answers import validate_question, normalize_options
from formportal.utils.api import ok, dump

logger = logging.getLogger("formportal.sections")

router = APIRouter(prefix="/sections", tags=["sections"])


def _visible(section: Section | None, identity: Identity) -> bool:
    if section is None:
        return False
    if is_admin(identity):
        return True
    return section.is_active and section.bank.is_active


@router.get("")
def list_sections(
    bank_id: str | None = Query(None, alias="bankId"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    q = db.query(Section).options(selectinload(Section.questions))
    if bank_id:
        q = q.filter(Section.bank_id == bank_id)
    if not is_admin(identity):
        q = q.join(Bank, Bank.id == Section.bank_id).filter(Section.is_active.is_(True), Bank.is_active.is_(True))
    sections = q.order_by(Section.order.asc(), Section.created_at.asc()).all()
    return ok([dump(SectionOut.model_validate(s)) for s in sections])


@router.get("/{section_id}")
def get_section(section_id: str, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    s = db.get(Section, section_id)
    require(_visible(s, identity), "Section not found", 404)
    return ok(dump(SectionOut.model_validate(s)))


@router.post("")
def create(body: SectionIn, db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    require(db.get(Bank, body.bank_id) is not None, "Bank not found", 404)
    require(bool(body.title.strip()), "Title cannot be empty.", 400)

    s = Section(
        bank_id=body.bank_id,
        title=body.title.strip(),
        description=body.description,
        order=body.order,
        is_active=body.is_active,
    )
    db.add(s)
    db.commit()
    db.refresh(s)
    return ok(dump(SectionOut.model_validate(s)))


@router.put("/{section_id}")
def update(
    section_id: str,
    body: SectionUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    s = db.get(Section, section_id)
    require(s is not None, "Section not found", 404)

    changes = body.model_dump(exclude_unset=True)
    if changes.get("title") is not None:
        require(bool(changes["title"].strip()), "Title cannot be empty.", 400)
        s.title = changes["title"].strip()
    if "description" in changes:
        s.description = changes["description"]
    if changes.get("order") is not None:
        s.order = changes["order"]
    if changes.get("is_active") is not None:
        s.is_active = changes["is_active"]

    db.commit()
    db.refresh(s)
    return ok(dump(SectionOut.model_validate(s)))


@router.delete("/{section_id}")
def delete(section_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    s = db.get(Section, section_id)
    require(s is not None, "Section not found", 404)
    # questions and responses go with it
    db.delete(s)
    db.commit()
    logger.info("Section %s deleted by %s", section_id, identity.user_id)
    return ok(message="Section deleted successfully")


@router.post("/{section_id}/questions")
def add_question(
    section_id: str,
    body: QuestionIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    s = db.get(Section, section_id)
    require(s is not None, "Section not found", 404)

    options = [o.model_dump() for o in body.options] if body.options is not None else None
    errors = validate_question(body.type, options)
    if not body.label.strip():
        errors.append("Label cannot be empty.")
    require(not errors, "; ".join(errors), 400)

    q = Question(
        section_id=s.id,
        type=body.type,
        label=body.label.strip(),
        placeholder=body.placeholder,
        required=body.required,
        order=body.order,
    )
    q.options = normalize_options(options)
    db.add(q)
    db.commit()
    db.refresh(q)
    return ok(dump(QuestionOut.model_validate(q)))
