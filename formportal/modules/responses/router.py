from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from formportal.db.session import get_db
from formportal.auth.deps import get_current_identity
from formportal.core.errors import ResponseNotFound
from formportal.core.rbac import scoped, apply_filters
from formportal.core.security import Identity
from formportal.db.models.form_response import FormResponse
from formportal.modules.responses import lifecycle
from formportal.modules.responses.schemas import SaveResponseIn, ResponseOut, ResponseDetailOut
from formportal.utils.api import ok, dump

router = APIRouter(prefix="/responses", tags=["responses"])


def _detail_query(db: Session):
    return db.query(FormResponse).options(
        joinedload(FormResponse.user),
        joinedload(FormResponse.section),
        joinedload(FormResponse.bank),
    )


@router.get("")
def list_responses(
    bank_id: str | None = Query(None, alias="bankId"),
    section_id: str | None = Query(None, alias="sectionId"),
    user_id: str | None = Query(None, alias="userId"),
    is_submitted: bool | None = Query(None, alias="isSubmitted"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    q = scoped(_detail_query(db), identity, FormResponse)
    q = apply_filters(q, FormResponse, bank_id=bank_id, section_id=section_id, user_id=user_id, is_submitted=is_submitted)
    rows = q.order_by(FormResponse.updated_at.desc()).all()
    return ok([dump(ResponseDetailOut.model_validate(r)) for r in rows])


@router.get("/user/section/{section_id}")
def my_response_for_section(
    section_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = lifecycle.get_for_user_section(db, identity.user_id, section_id)
    return ok(dump(ResponseOut.model_validate(row)) if row else None)


@router.post("/save")
def save_response(
    body: SaveResponseIn,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = lifecycle.save(db, identity.user_id, body.section_id, body.bank_id, body.responses)
    return ok(dump(ResponseOut.model_validate(row)))


@router.post("/{response_id}/submit")
def submit_response(
    response_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = lifecycle.submit(db, response_id, identity.user_id)
    return ok(dump(ResponseOut.model_validate(row)))


@router.get("/{response_id}")
def get_response(
    response_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    row = scoped(_detail_query(db), identity, FormResponse).filter(FormResponse.id == response_id).first()
    if row is None:
        raise ResponseNotFound()
    return ok(dump(ResponseDetailOut.model_validate(row)))
