from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from formportal.db.session import get_db
from formportal.auth.deps import get_optional_identity, require_roles
from formportal.core.errors import Conflict
from formportal.core.rbac import is_admin, require
from formportal.core.security import Identity
from formportal.db.models.bank import Bank
from formportal.db.models.user import Role
from formportal.modules.banks.schemas import BankIn, BankUpdate, BankOut
from formportal.utils.api import ok, dump

logger = logging.getLogger("formportal.banks")

router = APIRouter(prefix="/banks", tags=["banks"])


def _commit_unique(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("A bank with this name already exists.")


@router.get("")
def list_banks(db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    # Public: the registration page lists banks for agents to pick from.
    q = db.query(Bank)
    if identity is None or not is_admin(identity):
        q = q.filter(Bank.is_active.is_(True))
    banks = q.order_by(Bank.name.asc()).all()
    return ok([dump(BankOut.model_validate(b)) for b in banks])


@router.get("/{bank_id}")
def get_bank(bank_id: str, db: Session = Depends(get_db), identity: Identity | None = Depends(get_optional_identity)):
    bank = db.get(Bank, bank_id)
    visible = bank is not None and (bank.is_active or (identity is not None and is_admin(identity)))
    require(visible, "Bank not found", 404)
    return ok(dump(BankOut.model_validate(bank)))


@router.post("")
def create(body: BankIn, db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    name = (body.name or "").strip()
    require(bool(name), "Name cannot be empty.", 400)
    bank = Bank(name=name, logo=body.logo.strip(), description=body.description, is_active=body.is_active)
    db.add(bank)
    _commit_unique(db)
    db.refresh(bank)
    return ok(dump(BankOut.model_validate(bank)))


@router.put("/{bank_id}")
def update(
    bank_id: str,
    body: BankUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    bank = db.get(Bank, bank_id)
    require(bank is not None, "Bank not found", 404)

    changes = body.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        bank.name = changes["name"].strip()
        require(bool(bank.name), "Name cannot be empty.", 400)
    if changes.get("logo") is not None:
        bank.logo = changes["logo"].strip()
    if "description" in changes:
        bank.description = changes["description"]
    if changes.get("is_active") is not None:
        bank.is_active = changes["is_active"]

    _commit_unique(db)
    db.refresh(bank)
    return ok(dump(BankOut.model_validate(bank)))


@router.delete("/{bank_id}")
def delete(bank_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    bank = db.get(Bank, bank_id)
    require(bank is not None, "Bank not found", 404)
    db.delete(bank)
    db.commit()
    logger.info("Bank %s deleted by %s", bank_id, identity.user_id)
    return ok(message="Bank deleted successfully")
