from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from formportal.auth.deps import get_current_user
from formportal.auth.schemas import RegisterIn, LoginIn, AuthOut
from formportal.core.errors import Conflict, Unauthorized, Forbidden
from formportal.core.rbac import require
from formportal.core.security import Identity, hash_password, verify_password, issue_token
from formportal.db.models.user import User, Role
from formportal.db.session import get_db
from formportal.modules.users.router import validate_role_context
from formportal.modules.users.schemas import UserOut
from formportal.utils.api import ok, dump

logger = logging.getLogger("formportal.auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_payload(user: User) -> dict:
    token = issue_token(Identity(user_id=user.id, role=user.role, bank_id=user.bank_id))
    return dump(AuthOut(user=UserOut.model_validate(user), token=token))


@router.post("/register")
def register(body: RegisterIn, db: Session = Depends(get_db)):
    # Admin accounts are created by an admin or the bootstrap script only.
    require(body.role in (Role.USER, Role.AGENT), "Cannot self-register with this role.", 403)

    bank_id = body.bank_id if body.role == Role.AGENT else None
    err = validate_role_context(db, body.role, bank_id)
    require(err is None, err or "", 400)

    if db.query(User).filter(User.email == body.email).first():
        raise Conflict("Email already registered")

    user = User(
        name=body.name.strip(),
        email=body.email,
        phone=body.phone.strip(),
        password_hash=hash_password(body.password),
        role=body.role,
        bank_id=bank_id,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    db.refresh(user)
    logger.info("Registered %s account %s", user.role.value, user.id)
    return ok(_auth_payload(user))


@router.post("/login")
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == body.email.strip().lower()).first()
    if not user or not verify_password(body.password, user.password_hash):
        raise Unauthorized("Invalid email or password")
    if body.role is not None and user.role != body.role:
        raise Unauthorized("Invalid email or password")
    if not user.is_active:
        raise Forbidden("This account is disabled")
    return ok(_auth_payload(user))


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return ok(dump(UserOut.model_validate(user)))
