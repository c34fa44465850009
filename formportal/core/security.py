from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from formportal.core.config import settings
from formportal.db.models.user import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidToken(Exception):
    """Token signature, expiry or claims could not be verified."""


@dataclass(frozen=True)
class Identity:
    """Decoded credential; lives for one request."""

    user_id: str
    role: Role
    bank_id: str | None = None

    def __post_init__(self):
        # bank_id only means something for agents
        if self.role != Role.AGENT and self.bank_id is not None:
            object.__setattr__(self, "bank_id", None)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def issue_token(identity: Identity, expires_in: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": identity.user_id,
        "role": identity.role.value,
        "iat": now,
        "exp": now + (expires_in or timedelta(seconds=settings.JWT_EXPIRES_SECONDS)),
    }
    if identity.bank_id:
        claims["bankId"] = identity.bank_id
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    user_id = payload.get("userId")
    if not user_id or not isinstance(user_id, str):
        raise InvalidToken("userId claim missing")
    try:
        role = Role(payload.get("role"))
    except ValueError as exc:
        raise InvalidToken("unknown role") from exc

    bank_id = payload.get("bankId")
    return Identity(user_id=user_id, role=role, bank_id=bank_id or None)
