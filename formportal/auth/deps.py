import logging

from fastapi import Request, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from formportal.db.session import get_db
from formportal.core.errors import Unauthorized, Forbidden
from formportal.core.security import Identity, InvalidToken, verify_token
from formportal.db.models.user import Role, User

logger = logging.getLogger("formportal.auth")

bearer = HTTPBearer(auto_error=False)


def _identity_from(request: Request, creds: HTTPAuthorizationCredentials | None) -> Identity | None:
    if creds is None or not creds.credentials:
        return None
    try:
        identity = verify_token(creds.credentials)
    except InvalidToken as exc:
        logger.info("Rejected token on %s: %s", request.url.path, exc)
        raise Forbidden("Invalid or expired token")
    request.state.identity = identity
    return identity


def get_current_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Identity:
    identity = _identity_from(request, creds)
    if identity is None:
        raise Unauthorized("Access token required")
    return identity


def get_optional_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Identity | None:
    return _identity_from(request, creds)


def check_roles(identity: Identity | None, roles: tuple[Role, ...]) -> Identity:
    if identity is None:
        raise Unauthorized("Authentication required")
    if identity.role not in roles:
        raise Forbidden("Insufficient permissions")
    return identity


def require_roles(*roles: Role):
    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        return check_roles(identity, roles)

    return dependency


def get_current_user(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)) -> User:
    user = db.get(User, identity.user_id)
    if not user or not user.is_active:
        raise Unauthorized("User not found")
    return user
