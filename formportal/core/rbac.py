from __future__ import annotations

from sqlalchemy.orm import Query

from formportal.core.errors import error_for_status
from formportal.core.security import Identity
from formportal.db.models.user import Role


def require(condition: bool, msg: str = "Insufficient permissions", status_code: int = 403) -> None:
    """Small helper used across routers.

    Defaults to 403 (permission denied). For validation errors or not-found cases,
    pass `status_code=400/404`.
    """
    if not condition:
        raise error_for_status(status_code, msg)


def is_admin(identity: Identity) -> bool:
    return identity.role == Role.ADMIN


def is_agent(identity: Identity) -> bool:
    return identity.role == Role.AGENT


def is_user(identity: Identity) -> bool:
    return identity.role == Role.USER


def agent_bank_id(identity: Identity) -> str:
    require(bool(identity.bank_id), "Agent not assigned to any bank", 400)
    return identity.bank_id


def scope_criteria(identity: Identity, model) -> list:
    """Row filter restricting `model` (with user_id/bank_id columns) to what
    `identity` may see.

      - user  => own rows
      - agent => rows of the assigned bank (400 when no bank is assigned)
      - admin => everything
    """
    if is_user(identity):
        return [model.user_id == identity.user_id]
    if is_agent(identity):
        return [model.bank_id == agent_bank_id(identity)]
    if is_admin(identity):
        return []
    # unknown roles see nothing
    require(False)
    return []


def scoped(q: Query, identity: Identity, model) -> Query:
    crit = scope_criteria(identity, model)
    return q.filter(*crit) if crit else q


def apply_filters(
    q: Query,
    model,
    *,
    bank_id: str | None = None,
    section_id: str | None = None,
    user_id: str | None = None,
    is_submitted: bool | None = None,
) -> Query:
    """AND caller-supplied filters onto an already scoped query.

    These only ever narrow: `scoped()` must have been applied first.
    """
    if bank_id:
        q = q.filter(model.bank_id == bank_id)
    if section_id:
        q = q.filter(model.section_id == section_id)
    if user_id:
        q = q.filter(model.user_id == user_id)
    if is_submitted is not None:
        q = q.filter(model.is_submitted == bool(is_submitted))
    return q
