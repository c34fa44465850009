from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from formportal.db.session import get_db
from formportal.auth.deps import require_roles
from formportal.core.rbac import agent_bank_id
from formportal.core.security import Identity
from formportal.db.models.bank import Bank
from formportal.db.models.form_response import FormResponse
from formportal.db.models.user import Role, User
from formportal.modules.stats.schemas import AdminStats, AgentStats
from formportal.utils.api import ok, dump

router = APIRouter(prefix="/stats", tags=["stats"])


def admin_stats(db: Session) -> AdminStats:
    responses_q = db.query(FormResponse)
    return AdminStats(
        total_users=db.query(User).filter(User.role == Role.USER).count(),
        total_agents=db.query(User).filter(User.role == Role.AGENT).count(),
        total_banks=db.query(Bank).count(),
        total_responses=responses_q.count(),
        submitted_responses=responses_q.filter(FormResponse.is_submitted.is_(True)).count(),
        pending_responses=responses_q.filter(FormResponse.is_submitted.is_(False)).count(),
    )


def agent_stats(db: Session, bank_id: str) -> AgentStats:
    responses_q = db.query(FormResponse).filter(FormResponse.bank_id == bank_id)
    return AgentStats(
        total_responses=responses_q.count(),
        submitted_responses=responses_q.filter(FormResponse.is_submitted.is_(True)).count(),
        pending_responses=responses_q.filter(FormResponse.is_submitted.is_(False)).count(),
        total_users=(
            db.query(func.count(func.distinct(FormResponse.user_id)))
            .filter(FormResponse.bank_id == bank_id)
            .scalar()
            or 0
        ),
    )


@router.get("/admin")
def get_admin_stats(db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    return ok(dump(admin_stats(db)))


@router.get("/agent")
def get_agent_stats(db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.AGENT))):
    return ok(dump(agent_stats(db, agent_bank_id(identity))))
