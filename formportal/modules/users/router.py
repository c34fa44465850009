from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from formportal.db.session import get_db
from formportal.auth.deps import require_roles
from formportal.core.rbac import require
from formportal.core.security import Identity
from formportal.db.models.bank import Bank
from formportal.db.models.user import User, Role
from formportal.modules.users.schemas import UserOut, UserUpdate
from formportal.utils.api import ok, dump

router = APIRouter(prefix="/users", tags=["users"])


def validate_role_context(db: Session, role: Role, bank_id: str | None, active_only: bool = True) -> str | None:
    # Return error message if invalid, else None
    if role == Role.AGENT:
        if not bank_id:
            return "Agents must be assigned to a bank."
        bank = db.get(Bank, bank_id)
        if bank is None or (active_only and not bank.is_active):
            return "Bank not found."
    return None


@router.get("")
def list_users(
    role: Role | None = Query(None),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    q = db.query(User)
    if role is not None:
        q = q.filter(User.role == role)
    users = q.order_by(User.created_at.desc()).all()
    return ok([dump(UserOut.model_validate(u)) for u in users])


@router.put("/{user_id}")
def update(
    user_id: str,
    body: UserUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_roles(Role.ADMIN)),
):
    u = db.get(User, user_id)
    require(u is not None, "User not found", 404)

    changes = body.model_dump(exclude_unset=True)
    role = changes.get("role") or u.role
    bank_id = changes["bank_id"] if "bank_id" in changes else u.bank_id
    if role != Role.AGENT:
        bank_id = None

    if u.id == identity.user_id:
        # do not allow locking yourself out
        require(role == Role.ADMIN, "You cannot change your own role.", 400)
        require(changes.get("is_active") is not False, "You cannot deactivate your own account.", 400)

    err = validate_role_context(db, role, bank_id, active_only=False)
    require(err is None, err or "", 400)

    if changes.get("name") is not None:
        require(bool(changes["name"].strip()), "Name cannot be empty.", 400)
        u.name = changes["name"].strip()
    if changes.get("phone") is not None:
        u.phone = changes["phone"].strip()
    if changes.get("is_active") is not None:
        u.is_active = changes["is_active"]
    u.role = role
    u.bank_id = bank_id

    db.commit()
    db.refresh(u)
    return ok(dump(UserOut.model_validate(u)))


@router.delete("/{user_id}")
def delete(user_id: str, db: Session = Depends(get_db), identity: Identity = Depends(require_roles(Role.ADMIN))):
    require(user_id != identity.user_id, "You cannot delete your own account.", 400)
    u = db.get(User, user_id)
    require(u is not None, "User not found", 404)
    db.delete(u)
    db.commit()
    return ok(message="User deleted successfully")
