import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import select, func, case

from ..db import get_session
from ..models.user import User
from ..models.request import AccessRequest, PENDING
from ..core.current_user import Identity
from ..core.errors import NotFound, ValidationFailed
from ..core.permissions import requires
from ..schemas.admin_user import AdminUserOut, UserRoleUpdateIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/users", tags=["admin-users"])


def user_stats_stmt():
    pending_case = case((AccessRequest.status == PENDING, 1), else_=0)
    return (
        select(
            User.id,
            User.username,
            User.full_name,
            User.email,
            User.role,
            func.coalesce(func.sum(pending_case), 0).label("pending"),
            func.count(AccessRequest.id).label("total"),
        )
        .outerjoin(AccessRequest, AccessRequest.user_id == User.id)
        .group_by(
            User.id,
            User.username,
            User.full_name,
            User.email,
            User.role,
        )
    )


@router.get("", response_model=list[AdminUserOut])
def list_users(
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("user:list")),
):
    stmt = user_stats_stmt().order_by(User.id.asc())
    rows = session.execute(stmt).mappings().all()
    return [AdminUserOut(**row) for row in rows]


@router.patch("/{user_id}/role", response_model=AdminUserOut)
def update_role(
    user_id: int,
    payload: UserRoleUpdateIn,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("user:update_role")),
):
    if user_id == identity.user_id:
        raise ValidationFailed("Admins cannot change their own role")

    target = session.get(User, user_id)
    if not target:
        raise NotFound("User not found")

    old = target.role
    target.role = payload.role
    session.commit()
    logger.info("role changed (user_id=%s %s -> %s by %s)", user_id, old, payload.role, identity.user_id)

    row = session.execute(user_stats_stmt().where(User.id == user_id)).mappings().first()
    return AdminUserOut(**row)
