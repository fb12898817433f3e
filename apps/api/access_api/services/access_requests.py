"""
Access request lifecycle.

A request is created Pending by any authenticated user and moved exactly once
to Approved or Rejected by a Manager or Admin. Both invariants that depend on
current state (one Pending request per user/software/access type, and the
terminal-state guard) are enforced by the database rather than by the
preceding read alone: the partial unique index on ``requests`` and a
conditional UPDATE predicated on ``status = 'Pending'``.
"""
from __future__ import annotations

from datetime import datetime, timezone
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..core.current_user import Identity
from ..core.errors import AlreadyProcessed, Conflict, Forbidden, NotFound, ValidationFailed
from ..core.permissions import can_view_request, require_capability
from ..core.request_rules import REVIEW_OUTCOMES, can_transition
from ..models.event import RequestEvent
from ..models.request import AccessRequest, PENDING
from ..models.software import ACCESS_LEVELS, Software
from ..models.user import User

logger = logging.getLogger(__name__)

DUPLICATE_PENDING = "A similar request is already pending"


def _with_relations(stmt):
    return stmt.options(selectinload(AccessRequest.user), selectinload(AccessRequest.software))


def load_request(session: Session, request_id: int) -> AccessRequest | None:
    stmt = _with_relations(select(AccessRequest).where(AccessRequest.id == request_id))
    return session.scalar(stmt.execution_options(populate_existing=True))


def create_request(
    session: Session,
    identity: Identity,
    *,
    software_id: int | None,
    access_type: str | None,
    reason: str | None,
) -> AccessRequest:
    require_capability(identity, "request:create")

    reason = (reason or "").strip()
    if not software_id or not access_type or not reason:
        raise ValidationFailed("Software ID, access type, and reason are required")
    if access_type not in ACCESS_LEVELS:
        raise ValidationFailed("Access type must be one of: Read, Write, Admin")

    software = session.get(Software, software_id)
    if not software:
        raise NotFound("Software not found")
    if access_type not in (software.access_levels or []):
        raise ValidationFailed(f"Software does not support {access_type} access level")

    # The token may outlive the account.
    if not session.get(User, identity.user_id):
        raise NotFound("User not found")

    existing = session.scalar(
        select(AccessRequest.id)
        .where(AccessRequest.user_id == identity.user_id)
        .where(AccessRequest.software_id == software_id)
        .where(AccessRequest.access_type == access_type)
        .where(AccessRequest.status == PENDING)
        .limit(1)
    )
    if existing:
        raise Conflict(DUPLICATE_PENDING)

    req = AccessRequest(
        user_id=identity.user_id,
        software_id=software_id,
        access_type=access_type,
        reason=reason,
        status=PENDING,
        created_at=datetime.now(timezone.utc),
    )
    session.add(req)
    try:
        session.flush()
    except IntegrityError:
        # Lost the race against a concurrent identical submission.
        session.rollback()
        raise Conflict(DUPLICATE_PENDING)

    session.add(
        RequestEvent(
            request_id=req.id,
            actor_id=identity.user_id,
            type="request_created",
            from_value=None,
            to_value=PENDING,
            note=None,
        )
    )
    session.commit()
    logger.info(
        "access request created (request_id=%s user_id=%s software_id=%s access_type=%s)",
        req.id, identity.user_id, software_id, access_type,
    )
    return load_request(session, req.id)


def _page(stmt, limit, offset):
    # No limit means the full list.
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt.offset(offset) if offset else stmt


def list_user_requests(
    session: Session, identity: Identity, *, limit: int | None = None, offset: int = 0
) -> list[AccessRequest]:
    require_capability(identity, "request:list_own")
    stmt = _with_relations(
        select(AccessRequest)
        .where(AccessRequest.user_id == identity.user_id)
        .order_by(AccessRequest.created_at.desc(), AccessRequest.id.desc())
    )
    return list(session.scalars(_page(stmt, limit, offset)).all())


def list_pending_requests(
    session: Session, identity: Identity, *, limit: int | None = None, offset: int = 0
) -> list[AccessRequest]:
    require_capability(identity, "request:list_pending")
    stmt = _with_relations(
        select(AccessRequest)
        .where(AccessRequest.status == PENDING)
        .order_by(AccessRequest.created_at.asc(), AccessRequest.id.asc())
    )
    return list(session.scalars(_page(stmt, limit, offset)).all())


def get_request_for_viewer(session: Session, identity: Identity, request_id: int) -> AccessRequest:
    require_capability(identity, "request:view")
    req = load_request(session, request_id)
    if not req:
        raise NotFound("Request not found")
    if not can_view_request(identity, req):
        raise Forbidden("Unauthorized to view this request")
    return req


def review_request(
    session: Session,
    identity: Identity,
    request_id: int,
    *,
    status: str | None,
    review_comment: str | None = None,
) -> AccessRequest:
    require_capability(identity, "request:review")

    if status not in REVIEW_OUTCOMES:
        raise ValidationFailed("Valid status (Approved/Rejected) is required")

    req = session.get(AccessRequest, request_id)
    if not req:
        raise NotFound("Request not found")

    old = req.status
    if not can_transition(old, status):
        raise AlreadyProcessed("Request has already been processed")

    now = datetime.now(timezone.utc)
    result = session.execute(
        update(AccessRequest)
        .where(AccessRequest.id == request_id)
        .where(AccessRequest.status == PENDING)
        .values(
            status=status,
            reviewed_by=identity.user_id,
            review_comment=review_comment or None,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        # Another reviewer committed first.
        session.rollback()
        raise AlreadyProcessed("Request has already been processed")

    session.add(
        RequestEvent(
            request_id=request_id,
            actor_id=identity.user_id,
            type="status_changed",
            from_value=old,
            to_value=status,
            note=review_comment or None,
        )
    )
    session.commit()
    logger.info(
        "access request reviewed (request_id=%s reviewer_id=%s %s -> %s)",
        request_id, identity.user_id, old, status,
    )
    return load_request(session, request_id)


def list_request_events(session: Session, identity: Identity, request_id: int) -> list[RequestEvent]:
    get_request_for_viewer(session, identity, request_id)
    stmt = (
        select(RequestEvent)
        .where(RequestEvent.request_id == request_id)
        .order_by(RequestEvent.created_at.asc(), RequestEvent.id.asc())
    )
    return list(session.scalars(stmt).all())
