from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_session
from ..core.current_user import Identity
from ..core.permissions import requires
from ..schemas.event import EventOut
from ..schemas.request import RequestCreateIn, RequestOut, RequestReviewOut, RequestStatusUpdateIn
from ..services import access_requests as service

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", response_model=RequestOut, status_code=201)
def create_request(
    payload: RequestCreateIn,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:create")),
):
    return service.create_request(
        session,
        identity,
        software_id=payload.software_id,
        access_type=payload.access_type,
        reason=payload.reason,
    )


# Fixed paths first so they are not captured by /{request_id}.
@router.get("/my-requests", response_model=list[RequestOut])
def my_requests(
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:list_own")),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
):
    return service.list_user_requests(session, identity, limit=limit, offset=offset)


@router.get("/pending", response_model=list[RequestOut])
def pending_requests(
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:list_pending")),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
):
    return service.list_pending_requests(session, identity, limit=limit, offset=offset)


@router.get("/{request_id}", response_model=RequestOut)
def get_request(
    request_id: int,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:view")),
):
    return service.get_request_for_viewer(session, identity, request_id)


@router.get("/{request_id}/events", response_model=list[EventOut])
def list_events(
    request_id: int,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:view")),
):
    return service.list_request_events(session, identity, request_id)


@router.patch("/{request_id}/status", response_model=RequestReviewOut)
def update_status(
    request_id: int,
    payload: RequestStatusUpdateIn,
    session: Session = Depends(get_session),
    identity: Identity = Depends(requires("request:review")),
):
    return service.review_request(
        session,
        identity,
        request_id,
        status=payload.status,
        review_comment=payload.review_comment,
    )
