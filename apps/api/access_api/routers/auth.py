import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..schemas.auth import LoginIn, SignupIn, TokenOut
from ..schemas.user import UserDetailOut, UserPublicOut
from ..core.config import Settings
from ..core.current_user import Identity, get_identity
from ..core.errors import Conflict, Forbidden, NotFound, Unauthorized
from ..core.security import verify_password, hash_password, create_access_token
from ..models.user import User, EMPLOYEE
from ..db import get_session, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def issue_token(settings: Settings, user: User) -> TokenOut:
    token = create_access_token(settings, user_id=user.id, username=user.username, role=user.role)
    return TokenOut(token=token, user=UserPublicOut.model_validate(user))


@router.post("/signup", response_model=TokenOut, status_code=201)
def signup(
    payload: SignupIn,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    if payload.role != EMPLOYEE and not settings.ALLOW_SIGNUP_ROLE:
        raise Forbidden("Role cannot be chosen at signup")

    exists = session.scalar(select(User.id).where(User.username == payload.username))
    if exists:
        raise Conflict("Username already exists")

    user = User(
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict("Username already exists")
    session.refresh(user)
    logger.info("user signed up (user_id=%s role=%s)", user.id, user.role)
    return issue_token(settings, user)


@router.post("/login", response_model=TokenOut)
def login(
    payload: LoginIn,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = session.scalar(select(User).where(User.username == payload.username))
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthorized("Invalid credentials")
    return issue_token(settings, user)


@router.get("/me", response_model=UserDetailOut)
def me(
    identity: Identity = Depends(get_identity),
    session: Session = Depends(get_session),
):
    user = session.get(User, identity.user_id)
    if not user:
        raise NotFound("User not found")
    return user
