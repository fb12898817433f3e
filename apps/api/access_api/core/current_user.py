from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from ..db import get_session, get_settings
from ..models.user import User
from .config import Settings
from .errors import Unauthorized
from .security import decode_token

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    user_id: int
    username: str
    role: str


def get_identity(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
) -> Identity:
    if not creds:
        raise Unauthorized("Not authenticated")

    try:
        payload = decode_token(settings, creds.credentials)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise Unauthorized("Invalid or expired token")

    # Role comes from the stored user, so role changes apply to live tokens.
    user = session.get(User, user_id)
    if not user:
        raise Unauthorized("User not found")
    return Identity(user_id=user.id, username=user.username, role=user.role)
