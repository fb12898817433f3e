from datetime import datetime

from .base import ApiModel


class UserPublicOut(ApiModel):
    """The only user fields ever serialized; no password material."""

    id: int
    username: str
    full_name: str | None = None
    email: str | None = None
    role: str


class UserRefOut(ApiModel):
    id: int
    username: str


class UserDetailOut(UserPublicOut):
    created_at: datetime | None = None
