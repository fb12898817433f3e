from typing import Literal

from .base import ApiModel


class AdminUserOut(ApiModel):
    id: int
    username: str
    full_name: str | None = None
    email: str | None = None
    role: str
    pending: int
    total: int


class UserRoleUpdateIn(ApiModel):
    role: Literal["Employee", "Manager", "Admin"]
