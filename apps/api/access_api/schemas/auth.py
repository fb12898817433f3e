from typing import Literal

from pydantic import EmailStr, Field, field_validator

from .base import ApiModel
from .user import UserPublicOut


def _password_bytes_le_72(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be <= 72 bytes (bcrypt limit).")
    return v


class SignupIn(ApiModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=72)
    email: EmailStr | None = None
    full_name: str | None = Field(default=None, max_length=100)
    role: Literal["Employee", "Manager", "Admin"] = "Employee"

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def signup_password_bytes_le_72(cls, v: str) -> str:
        return _password_bytes_le_72(v)


class LoginIn(ApiModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=72)

    @field_validator("password")
    @classmethod
    def login_password_bytes_le_72(cls, v: str) -> str:
        return _password_bytes_le_72(v)


class TokenOut(ApiModel):
    token: str
    token_type: str = "bearer"
    user: UserPublicOut
