from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from .base import ApiModel

AccessLevel = Literal["Read", "Write", "Admin"]


def _fold_levels(levels: list[str]) -> list[str]:
    return list(dict.fromkeys(levels))


class SoftwareCreateIn(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    access_levels: list[AccessLevel] = Field(min_length=1)

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("access_levels")
    @classmethod
    def fold_levels(cls, v: list[str]) -> list[str]:
        return _fold_levels(v)


class SoftwareUpdateIn(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    access_levels: list[AccessLevel] | None = Field(default=None, min_length=1)

    @field_validator("name", "description")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("access_levels")
    @classmethod
    def fold_levels(cls, v: list[str] | None) -> list[str] | None:
        return _fold_levels(v) if v is not None else None


class SoftwareOut(ApiModel):
    id: int
    name: str
    description: str
    access_levels: list[str]
    created_at: datetime | None = None
