from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.current_user import Identity
from ..core.errors import Conflict, NotFound, ValidationFailed
from ..core.permissions import require_capability
from ..models.request import AccessRequest
from ..models.software import ACCESS_LEVELS, Software

logger = logging.getLogger(__name__)


def _check_levels(levels: list[str] | None) -> list[str]:
    if not levels:
        raise ValidationFailed("At least one access level is required")
    if any(level not in ACCESS_LEVELS for level in levels):
        raise ValidationFailed("Access levels must be one of: Read, Write, Admin")
    return list(dict.fromkeys(levels))


def _name_taken(session: Session, name: str, *, exclude_id: int | None = None) -> bool:
    stmt = select(Software.id).where(Software.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Software.id != exclude_id)
    return session.scalar(stmt.limit(1)) is not None


def _commit_unique_name(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise Conflict("Software with this name already exists")


def list_software(session: Session, identity: Identity) -> list[Software]:
    require_capability(identity, "software:list")
    stmt = select(Software).order_by(Software.name.asc(), Software.id.asc())
    return list(session.scalars(stmt).all())


def get_software(session: Session, identity: Identity, software_id: int) -> Software:
    require_capability(identity, "software:view")
    software = session.get(Software, software_id)
    if not software:
        raise NotFound("Software not found")
    return software


def create_software(
    session: Session,
    identity: Identity,
    *,
    name: str,
    description: str,
    access_levels: list[str],
) -> Software:
    require_capability(identity, "software:create")
    if not name or not description:
        raise ValidationFailed("Name, description, and accessLevels are required")
    levels = _check_levels(access_levels)

    if _name_taken(session, name):
        raise Conflict("Software with this name already exists")

    software = Software(name=name, description=description, access_levels=levels)
    session.add(software)
    _commit_unique_name(session)
    session.refresh(software)
    logger.info("software created (software_id=%s name=%s)", software.id, software.name)
    return software


def update_software(
    session: Session,
    identity: Identity,
    software_id: int,
    *,
    name: str | None = None,
    description: str | None = None,
    access_levels: list[str] | None = None,
) -> Software:
    require_capability(identity, "software:update")
    software = session.get(Software, software_id)
    if not software:
        raise NotFound("Software not found")

    if name is not None and name != software.name:
        if _name_taken(session, name, exclude_id=software.id):
            raise Conflict("Software with this name already exists")
        software.name = name
    if description is not None:
        software.description = description
    if access_levels is not None:
        software.access_levels = _check_levels(access_levels)

    _commit_unique_name(session)
    session.refresh(software)
    logger.info("software updated (software_id=%s name=%s)", software.id, software.name)
    return software


def delete_software(session: Session, identity: Identity, software_id: int) -> None:
    require_capability(identity, "software:delete")
    software = session.get(Software, software_id)
    if not software:
        raise NotFound("Software not found")

    in_use = session.scalar(
        select(AccessRequest.id).where(AccessRequest.software_id == software_id).limit(1)
    )
    if in_use:
        raise Conflict("Software is referenced by access requests and cannot be deleted")

    session.delete(software)
    session.commit()
    logger.info("software deleted (software_id=%s)", software_id)
