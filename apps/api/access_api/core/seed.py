import logging

from sqlalchemy.orm import Session
from sqlalchemy import select

from ..models.user import User, ADMIN
from .config import Settings
from .security import hash_password

logger = logging.getLogger(__name__)


def seed_admin(session: Session, settings: Settings) -> None:
    """
    Seed the bootstrap Admin account.
    - Runs only when ADMIN_USERNAME and ADMIN_PASSWORD are both set.
    - An existing user with that username is promoted to Admin; its password is left alone.
    """
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return

    exists = session.scalar(select(User).where(User.username == settings.ADMIN_USERNAME))
    if exists:
        if exists.role != ADMIN:
            exists.role = ADMIN
            session.commit()
            logger.info("promoted seeded admin account: %s", exists.username)
        return

    session.add(
        User(
            username=settings.ADMIN_USERNAME,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            role=ADMIN,
            full_name="Administrator",
        )
    )
    session.commit()
    logger.info("seeded admin account: %s", settings.ADMIN_USERNAME)
