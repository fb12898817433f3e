from collections.abc import Iterator
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .core.config import Settings


@dataclass
class AppContext:
    """Process-wide resources, built at startup and disposed at shutdown."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker

    def dispose(self) -> None:
        self.engine.dispose()


def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # One shared connection, otherwise every session sees its own empty memory db.
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def build_context(settings: Settings) -> AppContext:
    engine = make_engine(settings.DATABASE_URL)
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)
    return AppContext(settings=settings, engine=engine, session_factory=session_factory)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings(ctx: AppContext = Depends(get_context)) -> Settings:
    return ctx.settings


def get_session(ctx: AppContext = Depends(get_context)) -> Iterator[Session]:
    with ctx.session_factory() as session:
        yield session
