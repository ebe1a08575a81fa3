"""Database engine and session helpers."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from cloud_uploader.core.config import settings


def sqlite_connect_args(db_url: str) -> dict[str, Any]:
    return {"check_same_thread": False} if db_url.startswith("sqlite") else {}


def build_engine(db_url: str, **engine_kwargs: Any) -> Engine:
    """Create an engine for ``db_url`` with the connect args its dialect needs."""
    return create_engine(db_url, connect_args=sqlite_connect_args(db_url), **engine_kwargs)


engine = build_engine(settings.db_url)


def open_session() -> Session:
    """Return a new session bound to the module-level engine."""
    return Session(engine)


def get_session(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's engine for dependency injection."""
    bound = getattr(request.app.state, "engine", engine)
    with Session(bound) as session:
        yield session
