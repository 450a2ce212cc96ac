"""
Database wiring for the portal
"""

from typing import Generator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from recruiting.review.database import get_engine as create_engine_from_config
from recruiting.review.database import get_session_factory

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def configure(engine: Engine) -> None:
    """Bind the portal to an engine (tests, embedding)."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = get_session_factory(engine)


def get_engine() -> Engine:
    if _engine is None:
        configure(create_engine_from_config())
    return _engine


def get_db() -> Generator[Session, None, None]:
    """One session per request; routes commit explicitly."""
    get_engine()
    db = _session_factory()
    try:
        yield db
    finally:
        db.close()
