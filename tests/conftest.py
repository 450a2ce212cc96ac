"""
Recruiting Review Test Configuration

Shared fixtures for all tests.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from recruiting.config import reload_config
from recruiting.review.models import Base


# =============================================================================
# FIXTURES: Configuration
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Defaults only: no YAML file, no env overrides leaking in."""
    for name in ("DATABASE_URL", "JWT_SECRET_KEY", "LOG_LEVEL", "RECRUITING_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    config = reload_config(str(tmp_path / "missing.yml"))
    yield config
    reload_config(str(tmp_path / "missing.yml"))


# =============================================================================
# FIXTURES: Database
# =============================================================================

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s
