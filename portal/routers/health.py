"""
Health Check Endpoint

Reports database reachability and whether the review schema is in place.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recruiting import __version__
from recruiting.review.models import Base

from ..db import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def _missing_tables(db: Session) -> list[str]:
    present = set(inspect(db.connection()).get_table_names())
    return sorted(set(Base.metadata.tables) - present)


@router.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Database probe plus schema check; degraded instead of failing"""
    dialect = db.get_bind().dialect.name
    try:
        db.execute(text("SELECT 1"))
        missing = _missing_tables(db)
    except SQLAlchemyError as e:
        logger.warning(f"Health check database probe failed: {e}")
        return {
            "status": "degraded",
            "database": f"unreachable: {e}",
            "dialect": dialect,
            "missing_tables": [],
            "version": __version__,
        }

    if missing:
        logger.warning(f"Health check: review tables missing: {', '.join(missing)}")
    return {
        "status": "degraded" if missing else "healthy",
        "database": "healthy",
        "dialect": dialect,
        "missing_tables": missing,
        "version": __version__,
    }
