"""Reviewer display names for audit and evaluation listings."""
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Reviewer


def reviewer_names(session: Session, references: Iterable[str]) -> dict[str, str]:
    """Map reviewer references to display names; unknown references are omitted."""
    refs = {r for r in references if r}
    if not refs:
        return {}
    rows = session.execute(
        select(Reviewer.reference, Reviewer.name).where(Reviewer.reference.in_(refs))
    )
    return {ref: name for ref, name in rows}


def upsert_reviewer(session: Session, reference: str, name: str) -> Reviewer:
    """Register or rename a reviewer (called when a session is established)."""
    reviewer = session.get(Reviewer, reference)
    if reviewer is None:
        reviewer = Reviewer(reference=reference, name=name)
        session.add(reviewer)
    else:
        reviewer.name = name
    session.flush()
    return reviewer
