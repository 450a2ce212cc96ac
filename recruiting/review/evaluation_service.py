"""Evaluation ledger — scored reviews of applications.

Append-only: entries are never updated. A reviewer may delete one entry
explicitly; nothing cascades. Recording is allowed at any status,
including after rejection.

The "current score" of an application is its latest entry
(created_at, then id as tie-breaker), so repeated reads agree.
"""
import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import InvalidScore, NotFound
from .models import Application, Evaluation
from .reviewers import reviewer_names

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100
MEMO_MAX_LENGTH = 200


def validate_score(name: str, value) -> int:
    """Return ``value`` if it is an int within [SCORE_MIN, SCORE_MAX]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScore(f"{name} must be an integer, got {value!r}")
    if not SCORE_MIN <= value <= SCORE_MAX:
        raise InvalidScore(
            f"{name} must be between {SCORE_MIN} and {SCORE_MAX}, got {value}"
        )
    return value


def record(
    session: Session,
    application_id: int,
    c1: int,
    c2: int,
    c3: int,
    evaluator: str,
    memo: Optional[str] = None,
) -> Evaluation:
    """Append an evaluation; total is the sum of the three criteria.

    Raises:
        NotFound: application does not exist
        InvalidScore: a criterion outside [0, 100] or memo too long
    """
    if session.get(Application, application_id) is None:
        raise NotFound(f"Application {application_id} not found")

    scores = [
        validate_score(f"score_criteria_{i}", value)
        for i, value in enumerate((c1, c2, c3), start=1)
    ]
    if memo is not None and len(memo) > MEMO_MAX_LENGTH:
        raise InvalidScore(f"memo exceeds {MEMO_MAX_LENGTH} characters")

    evaluation = Evaluation(
        application_id=application_id,
        score_criteria_1=scores[0],
        score_criteria_2=scores[1],
        score_criteria_3=scores[2],
        total_score=sum(scores),
        memo=memo,
        evaluated_by=evaluator,
    )
    session.add(evaluation)
    session.flush()

    logger.info(
        f"Evaluation {evaluation.id} recorded for application {application_id} "
        f"by {evaluator} (total={evaluation.total_score})"
    )
    return evaluation


def to_dict(evaluation: Evaluation, names: dict[str, str]) -> dict:
    return {
        "id": evaluation.id,
        "application_id": evaluation.application_id,
        "score_criteria_1": evaluation.score_criteria_1,
        "score_criteria_2": evaluation.score_criteria_2,
        "score_criteria_3": evaluation.score_criteria_3,
        "total_score": evaluation.total_score,
        "memo": evaluation.memo,
        "evaluated_by": evaluation.evaluated_by,
        "evaluated_by_name": names.get(evaluation.evaluated_by, ""),
        "created_at": evaluation.created_at,
    }


def _newest_first():
    return (Evaluation.created_at.desc(), Evaluation.id.desc())


def list_evaluations(session: Session, application_id: int) -> list[dict]:
    """All entries for an application, most recent first, with evaluator names."""
    if session.get(Application, application_id) is None:
        raise NotFound(f"Application {application_id} not found")

    evaluations = session.execute(
        select(Evaluation)
        .where(Evaluation.application_id == application_id)
        .order_by(*_newest_first())
    ).scalars().all()

    names = reviewer_names(session, (e.evaluated_by for e in evaluations))
    return [to_dict(e, names) for e in evaluations]


def delete(session: Session, evaluation_id: int) -> None:
    """Remove exactly one evaluation."""
    evaluation = session.get(Evaluation, evaluation_id)
    if evaluation is None:
        raise NotFound(f"Evaluation {evaluation_id} not found")

    session.delete(evaluation)
    session.flush()
    logger.info(
        f"Evaluation {evaluation_id} deleted from application {evaluation.application_id}"
    )


def latest_evaluation(session: Session, application_id: int) -> Optional[Evaluation]:
    return session.execute(
        select(Evaluation)
        .where(Evaluation.application_id == application_id)
        .order_by(*_newest_first())
        .limit(1)
    ).scalar_one_or_none()


def latest_totals(session: Session, application_ids: Iterable[int]) -> dict[int, int]:
    """Latest total_score per application; applications without entries are omitted."""
    ids = list(application_ids)
    if not ids:
        return {}

    rows = session.execute(
        select(Evaluation.application_id, Evaluation.total_score)
        .where(Evaluation.application_id.in_(ids))
        .order_by(Evaluation.application_id, *_newest_first())
    )
    totals: dict[int, int] = {}
    for app_id, total in rows:
        # First row per application is the newest
        totals.setdefault(app_id, total)
    return totals
