"""Participation provisioning and post-acceptance review.

A Participation exists exactly while its application holds final_pass:

    * → final_pass          create (idempotent, state 'upcoming')
    final_pass → rejected   delete
    anything else           no effect

Provisioning runs inside the transition's transaction. The insert sits in a
SAVEPOINT so a unique-constraint race with a concurrent retry only undoes
the insert, never the transition.

Usage:
    from recruiting.review.participation_service import (
        provision,
        list_participants,
        evaluate_participant,
    )
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError as DBIntegrityError
from sqlalchemy.orm import Session

from .errors import IntegrityError, NotFound
from .evaluation_service import validate_score
from .models import Application, Participation, Posting, Program
from .reviewers import reviewer_names
from .status import ApplicationStatus, ParticipationState
from .window import DateLike, participation_state

logger = logging.getLogger(__name__)

# provision() outcomes
CREATED = "created"
ALREADY_PROVISIONED = "already_provisioned"
REMOVED = "removed"

ROLE_MAX_LENGTH = 200
COMMENT_MAX_LENGTH = 2000


# ---------------------------------------------------------------------------
# 1) Provisioning hook
# ---------------------------------------------------------------------------

def provision(
    session: Session,
    application: Application,
    prior_status: str,
    target_status: str,
) -> Optional[str]:
    """React to a status edge.

    Returns CREATED / ALREADY_PROVISIONED / REMOVED, or None when the edge
    has no participation side effect.

    Raises:
        IntegrityError: posting or owning program missing (creation only)
    """
    if target_status == ApplicationStatus.FINAL_PASS.value:
        _, created = ensure_participation(session, application)
        return CREATED if created else ALREADY_PROVISIONED

    if (
        prior_status == ApplicationStatus.FINAL_PASS.value
        and target_status == ApplicationStatus.REJECTED.value
    ):
        removed = retract_participation(session, application.id)
        return REMOVED if removed else None

    return None


def get_participation(session: Session, application_id: int) -> Optional[Participation]:
    return session.execute(
        select(Participation).where(Participation.application_id == application_id)
    ).scalar_one_or_none()


def ensure_participation(
    session: Session,
    application: Application,
) -> tuple[Participation, bool]:
    """Return (participation, created). Never creates a second row."""
    existing = get_participation(session, application.id)
    if existing is not None:
        logger.debug(f"Participation already exists for application {application.id}")
        return existing, False

    posting = session.get(Posting, application.posting_id)
    if posting is None:
        raise IntegrityError(
            f"Application {application.id}: posting {application.posting_id} not found"
        )
    if posting.program_id is None or session.get(Program, posting.program_id) is None:
        raise IntegrityError(
            f"Application {application.id}: posting {posting.id} has no owning program"
        )

    participation = Participation(
        submitter_ref=application.submitter_ref,
        program_id=posting.program_id,
        posting_id=posting.id,
        application_id=application.id,
        participation_state=ParticipationState.UPCOMING.value,
    )
    try:
        with session.begin_nested():
            session.add(participation)
    except DBIntegrityError:
        # Lost a race against a concurrent retry; the unique index kept it single
        logger.info(
            f"Participation for application {application.id} created concurrently"
        )
        return get_participation(session, application.id), False

    logger.info(
        f"Participation {participation.id} created for application {application.id} "
        f"(program {posting.program_id})"
    )
    return participation, True


def retract_participation(session: Session, application_id: int) -> bool:
    """Delete the participation tied to an application. Returns True if one existed."""
    result = session.execute(
        delete(Participation).where(Participation.application_id == application_id)
    )
    removed = result.rowcount > 0
    if removed:
        logger.info(f"Participation removed for application {application_id}")
    else:
        logger.debug(f"No participation to remove for application {application_id}")
    return removed


# ---------------------------------------------------------------------------
# 2) Participants of a program
# ---------------------------------------------------------------------------

def _participant_item(
    participation: Participation,
    program: Program,
    names: dict[str, str],
    now: Optional[DateLike],
) -> dict:
    posting = participation.posting
    return {
        "id": participation.id,
        "submitter_ref": participation.submitter_ref,
        "application_id": participation.application_id,
        "applicant_name": participation.application.applicant_name,
        "posting_name": posting.name if posting else "-",
        "job_type": (posting.job_type if posting else None) or "-",
        "participation_state": participation_state(
            program, participation.participation_state, now
        ).value,
        "role": participation.role,
        "eval_scores": participation.eval_scores,
        "eval_total_score": participation.eval_total_score,
        "eval_comment": participation.eval_comment,
        "evaluated_by_name": names.get(participation.evaluated_by)
        if participation.evaluated_by else None,
        "evaluated_at": participation.evaluated_at,
    }


def list_participants(
    session: Session,
    program_id: int,
    now: Optional[DateLike] = None,
) -> list[dict]:
    """Participants of a program, oldest first, with the derived state."""
    program = session.get(Program, program_id)
    if program is None:
        raise NotFound(f"Program {program_id} not found")

    participations = session.execute(
        select(Participation)
        .where(Participation.program_id == program_id)
        .order_by(Participation.created_at.asc(), Participation.id.asc())
    ).scalars().all()

    names = reviewer_names(session, (p.evaluated_by for p in participations))
    return [_participant_item(p, program, names, now) for p in participations]


# ---------------------------------------------------------------------------
# 3) Post-acceptance evaluation
# ---------------------------------------------------------------------------

def evaluate_participant(
    session: Session,
    participation_id: int,
    scores: dict[str, int],
    total: int,
    state: str,
    evaluator: str,
    role: Optional[str] = None,
    comment: Optional[str] = None,
    now: Optional[DateLike] = None,
) -> dict:
    """Overwrite a participant's performance review.

    Unlike application evaluations this is a single mutable payload.
    ``state`` may set any participation state, including the manual
    completed/dropped.
    """
    participation = session.get(Participation, participation_id)
    if participation is None:
        raise NotFound(f"Participation {participation_id} not found")

    for key, value in scores.items():
        validate_score(f"score '{key}'", value)
    validate_score("total", total)
    if role is not None and len(role) > ROLE_MAX_LENGTH:
        raise ValueError(f"role exceeds {ROLE_MAX_LENGTH} characters")
    if comment is not None and len(comment) > COMMENT_MAX_LENGTH:
        raise ValueError(f"comment exceeds {COMMENT_MAX_LENGTH} characters")
    new_state = ParticipationState(state).value

    participation.eval_scores = dict(scores)
    participation.eval_total_score = total
    participation.participation_state = new_state
    participation.role = role
    participation.eval_comment = comment
    participation.evaluated_by = evaluator
    participation.evaluated_at = datetime.now(timezone.utc)
    session.flush()

    logger.info(
        f"Participation {participation_id} evaluated by {evaluator} "
        f"(total={total}, state={participation.participation_state})"
    )

    names = reviewer_names(session, [evaluator])
    return _participant_item(participation, participation.program, names, now)
