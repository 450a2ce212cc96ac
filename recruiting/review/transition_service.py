"""Status transitions with audit trail and participation hook.

One call = one reviewer action:
    1. lock the application row (SELECT ... FOR UPDATE)
    2. validate the edge against STATUS_TRANSITIONS
    3. conditional UPDATE ... WHERE status = prior
    4. append one StatusAuditEntry
    5. run the participation hook (savepointed, best-effort)

Everything shares the caller's transaction; the caller commits. The
conditional update means two reviewers racing from the same prior status
cannot both succeed, even on backends that ignore FOR UPDATE.

Usage:
    from recruiting.review.database import get_session
    from recruiting.review.transition_service import transition

    with get_session() as session:
        result = transition(session, 42, "first_pass", "reviewer-7")
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from . import participation_service
from .errors import IntegrityError, InvalidTransition, NotFound
from .models import Application, StatusAuditEntry
from .reviewers import reviewer_names
from .status import ApplicationStatus, is_allowed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    """Identifier and new status only; callers re-fetch for anything else."""
    id: int
    status: str


def transition(
    session: Session,
    application_id: int,
    target_status: str,
    acting_reviewer: str,
) -> TransitionResult:
    """Move an application along one allowed edge.

    Raises:
        NotFound: application does not exist
        InvalidTransition: edge not allowed from the current status, or the
            status changed underneath this call
    """
    app = session.execute(
        select(Application)
        .where(Application.id == application_id)
        .with_for_update()
    ).scalar_one_or_none()
    if app is None:
        raise NotFound(f"Application {application_id} not found")

    prior = app.status
    target = target_status.value if isinstance(target_status, ApplicationStatus) else target_status
    if not is_allowed(prior, target):
        raise InvalidTransition(f"Cannot transition from {prior} to {target}")

    now = datetime.now(timezone.utc)
    result = session.execute(
        update(Application)
        .where(Application.id == application_id, Application.status == prior)
        .values(status=target, updated_at=now)
    )
    if result.rowcount != 1:
        raise InvalidTransition(
            f"Application {application_id} changed concurrently; "
            f"status is no longer {prior}"
        )

    session.add(StatusAuditEntry(
        application_id=application_id,
        from_status=prior,
        to_status=target,
        changed_by=acting_reviewer,
        created_at=now,
    ))
    session.flush()

    logger.info(
        f"Application {application_id}: {prior} → {target} by {acting_reviewer}"
    )

    try:
        outcome = participation_service.provision(session, app, prior, target)
    except IntegrityError as e:
        # The transition stands; provisioning is best-effort
        logger.warning(f"Provisioning skipped for application {application_id}: {e}")
    else:
        if outcome:
            logger.debug(f"Application {application_id}: participation {outcome}")

    return TransitionResult(id=application_id, status=target)


def status_history(session: Session, application_id: int) -> list[dict]:
    """Audit entries for an application, oldest first."""
    if session.get(Application, application_id) is None:
        raise NotFound(f"Application {application_id} not found")

    entries = session.execute(
        select(StatusAuditEntry)
        .where(StatusAuditEntry.application_id == application_id)
        .order_by(StatusAuditEntry.created_at.asc(), StatusAuditEntry.id.asc())
    ).scalars().all()

    names = reviewer_names(session, (e.changed_by for e in entries))
    return [
        {
            "id": e.id,
            "from_status": e.from_status,
            "to_status": e.to_status,
            "changed_by": e.changed_by,
            "changed_by_name": names.get(e.changed_by, ""),
            "created_at": e.created_at,
        }
        for e in entries
    ]
