"""Application Review Workflow.

Applicants submit against time-bounded postings; reviewers move each
application through submitted → first_pass → final_pass (or rejected),
score it, and accepted applicants become program participants.

SQLAlchemy-backed, one session per reviewer action, caller commits.
"""

from .models import (
    Application,
    Base,
    Evaluation,
    Participation,
    Posting,
    Program,
    Reviewer,
    StatusAuditEntry,
)
from .database import get_engine, get_session, init_db
from .errors import (
    IntegrityError,
    InvalidScore,
    InvalidTransition,
    NotFound,
    ReviewError,
    SubmissionClosed,
)
from .status import ApplicationStatus, ParticipationState, RecruitStatus
from .transition_service import TransitionResult, status_history, transition
from .evaluation_service import delete, latest_evaluation, list_evaluations, record
from .participation_service import evaluate_participant, list_participants, provision
from .query_service import (
    Adjacency,
    ApplicationFilter,
    ExportRow,
    adjacent,
    export_rows,
    get_application,
    list_applications,
)
from .postings import get_posting, submit_application
from .window import can_submit, classify

__all__ = [
    # Models
    "Application",
    "Base",
    "Evaluation",
    "Participation",
    "Posting",
    "Program",
    "Reviewer",
    "StatusAuditEntry",
    # Database
    "get_engine",
    "get_session",
    "init_db",
    # Errors
    "IntegrityError",
    "InvalidScore",
    "InvalidTransition",
    "NotFound",
    "ReviewError",
    "SubmissionClosed",
    # Vocabulary
    "ApplicationStatus",
    "ParticipationState",
    "RecruitStatus",
    # Transitions
    "TransitionResult",
    "status_history",
    "transition",
    # Evaluation ledger
    "delete",
    "latest_evaluation",
    "list_evaluations",
    "record",
    # Participation
    "evaluate_participant",
    "list_participants",
    "provision",
    # Navigation / list / export
    "Adjacency",
    "ApplicationFilter",
    "ExportRow",
    "adjacent",
    "export_rows",
    "get_application",
    "list_applications",
    # Postings
    "get_posting",
    "submit_application",
    "can_submit",
    "classify",
]
