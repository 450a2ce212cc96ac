"""Status vocabularies for the review workflow.

Application status flow:
    submitted  → first_pass, final_pass, rejected
    first_pass → final_pass, rejected
    final_pass → rejected
    rejected   → first_pass, final_pass   (re-opened)

There is no terminal state. Staying on the same status is not an edge.
"""
import enum


class ApplicationStatus(str, enum.Enum):
    """Reviewer-controlled application lifecycle."""
    SUBMITTED = "submitted"     # Initial, set at submission
    FIRST_PASS = "first_pass"   # Passed document screening
    FINAL_PASS = "final_pass"   # Accepted → participant
    REJECTED = "rejected"       # Can be re-opened


class ParticipationState(str, enum.Enum):
    """Participant lifecycle, independent of application status."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    PERIOD_ENDED = "period_ended"
    COMPLETED = "completed"     # manual
    DROPPED = "dropped"         # manual


class RecruitStatus(str, enum.Enum):
    """Time-derived recruitment window of a posting."""
    UPCOMING = "upcoming"
    OPEN = "open"
    CLOSED = "closed"


class ProgramPhase(str, enum.Enum):
    """Time-derived phase of a program's activity period."""
    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


STATUS_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.SUBMITTED: frozenset({
        ApplicationStatus.FIRST_PASS,
        ApplicationStatus.FINAL_PASS,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.FIRST_PASS: frozenset({
        ApplicationStatus.FINAL_PASS,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.FINAL_PASS: frozenset({
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.REJECTED: frozenset({
        ApplicationStatus.FIRST_PASS,
        ApplicationStatus.FINAL_PASS,
    }),
}

MANUAL_PARTICIPATION_STATES = {
    ParticipationState.COMPLETED,
    ParticipationState.DROPPED,
}

STATUS_LABELS = {
    ApplicationStatus.SUBMITTED: "Submitted",
    ApplicationStatus.FIRST_PASS: "First pass",
    ApplicationStatus.FINAL_PASS: "Final pass",
    ApplicationStatus.REJECTED: "Rejected",
}


def allowed_targets(current) -> frozenset[ApplicationStatus]:
    """Statuses reachable in one step from ``current`` (empty if unknown)."""
    try:
        return STATUS_TRANSITIONS[ApplicationStatus(current)]
    except ValueError:
        return frozenset()


def is_allowed(current, target) -> bool:
    try:
        target = ApplicationStatus(target)
    except ValueError:
        return False
    return target in allowed_targets(current)


def status_label(status) -> str:
    """Human label for exports; unknown values pass through."""
    try:
        return STATUS_LABELS[ApplicationStatus(status)]
    except ValueError:
        return str(status)
