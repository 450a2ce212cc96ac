"""Time-derived statuses: recruitment windows, program phases, participation.

All comparisons happen at day granularity so a window does not flap around
midnight in a different timezone. Nothing here is persisted; callers
recompute on every read.
"""
from datetime import date, datetime
from typing import Optional, Union

from .status import (
    MANUAL_PARTICIPATION_STATES,
    ParticipationState,
    ProgramPhase,
    RecruitStatus,
)

DateLike = Union[date, datetime]


def _day(value: DateLike) -> date:
    """Truncate a datetime to its calendar day (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _today(now: Optional[DateLike]) -> date:
    return _day(now) if now is not None else date.today()


def classify(start: DateLike, end: DateLike, now: Optional[DateLike] = None) -> RecruitStatus:
    """Classify a recruitment window.

    upcoming before ``start``, closed after ``end``, open in between
    (both bounds inclusive).
    """
    today = _today(now)
    if today < _day(start):
        return RecruitStatus.UPCOMING
    if today > _day(end):
        return RecruitStatus.CLOSED
    return RecruitStatus.OPEN


def can_submit(posting, now: Optional[DateLike] = None) -> bool:
    """Applications are accepted only for published postings with an open window.

    The stored override is ignored on purpose: it can be stale relative
    to the clock.
    """
    if not posting.is_published:
        return False
    window = classify(posting.recruit_start_date, posting.recruit_end_date, now)
    return window is RecruitStatus.OPEN


def program_phase(start: DateLike, end: DateLike, now: Optional[DateLike] = None) -> ProgramPhase:
    today = _today(now)
    if today < _day(start):
        return ProgramPhase.UPCOMING
    if today > _day(end):
        return ProgramPhase.ENDED
    return ProgramPhase.IN_PROGRESS


def participation_state(
    program,
    stored: str,
    now: Optional[DateLike] = None,
) -> ParticipationState:
    """Effective participation state for display.

    completed/dropped are set by reviewers and kept as-is; every other
    value follows the program's activity period.
    """
    stored = ParticipationState(stored)
    if stored in MANUAL_PARTICIPATION_STATES:
        return stored

    phase = program_phase(program.activity_start_date, program.activity_end_date, now)
    if phase is ProgramPhase.UPCOMING:
        return ParticipationState.UPCOMING
    if phase is ProgramPhase.ENDED:
        return ParticipationState.PERIOD_ENDED
    return ParticipationState.ACTIVE
