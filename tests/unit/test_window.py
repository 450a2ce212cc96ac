"""Tests for recruitment window, program phase and participation state."""
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

from recruiting.review.status import ParticipationState, ProgramPhase, RecruitStatus
from recruiting.review.window import (
    can_submit,
    classify,
    participation_state,
    program_phase,
)

START = date(2026, 3, 1)
END = date(2026, 3, 31)


class TestClassify:

    @pytest.mark.parametrize("now,expected", [
        (date(2026, 2, 28), RecruitStatus.UPCOMING),
        (date(2026, 3, 1), RecruitStatus.OPEN),
        (date(2026, 3, 15), RecruitStatus.OPEN),
        (date(2026, 3, 31), RecruitStatus.OPEN),
        (date(2026, 4, 1), RecruitStatus.CLOSED),
    ])
    def test_boundaries(self, now, expected):
        assert classify(START, END, now) is expected

    def test_time_of_day_ignored(self):
        late_on_last_day = datetime(2026, 3, 31, 23, 59, tzinfo=timezone.utc)
        early_on_first_day = datetime(2026, 3, 1, 0, 0, 1)
        assert classify(START, END, late_on_last_day) is RecruitStatus.OPEN
        assert classify(START, END, early_on_first_day) is RecruitStatus.OPEN

    def test_datetime_bounds_truncated(self):
        start = datetime(2026, 3, 1, 18, 0)
        assert classify(start, END, datetime(2026, 3, 1, 9, 0)) is RecruitStatus.OPEN

    def test_single_day_window(self):
        day = date(2026, 5, 5)
        assert classify(day, day, day) is RecruitStatus.OPEN


class TestCanSubmit:

    def _posting(self, published=True, override=None):
        return SimpleNamespace(
            is_published=published,
            recruit_start_date=START,
            recruit_end_date=END,
            recruit_status_override=override,
        )

    def test_open_and_published(self):
        assert can_submit(self._posting(), date(2026, 3, 10))

    def test_unpublished(self):
        assert not can_submit(self._posting(published=False), date(2026, 3, 10))

    def test_outside_window(self):
        assert not can_submit(self._posting(), date(2026, 4, 10))

    def test_override_ignored(self):
        # A stale "open" override must not reopen a closed window
        assert not can_submit(self._posting(override="open"), date(2026, 4, 10))
        assert can_submit(self._posting(override="closed"), date(2026, 3, 10))


class TestProgramPhase:

    @pytest.mark.parametrize("now,expected", [
        (date(2026, 6, 30), ProgramPhase.UPCOMING),
        (date(2026, 7, 1), ProgramPhase.IN_PROGRESS),
        (date(2026, 8, 31), ProgramPhase.IN_PROGRESS),
        (date(2026, 9, 1), ProgramPhase.ENDED),
    ])
    def test_phases(self, now, expected):
        assert program_phase(date(2026, 7, 1), date(2026, 8, 31), now) is expected


class TestParticipationState:

    program = SimpleNamespace(
        activity_start_date=date(2026, 7, 1),
        activity_end_date=date(2026, 8, 31),
    )

    @pytest.mark.parametrize("now,expected", [
        (date(2026, 6, 1), ParticipationState.UPCOMING),
        (date(2026, 7, 15), ParticipationState.ACTIVE),
        (date(2026, 9, 15), ParticipationState.PERIOD_ENDED),
    ])
    def test_derived_from_program(self, now, expected):
        assert participation_state(self.program, "upcoming", now) is expected

    @pytest.mark.parametrize("stored", ["completed", "dropped"])
    def test_manual_states_kept(self, stored):
        assert participation_state(self.program, stored, date(2026, 7, 15)).value == stored
