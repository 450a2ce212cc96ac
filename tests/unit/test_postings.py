"""Tests for posting lookup, submission gating and rescheduling."""
from datetime import date

import pytest

from recruiting.review.errors import NotFound, SubmissionClosed
from recruiting.review.postings import (
    ApplicantSnapshot,
    Attachment,
    effective_recruit_status,
    get_posting,
    reschedule_posting,
    submit_application,
)
from recruiting.review.status import RecruitStatus
from tests.fixtures.recruiting import make_posting, make_program

APPLICANT = ApplicantSnapshot(name="Ann Lee", email="ann@example.com", phone="010-0000-0000")
CV = Attachment(url="https://files.example.com/cv.pdf", name="cv.pdf")
PORTFOLIO = Attachment(url="https://files.example.com/portfolio.pdf", name="portfolio.pdf")
IN_WINDOW = date(2026, 3, 15)


class TestGetPosting:

    def test_found(self, session):
        program = make_program(session)
        posting = make_posting(session, program=program)
        info = get_posting(session, posting.id)
        assert info.program_id == program.id
        assert info.is_published
        assert info.start_date == date(2026, 3, 1)
        assert info.end_date == date(2026, 3, 31)

    def test_missing(self, session):
        with pytest.raises(NotFound):
            get_posting(session, 999)


class TestSubmitApplication:

    def test_submitted(self, session):
        posting = make_posting(session)
        app = submit_application(
            session, posting.id, "user-1", APPLICANT, [CV, PORTFOLIO],
            referral_source="Newsletter", now=IN_WINDOW,
        )
        assert app.id is not None
        assert app.status == "submitted"
        assert app.applicant_email == "ann@example.com"
        assert app.file_name_2 == "portfolio.pdf"
        assert app.referral_source == "Newsletter"

    def test_unpublished(self, session):
        posting = make_posting(session, published=False)
        with pytest.raises(SubmissionClosed, match="unpublished"):
            submit_application(session, posting.id, "user-1", APPLICANT, [CV], now=IN_WINDOW)

    @pytest.mark.parametrize("now", [date(2026, 2, 28), date(2026, 4, 1)])
    def test_outside_window(self, session, now):
        posting = make_posting(session)
        with pytest.raises(SubmissionClosed, match="not currently open"):
            submit_application(session, posting.id, "user-1", APPLICANT, [CV], now=now)

    def test_stale_open_override_does_not_admit(self, session):
        posting = make_posting(session, override="open")
        with pytest.raises(SubmissionClosed):
            submit_application(
                session, posting.id, "user-1", APPLICANT, [CV], now=date(2026, 4, 2)
            )

    @pytest.mark.parametrize("attachments", [[], [CV, CV, CV]])
    def test_attachment_count(self, session, attachments):
        posting = make_posting(session)
        with pytest.raises(ValueError):
            submit_application(
                session, posting.id, "user-1", APPLICANT, attachments, now=IN_WINDOW
            )

    def test_missing_posting(self, session):
        with pytest.raises(NotFound):
            submit_application(session, 999, "user-1", APPLICANT, [CV], now=IN_WINDOW)


class TestReschedule:

    def test_date_change_clears_override(self, session):
        posting = make_posting(session, override="closed")
        reschedule_posting(session, posting.id, date(2026, 4, 1), date(2026, 4, 30))
        assert posting.recruit_status_override is None
        assert effective_recruit_status(posting, date(2026, 4, 10)) is RecruitStatus.OPEN

    def test_explicit_override_kept(self, session):
        posting = make_posting(session)
        reschedule_posting(
            session, posting.id, date(2026, 4, 1), date(2026, 4, 30), override="closed"
        )
        assert posting.recruit_status_override == "closed"
        assert effective_recruit_status(posting, date(2026, 4, 10)) is RecruitStatus.CLOSED

    def test_same_dates_keep_override(self, session):
        posting = make_posting(session, override="closed")
        reschedule_posting(session, posting.id, date(2026, 3, 1), date(2026, 3, 31))
        assert posting.recruit_status_override == "closed"

    def test_end_before_start(self, session):
        posting = make_posting(session)
        with pytest.raises(ValueError):
            reschedule_posting(session, posting.id, date(2026, 4, 30), date(2026, 4, 1))

    def test_missing(self, session):
        with pytest.raises(NotFound):
            reschedule_posting(session, 999, date(2026, 4, 1), date(2026, 4, 30))
