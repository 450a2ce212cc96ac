"""Posting lookup and applicant submission.

Postings and programs are maintained elsewhere; this module only reads
them, gates submissions on the recruitment window, and handles the
date/override interaction when a posting is rescheduled.

Usage:
    from recruiting.review.postings import get_posting, submit_application
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from .errors import NotFound, SubmissionClosed
from .models import Application, Posting
from .status import ApplicationStatus, RecruitStatus
from .window import DateLike, can_submit, classify

logger = logging.getLogger(__name__)

MAX_ATTACHMENTS = 2

# Marks "argument not passed" where None is a meaningful value
UNSET = object()


@dataclass(frozen=True)
class PostingInfo:
    """What the review engine needs to know about a posting."""
    id: int
    name: str
    program_id: Optional[int]
    is_published: bool
    start_date: date
    end_date: date


@dataclass(frozen=True)
class ApplicantSnapshot:
    """Applicant contact details as they were at submission time."""
    name: str
    email: str
    phone: str


@dataclass(frozen=True)
class Attachment:
    url: str
    name: str


def get_posting(session: Session, posting_id: int) -> PostingInfo:
    """Look up a posting; raises NotFound if absent."""
    posting = session.get(Posting, posting_id)
    if posting is None:
        raise NotFound(f"Posting {posting_id} not found")
    return PostingInfo(
        id=posting.id,
        name=posting.name,
        program_id=posting.program_id,
        is_published=posting.is_published,
        start_date=posting.recruit_start_date,
        end_date=posting.recruit_end_date,
    )


def effective_recruit_status(posting: Posting, now: Optional[DateLike] = None) -> RecruitStatus:
    """Display status: the manual override if one is set, else the computed window."""
    if posting.recruit_status_override:
        return RecruitStatus(posting.recruit_status_override)
    return classify(posting.recruit_start_date, posting.recruit_end_date, now)


def reschedule_posting(
    session: Session,
    posting_id: int,
    start_date: date,
    end_date: date,
    override=UNSET,
) -> Posting:
    """Move a posting's recruitment window.

    A date change invalidates any manual override: it is cleared unless the
    caller passes a new ``override`` explicitly (``None`` also clears).
    """
    if end_date < start_date:
        raise ValueError(f"end_date {end_date} is before start_date {start_date}")

    posting = session.get(Posting, posting_id)
    if posting is None:
        raise NotFound(f"Posting {posting_id} not found")

    dates_changed = (
        posting.recruit_start_date != start_date
        or posting.recruit_end_date != end_date
    )
    posting.recruit_start_date = start_date
    posting.recruit_end_date = end_date

    if override is not UNSET:
        posting.recruit_status_override = (
            RecruitStatus(override).value if override is not None else None
        )
    elif dates_changed and posting.recruit_status_override:
        logger.info(
            f"Posting {posting_id}: dates changed, clearing stale override "
            f"'{posting.recruit_status_override}'"
        )
        posting.recruit_status_override = None

    session.flush()
    return posting


def submit_application(
    session: Session,
    posting_id: int,
    submitter_ref: str,
    applicant: ApplicantSnapshot,
    attachments: Sequence[Attachment],
    referral_source: Optional[str] = None,
    now: Optional[DateLike] = None,
) -> Application:
    """Create an Application in ``submitted`` status.

    Raises:
        NotFound: posting does not exist
        SubmissionClosed: posting unpublished or window not open
        ValueError: not one or two attachments
    """
    if not 1 <= len(attachments) <= MAX_ATTACHMENTS:
        raise ValueError(
            f"Expected 1 to {MAX_ATTACHMENTS} attachments, got {len(attachments)}"
        )

    posting = session.get(Posting, posting_id)
    if posting is None:
        raise NotFound(f"Posting {posting_id} not found")

    if not posting.is_published:
        raise SubmissionClosed("Cannot apply to an unpublished posting")
    if not can_submit(posting, now):
        raise SubmissionClosed("Cannot apply: recruitment is not currently open")

    first = attachments[0]
    second = attachments[1] if len(attachments) > 1 else None

    app = Application(
        posting_id=posting.id,
        submitter_ref=submitter_ref,
        applicant_name=applicant.name,
        applicant_email=applicant.email,
        applicant_phone=applicant.phone,
        file_url_1=first.url,
        file_name_1=first.name,
        file_url_2=second.url if second else None,
        file_name_2=second.name if second else None,
        referral_source=referral_source,
        status=ApplicationStatus.SUBMITTED.value,
    )
    session.add(app)
    session.flush()

    logger.info(
        f"Application {app.id} submitted for posting {posting_id} by {submitter_ref}"
    )
    return app
