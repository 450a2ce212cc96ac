"""Read side of the review workflow: list, detail, navigation, export.

The list view, the export projection and prev/next navigation all share
one filter and one ordering (newest first, id as tie-breaker), so
"next" from the last row of a page lands on the first row of the next
page.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from .errors import NotFound
from .evaluation_service import latest_totals, to_dict as evaluation_to_dict
from .models import Application, Posting
from .reviewers import reviewer_names
from .status import status_label

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ApplicationFilter:
    """Status and posting subsets; an empty subset means no constraint."""
    statuses: frozenset[str] = field(default_factory=frozenset)
    posting_ids: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def parse(cls, status: Optional[str] = None, posting_id: Optional[str] = None) -> "ApplicationFilter":
        """Build from comma-separated query values ("first_pass,final_pass")."""
        statuses = frozenset(s.strip() for s in (status or "").split(",") if s.strip())
        posting_ids = frozenset(
            int(p) for p in (posting_id or "").split(",") if p.strip()
        )
        return cls(statuses=statuses, posting_ids=posting_ids)

    def apply(self, stmt):
        if self.statuses:
            stmt = stmt.where(Application.status.in_(self.statuses))
        if self.posting_ids:
            stmt = stmt.where(Application.posting_id.in_(self.posting_ids))
        return stmt


NO_FILTER = ApplicationFilter()

_ORDERING = (Application.created_at.desc(), Application.id.desc())


# ---------------------------------------------------------------------------
# List view
# ---------------------------------------------------------------------------

def _list_item(app: Application, totals: dict[int, int]) -> dict:
    posting = app.posting
    program = posting.program if posting else None
    return {
        "id": app.id,
        "posting_id": app.posting_id,
        "posting_name": posting.name if posting else "",
        "program_name": program.name if program else "",
        "applicant_name": app.applicant_name,
        "applicant_email": app.applicant_email,
        "applicant_phone": app.applicant_phone,
        "status": app.status,
        "referral_source": app.referral_source,
        "eval_score": totals.get(app.id),
        "created_at": app.created_at,
    }


def list_applications(
    session: Session,
    app_filter: ApplicationFilter = NO_FILTER,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> dict:
    """One page of applications, newest first.

    Returns:
        {"data": [...], "total": N, "page": N, "total_pages": N}
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    total = session.execute(
        app_filter.apply(select(func.count(Application.id)))
    ).scalar_one()

    apps = session.execute(
        app_filter.apply(select(Application))
        .options(selectinload(Application.posting).selectinload(Posting.program))
        .order_by(*_ORDERING)
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).scalars().all()

    totals = latest_totals(session, (a.id for a in apps))
    return {
        "data": [_list_item(a, totals) for a in apps],
        "total": total,
        "page": page,
        "total_pages": math.ceil(total / page_size),
    }


def list_posting_choices(session: Session) -> list[dict]:
    """Postings that have at least one application, by name (filter options)."""
    rows = session.execute(
        select(Posting.id, Posting.name)
        .where(Posting.id.in_(select(Application.posting_id)))
        .order_by(Posting.name.asc(), Posting.id.asc())
    )
    return [{"id": posting_id, "name": name} for posting_id, name in rows]


# ---------------------------------------------------------------------------
# Detail + navigation
# ---------------------------------------------------------------------------

def get_application(session: Session, application_id: int) -> dict:
    """Full review record: attachments, evaluations and status logs (newest first)."""
    app = session.execute(
        select(Application)
        .where(Application.id == application_id)
        .options(
            selectinload(Application.posting).selectinload(Posting.program),
            selectinload(Application.evaluations),
            selectinload(Application.status_logs),
        )
    ).scalar_one_or_none()
    if app is None:
        raise NotFound(f"Application {application_id} not found")

    evaluations = sorted(
        app.evaluations, key=lambda e: (_sort_key(e.created_at), e.id), reverse=True
    )
    logs = sorted(
        app.status_logs, key=lambda l: (_sort_key(l.created_at), l.id), reverse=True
    )
    names = reviewer_names(
        session,
        [e.evaluated_by for e in evaluations] + [l.changed_by for l in logs],
    )

    posting = app.posting
    program = posting.program if posting else None
    attachments = [{"url": app.file_url_1, "name": app.file_name_1}]
    if app.file_url_2:
        attachments.append({"url": app.file_url_2, "name": app.file_name_2})

    return {
        "id": app.id,
        "posting_id": app.posting_id,
        "posting_name": posting.name if posting else "",
        "program_name": program.name if program else "",
        "submitter_ref": app.submitter_ref,
        "applicant_name": app.applicant_name,
        "applicant_email": app.applicant_email,
        "applicant_phone": app.applicant_phone,
        "attachments": attachments,
        "referral_source": app.referral_source,
        "status": app.status,
        "created_at": app.created_at,
        "evaluations": [evaluation_to_dict(e, names) for e in evaluations],
        "status_logs": [
            {
                "id": l.id,
                "from_status": l.from_status,
                "to_status": l.to_status,
                "changed_by": l.changed_by,
                "changed_by_name": names.get(l.changed_by, ""),
                "created_at": l.created_at,
            }
            for l in logs
        ],
    }


def _sort_key(value: datetime) -> datetime:
    # SQLite hands back naive datetimes while fresh objects may be aware
    return value.replace(tzinfo=None) if value.tzinfo else value


@dataclass(frozen=True)
class Adjacency:
    prev_id: Optional[int]
    next_id: Optional[int]


def ordered_ids(session: Session, app_filter: ApplicationFilter = NO_FILTER) -> list[int]:
    """The full, unpaginated id sequence of the list view."""
    return list(session.execute(
        app_filter.apply(select(Application.id)).order_by(*_ORDERING)
    ).scalars())


def adjacent(
    session: Session,
    application_id: int,
    app_filter: ApplicationFilter = NO_FILTER,
) -> Adjacency:
    """Previous (newer) and next (older) ids around an application.

    Raises:
        NotFound: application not in the filtered sequence
    """
    ids = ordered_ids(session, app_filter)
    try:
        idx = ids.index(application_id)
    except ValueError:
        raise NotFound(
            f"Application {application_id} not found in the filtered list"
        ) from None

    return Adjacency(
        prev_id=ids[idx - 1] if idx > 0 else None,
        next_id=ids[idx + 1] if idx < len(ids) - 1 else None,
    )


# ---------------------------------------------------------------------------
# Export projection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExportRow:
    """One flat record per application for spreadsheet rendering."""
    id: int
    posting_name: str
    applied_at: datetime
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    status: str
    referral_source: str
    eval_score: Optional[int]


def export_rows(
    session: Session,
    app_filter: ApplicationFilter = NO_FILTER,
    batch_size: int = 500,
) -> Iterator[ExportRow]:
    """Yield export rows with the list view's filter and ordering, unpaginated."""
    offset = 0
    exported = 0
    while True:
        apps = session.execute(
            app_filter.apply(select(Application))
            .options(selectinload(Application.posting))
            .order_by(*_ORDERING)
            .offset(offset)
            .limit(batch_size)
        ).scalars().all()
        if not apps:
            break

        totals = latest_totals(session, (a.id for a in apps))
        for app in apps:
            exported += 1
            yield ExportRow(
                id=app.id,
                posting_name=app.posting.name if app.posting else "",
                applied_at=app.created_at,
                applicant_name=app.applicant_name,
                applicant_email=app.applicant_email,
                applicant_phone=app.applicant_phone,
                status=status_label(app.status),
                referral_source=app.referral_source or "",
                eval_score=totals.get(app.id),
            )
        offset += batch_size

    logger.info(f"Exported {exported} applications")
