"""SQLAlchemy 2.0 models for the application review workflow.

Tables:
- programs:                 Programs participants join (collaborator-owned)
- postings:                 Time-bounded recruitment postings (collaborator-owned)
- reviewers:                Display names for opaque reviewer references
- applications:             One per submission, applicant snapshot + status
- application_status_logs:  Audit trail, one row per successful transition
- application_evaluations:  Append-only scored reviews
- participations:           Derived from final_pass, at most one per application
"""
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

from .status import ApplicationStatus, ParticipationState


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Shared declarative base for all review models."""
    pass


class Program(Base):
    """A program accepted applicants take part in."""
    __tablename__ = "programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    host: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    organizer: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    activity_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    activity_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    postings: Mapped[list["Posting"]] = relationship(back_populates="program")

    def __repr__(self) -> str:
        return f"<Program(id={self.id}, name='{self.name}')>"


class Posting(Base):
    """A recruitment posting applications are submitted against.

    ``recruit_status_override`` is a manual display override. Submission
    eligibility is always recomputed from the dates.
    """
    __tablename__ = "postings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    program_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("programs.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    job_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recruit_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    recruit_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    recruit_status_override: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    program: Mapped[Optional["Program"]] = relationship(back_populates="postings")
    applications: Mapped[list["Application"]] = relationship(back_populates="posting")

    def __repr__(self) -> str:
        return (
            f"<Posting(id={self.id}, name='{self.name}', "
            f"published={self.is_published})>"
        )


class Reviewer(Base):
    """Staff member acting on applications, keyed by session reference."""
    __tablename__ = "reviewers"

    reference: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Reviewer(ref='{self.reference}', name='{self.name}')>"


class Application(Base):
    """A single submission against a posting — the central entity.

    applicant_* fields are a snapshot taken at submission time; reviewers
    only ever change ``status``.
    """
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    posting_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("postings.id"), nullable=False
    )
    submitter_ref: Mapped[str] = mapped_column(String(100), nullable=False)
    applicant_name: Mapped[str] = mapped_column(String(50), nullable=False)
    applicant_email: Mapped[str] = mapped_column(String(255), nullable=False)
    applicant_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    file_url_1: Mapped[str] = mapped_column(String(500), nullable=False)
    file_name_1: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url_2: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    file_name_2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    referral_source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ApplicationStatus.SUBMITTED.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # Relationships
    posting: Mapped["Posting"] = relationship(back_populates="applications")
    status_logs: Mapped[list["StatusAuditEntry"]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="StatusAuditEntry.id",
    )
    evaluations: Mapped[list["Evaluation"]] = relationship(
        back_populates="application",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_applications_status", "status"),
        Index("ix_applications_posting", "posting_id"),
        Index("ix_applications_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, posting={self.posting_id}, "
            f"applicant='{self.applicant_name}', status='{self.status}')>"
        )


class StatusAuditEntry(Base):
    """Audit trail — exactly one row per successful status transition."""
    __tablename__ = "application_status_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    from_status: Mapped[str] = mapped_column(String(20), nullable=False)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    application: Mapped["Application"] = relationship(back_populates="status_logs")

    __table_args__ = (
        Index("ix_status_logs_app_id", "application_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<StatusAuditEntry(app_id={self.application_id}, "
            f"'{self.from_status}' → '{self.to_status}', by='{self.changed_by}')>"
        )


class Evaluation(Base):
    """A scored review of an application; never updated after creation."""
    __tablename__ = "application_evaluations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    application_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    score_criteria_1: Mapped[int] = mapped_column(Integer, nullable=False)
    score_criteria_2: Mapped[int] = mapped_column(Integer, nullable=False)
    score_criteria_3: Mapped[int] = mapped_column(Integer, nullable=False)
    total_score: Mapped[int] = mapped_column(Integer, nullable=False)
    memo: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    evaluated_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    application: Mapped["Application"] = relationship(back_populates="evaluations")

    __table_args__ = (
        Index("ix_evaluations_app_created", "application_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Evaluation(id={self.id}, app_id={self.application_id}, "
            f"total={self.total_score})>"
        )


class Participation(Base):
    """A successful applicant's involvement in a program.

    Never authored directly: exists exactly while the originating
    application holds final_pass. The eval_* payload is the post-acceptance
    performance review, separate from application_evaluations.
    """
    __tablename__ = "participations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submitter_ref: Mapped[str] = mapped_column(String(100), nullable=False)
    program_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False
    )
    posting_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("postings.id"), nullable=False
    )
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    participation_state: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ParticipationState.UPCOMING.value
    )
    role: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    eval_scores: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    eval_total_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    eval_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    evaluated_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    evaluated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    program: Mapped["Program"] = relationship()
    posting: Mapped["Posting"] = relationship()
    application: Mapped["Application"] = relationship()

    __table_args__ = (
        Index("ix_participations_program", "program_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Participation(id={self.id}, app_id={self.application_id}, "
            f"state='{self.participation_state}')>"
        )
