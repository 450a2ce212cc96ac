"""
Pydantic schemas for the portal API
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from recruiting.review.status import ParticipationState


# --- Applications (reviewer side) ---

class StatusUpdate(BaseModel):
    status: str


class TransitionResponse(BaseModel):
    id: int
    status: str


class ApplicationListItem(BaseModel):
    id: int
    posting_id: int
    posting_name: str
    program_name: str
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    status: str
    referral_source: Optional[str]
    eval_score: Optional[int]
    created_at: datetime


class ApplicationListResponse(BaseModel):
    data: List[ApplicationListItem]
    total: int
    page: int
    total_pages: int


class AttachmentOut(BaseModel):
    url: str
    name: Optional[str]


class EvaluationResponse(BaseModel):
    id: int
    application_id: int
    score_criteria_1: int
    score_criteria_2: int
    score_criteria_3: int
    total_score: int
    memo: Optional[str]
    evaluated_by: str
    evaluated_by_name: str
    created_at: datetime


class StatusLogResponse(BaseModel):
    id: int
    from_status: str
    to_status: str
    changed_by: str
    changed_by_name: str
    created_at: datetime


class ApplicationDetail(BaseModel):
    id: int
    posting_id: int
    posting_name: str
    program_name: str
    submitter_ref: str
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    attachments: List[AttachmentOut]
    referral_source: Optional[str]
    status: str
    created_at: datetime
    evaluations: List[EvaluationResponse]
    status_logs: List[StatusLogResponse]
    prev_id: Optional[int] = None
    next_id: Optional[int] = None


class EvaluationCreate(BaseModel):
    # Bounds are checked by the ledger so the error kind stays invalid_score
    score_criteria_1: int
    score_criteria_2: int
    score_criteria_3: int
    memo: Optional[str] = Field(default=None, max_length=200)


class ExportRowResponse(BaseModel):
    id: int
    posting_name: str
    applied_at: datetime
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    status: str
    referral_source: str
    eval_score: Optional[int]


class PostingChoice(BaseModel):
    id: int
    name: str


# --- Submission (applicant side) ---

class AttachmentIn(BaseModel):
    url: str = Field(max_length=500)
    name: str = Field(max_length=255)


class ApplicationCreate(BaseModel):
    posting_id: int
    applicant_name: str = Field(min_length=1, max_length=50)
    applicant_email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    applicant_phone: str = Field(min_length=1, max_length=20)
    attachments: List[AttachmentIn] = Field(min_length=1, max_length=2)
    referral_source: Optional[str] = Field(default=None, max_length=100)


class ApplicationCreated(BaseModel):
    id: int
    status: str
    created_at: datetime


# --- Participants ---

class ParticipantEvaluationUpdate(BaseModel):
    eval_scores: Dict[str, int]
    eval_total_score: int
    participation_state: ParticipationState
    role: Optional[str] = Field(default=None, max_length=200)
    eval_comment: Optional[str] = Field(default=None, max_length=2000)


class ParticipantResponse(BaseModel):
    id: int
    submitter_ref: str
    application_id: int
    applicant_name: str
    posting_name: str
    job_type: str
    participation_state: str
    role: Optional[str]
    eval_scores: Optional[Dict[str, int]]
    eval_total_score: Optional[int]
    eval_comment: Optional[str]
    evaluated_by_name: Optional[str]
    evaluated_at: Optional[datetime]


class ProgramPhaseResponse(BaseModel):
    program_id: int
    phase: str
    activity_start_date: date
    activity_end_date: date
