"""
Admin Applications API Endpoints

Reviewer-only: list/detail with prev/next navigation, status transitions,
evaluation ledger, export projection.
"""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from recruiting.config import get_config
from recruiting.review import evaluation_service, query_service, transition_service
from recruiting.review.errors import NotFound
from recruiting.review.reviewers import upsert_reviewer

from ..auth.jwt import Principal, get_current_reviewer
from ..db import get_db
from ..schemas import (
    ApplicationDetail,
    ApplicationListResponse,
    EvaluationCreate,
    EvaluationResponse,
    ExportRowResponse,
    PostingChoice,
    StatusUpdate,
    TransitionResponse,
)

router = APIRouter()


def _parse_filter(status: Optional[str], posting_id: Optional[str]) -> query_service.ApplicationFilter:
    try:
        return query_service.ApplicationFilter.parse(status, posting_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="posting_id must be comma-separated integers")


def _register(db: Session, reviewer: Principal) -> None:
    """Keep the reviewer's display name current for audit/evaluation listings"""
    if reviewer.name:
        upsert_reviewer(db, reviewer.reference, reviewer.name)


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    status: Optional[str] = None,
    posting_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """List applications, newest first, ten per page by default"""
    app_filter = _parse_filter(status, posting_id)
    return query_service.list_applications(
        db, app_filter, page=page, page_size=get_config().review.page_size
    )


@router.get("/export", response_model=List[ExportRowResponse])
async def export_applications(
    status: Optional[str] = None,
    posting_id: Optional[str] = None,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Flat row projection for spreadsheet export (same filter as the list)"""
    app_filter = _parse_filter(status, posting_id)
    return [asdict(row) for row in query_service.export_rows(db, app_filter)]


@router.get("/postings", response_model=List[PostingChoice])
async def list_postings(
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Postings that have applications (filter dropdown)"""
    return query_service.list_posting_choices(db)


@router.get("/{application_id}", response_model=ApplicationDetail)
async def get_application(
    application_id: int,
    status: Optional[str] = None,
    posting_id: Optional[str] = None,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Application detail plus prev/next ids under the list filter"""
    app_filter = _parse_filter(status, posting_id)
    detail = query_service.get_application(db, application_id)
    try:
        nav = query_service.adjacent(db, application_id, app_filter)
    except NotFound:
        # Application left the filtered list (e.g. status changed); no neighbours
        nav = query_service.Adjacency(prev_id=None, next_id=None)
    return {**detail, "prev_id": nav.prev_id, "next_id": nav.next_id}


@router.patch("/{application_id}/status", response_model=TransitionResponse)
async def update_status(
    application_id: int,
    update: StatusUpdate,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Move an application along one allowed edge"""
    _register(db, reviewer)
    result = transition_service.transition(
        db, application_id, update.status, reviewer.reference
    )
    db.commit()
    return {"id": result.id, "status": result.status}


@router.post(
    "/{application_id}/evaluations",
    response_model=EvaluationResponse,
    status_code=201,
)
async def create_evaluation(
    application_id: int,
    body: EvaluationCreate,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Record an evaluation (allowed at any status)"""
    _register(db, reviewer)
    evaluation = evaluation_service.record(
        db,
        application_id,
        body.score_criteria_1,
        body.score_criteria_2,
        body.score_criteria_3,
        evaluator=reviewer.reference,
        memo=body.memo,
    )
    db.commit()
    names = {reviewer.reference: reviewer.name} if reviewer.name else {}
    return evaluation_service.to_dict(evaluation, names)


@router.get("/{application_id}/evaluations", response_model=List[EvaluationResponse])
async def list_evaluations(
    application_id: int,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """All evaluations of an application, most recent first"""
    return evaluation_service.list_evaluations(db, application_id)


@router.delete("/evaluations/{evaluation_id}")
async def delete_evaluation(
    evaluation_id: int,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Delete exactly one evaluation"""
    evaluation_service.delete(db, evaluation_id)
    db.commit()
    return {"message": "Evaluation deleted"}
