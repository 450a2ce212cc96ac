"""
Program Participants API Endpoints

Participants exist only for applications that reached final_pass.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from recruiting.review import participation_service
from recruiting.review.errors import NotFound
from recruiting.review.models import Program
from recruiting.review.reviewers import upsert_reviewer
from recruiting.review.window import program_phase

from ..auth.jwt import Principal, get_current_reviewer
from ..db import get_db
from ..schemas import ParticipantEvaluationUpdate, ParticipantResponse, ProgramPhaseResponse

router = APIRouter()


@router.get("/programs/{program_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    program_id: int,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Participants of a program with their derived state"""
    return participation_service.list_participants(db, program_id)


@router.get("/programs/{program_id}/phase", response_model=ProgramPhaseResponse)
async def get_program_phase(
    program_id: int,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    program = db.get(Program, program_id)
    if program is None:
        raise NotFound(f"Program {program_id} not found")
    return {
        "program_id": program.id,
        "phase": program_phase(program.activity_start_date, program.activity_end_date).value,
        "activity_start_date": program.activity_start_date,
        "activity_end_date": program.activity_end_date,
    }


@router.put("/participations/{participation_id}/evaluation", response_model=ParticipantResponse)
async def evaluate_participant(
    participation_id: int,
    body: ParticipantEvaluationUpdate,
    db: Session = Depends(get_db),
    reviewer: Principal = Depends(get_current_reviewer),
):
    """Overwrite a participant's performance review"""
    if reviewer.name:
        upsert_reviewer(db, reviewer.reference, reviewer.name)
    try:
        item = participation_service.evaluate_participant(
            db,
            participation_id,
            scores=body.eval_scores,
            total=body.eval_total_score,
            state=body.participation_state.value,
            evaluator=reviewer.reference,
            role=body.role,
            comment=body.eval_comment,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return item
