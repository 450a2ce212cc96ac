"""
Applicant Submission Endpoint
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from recruiting.review.postings import ApplicantSnapshot, Attachment, submit_application

from ..auth.jwt import Principal, get_current_applicant
from ..db import get_db
from ..schemas import ApplicationCreate, ApplicationCreated

router = APIRouter()


@router.post("", response_model=ApplicationCreated, status_code=201)
async def create_application(
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    applicant: Principal = Depends(get_current_applicant),
):
    """Apply to a published posting while its recruitment window is open"""
    app = submit_application(
        db,
        body.posting_id,
        submitter_ref=applicant.reference,
        applicant=ApplicantSnapshot(
            name=body.applicant_name,
            email=body.applicant_email,
            phone=body.applicant_phone,
        ),
        attachments=[Attachment(url=a.url, name=a.name) for a in body.attachments],
        referral_source=body.referral_source,
    )
    db.commit()
    return {"id": app.id, "status": app.status, "created_at": app.created_at}
