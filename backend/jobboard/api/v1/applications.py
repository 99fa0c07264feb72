"""
Applications API endpoints.

Recruiters review and move applications to their jobs through the status
workflow; applicants list the applications they submitted.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status as http_status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from jobboard.api.v1.auth import (
    Identity,
    get_current_applicant,
    get_current_identity,
    get_current_recruiter,
)
from jobboard.api.v1.schemas import (
    ApplicationWithApplicant,
    ApplicationWithJob,
    JobResponse,
    Pagination,
    applicant_summary,
)
from jobboard.core.errors import ValidationError
from jobboard.db.session import get_db
from jobboard.models import Applicant, Recruiter
from jobboard.models.enums import ApplicationStatus, Role
from jobboard.services.applications import (
    get_application_for_viewer,
    get_resume_url,
    list_applicant_applications,
    set_application_status,
)
from jobboard.services.pagination import build_pagination, resolve_page

logger = logging.getLogger("applications")

router = APIRouter()


# ============== Pydantic Schemas ==============


class StatusUpdateRequest(BaseModel):
    """Schema for moving an application to a new status."""

    status: ApplicationStatus


class ApplicationDetail(ApplicationWithApplicant):
    job: JobResponse


class ApplicationDetailResponse(BaseModel):
    message: str
    application: ApplicationDetail


class MyApplicationsResponse(BaseModel):
    message: str = "Applications fetched successfully"
    data: list[ApplicationWithJob]
    pagination: Pagination


def _detail(application) -> ApplicationDetail:
    return ApplicationDetail(
        **ApplicationWithJob.model_validate(application).model_dump(),
        applicant=applicant_summary(application.applicant),
    )


# ============== API Endpoints ==============


@router.get("/me", response_model=MyApplicationsResponse)
def get_my_applications(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    status: Optional[str] = None,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """
    List the caller's applications, newest first (Applicant only).

    ``status`` narrows the list to one ApplicationStatus.
    """
    status_filter = None
    if status:
        try:
            status_filter = ApplicationStatus(status.strip().upper())
        except ValueError:
            valid = ", ".join(s.value for s in ApplicationStatus)
            raise ValidationError(f"Invalid status. Must be one of: {valid}")

    page_number, limit_number = resolve_page(page, limit, default_limit=10)
    applications, total = list_applicant_applications(
        db, applicant.id, page_number, limit_number, status=status_filter
    )

    return MyApplicationsResponse(
        data=[ApplicationWithJob.model_validate(a) for a in applications],
        pagination=build_pagination(total, page_number, limit_number),
    )


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(
    application_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Fetch one application.

    Visible to the recruiter who owns the job and to the applicant who
    submitted it.
    """
    recruiter_id = None
    applicant_id = None
    if identity.role == Role.RECRUITER:
        recruiter = db.query(Recruiter).filter(Recruiter.user_id == identity.subject_id).first()
        recruiter_id = recruiter.id if recruiter else None
    else:
        applicant = db.query(Applicant).filter(Applicant.user_id == identity.subject_id).first()
        applicant_id = applicant.id if applicant else None

    application = get_application_for_viewer(
        db, application_id, recruiter_id=recruiter_id, applicant_id=applicant_id
    )
    return ApplicationDetailResponse(
        message="Application fetched successfully",
        application=_detail(application),
    )


@router.patch("/{application_id}/status", response_model=ApplicationDetailResponse)
def update_application_status(
    application_id: int,
    request: StatusUpdateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """
    Move an application through the workflow (owning Recruiter only).

    Allowed: PENDING -> REVIEWED | WITHDRAWN, REVIEWED -> ACCEPTED |
    REJECTED | WITHDRAWN. Anything else is a 409.
    """
    application = set_application_status(db, application_id, recruiter.id, request.status)
    return ApplicationDetailResponse(
        message="Application status updated successfully",
        application=_detail(application),
    )


@router.get(
    "/{application_id}/resume",
    response_class=RedirectResponse,
    status_code=http_status.HTTP_307_TEMPORARY_REDIRECT,
)
def redirect_to_resume(
    application_id: int,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Redirect to the applicant's resume (owning Recruiter only)."""
    resume_url = get_resume_url(db, application_id, recruiter.id)
    logger.info(f"Recruiter {recruiter.id} opened resume of application {application_id}")
    return RedirectResponse(resume_url, status_code=http_status.HTTP_307_TEMPORARY_REDIRECT)
