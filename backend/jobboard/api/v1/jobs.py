"""
Jobs API endpoints.

Public search and detail views, recruiter job management and the
applicant-side actions on a job (apply, save, hide).
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field, HttpUrl
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.api.v1.auth import (
    get_current_applicant,
    get_current_recruiter,
    get_viewer_applicant_id,
)
from jobboard.api.v1.schemas import (
    ApplicationResponse,
    ApplicationWithApplicant,
    JobResponse,
    Pagination,
    application_with_applicant,
)
from jobboard.core.errors import Internal, ValidationError
from jobboard.db.session import get_db
from jobboard.models import Applicant, Application, Recruiter
from jobboard.models.enums import (
    CTCType,
    Currency,
    Department,
    EmploymentType,
    JobRole,
    NoticePeriod,
    WorkMode,
)
from jobboard.services.applications import (
    apply_to_job,
    count_by_status,
    list_job_applications,
)
from jobboard.services.job_query import JobSearchFilters, search_jobs
from jobboard.services.jobs import (
    create_job,
    delete_job,
    get_job,
    get_owned_job,
    list_recruiter_jobs,
    update_job,
)
from jobboard.services.pagination import build_pagination, resolve_page
from jobboard.services.saved_jobs import (
    hide_job,
    is_hidden,
    is_saved,
    list_saved_jobs,
    save_job,
    unhide_job,
    unsave_job,
)

logger = logging.getLogger("jobs")

router = APIRouter()


# ============== Pydantic Schemas ==============


class JobCreateRequest(BaseModel):
    """Schema for posting a job."""

    company_id: int
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    skills: list[str] = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    role: JobRole
    department: Department
    ctc_type: CTCType
    min_ctc: Optional[float] = Field(None, ge=0)
    max_ctc: Optional[float] = Field(None, ge=0)
    currency: Currency = Currency.INR
    min_experience: float = Field(..., ge=0)
    max_experience: float = Field(..., ge=0)
    employment_type: EmploymentType
    work_mode: WorkMode
    openings: int = Field(..., ge=1)
    relocation_assistance: bool = False
    visa_sponsorship: bool = False
    notice_period: Optional[NoticePeriod] = None
    duration_in_months: Optional[int] = Field(None, ge=1)
    benefits: list[str] = []
    application_deadline: datetime


class JobUpdateRequest(BaseModel):
    """Schema for a partial job update. Only fields that are sent change."""

    company_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    skills: Optional[list[str]] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    role: Optional[JobRole] = None
    department: Optional[Department] = None
    ctc_type: Optional[CTCType] = None
    min_ctc: Optional[float] = Field(None, ge=0)
    max_ctc: Optional[float] = Field(None, ge=0)
    currency: Optional[Currency] = None
    min_experience: Optional[float] = Field(None, ge=0)
    max_experience: Optional[float] = Field(None, ge=0)
    employment_type: Optional[EmploymentType] = None
    work_mode: Optional[WorkMode] = None
    openings: Optional[int] = Field(None, ge=1)
    relocation_assistance: Optional[bool] = None
    visa_sponsorship: Optional[bool] = None
    notice_period: Optional[NoticePeriod] = None
    duration_in_months: Optional[int] = Field(None, ge=1)
    benefits: Optional[list[str]] = None
    application_deadline: Optional[datetime] = None


# Fields a client may explicitly clear with null on update
NULLABLE_JOB_FIELDS = {
    "min_ctc",
    "max_ctc",
    "notice_period",
    "duration_in_months",
    "application_deadline",
}


class ApplicationCreateRequest(BaseModel):
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    portfolio_url: Optional[HttpUrl] = None


class JobMutationResponse(BaseModel):
    message: str
    job: JobResponse


class JobListResponse(BaseModel):
    message: str = "Jobs fetched successfully"
    jobs: list[JobResponse]
    pagination: Pagination


class JobMeta(BaseModel):
    is_applied: bool = False
    is_saved: bool = False
    is_hidden: bool = False


class JobDetailResponse(BaseModel):
    message: str = "Job fetched successfully"
    job: JobResponse
    meta: JobMeta


class RecruiterJob(JobResponse):
    application_count: int = 0


class RecruiterJobsResponse(BaseModel):
    message: str = "Jobs by recruiter fetched successfully"
    jobs: list[RecruiterJob]


class ApplyResponse(BaseModel):
    message: str
    application: ApplicationResponse


class ToggleResponse(BaseModel):
    message: str
    job_id: int


class SavedJobEntry(BaseModel):
    id: int
    job_id: int
    created_at: Optional[datetime] = None
    job: JobResponse

    class Config:
        from_attributes = True


class SavedJobsResponse(BaseModel):
    message: str = "Saved jobs fetched successfully"
    data: list[SavedJobEntry]
    pagination: Pagination
    order: str


class JobApplicationsResponse(BaseModel):
    message: str
    job: JobResponse
    applications: list[ApplicationWithApplicant]
    pagination: Pagination


class JobDashboardResponse(JobApplicationsResponse):
    stats: dict[str, int]


# ============== Recruiter Endpoints ==============


@router.post("", response_model=JobMutationResponse, status_code=status.HTTP_201_CREATED)
def post_job(
    payload: JobCreateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """
    Post a new job (Recruiter only).

    The recruiter must belong to the job's company. For ``ctc_type`` RANGE
    both salary bounds are required and ``min_ctc <= max_ctc``.
    """
    job = create_job(db, recruiter.id, payload.model_dump())
    return JobMutationResponse(
        message="Job created successfully", job=JobResponse.model_validate(job)
    )


@router.get("/me", response_model=RecruiterJobsResponse)
def get_my_jobs(
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """List the caller's jobs with application counts (Recruiter only)."""
    jobs = [
        RecruiterJob(**JobResponse.model_validate(job).model_dump(), application_count=count)
        for job, count in list_recruiter_jobs(db, recruiter.id)
    ]
    return RecruiterJobsResponse(jobs=jobs)


def _update_job(job_id: int, payload: JobUpdateRequest, recruiter: Recruiter, db: Session):
    changes = payload.model_dump(exclude_unset=True)
    for name, value in changes.items():
        if value is None and name not in NULLABLE_JOB_FIELDS:
            raise ValidationError(f"{name} cannot be null")

    job = get_owned_job(db, job_id, recruiter.id, action="edit")
    job = update_job(db, job, changes)
    return JobMutationResponse(
        message="Job updated successfully", job=JobResponse.model_validate(job)
    )


@router.patch("/{job_id}", response_model=JobMutationResponse)
def patch_job(
    job_id: int,
    payload: JobUpdateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Partially update a job (owning Recruiter only)."""
    return _update_job(job_id, payload, recruiter, db)


@router.put("/{job_id}", response_model=JobMutationResponse)
def put_job(
    job_id: int,
    payload: JobUpdateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Update a job (owning Recruiter only). Same semantics as PATCH."""
    return _update_job(job_id, payload, recruiter, db)


@router.delete("/{job_id}")
def remove_job(
    job_id: int,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Delete a job and everything attached to it (owning Recruiter only)."""
    job = get_owned_job(db, job_id, recruiter.id, action="delete")
    summary = {"id": job.id, "title": job.title}
    delete_job(db, job)
    return {"message": "Job deleted successfully", "job": summary}


@router.get("/{job_id}/dashboard", response_model=JobDashboardResponse)
def get_job_dashboard(
    job_id: int,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Per-status application counts plus a page of applications (owning Recruiter only)."""
    job = get_owned_job(db, job_id, recruiter.id, action="view")
    page_number, limit_number = resolve_page(page, limit, default_limit=10)

    stats = count_by_status(db, job.id)
    applications, total = list_job_applications(db, job.id, page_number, limit_number)

    return JobDashboardResponse(
        message="Job dashboard fetched successfully",
        job=JobResponse.model_validate(job),
        stats=stats,
        applications=[application_with_applicant(a) for a in applications],
        pagination=build_pagination(total, page_number, limit_number),
    )


@router.get("/{job_id}/applications", response_model=JobApplicationsResponse)
def get_job_applications(
    job_id: int,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Page through the applications to one job (owning Recruiter only)."""
    job = get_owned_job(db, job_id, recruiter.id, action="view")
    page_number, limit_number = resolve_page(page, limit, default_limit=10)

    applications, total = list_job_applications(db, job.id, page_number, limit_number)

    return JobApplicationsResponse(
        message="Job applications fetched successfully",
        job=JobResponse.model_validate(job),
        applications=[application_with_applicant(a) for a in applications],
        pagination=build_pagination(total, page_number, limit_number),
    )


# ============== Applicant Endpoints ==============


@router.get("/saved", response_model=SavedJobsResponse)
def get_saved_jobs(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    order: Optional[str] = None,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """List the caller's saved jobs (Applicant only). ``order`` is asc or desc."""
    page_number, limit_number = resolve_page(page, limit, default_limit=10)
    direction = "asc" if (order or "").lower() == "asc" else "desc"

    saved, total = list_saved_jobs(
        db, applicant.id, page_number, limit_number, newest_first=direction == "desc"
    )
    return SavedJobsResponse(
        data=[SavedJobEntry.model_validate(entry) for entry in saved],
        pagination=build_pagination(total, page_number, limit_number),
        order=direction,
    )


@router.post("/{job_id}/apply", response_model=ApplyResponse, status_code=status.HTTP_201_CREATED)
def apply(
    job_id: int,
    payload: Optional[ApplicationCreateRequest] = None,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Apply to a job (Applicant only). A second application to the same job is a 409."""
    payload = payload or ApplicationCreateRequest()
    application = apply_to_job(
        db,
        applicant.id,
        job_id,
        resume=payload.resume,
        cover_letter=payload.cover_letter,
        portfolio_url=str(payload.portfolio_url) if payload.portfolio_url else None,
    )
    return ApplyResponse(
        message="Application submitted successfully",
        application=ApplicationResponse.model_validate(application),
    )


@router.post("/{job_id}/save", response_model=ToggleResponse, status_code=status.HTTP_201_CREATED)
def save(
    job_id: int,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Bookmark a job (Applicant only)."""
    save_job(db, applicant.id, job_id)
    return ToggleResponse(message="Job saved successfully", job_id=job_id)


@router.delete("/{job_id}/unsave", response_model=ToggleResponse)
def unsave(
    job_id: int,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Remove a bookmark (Applicant only)."""
    unsave_job(db, applicant.id, job_id)
    return ToggleResponse(message="Saved job removed successfully", job_id=job_id)


@router.post("/{job_id}/hide", response_model=ToggleResponse, status_code=status.HTTP_201_CREATED)
def hide(
    job_id: int,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Hide a job from the caller's search results (Applicant only)."""
    hide_job(db, applicant.id, job_id)
    return ToggleResponse(message="Job hidden successfully", job_id=job_id)


@router.delete("/{job_id}/hide", response_model=ToggleResponse)
def unhide(
    job_id: int,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Show a previously hidden job again (Applicant only)."""
    unhide_job(db, applicant.id, job_id)
    return ToggleResponse(message="Hidden job restored successfully", job_id=job_id)


# ============== Public Endpoints ==============


@router.get("", response_model=JobListResponse)
def list_jobs(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    roles: Optional[list[str]] = Query(None),
    skills: Optional[list[str]] = Query(None),
    job_type: Optional[list[str]] = Query(None, alias="jobType"),
    location: Optional[list[str]] = Query(None),
    work_mode: Optional[list[str]] = Query(None, alias="workMode"),
    department: Optional[list[str]] = Query(None),
    company_type: Optional[list[str]] = Query(None, alias="companyType"),
    salary_min: Optional[str] = Query(None, alias="salaryMin"),
    salary_max: Optional[str] = Query(None, alias="salaryMax"),
    min_experience: Optional[str] = Query(None, alias="minExperience"),
    max_experience: Optional[str] = Query(None, alias="maxExperience"),
    company: Optional[str] = None,
    posted_date: Optional[str] = Query(None, alias="postedDate"),
    applicant_id: Optional[int] = Depends(get_viewer_applicant_id),
    db: Session = Depends(get_db),
):
    """
    Search jobs.

    List filters accept comma-separated values (or repeated keys) and match
    any of the given values. Experience and salary filters match jobs whose
    range overlaps the requested one. Signed-in applicants do not see jobs
    they already applied to or hid.
    """
    filters = JobSearchFilters.from_query(
        page=page,
        limit=limit,
        roles=roles,
        skills=skills,
        job_type=job_type,
        location=location,
        work_mode=work_mode,
        department=department,
        company_type=company_type,
        salary_min=salary_min,
        salary_max=salary_max,
        min_experience=min_experience,
        max_experience=max_experience,
        company=company,
        posted_date=posted_date,
    )

    try:
        jobs, total = search_jobs(db, filters, applicant_id=applicant_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error fetching jobs: {str(e)}")
        raise Internal("Error fetching jobs", error=str(e))

    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=build_pagination(total, filters.page, filters.limit),
    )


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job_detail(
    job_id: int,
    applicant_id: Optional[int] = Depends(get_viewer_applicant_id),
    db: Session = Depends(get_db),
):
    """Fetch one job. Signed-in applicants also get their applied/saved/hidden flags."""
    job = get_job(db, job_id)

    meta = JobMeta()
    if applicant_id is not None:
        applied = (
            db.query(Application.id)
            .filter(Application.applicant_id == applicant_id, Application.job_id == job.id)
            .first()
        )
        meta = JobMeta(
            is_applied=applied is not None,
            is_saved=is_saved(db, applicant_id, job.id),
            is_hidden=is_hidden(db, applicant_id, job.id),
        )

    return JobDetailResponse(job=JobResponse.model_validate(job), meta=meta)
