"""
Response schemas shared by several routers.

Request schemas stay next to the endpoints that accept them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from jobboard.models import Applicant, Application
from jobboard.models.enums import (
    ApplicationStatus,
    CompanySize,
    CompanyType,
    CTCType,
    Currency,
    Department,
    EmploymentType,
    JobRole,
    NoticePeriod,
    WorkMode,
)
from jobboard.services.pagination import Pagination

__all__ = [
    "CompanySummary",
    "CompanyResponse",
    "JobResponse",
    "ApplicationResponse",
    "ApplicantSummary",
    "ApplicationWithApplicant",
    "ApplicationWithJob",
    "Pagination",
    "applicant_summary",
    "application_with_applicant",
]


class CompanySummary(BaseModel):
    id: int
    name: str
    logo_url: Optional[str] = None
    company_type: Optional[CompanyType] = None

    class Config:
        from_attributes = True


class CompanyResponse(BaseModel):
    id: int
    name: str
    logo_url: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    company_type: Optional[CompanyType] = None
    headquarters: Optional[str] = None
    founded_year: Optional[int] = None
    description: Optional[str] = None

    class Config:
        from_attributes = True


class JobResponse(BaseModel):
    """Schema for a job posting."""

    id: int
    title: str
    description: str
    skills: list[str] = []
    location: str
    role: JobRole
    department: Department

    ctc_type: CTCType
    min_ctc: Optional[float] = None
    max_ctc: Optional[float] = None
    currency: Currency

    min_experience: float
    max_experience: float
    employment_type: EmploymentType
    work_mode: WorkMode
    openings: int
    relocation_assistance: bool = False
    visa_sponsorship: bool = False
    notice_period: Optional[NoticePeriod] = None
    duration_in_months: Optional[int] = None
    benefits: Optional[list[str]] = None
    application_deadline: Optional[datetime] = None

    company_id: int
    recruiter_id: int
    company: Optional[CompanySummary] = None

    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationResponse(BaseModel):
    id: int
    applicant_id: int
    job_id: int
    status: ApplicationStatus
    resume: Optional[str] = None
    cover_letter: Optional[str] = None
    portfolio_url: Optional[str] = None
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    withdrawn_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicantSummary(BaseModel):
    """What a recruiter sees about the person behind an application."""

    id: int
    name: str
    email: str
    resume_url: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[int] = None
    skills: list[str] = []


class ApplicationWithApplicant(ApplicationResponse):
    applicant: ApplicantSummary


class ApplicationWithJob(ApplicationResponse):
    job: JobResponse


def applicant_summary(applicant: Applicant) -> ApplicantSummary:
    return ApplicantSummary(
        id=applicant.id,
        name=applicant.user.name,
        email=applicant.user.email,
        resume_url=applicant.resume_url,
        location=applicant.location,
        years_of_experience=applicant.years_of_experience,
        skills=applicant.skills or [],
    )


def application_with_applicant(application: Application) -> ApplicationWithApplicant:
    return ApplicationWithApplicant(
        **ApplicationResponse.model_validate(application).model_dump(),
        applicant=applicant_summary(application.applicant),
    )
