"""
Companies API endpoints.

Recruiters create companies, join existing ones and keep them up to date;
anyone can browse them.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.api.v1.auth import get_current_recruiter
from jobboard.api.v1.schemas import CompanyResponse, JobResponse, Pagination
from jobboard.core.errors import Conflict, Forbidden, NotFound
from jobboard.db.session import get_db
from jobboard.models import Company, Job, Recruiter, RecruiterCompany
from jobboard.models.enums import CompanySize, CompanyType
from jobboard.services.jobs import is_company_member
from jobboard.services.pagination import build_pagination, page_offset, resolve_page

logger = logging.getLogger("companies")

router = APIRouter()


# ============== Pydantic Schemas ==============


class CompanyCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    logo_url: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    company_type: Optional[CompanyType] = None
    headquarters: Optional[str] = None
    founded_year: Optional[int] = Field(None, ge=1800)
    description: Optional[str] = None


class CompanyUpdateRequest(CompanyCreateRequest):
    name: Optional[str] = Field(None, min_length=1)


class CompanyMutationResponse(BaseModel):
    message: str
    company: CompanyResponse


class CompanyListResponse(BaseModel):
    message: str = "Companies fetched successfully"
    companies: list[CompanyResponse]
    pagination: Pagination


class CompanyJobsResponse(BaseModel):
    message: str = "Jobs fetched successfully"
    company: CompanyResponse
    jobs: list[JobResponse]
    pagination: Pagination


def _get_company(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise NotFound("Company not found")
    return company


# ============== Recruiter Endpoints ==============


@router.post("", response_model=CompanyMutationResponse, status_code=status.HTTP_201_CREATED)
def create_company(
    payload: CompanyCreateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Create a company and make the caller its first member (Recruiter only)."""
    company = Company(**payload.model_dump())
    db.add(company)
    db.flush()
    db.add(RecruiterCompany(recruiter_id=recruiter.id, company_id=company.id, is_current=True))
    db.commit()
    db.refresh(company)

    logger.info(f"Recruiter {recruiter.id} created company {company.id}")
    return CompanyMutationResponse(
        message="Company created successfully",
        company=CompanyResponse.model_validate(company),
    )


@router.post("/{company_id}/join", response_model=CompanyMutationResponse)
def join_company(
    company_id: int,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Join an existing company (Recruiter only). Joining twice is a 409."""
    company = _get_company(db, company_id)

    db.add(RecruiterCompany(recruiter_id=recruiter.id, company_id=company.id, is_current=True))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("You are already a member of this company")

    logger.info(f"Recruiter {recruiter.id} joined company {company.id}")
    return CompanyMutationResponse(
        message="Joined company successfully",
        company=CompanyResponse.model_validate(company),
    )


@router.get("/me", response_model=list[CompanyResponse])
def get_my_companies(
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Companies the caller belongs to (Recruiter only)."""
    companies = (
        db.query(Company)
        .join(RecruiterCompany, RecruiterCompany.company_id == Company.id)
        .filter(RecruiterCompany.recruiter_id == recruiter.id)
        .order_by(Company.name)
        .all()
    )
    return [CompanyResponse.model_validate(c) for c in companies]


@router.put("/{company_id}", response_model=CompanyMutationResponse)
def update_company(
    company_id: int,
    payload: CompanyUpdateRequest,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Update a company's details (members only)."""
    company = _get_company(db, company_id)
    if not is_company_member(db, recruiter.id, company.id):
        raise Forbidden("Forbidden: You can only edit companies you belong to")

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name", "") is None:
        changes.pop("name")
    for name, value in changes.items():
        setattr(company, name, value)
    db.commit()
    db.refresh(company)

    logger.info(f"Recruiter {recruiter.id} updated company {company.id}")
    return CompanyMutationResponse(
        message="Company updated successfully",
        company=CompanyResponse.model_validate(company),
    )


# ============== Public Endpoints ==============


@router.get("", response_model=CompanyListResponse)
def list_companies(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Browse companies, optionally by a case-insensitive name fragment."""
    page_number, limit_number = resolve_page(page, limit, default_limit=10)

    query = db.query(Company)
    if search and search.strip():
        query = query.filter(Company.name.icontains(search.strip(), autoescape=True))

    total = query.count()
    companies = (
        query.order_by(Company.name, Company.id)
        .offset(page_offset(page_number, limit_number))
        .limit(limit_number)
        .all()
    )
    return CompanyListResponse(
        companies=[CompanyResponse.model_validate(c) for c in companies],
        pagination=build_pagination(total, page_number, limit_number),
    )


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: int, db: Session = Depends(get_db)):
    """Fetch one company."""
    return CompanyResponse.model_validate(_get_company(db, company_id))


@router.get("/{company_id}/jobs", response_model=CompanyJobsResponse)
def get_company_jobs(
    company_id: int,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Jobs posted under one company, newest first."""
    company = _get_company(db, company_id)
    page_number, limit_number = resolve_page(page, limit, default_limit=10)

    query = db.query(Job).filter(Job.company_id == company.id)
    total = query.count()
    jobs = (
        query.order_by(Job.created_at.desc(), Job.id.desc())
        .offset(page_offset(page_number, limit_number))
        .limit(limit_number)
        .all()
    )
    return CompanyJobsResponse(
        company=CompanyResponse.model_validate(company),
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=build_pagination(total, page_number, limit_number),
    )
