"""
Applicants API endpoints.

Applicants keep their own profile up to date; recruiters search profiles by
skill and desired role.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from jobboard.api.v1.auth import get_current_applicant, get_current_recruiter
from jobboard.api.v1.schemas import Pagination
from jobboard.db.session import get_db
from jobboard.models import Applicant, Recruiter
from jobboard.services.applicants import get_applicant, has_applied_to_recruiter, search_applicants
from jobboard.services.job_query import split_list
from jobboard.services.pagination import build_pagination, resolve_page

logger = logging.getLogger("applicants")

router = APIRouter()


# ============== Pydantic Schemas ==============


class ApplicantProfileUpdate(BaseModel):
    bio: Optional[str] = None
    resume_url: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[int] = Field(None, ge=0)
    role: Optional[str] = None
    skills: Optional[list[str]] = None


class ApplicantCard(BaseModel):
    """One search hit: enough to decide whether to open the profile."""

    id: int
    name: str
    profile_picture: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    years_of_experience: Optional[int] = None
    skills: list[str] = []


class ApplicantProfile(ApplicantCard):
    bio: Optional[str] = None
    resume_url: Optional[str] = None
    # Only filled in for recruiters the applicant has applied to
    email: Optional[str] = None
    phone_number: Optional[str] = None


class ApplicantProfileResponse(BaseModel):
    message: str
    applicant: ApplicantProfile


class ApplicantSearchResponse(BaseModel):
    message: str = "Applicants fetched successfully"
    applicants: list[ApplicantCard]
    pagination: Pagination


def _card(applicant: Applicant) -> ApplicantCard:
    return ApplicantCard(
        id=applicant.id,
        name=applicant.user.name,
        profile_picture=applicant.user.profile_picture,
        role=applicant.role,
        location=applicant.location,
        years_of_experience=applicant.years_of_experience,
        skills=applicant.skills,
    )


def _profile(applicant: Applicant, with_contact: bool) -> ApplicantProfile:
    profile = ApplicantProfile(
        **_card(applicant).model_dump(),
        bio=applicant.bio,
        resume_url=applicant.resume_url,
    )
    if with_contact:
        profile.email = applicant.user.email
        profile.phone_number = applicant.user.phone_number
    return profile


# ============== Applicant Endpoints ==============


@router.get("/me", response_model=ApplicantProfileResponse)
def get_my_profile(applicant: Applicant = Depends(get_current_applicant)):
    """The caller's own profile (Applicant only)."""
    return ApplicantProfileResponse(
        message="Profile fetched successfully",
        applicant=_profile(applicant, with_contact=True),
    )


@router.put("/me", response_model=ApplicantProfileResponse)
def update_my_profile(
    payload: ApplicantProfileUpdate,
    applicant: Applicant = Depends(get_current_applicant),
    db: Session = Depends(get_db),
):
    """Update the caller's profile (Applicant only). Omitted fields are left alone."""
    changes = payload.model_dump(exclude_unset=True)
    if "skills" in changes:
        applicant.skills = changes.pop("skills") or []
    for name, value in changes.items():
        setattr(applicant, name, value)
    db.commit()
    db.refresh(applicant)

    logger.info(f"Applicant {applicant.id} updated their profile")
    return ApplicantProfileResponse(
        message="Profile updated successfully",
        applicant=_profile(applicant, with_contact=True),
    )


# ============== Recruiter Endpoints ==============


@router.get("/search", response_model=ApplicantSearchResponse)
def search(
    skills: Optional[list[str]] = Query(None),
    role: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """
    Search applicants (Recruiter only).

    ``skills`` is comma-separated (or repeated) and matches any listed skill,
    ignoring case. ``role`` matches a case-insensitive fragment of the
    applicant's desired role.
    """
    page_number, limit_number = resolve_page(page, limit, default_limit=10)
    wanted_role = role.strip() if role else None

    applicants, total = search_applicants(
        db, split_list(skills), wanted_role, page_number, limit_number
    )
    return ApplicantSearchResponse(
        applicants=[_card(a) for a in applicants],
        pagination=build_pagination(total, page_number, limit_number),
    )


@router.get("/{applicant_id}", response_model=ApplicantProfileResponse)
def get_applicant_detail(
    applicant_id: int,
    recruiter: Recruiter = Depends(get_current_recruiter),
    db: Session = Depends(get_db),
):
    """Fetch one applicant profile (Recruiter only)."""
    applicant = get_applicant(db, applicant_id)
    return ApplicantProfileResponse(
        message="Applicant fetched successfully",
        applicant=_profile(
            applicant, with_contact=has_applied_to_recruiter(db, applicant.id, recruiter.id)
        ),
    )
