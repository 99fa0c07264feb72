"""
Applicant profiles as recruiters see them.

Recruiters browse applicants by skill and desired role. Contact details
stay private until the applicant has applied to one of the recruiter's jobs.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from jobboard.core.errors import NotFound
from jobboard.models import Applicant, ApplicantSkill, Application, Job
from jobboard.services.pagination import page_offset


def get_applicant(db: Session, applicant_id: int) -> Applicant:
    applicant = (
        db.query(Applicant)
        .options(joinedload(Applicant.user))
        .filter(Applicant.id == applicant_id)
        .first()
    )
    if not applicant:
        raise NotFound("Applicant not found")
    return applicant


def search_applicants(
    db: Session,
    skills: list[str],
    role: Optional[str],
    page: int,
    limit: int,
) -> tuple[list[Applicant], int]:
    """
    Applicants having any of ``skills`` (case-insensitive) and whose desired
    role contains ``role``. Empty filters match everyone.
    """
    query = db.query(Applicant)
    if skills:
        wanted = [skill.lower() for skill in skills]
        query = query.filter(Applicant.skill_tags.any(func.lower(ApplicantSkill.name).in_(wanted)))
    if role:
        query = query.filter(Applicant.role.icontains(role, autoescape=True))

    total = query.count()
    applicants = (
        query.options(joinedload(Applicant.user))
        .order_by(Applicant.id)
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return applicants, total


def has_applied_to_recruiter(db: Session, applicant_id: int, recruiter_id: int) -> bool:
    application = (
        db.query(Application.id)
        .join(Job, Job.id == Application.job_id)
        .filter(Application.applicant_id == applicant_id, Job.recruiter_id == recruiter_id)
        .first()
    )
    return application is not None
