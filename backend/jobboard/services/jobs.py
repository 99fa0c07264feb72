"""
Job posting writes and ownership checks.

The compensation and experience invariants are not enforced by the
database, so every create and update goes through ``check_job_invariants``.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.core.errors import Forbidden, NotFound, ValidationError
from jobboard.models import Application, Job, RecruiterCompany
from jobboard.models.enums import CTCType

logger = logging.getLogger("jobs")


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise datetimes to naive UTC, which is how they are stored."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def check_job_invariants(values: dict[str, Any], check_deadline: bool = True) -> None:
    """
    Validate the cross-field rules of a job.

    Args:
        values: The full set of job values after the write would apply
        check_deadline: Whether the deadline must be in the future

    Raises:
        ValidationError: on the first violated rule
    """
    if values.get("ctc_type") == CTCType.RANGE:
        min_ctc = values.get("min_ctc")
        max_ctc = values.get("max_ctc")
        if min_ctc is None or max_ctc is None:
            raise ValidationError("minCTC and maxCTC are required when ctcType is RANGE")
        if min_ctc > max_ctc:
            raise ValidationError("minCTC must be less than or equal to maxCTC")

    min_exp = values.get("min_experience")
    max_exp = values.get("max_experience")
    if min_exp is not None and max_exp is not None and min_exp > max_exp:
        raise ValidationError("minExperience must be less than or equal to maxExperience")

    deadline = as_naive_utc(values.get("application_deadline"))
    if check_deadline and deadline is not None and deadline <= datetime.utcnow():
        raise ValidationError("Deadline must be in the future")


def get_job(db: Session, job_id: int) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFound("Job not found")
    return job


def get_owned_job(db: Session, job_id: int, recruiter_id: int, action: str = "view") -> Job:
    """Fetch a job, allowing only the recruiter who posted it."""
    job = get_job(db, job_id)
    if job.recruiter_id != recruiter_id:
        raise Forbidden(f"Forbidden: You can't {action} this job")
    return job


def is_company_member(db: Session, recruiter_id: int, company_id: int) -> bool:
    membership = (
        db.query(RecruiterCompany)
        .filter(
            RecruiterCompany.recruiter_id == recruiter_id,
            RecruiterCompany.company_id == company_id,
        )
        .first()
    )
    return membership is not None


def create_job(db: Session, recruiter_id: int, data: dict[str, Any]) -> Job:
    """Create a job under one of the recruiter's companies."""
    if not is_company_member(db, recruiter_id, data["company_id"]):
        raise Forbidden("Forbidden: You can only post jobs for companies you belong to")

    check_job_invariants(data)

    skills = data.pop("skills", [])
    data["application_deadline"] = as_naive_utc(data.get("application_deadline"))

    job = Job(**data, recruiter_id=recruiter_id)
    job.skills = skills
    db.add(job)
    db.commit()
    db.refresh(job)

    logger.info(f"Recruiter {recruiter_id} created job {job.id}")
    return job


JOB_FIELDS = (
    "title",
    "description",
    "location",
    "role",
    "department",
    "ctc_type",
    "min_ctc",
    "max_ctc",
    "currency",
    "min_experience",
    "max_experience",
    "employment_type",
    "work_mode",
    "openings",
    "relocation_assistance",
    "visa_sponsorship",
    "notice_period",
    "duration_in_months",
    "benefits",
    "application_deadline",
    "company_id",
)


def update_job(db: Session, job: Job, changes: dict[str, Any]) -> Job:
    """
    Apply a partial update.

    Invariants are checked against the merged result, so a change of
    ``ctc_type`` alone is validated against the stored salary bounds. The
    deadline is only checked when the update supplies one.
    """
    merged = {name: getattr(job, name) for name in JOB_FIELDS}
    merged.update(changes)
    check_job_invariants(merged, check_deadline="application_deadline" in changes)

    if "company_id" in changes and changes["company_id"] != job.company_id:
        if not is_company_member(db, job.recruiter_id, changes["company_id"]):
            raise Forbidden("Forbidden: You can only post jobs for companies you belong to")

    for name, value in changes.items():
        if name == "skills":
            job.skills = value
        elif name == "application_deadline":
            job.application_deadline = as_naive_utc(value)
        else:
            setattr(job, name, value)

    db.commit()
    db.refresh(job)

    logger.info(f"Job {job.id} updated: {sorted(changes)}")
    return job


def delete_job(db: Session, job: Job) -> None:
    """Delete a job together with its applications, saves and hides."""
    job_id = job.id
    db.delete(job)
    db.commit()
    logger.info(f"Job {job_id} deleted")


def list_recruiter_jobs(db: Session, recruiter_id: int) -> list[tuple[Job, int]]:
    """Jobs posted by a recruiter, newest first, with their application counts."""
    counts = (
        db.query(Application.job_id, func.count(Application.id).label("applications"))
        .group_by(Application.job_id)
        .subquery()
    )
    rows = (
        db.query(Job, func.coalesce(counts.c.applications, 0))
        .outerjoin(counts, counts.c.job_id == Job.id)
        .filter(Job.recruiter_id == recruiter_id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
    return [(job, count) for job, count in rows]
