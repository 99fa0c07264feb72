"""
Application lifecycle.

Applying is a single INSERT guarded by the (applicant, job) unique key;
status changes follow a forward-only transition table and are written with
a conditional UPDATE on the current status, so concurrent writers get a
Conflict instead of silently overwriting each other.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from jobboard.core.errors import Conflict, Forbidden, NotFound, ValidationError
from jobboard.models import Applicant, Application, Job
from jobboard.models.enums import ApplicationStatus
from jobboard.services.pagination import page_offset

logger = logging.getLogger("applications")

ALLOWED_TRANSITIONS = {
    ApplicationStatus.PENDING: {ApplicationStatus.REVIEWED, ApplicationStatus.WITHDRAWN},
    ApplicationStatus.REVIEWED: {
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.ACCEPTED: set(),
    ApplicationStatus.REJECTED: set(),
    ApplicationStatus.WITHDRAWN: set(),
}

STATUS_TIMESTAMPS = {
    ApplicationStatus.REVIEWED: Application.reviewed_at,
    ApplicationStatus.ACCEPTED: Application.accepted_at,
    ApplicationStatus.REJECTED: Application.rejected_at,
    ApplicationStatus.WITHDRAWN: Application.withdrawn_at,
}


def can_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, set())


def apply_to_job(
    db: Session,
    applicant_id: int,
    job_id: int,
    resume: Optional[str] = None,
    cover_letter: Optional[str] = None,
    portfolio_url: Optional[str] = None,
) -> Application:
    """
    Submit an application in PENDING state.

    Raises:
        NotFound: if the applicant profile or the job does not exist
        ValidationError: if the job's application deadline has passed
        Conflict: if the applicant already applied to the job
    """
    applicant = db.query(Applicant).filter(Applicant.id == applicant_id).first()
    if not applicant:
        raise NotFound("Applicant profile not found")

    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFound("Job not found")

    if job.application_deadline is not None and job.application_deadline <= datetime.utcnow():
        raise ValidationError("The application deadline for this job has passed")

    application = Application(
        applicant_id=applicant_id,
        job_id=job_id,
        status=ApplicationStatus.PENDING,
        resume=resume or applicant.resume_url,
        cover_letter=cover_letter,
        portfolio_url=portfolio_url,
    )
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("You have already applied to this job")

    db.refresh(application)
    logger.info(f"Applicant {applicant_id} applied to job {job_id} (application {application.id})")
    return application


def _get_application(db: Session, application_id: int) -> Application:
    application = (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.id == application_id)
        .first()
    )
    if not application:
        raise NotFound("Application not found")
    return application


def get_application_for_owner(db: Session, application_id: int, recruiter_id: int) -> Application:
    """Fetch an application, allowing only the recruiter who owns its job."""
    application = _get_application(db, application_id)
    if application.job.recruiter_id != recruiter_id:
        raise Forbidden("Forbidden: You can only access applications for your own jobs.")
    return application


def get_application_for_viewer(
    db: Session,
    application_id: int,
    recruiter_id: Optional[int] = None,
    applicant_id: Optional[int] = None,
) -> Application:
    """Fetch an application for its job's recruiter or the applicant who created it."""
    application = _get_application(db, application_id)
    if recruiter_id is not None and application.job.recruiter_id == recruiter_id:
        return application
    if applicant_id is not None and application.applicant_id == applicant_id:
        return application
    raise Forbidden("Forbidden: You can't view this application")


def set_application_status(
    db: Session,
    application_id: int,
    recruiter_id: int,
    new_status: ApplicationStatus,
) -> Application:
    """
    Move an application to ``new_status``.

    Raises:
        NotFound: if the application does not exist
        Forbidden: if the recruiter does not own the application's job
        Conflict: if the transition is not allowed, or the status changed
            underneath us
    """
    application = get_application_for_owner(db, application_id, recruiter_id)
    current = application.status

    if not can_transition(current, new_status):
        raise Conflict(f"Cannot change application status from {current.value} to {new_status.value}")

    now = datetime.utcnow()
    values = {Application.status: new_status, Application.updated_at: now}
    if new_status in STATUS_TIMESTAMPS:
        values[STATUS_TIMESTAMPS[new_status]] = now

    updated = (
        db.query(Application)
        .filter(Application.id == application_id, Application.status == current)
        .update(values, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        raise Conflict("Application status was changed by another request, reload and retry")

    db.commit()
    db.refresh(application)

    logger.info(
        f"Recruiter {recruiter_id} moved application {application_id} "
        f"from {current.value} to {new_status.value}"
    )
    return application


def get_resume_url(db: Session, application_id: int, recruiter_id: int) -> str:
    application = get_application_for_owner(db, application_id, recruiter_id)
    resume_url = application.resume or application.applicant.resume_url
    if not resume_url:
        raise NotFound("Resume not found for this applicant.")
    return resume_url


def count_by_status(db: Session, job_id: int) -> dict[str, int]:
    """Number of applications per status for one job; absent statuses count 0."""
    stats = {status.value: 0 for status in ApplicationStatus}
    rows = (
        db.query(Application.status, func.count(Application.id))
        .filter(Application.job_id == job_id)
        .group_by(Application.status)
        .all()
    )
    for status, count in rows:
        stats[status.value] = count
    return stats


def list_job_applications(
    db: Session, job_id: int, page: int, limit: int
) -> tuple[list[Application], int]:
    query = db.query(Application).filter(Application.job_id == job_id)
    total = query.count()
    applications = (
        query.options(joinedload(Application.applicant).joinedload(Applicant.user))
        .order_by(Application.created_at.desc(), Application.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return applications, total


def list_applicant_applications(
    db: Session,
    applicant_id: int,
    page: int,
    limit: int,
    status: Optional[ApplicationStatus] = None,
) -> tuple[list[Application], int]:
    query = db.query(Application).filter(Application.applicant_id == applicant_id)
    if status is not None:
        query = query.filter(Application.status == status)
    total = query.count()
    applications = (
        query.options(joinedload(Application.job).joinedload(Job.company))
        .order_by(Application.created_at.desc(), Application.id.desc())
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return applications, total
