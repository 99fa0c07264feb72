"""
Saved and hidden job toggles.

Both are (applicant, job) join rows guarded by a unique key. Turning a
toggle on is one INSERT, turning it off is one DELETE; the database decides
whether the row already existed, so retries never leave duplicates.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from jobboard.core.errors import Conflict, NotFound
from jobboard.models import HiddenJob, Job, SavedJob
from jobboard.services.jobs import get_job
from jobboard.services.pagination import page_offset

logger = logging.getLogger("saved_jobs")


def _toggle_on(db: Session, model, applicant_id: int, job_id: int, conflict_message: str):
    get_job(db, job_id)

    record = model(applicant_id=applicant_id, job_id=job_id)
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(conflict_message)

    db.refresh(record)
    return record


def _toggle_off(db: Session, model, applicant_id: int, job_id: int, missing_message: str) -> None:
    get_job(db, job_id)

    deleted = (
        db.query(model)
        .filter(model.applicant_id == applicant_id, model.job_id == job_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        db.rollback()
        raise NotFound(missing_message)
    db.commit()


def save_job(db: Session, applicant_id: int, job_id: int) -> SavedJob:
    saved = _toggle_on(db, SavedJob, applicant_id, job_id, "You have already saved this job.")
    logger.info(f"Applicant {applicant_id} saved job {job_id}")
    return saved


def unsave_job(db: Session, applicant_id: int, job_id: int) -> None:
    _toggle_off(db, SavedJob, applicant_id, job_id, "Saved job not found.")
    logger.info(f"Applicant {applicant_id} unsaved job {job_id}")


def hide_job(db: Session, applicant_id: int, job_id: int) -> HiddenJob:
    hidden = _toggle_on(db, HiddenJob, applicant_id, job_id, "You have already hidden this job.")
    logger.info(f"Applicant {applicant_id} hid job {job_id}")
    return hidden


def unhide_job(db: Session, applicant_id: int, job_id: int) -> None:
    _toggle_off(db, HiddenJob, applicant_id, job_id, "Hidden job not found.")
    logger.info(f"Applicant {applicant_id} unhid job {job_id}")


def is_saved(db: Session, applicant_id: int, job_id: int) -> bool:
    return (
        db.query(SavedJob.id)
        .filter(SavedJob.applicant_id == applicant_id, SavedJob.job_id == job_id)
        .first()
        is not None
    )


def is_hidden(db: Session, applicant_id: int, job_id: int) -> bool:
    return (
        db.query(HiddenJob.id)
        .filter(HiddenJob.applicant_id == applicant_id, HiddenJob.job_id == job_id)
        .first()
        is not None
    )


def list_saved_jobs(
    db: Session,
    applicant_id: int,
    page: int,
    limit: int,
    newest_first: bool = True,
) -> tuple[list[SavedJob], int]:
    query = db.query(SavedJob).filter(SavedJob.applicant_id == applicant_id)
    total = query.count()

    if newest_first:
        ordering = (SavedJob.created_at.desc(), SavedJob.id.desc())
    else:
        ordering = (SavedJob.created_at.asc(), SavedJob.id.asc())

    saved = (
        query.options(joinedload(SavedJob.job).joinedload(Job.company))
        .order_by(*ordering)
        .offset(page_offset(page, limit))
        .limit(limit)
        .all()
    )
    return saved, total
