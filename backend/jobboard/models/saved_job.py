from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.db.base import Base


class SavedJob(Base):
    """Bookmark of a job by an applicant. Pure toggle record."""

    __tablename__ = "saved_jobs"
    __table_args__ = (
        UniqueConstraint("applicant_id", "job_id", name="uq_saved_job_applicant_job"),
    )

    id = Column(Integer, primary_key=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    applicant = relationship("Applicant", back_populates="saved_jobs")
    job = relationship("Job", back_populates="saved_by")


class HiddenJob(Base):
    """A job the applicant removed from their search results."""

    __tablename__ = "hidden_jobs"
    __table_args__ = (
        UniqueConstraint("applicant_id", "job_id", name="uq_hidden_job_applicant_job"),
    )

    id = Column(Integer, primary_key=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    job = relationship("Job", back_populates="hidden_by")
