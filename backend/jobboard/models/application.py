from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.db.base import Base
from jobboard.models.enums import ApplicationStatus


class Application(Base):
    """
    An applicant's application to a job.

    At most one row per (applicant, job); the unique constraint is what
    makes concurrent applies safe.
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("applicant_id", "job_id", name="uq_application_applicant_job"),
    )

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=16),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True,
    )
    resume = Column(String, nullable=True)
    cover_letter = Column(Text, nullable=True)
    portfolio_url = Column(String, nullable=True)

    applied_at = Column(DateTime, default=datetime.utcnow)
    reviewed_at = Column(DateTime, nullable=True)
    accepted_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    withdrawn_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    applicant = relationship("Applicant", back_populates="applications")
    job = relationship("Job", back_populates="applications")
