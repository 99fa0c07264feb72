from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from jobboard.db.base import Base
from jobboard.models.enums import (
    CTCType,
    Currency,
    Department,
    EmploymentType,
    JobRole,
    NoticePeriod,
    WorkMode,
)


def normalize_skills(names) -> list[str]:
    """Trim, drop blanks and de-duplicate (case-insensitively), keeping order."""
    seen = set()
    result = []
    for name in names or []:
        cleaned = str(name).strip()
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return result


class Job(Base):
    """A job posting owned by one recruiter under one company."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    role = Column(Enum(JobRole, native_enum=False, length=32), nullable=False)
    department = Column(Enum(Department, native_enum=False, length=32), nullable=False)

    # Compensation: min_ctc <= max_ctc is checked at write time for RANGE
    ctc_type = Column(Enum(CTCType, native_enum=False, length=16), nullable=False, default=CTCType.RANGE)
    min_ctc = Column(Float, nullable=True)
    max_ctc = Column(Float, nullable=True)
    currency = Column(Enum(Currency, native_enum=False, length=8), nullable=False, default=Currency.INR)

    min_experience = Column(Float, nullable=False)
    max_experience = Column(Float, nullable=False)
    employment_type = Column(Enum(EmploymentType, native_enum=False, length=16), nullable=False)
    work_mode = Column(Enum(WorkMode, native_enum=False, length=16), nullable=False)
    openings = Column(Integer, nullable=False, default=1)
    relocation_assistance = Column(Boolean, default=False)
    visa_sponsorship = Column(Boolean, default=False)
    notice_period = Column(Enum(NoticePeriod, native_enum=False, length=16), nullable=True)
    duration_in_months = Column(Integer, nullable=True)
    benefits = Column(JSON, default=list)
    application_deadline = Column(DateTime, nullable=True)

    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    recruiter_id = Column(Integer, ForeignKey("recruiters.id"), nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    company = relationship("Company", back_populates="jobs")
    recruiter = relationship("Recruiter", back_populates="jobs")
    skill_tags = relationship(
        "JobSkill",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobSkill.id",
    )
    applications = relationship(
        "Application", back_populates="job", cascade="all, delete-orphan"
    )
    saved_by = relationship("SavedJob", back_populates="job", cascade="all, delete-orphan")
    hidden_by = relationship("HiddenJob", back_populates="job", cascade="all, delete-orphan")

    @property
    def skills(self) -> list[str]:
        return [tag.name for tag in self.skill_tags]

    @skills.setter
    def skills(self, names) -> None:
        # Reuse existing rows so re-saving a skill never trips the unique key
        existing = {tag.name.lower(): tag for tag in self.skill_tags}
        tags = []
        for name in normalize_skills(names):
            tag = existing.get(name.lower()) or JobSkill(name=name)
            tag.name = name
            tags.append(tag)
        self.skill_tags = tags


class JobSkill(Base):
    """One required skill of a job; the search filter joins on this table."""

    __tablename__ = "job_skills"
    __table_args__ = (UniqueConstraint("job_id", "name", name="uq_job_skill"),)

    id = Column(Integer, primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)

    job = relationship("Job", back_populates="skill_tags")
