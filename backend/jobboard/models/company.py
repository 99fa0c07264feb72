from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from jobboard.db.base import Base
from jobboard.models.enums import CompanySize, CompanyType


class Company(Base):
    """Employer organisation that jobs are posted under."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    logo_url = Column(String, nullable=True)
    website = Column(String, nullable=True)
    industry = Column(String, nullable=True)
    company_size = Column(Enum(CompanySize, native_enum=False, length=32), nullable=True)
    company_type = Column(Enum(CompanyType, native_enum=False, length=32), nullable=True)
    headquarters = Column(String, nullable=True)
    founded_year = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)

    # Relationships
    members = relationship("RecruiterCompany", back_populates="company")
    jobs = relationship("Job", back_populates="company")


class RecruiterCompany(Base):
    """
    Membership of a recruiter in a company.

    A recruiter may post jobs only under companies they belong to.
    """

    __tablename__ = "recruiter_companies"
    __table_args__ = (
        UniqueConstraint("recruiter_id", "company_id", name="uq_recruiter_company"),
    )

    id = Column(Integer, primary_key=True)
    recruiter_id = Column(Integer, ForeignKey("recruiters.id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    is_current = Column(Boolean, default=True)
    joined_at = Column(DateTime, default=datetime.utcnow)
    left_at = Column(DateTime, nullable=True)

    recruiter = relationship("Recruiter", back_populates="memberships")
    company = relationship("Company", back_populates="members")
