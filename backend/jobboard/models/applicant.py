from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from jobboard.db.base import Base
from jobboard.models.job import normalize_skills


class Applicant(Base):
    """Job seeker profile attached to an APPLICANT user."""

    __tablename__ = "applicants"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    bio = Column(Text, nullable=True)
    resume_url = Column(String, nullable=True)
    location = Column(String, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    # Free-text role the applicant is looking for, e.g. "Backend Developer"
    role = Column(String, nullable=True)

    # Relationships
    user = relationship("User", back_populates="applicant_profile")
    applications = relationship("Application", back_populates="applicant")
    saved_jobs = relationship("SavedJob", back_populates="applicant")
    skill_tags = relationship(
        "ApplicantSkill",
        back_populates="applicant",
        cascade="all, delete-orphan",
        order_by="ApplicantSkill.id",
    )

    @property
    def skills(self) -> list[str]:
        return [tag.name for tag in self.skill_tags]

    @skills.setter
    def skills(self, names) -> None:
        existing = {tag.name.lower(): tag for tag in self.skill_tags}
        tags = []
        for name in normalize_skills(names):
            tag = existing.get(name.lower()) or ApplicantSkill(name=name)
            tag.name = name
            tags.append(tag)
        self.skill_tags = tags


class ApplicantSkill(Base):
    """One skill listed on an applicant profile; recruiter search joins on it."""

    __tablename__ = "applicant_skills"
    __table_args__ = (UniqueConstraint("applicant_id", "name", name="uq_applicant_skill"),)

    id = Column(Integer, primary_key=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)

    applicant = relationship("Applicant", back_populates="skill_tags")
