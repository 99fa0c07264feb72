from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from jobboard.db.base import Base


class Recruiter(Base):
    """Recruiter profile attached to a RECRUITER user."""

    __tablename__ = "recruiters"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    position_title = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    department = Column(String, nullable=True)

    # Relationships
    user = relationship("User", back_populates="recruiter_profile")
    memberships = relationship("RecruiterCompany", back_populates="recruiter")
    jobs = relationship("Job", back_populates="recruiter")
