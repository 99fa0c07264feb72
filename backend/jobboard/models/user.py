from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String
from sqlalchemy.orm import relationship

from jobboard.db.base import Base
from jobboard.models.enums import Role

DEFAULT_PROFILE_PICTURE = (
    "https://icon-library.com/images/anonymous-avatar-icon/anonymous-avatar-icon-25.jpg"
)


class User(Base):
    """User model for authentication and authorization."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    # Set at signup, never changed afterwards
    role = Column(Enum(Role, native_enum=False, length=16), nullable=False, default=Role.APPLICANT)
    phone_number = Column(String, nullable=True)
    profile_picture = Column(String, default=DEFAULT_PROFILE_PICTURE)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships (exactly one of these exists, matching ``role``)
    applicant_profile = relationship("Applicant", back_populates="user", uselist=False)
    recruiter_profile = relationship("Recruiter", back_populates="user", uselist=False)
