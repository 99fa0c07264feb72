"""
Authentication API endpoints.

Handles signup, signin and logout with a JWT carried in an httpOnly
cookie, and provides the dependencies other routers use to gate requests:

- ``get_current_identity``: any valid session (401 otherwise)
- ``require_role(role)``: a valid session with exactly that role (403 otherwise)
- ``get_optional_identity``: the session if there is a valid one, else None
"""

import logging
import re
from datetime import datetime
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.core.config import settings
from jobboard.core.errors import Conflict, Forbidden, InvalidToken, NotFound, Unauthenticated
from jobboard.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from jobboard.db.session import get_db
from jobboard.models import Applicant, Recruiter, User
from jobboard.models.enums import Role

logger = logging.getLogger("auth")

router = APIRouter()


# ============== Pydantic Schemas ==============


EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"


def _validate_email(v: str) -> str:
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Invalid email format")
    return v.lower()


class UserSignup(BaseModel):
    """Schema for user registration."""

    name: str = Field(..., min_length=1)
    email: str
    role: Role
    password: str = Field(..., min_length=8)
    confirm_password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserSignin(BaseModel):
    """Schema for signin."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)


class UserResponse(BaseModel):
    """Schema for user response (without password)."""

    id: int
    name: str
    email: str
    role: Role
    profile_picture: Optional[str] = None
    last_login: Optional[datetime] = None
    applicant_id: Optional[int] = None  # Applicant profile ID (if role is APPLICANT)
    recruiter_id: Optional[int] = None  # Recruiter profile ID (if role is RECRUITER)

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    user: UserResponse


class Identity(BaseModel):
    """Authenticated caller as decoded from the session token."""

    subject_id: int
    role: Role


# ============== Auth Dependencies ==============


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _audit_failure(request: Request, reason: str) -> None:
    logger.warning(
        f"Auth failure ({reason}): {request.method} {request.url.path} from {_client_ip(request)}"
    )


def _identity_from_token(token: str) -> Identity:
    """
    Decode a token into an Identity.

    Raises:
        InvalidToken: if the token cannot be verified
        ValueError: if the payload lacks a usable subject or role
    """
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if subject is None:
        raise ValueError("missing subject")
    return Identity(subject_id=int(subject), role=Role(payload.get("role")))


async def get_current_identity(request: Request) -> Identity:
    """
    Dependency gating a route on a valid session cookie.

    Malformed and expired tokens are reported identically to the client;
    the specific reason only goes to the audit log.
    """
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        _audit_failure(request, "NoToken")
        raise Unauthenticated("Unauthorized: No token provided")

    try:
        return _identity_from_token(token)
    except InvalidToken as e:
        _audit_failure(request, f"InvalidToken: {e}")
        raise Unauthenticated("Unauthorized: Invalid token")
    except ValueError as e:
        _audit_failure(request, f"InvalidPayload: {e}")
        raise Unauthenticated("Unauthorized: Invalid token")


async def get_optional_identity(request: Request) -> Optional[Identity]:
    """Like get_current_identity, but anonymous or invalid sessions yield None."""
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        return None
    try:
        return _identity_from_token(token)
    except (InvalidToken, ValueError):
        return None


def require_role(role: Role) -> Callable:
    """Build a dependency admitting only sessions whose role is ``role``."""

    async def role_gate(
        request: Request,
        identity: Identity = Depends(get_current_identity),
    ) -> Identity:
        if identity.role != role:
            _audit_failure(request, f"Forbidden: role {identity.role.value} != {role.value}")
            raise Forbidden("Forbidden: Insufficient role")
        return identity

    return role_gate


require_applicant = require_role(Role.APPLICANT)
require_recruiter = require_role(Role.RECRUITER)


def get_current_applicant(
    identity: Identity = Depends(require_applicant),
    db: Session = Depends(get_db),
) -> Applicant:
    applicant = db.query(Applicant).filter(Applicant.user_id == identity.subject_id).first()
    if not applicant:
        raise NotFound("Applicant profile not found")
    return applicant


def get_current_recruiter(
    identity: Identity = Depends(require_recruiter),
    db: Session = Depends(get_db),
) -> Recruiter:
    recruiter = db.query(Recruiter).filter(Recruiter.user_id == identity.subject_id).first()
    if not recruiter:
        raise NotFound("Recruiter profile not found")
    return recruiter


def get_viewer_applicant_id(
    identity: Optional[Identity] = Depends(get_optional_identity),
    db: Session = Depends(get_db),
) -> Optional[int]:
    """Applicant profile id of the caller, or None for anonymous users and recruiters."""
    if identity is None or identity.role != Role.APPLICANT:
        return None
    applicant = db.query(Applicant).filter(Applicant.user_id == identity.subject_id).first()
    return applicant.id if applicant else None


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def set_session_cookie(response: Response, user: User) -> None:
    token = create_access_token(user.id, user.role)
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        profile_picture=user.profile_picture,
        last_login=user.last_login,
        applicant_id=user.applicant_profile.id if user.applicant_profile else None,
        recruiter_id=user.recruiter_profile.id if user.recruiter_profile else None,
    )


# ============== API Endpoints ==============


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(user_data: UserSignup, response: Response, db: Session = Depends(get_db)):
    """
    Register a new user and start a session.

    Creates the role's profile (Applicant or Recruiter) in the same
    transaction. A duplicate email is detected by the unique index.
    """
    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        last_login=datetime.utcnow(),
    )
    db.add(new_user)

    try:
        db.flush()
        if user_data.role == Role.APPLICANT:
            db.add(Applicant(user_id=new_user.id, skills=[]))
        else:
            db.add(Recruiter(user_id=new_user.id))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already exists")

    db.refresh(new_user)
    set_session_cookie(response, new_user)

    logger.info(f"User {new_user.id} signed up as {new_user.role.value}")
    return AuthResponse(message="User created successfully", user=to_user_response(new_user))


@router.post("/signin", response_model=AuthResponse)
def signin(credentials: UserSignin, response: Response, db: Session = Depends(get_db)):
    """Check credentials and start a session."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.warning(f"Failed signin for {credentials.email}")
        raise Unauthenticated("Incorrect email or password")

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    set_session_cookie(response, user)

    logger.info(f"User {user.id} signed in")
    return AuthResponse(message="User signed in successfully", user=to_user_response(user))


@router.get("/me", response_model=UserResponse)
def get_me(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Get the user behind the current session."""
    user = db.query(User).filter(User.id == identity.subject_id).first()
    if user is None:
        raise NotFound("User not found")
    return to_user_response(user)


@router.post("/logout")
async def logout(response: Response, identity: Identity = Depends(get_current_identity)):
    """
    End the session by clearing the cookie.

    Tokens are not revoked server-side; a copied token stays valid until it
    expires.
    """
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    logger.info(f"User {identity.subject_id} logged out")
    return {"message": "Logged out"}
