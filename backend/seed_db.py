"""
JobBoard Database Seeder

Creates demo data for local development:
- A recruiter (Sarah Chen) who is a member of Acme Labs
- Three open jobs at Acme Labs
- An applicant (John Doe) who has applied to one of them
"""

from datetime import datetime, timedelta

from jobboard.core.security import get_password_hash
from jobboard.db.base import Base
from jobboard.db.session import SessionLocal, engine
from jobboard.models import Applicant, Application, Company, Job, Recruiter, RecruiterCompany, User
from jobboard.models.enums import (
    ApplicationStatus,
    CompanySize,
    CompanyType,
    CTCType,
    Department,
    EmploymentType,
    JobRole,
    Role,
    WorkMode,
)

RECRUITER_EMAIL = "recruiter@jobboard.dev"
APPLICANT_EMAIL = "john.doe@example.com"

SEED_JOBS = [
    {
        "title": "Backend Engineer",
        "description": "Build and run our Python APIs.",
        "skills": ["Python", "FastAPI", "PostgreSQL"],
        "location": "Bengaluru",
        "role": JobRole.BACKEND_DEVELOPER,
        "work_mode": WorkMode.HYBRID,
        "min_experience": 2,
        "max_experience": 6,
        "min_ctc": 1800000,
        "max_ctc": 3000000,
    },
    {
        "title": "Frontend Engineer",
        "description": "Own the candidate-facing web app.",
        "skills": ["TypeScript", "React"],
        "location": "Remote",
        "role": JobRole.FRONTEND_DEVELOPER,
        "work_mode": WorkMode.REMOTE,
        "min_experience": 1,
        "max_experience": 4,
        "min_ctc": 1200000,
        "max_ctc": 2200000,
    },
    {
        "title": "DevOps Engineer",
        "description": "Keep deployments boring.",
        "skills": ["Docker", "Kubernetes", "AWS"],
        "location": "Pune",
        "role": JobRole.DEVOPS_ENGINEER,
        "work_mode": WorkMode.ONSITE,
        "min_experience": 3,
        "max_experience": 8,
        "min_ctc": 2000000,
        "max_ctc": 3500000,
    },
]


def seed_database(db=None):
    """Seed the database with demo data. Does nothing if it was already seeded."""

    owns_session = db is None
    if owns_session:
        # Create all tables
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    try:
        # Check if already seeded
        existing_recruiter = db.query(User).filter(User.email == RECRUITER_EMAIL).first()
        if existing_recruiter:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Create Recruiter User and profile
        recruiter_user = User(
            name="Sarah Chen",
            email=RECRUITER_EMAIL,
            hashed_password=get_password_hash("recruiter123"),
            role=Role.RECRUITER,
        )
        db.add(recruiter_user)
        db.flush()  # Get IDs

        recruiter = Recruiter(
            user_id=recruiter_user.id,
            position_title="Talent Partner",
            department="Talent Acquisition",
        )
        db.add(recruiter)

        # 2. Create the company and the membership
        company = Company(
            name="Acme Labs",
            website="https://acme.example.com",
            industry="Software",
            company_size=CompanySize.SIZE_51_200,
            company_type=CompanyType.GROWTH_STAGE_STARTUP,
            headquarters="Bengaluru",
            founded_year=2016,
        )
        db.add(company)
        db.flush()

        db.add(RecruiterCompany(recruiter_id=recruiter.id, company_id=company.id, is_current=True))

        # 3. Create the jobs
        deadline = datetime.utcnow() + timedelta(days=30)
        jobs = []
        for job_data in SEED_JOBS:
            values = dict(job_data)
            skills = values.pop("skills")
            job = Job(
                **values,
                department=Department.ENGINEERING,
                ctc_type=CTCType.RANGE,
                employment_type=EmploymentType.FULL_TIME,
                openings=2,
                benefits=["Health insurance"],
                application_deadline=deadline,
                company_id=company.id,
                recruiter_id=recruiter.id,
            )
            job.skills = skills
            db.add(job)
            jobs.append(job)
        db.flush()

        # 4. Create Applicant User - John Doe, with one pending application
        applicant_user = User(
            name="John Doe",
            email=APPLICANT_EMAIL,
            hashed_password=get_password_hash("applicant123"),
            role=Role.APPLICANT,
        )
        db.add(applicant_user)
        db.flush()

        applicant = Applicant(
            user_id=applicant_user.id,
            resume_url="https://example.com/resumes/john-doe.pdf",
            location="Bengaluru",
            years_of_experience=4,
            role="Backend Developer",
            skills=["Python", "FastAPI", "Docker"],
        )
        db.add(applicant)
        db.flush()

        db.add(
            Application(
                applicant_id=applicant.id,
                job_id=jobs[0].id,
                status=ApplicationStatus.PENDING,
                resume=applicant.resume_url,
            )
        )

        # Commit all changes
        db.commit()

        print("Database seeded successfully!")
        print("\nCreated Users:")
        print(f"   - {RECRUITER_EMAIL} (password: recruiter123)")
        print(f"   - {APPLICANT_EMAIL} (password: applicant123)")
        print(f"\nCreated {len(jobs)} jobs at {company.name}")

    except Exception as e:
        db.rollback()
        print(f"Error seeding database: {e}")
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed_database()
