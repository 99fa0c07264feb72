from jobboard.models.user import User
from jobboard.models.applicant import Applicant, ApplicantSkill
from jobboard.models.recruiter import Recruiter
from jobboard.models.company import Company, RecruiterCompany
from jobboard.models.job import Job, JobSkill
from jobboard.models.application import Application
from jobboard.models.saved_job import SavedJob, HiddenJob

__all__ = [
    "User",
    "Applicant",
    "ApplicantSkill",
    "Recruiter",
    "Company",
    "RecruiterCompany",
    "Job",
    "JobSkill",
    "Application",
    "SavedJob",
    "HiddenJob",
]
