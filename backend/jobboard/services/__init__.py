from jobboard.services.job_query import JobSearchFilters, search_jobs
from jobboard.services.jobs import create_job, update_job, delete_job, get_owned_job
from jobboard.services.applications import (
    apply_to_job,
    set_application_status,
    get_application_for_owner,
    get_resume_url,
)
from jobboard.services.saved_jobs import save_job, unsave_job, hide_job, unhide_job
from jobboard.services.applicants import get_applicant, search_applicants, has_applied_to_recruiter

__all__ = [
    "JobSearchFilters",
    "search_jobs",
    "create_job",
    "update_job",
    "delete_job",
    "get_owned_job",
    "apply_to_job",
    "set_application_status",
    "get_application_for_owner",
    "get_resume_url",
    "save_job",
    "unsave_job",
    "hide_job",
    "unhide_job",
    "get_applicant",
    "search_applicants",
    "has_applied_to_recruiter",
]
