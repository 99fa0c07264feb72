"""
Job search query builder.

Turns the loosely-typed query string of ``GET /jobs`` into a typed
``JobSearchFilters`` value once, at the boundary, and then into a single
SQLAlchemy query: predicates AND-ed across categories, OR-ed within a
category, ordered by posting time, paginated, plus an unpaginated count.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from jobboard.core.errors import ValidationError
from jobboard.models import Application, Company, HiddenJob, Job, JobSkill
from jobboard.models.enums import CompanyType, Department, EmploymentType, JobRole, WorkMode
from jobboard.services.pagination import page_offset, parse_int, resolve_page

DEFAULT_SEARCH_LIMIT = 25

RawParam = Union[str, Iterable[str], None]


@dataclass
class JobSearchFilters:
    """Validated search parameters. Empty lists mean "no filter"."""

    page: int = 1
    limit: int = DEFAULT_SEARCH_LIMIT
    roles: list[JobRole] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    employment_types: list[EmploymentType] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    work_modes: list[WorkMode] = field(default_factory=list)
    departments: list[Department] = field(default_factory=list)
    company_types: list[CompanyType] = field(default_factory=list)
    company: Optional[str] = None
    min_experience: Optional[int] = None
    max_experience: Optional[int] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    newest_first: bool = True

    @property
    def offset(self) -> int:
        return page_offset(self.page, self.limit)

    @classmethod
    def from_query(
        cls,
        page: RawParam = None,
        limit: RawParam = None,
        roles: RawParam = None,
        skills: RawParam = None,
        job_type: RawParam = None,
        location: RawParam = None,
        work_mode: RawParam = None,
        department: RawParam = None,
        company_type: RawParam = None,
        salary_min: RawParam = None,
        salary_max: RawParam = None,
        min_experience: RawParam = None,
        max_experience: RawParam = None,
        company: RawParam = None,
        posted_date: RawParam = None,
    ) -> "JobSearchFilters":
        """
        Build filters from raw query values.

        Numeric inputs that fail to parse are ignored (or fall back to the
        pagination defaults); unknown enum values raise ValidationError.
        """
        page_number, limit_number = resolve_page(page, limit, DEFAULT_SEARCH_LIMIT)

        company_text = _first(company)
        company_text = company_text.strip() if company_text else None

        sort = (_first(posted_date) or "").strip().lower()

        return cls(
            page=page_number,
            limit=limit_number,
            roles=parse_enum_list(roles, JobRole, "roles"),
            skills=split_list(skills),
            employment_types=parse_enum_list(job_type, EmploymentType, "jobType"),
            locations=split_list(location),
            work_modes=parse_enum_list(work_mode, WorkMode, "workMode"),
            departments=parse_enum_list(department, Department, "department"),
            company_types=parse_enum_list(company_type, CompanyType, "companyType"),
            company=company_text or None,
            min_experience=parse_int(min_experience),
            max_experience=parse_int(max_experience),
            salary_min=parse_int(salary_min),
            salary_max=parse_int(salary_max),
            newest_first=sort != "oldest",
        )


def _first(value: RawParam) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    for item in value:
        return item
    return None


def split_list(value: RawParam) -> list[str]:
    """Split comma-joined (or repeated) parameters, trimming and dropping blanks."""
    if value is None:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [
        token.strip()
        for chunk in chunks
        for token in str(chunk).split(",")
        if token.strip()
    ]


def parse_enum_list(value: RawParam, enum_cls: type[enum.Enum], param: str) -> list:
    parsed = []
    for token in split_list(value):
        try:
            member = enum_cls(token.upper())
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise ValidationError(
                f"Invalid value '{token}' for {param}",
                error=f"Allowed values: {allowed}",
            )
        if member not in parsed:
            parsed.append(member)
    return parsed


def job_search_conditions(filters: JobSearchFilters, applicant_id: Optional[int] = None) -> list:
    """Translate filters into a list of SQL predicates to be AND-ed together."""
    conditions = []

    if applicant_id is not None:
        applied = select(Application.job_id).where(Application.applicant_id == applicant_id)
        hidden = select(HiddenJob.job_id).where(HiddenJob.applicant_id == applicant_id)
        conditions.append(Job.id.not_in(applied))
        conditions.append(Job.id.not_in(hidden))

    if filters.roles:
        conditions.append(Job.role.in_(filters.roles))

    if filters.skills:
        wanted = [skill.lower() for skill in filters.skills]
        conditions.append(Job.skill_tags.any(func.lower(JobSkill.name).in_(wanted)))

    if filters.employment_types:
        conditions.append(Job.employment_type.in_(filters.employment_types))

    if filters.work_modes:
        conditions.append(Job.work_mode.in_(filters.work_modes))

    if filters.departments:
        conditions.append(Job.department.in_(filters.departments))

    if filters.locations:
        conditions.append(
            or_(*[Job.location.icontains(loc, autoescape=True) for loc in filters.locations])
        )

    if filters.company:
        conditions.append(Job.company.has(Company.name.icontains(filters.company, autoescape=True)))

    if filters.company_types:
        conditions.append(Job.company.has(Company.company_type.in_(filters.company_types)))

    # Band overlap: each side of the query range activates independently
    if filters.min_experience is not None:
        conditions.append(Job.max_experience >= filters.min_experience)
    if filters.max_experience is not None:
        conditions.append(Job.min_experience <= filters.max_experience)

    if filters.salary_min is not None:
        conditions.append(Job.max_ctc >= filters.salary_min)
    if filters.salary_max is not None:
        conditions.append(Job.min_ctc <= filters.salary_max)

    return conditions


def build_job_query(
    db: Session,
    filters: JobSearchFilters,
    applicant_id: Optional[int] = None,
) -> Query:
    """Unordered, unpaginated query of every job matching ``filters``."""
    return db.query(Job).filter(*job_search_conditions(filters, applicant_id))


def search_jobs(
    db: Session,
    filters: JobSearchFilters,
    applicant_id: Optional[int] = None,
) -> tuple[list[Job], int]:
    """
    Run a job search.

    Args:
        db: Database session
        filters: Parsed search filters
        applicant_id: Applicant profile id of the caller, if any. Jobs the
            applicant applied to or hid are excluded.

    Returns:
        The requested page of jobs and the total number of matches
    """
    query = build_job_query(db, filters, applicant_id)
    total = query.count()

    if filters.newest_first:
        ordering = (Job.created_at.desc(), Job.id.desc())
    else:
        ordering = (Job.created_at.asc(), Job.id.asc())

    jobs = (
        query.options(joinedload(Job.company), selectinload(Job.skill_tags))
        .order_by(*ordering)
        .offset(filters.offset)
        .limit(filters.limit)
        .all()
    )
    return jobs, total
