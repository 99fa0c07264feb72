from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from jobboard.core.errors import ValidationError
from jobboard.models.enums import EmploymentType, JobRole, WorkMode
from jobboard.services.job_query import JobSearchFilters, split_list
from jobboard.services.pagination import MAX_PAGE, page_offset

API = "/api/v1"


# ============== Filter parsing ==============


def test_defaults() -> None:
    filters = JobSearchFilters.from_query()

    assert filters.page == 1
    assert filters.limit == 25
    assert filters.offset == 0
    assert filters.newest_first is True
    assert filters.roles == []


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        ("0", "1000", (1, 100)),
        ("-3", "0", (1, 1)),
        ("abc", "xyz", (1, 25)),
        ("3", "10", (3, 10)),
        ("99999999999999999999999", "5", (MAX_PAGE, 5)),
        ("-99999999999999999999999", "99999999999999999999999", (1, 25)),
    ],
)
def test_page_and_limit_are_clamped(page: str, limit: str, expected: tuple[int, int]) -> None:
    filters = JobSearchFilters.from_query(page=page, limit=limit)
    assert (filters.page, filters.limit) == expected


def test_offset_follows_page_and_limit() -> None:
    assert JobSearchFilters.from_query(page="3", limit="10").offset == 20


def test_list_values_are_split_trimmed_and_deduplicated() -> None:
    filters = JobSearchFilters.from_query(
        roles=["frontend_developer, BACKEND_DEVELOPER,,", "FRONTEND_DEVELOPER"],
        job_type="full_time",
        work_mode=" remote , hybrid ",
    )

    assert filters.roles == [JobRole.FRONTEND_DEVELOPER, JobRole.BACKEND_DEVELOPER]
    assert filters.employment_types == [EmploymentType.FULL_TIME]
    assert filters.work_modes == [WorkMode.REMOTE, WorkMode.HYBRID]


def test_split_list_drops_blanks() -> None:
    assert split_list(" python, ,Go ,") == ["python", "Go"]
    assert split_list(None) == []


def test_unknown_enum_value_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        JobSearchFilters.from_query(roles="ASTRONAUT")

    assert exc_info.value.status_code == 400
    assert "ASTRONAUT" in exc_info.value.detail


def test_malformed_numbers_leave_filter_inactive() -> None:
    filters = JobSearchFilters.from_query(min_experience="five", salary_max="")

    assert filters.min_experience is None
    assert filters.salary_max is None

    huge = JobSearchFilters.from_query(
        min_experience="99999999999999999999999", salary_min="-99999999999999999999999"
    )
    assert huge.min_experience is None
    assert huge.salary_min is None


def test_largest_page_offset_still_fits_a_sql_integer() -> None:
    filters = JobSearchFilters.from_query(page="99999999999999999999999", limit="100")
    assert page_offset(filters.page, filters.limit) < 2**63


def test_posted_date_oldest_flips_order() -> None:
    assert JobSearchFilters.from_query(posted_date="oldest").newest_first is False
    assert JobSearchFilters.from_query(posted_date="newest").newest_first is True


# ============== Search over HTTP ==============


def _search(client: TestClient, **params) -> dict:
    response = client.get(f"{API}/jobs", params=params)
    assert response.status_code == 200, response.text
    return response.json()


def _titles(body: dict) -> set[str]:
    return {job["title"] for job in body["jobs"]}


@pytest.mark.integration
def test_skills_match_any_requested_skill_case_insensitively(client: TestClient, make_job) -> None:
    make_job(title="API", skills=["Python", "FastAPI"])
    make_job(title="Web", skills=["React", "TypeScript"])
    make_job(title="Infra", skills=["Go"])

    assert _titles(_search(client, skills="python")) == {"API"}
    assert _titles(_search(client, skills="REACT,go")) == {"Web", "Infra"}
    assert _titles(_search(client, skills="rust")) == set()


@pytest.mark.integration
def test_experience_ranges_overlap(client: TestClient, make_job) -> None:
    make_job(title="Mid", min_experience=2, max_experience=6)

    assert _titles(_search(client, minExperience=5, maxExperience=10)) == {"Mid"}
    assert _titles(_search(client, minExperience=7, maxExperience=10)) == set()
    assert _titles(_search(client, maxExperience=1)) == set()
    assert _titles(_search(client, minExperience="junk")) == {"Mid"}


@pytest.mark.integration
def test_salary_ranges_overlap(client: TestClient, make_job) -> None:
    make_job(title="Paid", min_ctc=1000000, max_ctc=2000000)
    make_job(title="Secret", ctc_type="UNDISCLOSED", min_ctc=None, max_ctc=None)

    assert _titles(_search(client, salaryMin=1500000)) == {"Paid"}
    assert _titles(_search(client, salaryMin=2500000)) == set()
    assert _titles(_search(client, salaryMax=900000)) == set()
    assert _titles(_search(client)) == {"Paid", "Secret"}


@pytest.mark.integration
def test_oversized_numbers_are_ignored_not_a_server_error(client: TestClient, make_job) -> None:
    make_job(title="Paid", min_ctc=1000000, max_ctc=2000000, min_experience=2, max_experience=6)
    huge = "99999999999999999999999"

    filtered = _search(client, salaryMin=huge, minExperience=huge, maxExperience=f"-{huge}")
    assert _titles(filtered) == {"Paid"}

    far_page = _search(client, page=huge)
    assert far_page["jobs"] == []
    assert far_page["pagination"]["page"] == MAX_PAGE
    assert far_page["pagination"]["total"] == 1


@pytest.mark.integration
def test_enum_filters(client: TestClient, make_job) -> None:
    make_job(title="Remote FE", role="FRONTEND_DEVELOPER", work_mode="REMOTE")
    make_job(title="Onsite BE", role="BACKEND_DEVELOPER", work_mode="ONSITE", employment_type="CONTRACT")

    assert _titles(_search(client, roles="frontend_developer")) == {"Remote FE"}
    assert _titles(_search(client, workMode="ONSITE,HYBRID")) == {"Onsite BE"}
    assert _titles(_search(client, jobType="CONTRACT")) == {"Onsite BE"}
    assert _titles(_search(client, department="ENGINEERING")) == {"Remote FE", "Onsite BE"}
    assert _titles(_search(client, roles="DESIGNER")) == set()


@pytest.mark.integration
def test_repeated_query_keys_are_accepted(client: TestClient, make_job) -> None:
    make_job(title="FE", role="FRONTEND_DEVELOPER")
    make_job(title="BE", role="BACKEND_DEVELOPER")
    make_job(title="PM", role="PRODUCT_MANAGER", department="PRODUCT")

    response = client.get(
        f"{API}/jobs", params=[("roles", "FRONTEND_DEVELOPER"), ("roles", "BACKEND_DEVELOPER")]
    )

    assert _titles(response.json()) == {"FE", "BE"}


@pytest.mark.integration
def test_invalid_enum_is_a_bad_request(client: TestClient, make_job) -> None:
    make_job()

    response = client.get(f"{API}/jobs", params={"workMode": "MOON"})

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid value 'MOON' for workMode"
    assert "REMOTE" in response.json()["error"]


@pytest.mark.integration
def test_location_is_a_case_insensitive_substring_disjunction(client: TestClient, make_job) -> None:
    make_job(title="BLR", location="Bengaluru, India")
    make_job(title="PNQ", location="Pune")
    make_job(title="NYC", location="New York")

    assert _titles(_search(client, location="bengal")) == {"BLR"}
    assert _titles(_search(client, location="pune,york")) == {"PNQ", "NYC"}
    assert _titles(_search(client, location="100%")) == set()


@pytest.mark.integration
def test_company_name_and_type(
    client: TestClient, recruiter: TestClient, make_company, make_job
) -> None:
    startup = make_company(recruiter, name="Tiny Startup", company_type="EARLY_STAGE_STARTUP")
    mnc = make_company(recruiter, name="Global Corp", company_type="MNC")
    make_job(title="Startup job", company_id=startup["id"])
    make_job(title="Corp job", company_id=mnc["id"])

    assert _titles(_search(client, company="global")) == {"Corp job"}
    assert _titles(_search(client, companyType="early_stage_startup")) == {"Startup job"}
    assert _titles(_search(client, companyType="MNC", company="tiny")) == set()


@pytest.mark.integration
def test_pagination_and_ordering(client: TestClient, make_job) -> None:
    for n in range(5):
        make_job(title=f"Job {n}")

    newest = _search(client, limit=2)
    assert [job["title"] for job in newest["jobs"]] == ["Job 4", "Job 3"]
    assert newest["pagination"] == {"total": 5, "page": 1, "limit": 2, "total_pages": 3}

    oldest = _search(client, limit=2, page=3, postedDate="oldest")
    assert [job["title"] for job in oldest["jobs"]] == ["Job 4"]

    clamped = _search(client, limit=1000, page=0)
    assert clamped["pagination"]["limit"] == 100
    assert clamped["pagination"]["page"] == 1
    assert len(clamped["jobs"]) == 5


@pytest.mark.integration
def test_applied_and_hidden_jobs_are_invisible_to_that_applicant(
    client: TestClient, applicant: TestClient, recruiter: TestClient, make_job
) -> None:
    applied = make_job(title="Applied")
    hidden = make_job(title="Hidden")
    make_job(title="Open")

    assert applicant.post(f"{API}/jobs/{applied['id']}/apply").status_code == 201
    assert applicant.post(f"{API}/jobs/{hidden['id']}/hide").status_code == 201

    mine = _search(applicant)
    assert _titles(mine) == {"Open"}
    assert mine["pagination"]["total"] == 1

    assert _titles(_search(client)) == {"Applied", "Hidden", "Open"}
    assert _titles(_search(recruiter)) == {"Applied", "Hidden", "Open"}

    assert applicant.delete(f"{API}/jobs/{hidden['id']}/hide").status_code == 200
    assert _titles(_search(applicant)) == {"Hidden", "Open"}
