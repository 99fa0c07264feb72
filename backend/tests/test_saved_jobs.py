from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from jobboard.models import HiddenJob, SavedJob

pytestmark = pytest.mark.integration

API = "/api/v1"


def test_save_twice_is_a_conflict(applicant: TestClient, make_job, session_factory) -> None:
    job = make_job()

    first = applicant.post(f"{API}/jobs/{job['id']}/save")
    second = applicant.post(f"{API}/jobs/{job['id']}/save")

    assert first.status_code == 201
    assert first.json() == {"message": "Job saved successfully", "job_id": job["id"]}
    assert second.status_code == 409
    assert second.json()["message"] == "You have already saved this job."
    with session_factory() as db:
        assert db.query(SavedJob).count() == 1


def test_unsave(applicant: TestClient, make_job, session_factory) -> None:
    job = make_job()
    applicant.post(f"{API}/jobs/{job['id']}/save")

    assert applicant.delete(f"{API}/jobs/{job['id']}/unsave").status_code == 200
    with session_factory() as db:
        assert db.query(SavedJob).count() == 0

    again = applicant.delete(f"{API}/jobs/{job['id']}/unsave")
    assert again.status_code == 404
    assert again.json()["message"] == "Saved job not found."


def test_toggles_need_an_existing_job(applicant: TestClient) -> None:
    assert applicant.post(f"{API}/jobs/999/save").status_code == 404
    assert applicant.delete(f"{API}/jobs/999/unsave").status_code == 404
    assert applicant.post(f"{API}/jobs/999/hide").status_code == 404


def test_saves_are_per_applicant(signup, make_job) -> None:
    job = make_job()
    first, _ = signup("APPLICANT")
    second, _ = signup("APPLICANT")

    assert first.post(f"{API}/jobs/{job['id']}/save").status_code == 201
    assert second.post(f"{API}/jobs/{job['id']}/save").status_code == 201
    assert second.delete(f"{API}/jobs/{job['id']}/unsave").status_code == 200
    assert first.get(f"{API}/jobs/saved").json()["pagination"]["total"] == 1


def test_saved_list_order_and_pagination(applicant: TestClient, make_job) -> None:
    jobs = [make_job(title=f"Job {n}") for n in range(3)]
    for job in jobs:
        applicant.post(f"{API}/jobs/{job['id']}/save")

    newest = applicant.get(f"{API}/jobs/saved").json()
    assert newest["order"] == "desc"
    assert [entry["job"]["title"] for entry in newest["data"]] == ["Job 2", "Job 1", "Job 0"]

    oldest = applicant.get(f"{API}/jobs/saved", params={"order": "asc", "limit": 2}).json()
    assert oldest["order"] == "asc"
    assert [entry["job"]["title"] for entry in oldest["data"]] == ["Job 0", "Job 1"]
    assert oldest["pagination"] == {"total": 3, "page": 1, "limit": 2, "total_pages": 2}


def test_hide_twice_is_a_conflict_and_unhide_restores(
    applicant: TestClient, make_job, session_factory
) -> None:
    job = make_job()

    assert applicant.post(f"{API}/jobs/{job['id']}/hide").status_code == 201
    assert applicant.post(f"{API}/jobs/{job['id']}/hide").status_code == 409
    assert applicant.get(f"{API}/jobs/{job['id']}").json()["meta"]["is_hidden"] is True

    assert applicant.delete(f"{API}/jobs/{job['id']}/hide").status_code == 200
    assert applicant.delete(f"{API}/jobs/{job['id']}/hide").status_code == 404
    with session_factory() as db:
        assert db.query(HiddenJob).count() == 0
