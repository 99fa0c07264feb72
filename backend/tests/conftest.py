from __future__ import annotations

import itertools
import os
from datetime import datetime, timedelta

# Settings are read at import time, so configure the environment first.
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from jobboard.db.base import Base
from jobboard.db.session import build_engine, get_db
from jobboard.main import app

API = "/api/v1"


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_client(session_factory):
    """Each client keeps its own cookie jar, i.e. its own session."""
    clients = []

    def _make() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def signup(make_client):
    counter = itertools.count(1)

    def _signup(role: str = "APPLICANT", password: str = "password123"):
        n = next(counter)
        client = make_client()
        response = client.post(
            f"{API}/auth/signup",
            json={
                "name": f"{role.title()} {n}",
                "email": f"{role.lower()}{n}@example.com",
                "role": role,
                "password": password,
                "confirm_password": password,
            },
        )
        assert response.status_code == 201, response.text
        return client, response.json()["user"]

    return _signup


@pytest.fixture
def recruiter(signup) -> TestClient:
    client, _ = signup("RECRUITER")
    return client


@pytest.fixture
def applicant(signup) -> TestClient:
    client, _ = signup("APPLICANT")
    return client


@pytest.fixture
def make_company():
    def _make(client: TestClient, **fields) -> dict:
        payload = {"name": "Acme Labs", "company_type": "GROWTH_STAGE_STARTUP"}
        payload.update(fields)
        response = client.post(f"{API}/companies", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["company"]

    return _make


@pytest.fixture
def company(recruiter, make_company) -> dict:
    return make_company(recruiter)


def future_deadline(days: int = 30) -> str:
    return (datetime.utcnow() + timedelta(days=days)).isoformat()


@pytest.fixture
def job_payload():
    def _payload(company_id: int, **overrides) -> dict:
        payload = {
            "company_id": company_id,
            "title": "Backend Engineer",
            "description": "Build and run Python APIs.",
            "skills": ["Python", "FastAPI"],
            "location": "Bengaluru",
            "role": "BACKEND_DEVELOPER",
            "department": "ENGINEERING",
            "ctc_type": "RANGE",
            "min_ctc": 1000000,
            "max_ctc": 2000000,
            "currency": "INR",
            "min_experience": 2,
            "max_experience": 6,
            "employment_type": "FULL_TIME",
            "work_mode": "HYBRID",
            "openings": 1,
            "application_deadline": future_deadline(),
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def make_job(recruiter, company, job_payload):
    """Post a job as ``recruiter`` (or ``client``) and return the created job."""

    def _make(client: TestClient | None = None, company_id: int | None = None, **overrides) -> dict:
        poster = client or recruiter
        payload = job_payload(company_id or company["id"], **overrides)
        response = poster.post(f"{API}/jobs", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["job"]

    return _make
