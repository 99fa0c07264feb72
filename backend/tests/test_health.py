from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from jobboard.core.config import settings
from jobboard.core.errors import ConfigurationError
from jobboard.main import app

pytestmark = pytest.mark.integration


def test_health_and_root(session_factory) -> None:
    with TestClient(app) as client:
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/").json() == {"message": f"Welcome to {settings.APP_NAME} API"}


def test_startup_refuses_missing_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "SECRET_KEY", "")

    with pytest.raises(ConfigurationError):
        with TestClient(app):
            pass


def test_unknown_route_uses_error_body(client: TestClient) -> None:
    response = client.get("/api/v1/nope")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}
