import logging

import pytest

from evaltrack.api.v1.dependencies import resolve_identity, resolve_token_identity
from evaltrack.core.config import settings
from evaltrack.core.security import create_access_token
from evaltrack.models.user import UserRole
from tests.conftest import DEFAULT_PASSWORD, headers_for


class TestHeaderIdentity:

    def test_both_headers_required(self):
        assert resolve_identity(None, "ADMIN") is None
        assert resolve_identity("u1", None) is None
        assert resolve_identity("", "ADMIN") is None

    def test_unknown_role(self):
        assert resolve_identity("u1", "OWNER") is None

    def test_role_is_case_insensitive(self):
        caller = resolve_identity("u1", "supervisor")
        assert caller.id == "u1"
        assert caller.role == UserRole.SUPERVISOR


class TestTokenIdentity:

    def test_valid_token(self):
        token = create_access_token("u1", "ADMIN")
        caller = resolve_token_identity(f"Bearer {token}")
        assert caller.id == "u1"
        assert caller.is_admin

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer ", "Bearer not-a-jwt"])
    def test_invalid_authorization_header(self, header):
        assert resolve_token_identity(header) is None

    def test_token_mode_end_to_end(self, client, employee, monkeypatch):
        monkeypatch.setattr(settings, "IDENTITY_MODE", "token")
        login = client.post("/api/v1/auth/login", json={"email": employee.email, "password": DEFAULT_PASSWORD})
        token = login.json()["accessToken"]

        with_token = client.get("/api/v1/goals", headers={"Authorization": f"Bearer {token}"})
        with_headers_only = client.get("/api/v1/goals", headers=headers_for(employee))

        assert with_token.status_code == 200
        assert with_headers_only.status_code == 401


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"


def test_caller_id_reaches_route_logs(client, caplog, employee, make_user, make_goal):
    other_goal = make_goal(make_user(UserRole.EMPLOYEE))
    employee_id = employee.id

    with caplog.at_level(logging.WARNING, logger="evaltrack.api.v1.goals"):
        response = client.get(f"/api/v1/goals/{other_goal.id}", headers=headers_for(employee))

    assert response.status_code == 403
    denials = [r for r in caplog.records if "denied view" in r.getMessage()]
    assert len(denials) == 1
    assert denials[0].caller_id == employee_id
