from evaltrack.core.security import decode_access_token
from evaltrack.models import AuditAction
from tests.conftest import DEFAULT_PASSWORD, audit_rows

LOGIN = "/api/v1/auth/login"


def test_successful_login_returns_user_without_password(client, db, employee, supervisor):
    response = client.post(LOGIN, json={"email": employee.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == employee.id
    assert body["role"] == "EMPLOYEE"
    assert "password" not in body
    assert body["supervisor"]["id"] == supervisor.id
    assert body["tokenType"] == "bearer"
    claims = decode_access_token(body["accessToken"])
    assert claims["sub"] == employee.id
    assert claims["role"] == "EMPLOYEE"

    rows = audit_rows(db, AuditAction.AUTH_LOGIN_SUCCESS)
    assert len(rows) == 1
    assert rows[0].user_id == employee.id


def test_wrong_password_is_unauthorized_and_audited_once(client, db, employee):
    response = client.post(LOGIN, json={"email": employee.email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"
    rows = audit_rows(db, AuditAction.AUTH_LOGIN_FAILURE)
    assert len(rows) == 1
    assert rows[0].details["reason"] == "password mismatch"
    assert rows[0].details["email"] == employee.email
    assert rows[0].user_id == employee.id
    assert audit_rows(db, AuditAction.AUTH_LOGIN_SUCCESS) == []


def test_unknown_email_gives_same_message(client, db):
    response = client.post(LOGIN, json={"email": "nobody@example.com", "password": "whatever-it-is"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"
    rows = audit_rows(db, AuditAction.AUTH_LOGIN_FAILURE)
    assert [r.details["reason"] for r in rows] == ["user not found"]
    assert rows[0].user_id is None


def test_account_without_password(client, db, make_user):
    user = make_user(password=None)

    response = client.post(LOGIN, json={"email": user.email, "password": "anything-at-all"})

    assert response.status_code == 500
    rows = audit_rows(db, AuditAction.AUTH_LOGIN_FAILURE)
    assert [r.details["reason"] for r in rows] == ["no password set"]


def test_missing_fields_rejected(client):
    response = client.post(LOGIN, json={"email": "someone@example.com"})
    assert response.status_code == 400
