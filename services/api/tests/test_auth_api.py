import time

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from conftest import TEST_SECRET, login, signup
from switchhub_api.core.security import decode_session_token
from switchhub_api.repositories.user_repository import UserRepository
from switchhub_api.services.auth_service import FORGOT_LOOKUP_MESSAGE
from switchhub_api.services.local_auth import RECOVERY_CODE_ALPHABET


def _reset(client, *, email="ann@x.com", recovery_code, new_password="newsecret34"):
    return client.post(
        "/api/auth",
        json={"action": "forgot", "email": email, "recovery_code": recovery_code, "new_password": new_password},
    )


def test_signup_returns_recovery_code_once(client):
    resp = signup(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Signup successful"
    assert len(body["recovery_code"]) == 12
    assert set(body["recovery_code"]) <= set(RECOVERY_CODE_ALPHABET)


def test_signup_then_login_issues_verifiable_token(client):
    assert signup(client).status_code == 201

    resp = login(client, email="ann@x.com", password="secret12")
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Login successful"

    claims = decode_session_token(body["token"], TEST_SECRET)
    assert claims is not None
    assert claims["email"] == "ann@x.com"
    assert abs(claims["exp"] - (time.time() + 86400)) < 60

    user = body["user"]
    assert set(user) == {"id", "name", "email", "phone", "gender"}
    assert user["id"] == claims["id"]
    assert user["name"] == "Ann"
    assert user["email"] == "ann@x.com"


def test_signup_keeps_optional_metadata(client):
    signup(client, phone="+15550100", gender="f")
    user = login(client).json()["user"]
    assert user["phone"] == "+15550100"
    assert user["gender"] == "f"


def test_duplicate_signup_conflicts(client):
    assert signup(client).status_code == 201
    resp = signup(client, email="  ANN@x.COM ")
    assert resp.status_code == 409
    assert resp.json() == {"success": False, "error": "User already exists"}


def test_signup_missing_fields(client):
    resp = client.post("/api/auth", json={"action": "signup", "email": "ann@x.com"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: name, email, password"


def test_signup_rejects_short_password(client):
    resp = signup(client, password="short")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Password must be at least 8 characters"


def test_login_failures_are_indistinguishable(client):
    signup(client)
    unknown = login(client, email="nobody@x.com", password="secret12")
    wrong = login(client, email="ann@x.com", password="wrong-password")

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.content == wrong.content
    assert wrong.json() == {"success": False, "error": "Invalid credentials"}


def test_login_missing_fields(client):
    resp = client.post("/api/auth", json={"action": "login", "email": "ann@x.com"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing email or password"


def test_forgot_lookup_does_not_reveal_accounts(client):
    signup(client)
    known = client.post("/api/auth", json={"action": "forgot", "email": "ann@x.com"})
    unknown = client.post("/api/auth", json={"action": "forgot", "email": "nobody@x.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.content == unknown.content
    assert known.json()["message"] == FORGOT_LOOKUP_MESSAGE


def test_forgot_requires_email(client):
    resp = client.post("/api/auth", json={"action": "forgot"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing email"

    resp = client.post("/api/auth", json={"action": "forgot", "recovery_code": "abc", "new_password": "newsecret34"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing email"


def test_recovery_code_is_single_use(client):
    code = signup(client).json()["recovery_code"]

    first = _reset(client, recovery_code=code)
    assert first.status_code == 200
    new_code = first.json()["recovery_code"]
    assert first.json()["message"] == "Password reset successful"
    assert len(new_code) == 12
    assert new_code != code

    second = _reset(client, recovery_code=code, new_password="another56")
    assert second.status_code == 401
    assert second.json() == {"success": False, "error": "Invalid recovery code"}

    assert login(client, password="secret12").status_code == 401
    assert login(client, password="newsecret34").status_code == 200
    assert _reset(client, recovery_code=new_code, new_password="another56").status_code == 200


def test_reset_for_unknown_email_looks_like_bad_code(client):
    resp = _reset(client, email="nobody@x.com", recovery_code="AAAAAAAAAAAA")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid recovery code"


def test_delete_unknown_user(client):
    resp = client.post("/api/auth", json={"action": "delete", "email": "nobody@x.com"})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "User not found"}


def test_delete_removes_account(client):
    signup(client)
    resp = client.post("/api/auth", json={"action": "delete", "email": "ANN@x.com"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Account deleted"}
    assert login(client).status_code == 401
    assert signup(client).status_code == 201


def test_delete_requires_email(client):
    resp = client.post("/api/auth", json={"action": "delete"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing email"


def test_action_dispatch_errors(client):
    missing = client.post("/api/auth", json={"email": "ann@x.com"})
    assert missing.status_code == 400
    assert missing.json()["error"] == "Missing action"

    unknown = client.post("/api/auth", json={"action": "promote"})
    assert unknown.status_code == 400
    assert unknown.json()["error"] == "Unknown action"


def test_action_from_query_parameter(client):
    signup(client)
    resp = client.post("/api/auth?action=LOGIN", json={"email": "ann@x.com", "password": "secret12"})
    assert resp.status_code == 200
    assert "token" in resp.json()


def test_rest_style_paths(client):
    resp = client.post("/api/auth/signup", json={"name": "Ann", "email": "ann@x.com", "password": "secret12"})
    assert resp.status_code == 201
    resp = client.post("/api/auth/login", json={"email": "ann@x.com", "password": "secret12"})
    assert resp.status_code == 200
    resp = client.post("/api/auth/promote", json={"email": "ann@x.com"})
    assert resp.status_code == 400


def test_get_uses_query_parameters(client):
    resp = client.get("/api/auth", params={"action": "forgot", "email": "ann@x.com"})
    assert resp.status_code == 200
    assert resp.json()["message"] == FORGOT_LOOKUP_MESSAGE


def test_invalid_json_body(client):
    resp = client.post("/api/auth", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "error" in resp.json()


def test_unknown_fields_rejected_over_http(client):
    resp = client.post("/api/auth", json={"action": "delete", "email": "ann@x.com", "force": True})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Unexpected fields: force"


def test_store_failure_is_generic_500(client, monkeypatch):
    def _boom(self, email):
        raise OperationalError("SELECT id FROM users", {}, Exception("database is locked"))

    monkeypatch.setattr(UserRepository, "exists", _boom)
    resp = signup(client)
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error (signup)"}
    assert "locked" not in resp.text


def test_cors_preflight_and_headers(client):
    preflight = client.options("/api/auth")
    assert preflight.status_code == 204
    assert preflight.headers["Access-Control-Allow-Origin"] == "*"
    assert preflight.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"
    assert preflight.headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"

    resp = login(client, email="nobody@x.com")
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.headers["X-Request-Id"]


def test_unhandled_error_keeps_cors_and_request_id(client, monkeypatch):
    def _boom(self, *args, **kwargs):
        raise OperationalError("select 1", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "execute", _boom)
    resp = TestClient(client.app, raise_server_exceptions=False).get("/api/health/ready")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert resp.headers["X-Request-Id"]
    assert "locked" not in resp.text


def test_unknown_route(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


def test_health(client):
    assert client.get("/api/health/live").json() == {"success": True, "status": "ok"}
    assert client.get("/api/health/ready").json() == {"success": True, "status": "ready"}
