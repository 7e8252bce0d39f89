from __future__ import annotations

from cardfolio.services.auth_service import RESET_REQUESTED_MESSAGE


def _auth(token):
    return {"x-auth-token": token}


def test_register_verify_and_session_round(client, outbox):
    resp = client.post(
        "/api/auth/register", json={"name": "Alice", "email": "alice@example.com", "password": "s3cret-pass"}
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["data"] == {"email": "alice@example.com", "emailSent": True}

    code = outbox[-1]["code"]
    resp = client.post("/api/auth/register/verify", json={"email": "alice@example.com", "code": code})
    data = resp.json()["data"]
    token = data["token"]
    assert data["user"]["name"] == "Alice"

    resp = client.get("/api/auth/verify", headers=_auth(token))
    assert resp.json()["data"]["user"]["email"] == "alice@example.com"

    assert client.post("/api/auth/logout", headers=_auth(token)).status_code == 200
    resp = client.get("/api/auth/verify", headers=_auth(token))
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Token is not valid"}


def test_missing_token_is_rejected(client):
    resp = client.get("/api/auth/verify")
    assert resp.status_code == 401
    assert resp.json()["message"] == "No token, authorization denied"


def test_register_errors_use_the_envelope(client, signup):
    signup()
    resp = client.post(
        "/api/auth/register", json={"name": "Alice", "email": "alice@example.com", "password": "s3cret-pass"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "User already exists."}


def test_bad_otp_format(client, outbox):
    client.post("/api/auth/register", json={"name": "Bo", "email": "bo@example.com", "password": "s3cret-pass"})
    resp = client.post("/api/auth/register/verify", json={"email": "bo@example.com", "code": "12a4"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "OTP code must be exactly 4 digits."


def test_login_wrong_password(client, signup):
    signup()
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid credentials."

    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.json()["data"]["token"]


def test_login_is_rate_limited(client, signup):
    signup()
    codes = [
        client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"}).status_code
        for _ in range(11)
    ]
    assert codes[:10] == [400] * 10
    assert codes[10] == 429


def test_reset_request_does_not_reveal_accounts(client, signup, outbox):
    signup()
    sent_before = len(outbox)
    known = client.post("/api/password-reset/request", json={"email": "alice@example.com"})
    unknown = client.post("/api/password-reset/request", json={"email": "ghost@example.com"})
    assert known.json()["message"] == unknown.json()["message"] == RESET_REQUESTED_MESSAGE
    assert len(outbox) == sent_before + 1


def test_reset_password_over_http(client, signup, outbox):
    old_token, _ = signup()
    client.post("/api/password-reset/request", json={"email": "alice@example.com"})
    code = outbox[-1]["code"]

    resp = client.post("/api/password-reset/verify-code", json={"email": "alice@example.com", "code": code})
    assert resp.status_code == 200

    resp = client.post(
        "/api/password-reset/reset-password",
        json={"email": "alice@example.com", "code": code, "newPassword": "another-pass"},
    )
    assert resp.status_code == 200
    assert client.get("/api/auth/verify", headers=_auth(old_token)).status_code == 401
    resp = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "another-pass"})
    assert resp.status_code == 200


def test_validation_errors_are_wrapped(client):
    resp = client.post("/api/auth/login", json={"email": ["not", "a", "string"], "password": "x"})
    body = resp.json()
    assert resp.status_code == 422
    assert body["success"] is False
    assert body["message"].startswith("Invalid request")
    assert body["errors"]


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["success"] is True
