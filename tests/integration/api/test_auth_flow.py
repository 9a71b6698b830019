from jaothui.api.deps import get_rate_limiter
from jaothui.api.main import app
from jaothui.app_shell.rate_limit import RateLimiter

PASSWORD = "Buffalo#2024"


def test_auth_happy_path(client):
    resp = client.post(
        "/api/auth/register",
        json={"phone_number": "081-234-5678", "password": PASSWORD, "first_name": "สมชาย"},
    )
    assert resp.status_code == 201
    assert resp.json()["profile"]["phone_number"] == "0812345678"

    resp = client.post(
        "/api/auth/login", json={"phone_number": "0812345678", "password": PASSWORD}
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert resp.cookies.get("access_token") is not None

    # The client sends the cookie on later requests
    resp_me = client.get("/api/auth/me")
    assert resp_me.status_code == 200
    assert resp_me.json()["first_name"] == "สมชาย"
    assert "password_hash" not in resp_me.json()


def test_bearer_header_accepted(client):
    client.post("/api/auth/register", json={"phone_number": "0812345678", "password": PASSWORD})
    token = client.post(
        "/api/auth/login", json={"phone_number": "0812345678", "password": PASSWORD}
    ).json()["access_token"]
    client.cookies.clear()

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200


def test_duplicate_phone_conflict(client):
    body = {"phone_number": "0812345678", "password": PASSWORD}
    assert client.post("/api/auth/register", json=body).status_code == 201

    resp = client.post("/api/auth/register", json=body)

    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "phone_taken"


def test_weak_password_lists_rules(client):
    resp = client.post(
        "/api/auth/register", json={"phone_number": "0812345678", "password": "password"}
    )

    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["code"] == "validation_error"
    assert len(detail["details"]) == 3


def test_auth_failure(client):
    resp = client.post(
        "/api/auth/login", json={"phone_number": "0899999999", "password": PASSWORD}
    )

    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "invalid_credentials"


def test_protected_route_unauthorized(client):
    client.cookies.clear()

    resp = client.get("/api/auth/me")

    assert resp.status_code == 401


def test_garbage_token_unauthorized(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


def test_logout_clears_cookie(login_as, client):
    login_as("0812345678")

    resp = client.post("/api/auth/logout")

    assert resp.status_code == 200
    assert client.get("/api/auth/me").status_code == 401


def test_login_rate_limited(client):
    body = {"phone_number": "0812345678", "password": "Wrong#Pass1"}

    statuses = [client.post("/api/auth/login", json=body).status_code for _ in range(6)]

    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_forwarded_for_ignored_by_default(client):
    body = {"phone_number": "0812345678", "password": "Wrong#Pass1"}

    statuses = [
        client.post(
            "/api/auth/login", json=body, headers={"X-Forwarded-For": f"10.0.0.{i}"}
        ).status_code
        for i in range(20)
    ]

    assert statuses[:5] == [401] * 5
    assert set(statuses[5:]) == {429}


def test_forwarded_for_used_behind_trusted_proxy(client, rules):
    trusted = RateLimiter(rules.rate_limit.model_copy(update={"trust_forwarded_for": True}))
    app.dependency_overrides[get_rate_limiter] = lambda: trusted
    body = {"phone_number": "0812345678", "password": "Wrong#Pass1"}

    for _ in range(5):
        client.post("/api/auth/login", json=body, headers={"X-Forwarded-For": "203.0.113.7"})
    blocked = client.post(
        "/api/auth/login", json=body, headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}
    )
    other = client.post("/api/auth/login", json=body, headers={"X-Forwarded-For": "203.0.113.8"})

    assert blocked.status_code == 429
    assert other.status_code == 401
