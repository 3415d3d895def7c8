from datetime import UTC, datetime, timedelta

from portfolio_generator.app.core.sessions import (
    InMemorySessionStore,
    get_session_store,
)

EMAIL = "user@example.com"
PASSWORD = "correct-horse-battery"


def test_register_success(client, session_store):
    response = client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Registration successful"}
    assert "session_id" in response.cookies
    assert len(session_store) == 1


def test_register_logs_in(client):
    client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})

    response = client.get("/api/check-auth")

    body = response.json()
    assert body["authenticated"] is True
    assert isinstance(body["userId"], int)


def test_register_missing_fields(client):
    for payload in ({}, {"email": EMAIL}, {"password": PASSWORD}, {"email": "", "password": PASSWORD}):
        response = client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Email and password are required",
        }


def test_register_without_body(client):
    response = client.post("/api/register")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_register_duplicate_email(client):
    client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})

    response = client.post("/api/register", json={"email": EMAIL, "password": "other"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Email already exists"}


def test_login_success(client):
    client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
    client.post("/api/logout")

    response = client.post("/api/login", json={"email": EMAIL, "password": PASSWORD})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Login successful"}
    assert client.get("/api/check-auth").json()["authenticated"] is True


def test_login_failures_are_indistinguishable(client):
    client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
    client.post("/api/logout")

    wrong_password = client.post("/api/login", json={"email": EMAIL, "password": "nope"})
    unknown_email = client.post(
        "/api/login",
        json={"email": "nobody@example.com", "password": PASSWORD},
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {
        "success": False,
        "error": "Invalid credentials",
    }
    assert "session_id" not in wrong_password.cookies


def test_login_missing_fields(client):
    response = client.post("/api/login", json={"email": EMAIL})

    assert response.status_code == 400
    assert response.json()["error"] == "Email and password are required"


def test_logout_invalidates_session(auth_client, session_store):
    session_id = auth_client.cookies["session_id"]

    response = auth_client.post("/api/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}
    assert session_store.get(session_id) is None
    assert auth_client.get("/api/check-auth").json() == {"authenticated": False}
    assert auth_client.get("/api/portfolio").status_code == 401


def test_logout_without_session(client):
    response = client.post("/api/logout")

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_check_auth_unauthenticated(client):
    response = client.get("/api/check-auth")

    assert response.status_code == 200
    assert response.json() == {"authenticated": False}


def test_session_expires_after_a_day(app, client):
    now = [datetime(2024, 1, 1, tzinfo=UTC)]
    store = InMemorySessionStore(lifetime=timedelta(hours=24), clock=lambda: now[0])
    app.dependency_overrides[get_session_store] = lambda: store
    client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})

    now[0] += timedelta(hours=23)
    assert client.get("/api/check-auth").json()["authenticated"] is True

    now[0] += timedelta(hours=1)
    assert client.get("/api/check-auth").json() == {"authenticated": False}
    assert client.get("/api/portfolio").status_code == 401


def test_register_blank_credentials(client, session_store):
    """Whitespace-only fields are treated as missing, not as a server error."""
    for payload in (
        {"email": "   ", "password": PASSWORD},
        {"email": EMAIL, "password": "   "},
    ):
        response = client.post("/api/register", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Email and password are required",
        }
    assert len(session_store) == 0


def test_register_trims_email(client):
    client.post("/api/register", json={"email": f"  {EMAIL} ", "password": PASSWORD})
    client.post("/api/logout")

    response = client.post("/api/login", json={"email": EMAIL, "password": PASSWORD})

    assert response.status_code == 200


def test_login_blank_email(client):
    response = client.post("/api/login", json={"email": "  ", "password": PASSWORD})

    assert response.status_code == 400
    assert response.json()["error"] == "Email and password are required"


def test_register_and_login_with_longest_accepted_password(client):
    password = "é" * 36  # 72 bytes in UTF-8
    register = client.post("/api/register", json={"email": EMAIL, "password": password})
    client.post("/api/logout")

    login = client.post("/api/login", json={"email": EMAIL, "password": password})

    assert register.status_code == 200
    assert login.status_code == 200


def test_overlong_password_rejected(client, session_store):
    password = "p" * 80
    register = client.post("/api/register", json={"email": EMAIL, "password": password})
    login = client.post("/api/login", json={"email": EMAIL, "password": password})

    for response in (register, login):
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Password must be at most 72 bytes",
        }
    assert len(session_store) == 0
    # Nothing was registered, so the email is still free.
    retry = client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
    assert retry.status_code == 200
