"""Registration, login and authentication gate tests."""

import inspect
from datetime import UTC, datetime, timedelta

from jose import jwt

from postboard.api import account, auth, posts
from postboard.models.user import User
from postboard.services.auth import create_access_token


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client, db):
    """Test user registration stores a hashed password."""
    response = client.post(
        "/register",
        json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    assert "message" in response.json()

    user = db.query(User).filter(User.email == "newuser@example.com").one()
    assert user.name == "New User"
    assert user.password_hash != "password123"


def test_register_and_login_scenario(client, db):
    """Test duplicate registration and login outcomes for one account."""
    response = client.post("/register", json={"email": "a@x.com", "password": "pw", "name": "Al"})
    assert response.status_code == 201

    response = client.post(
        "/register", json={"email": "a@x.com", "password": "pw2", "name": "Al2"}
    )
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"]
    assert db.query(User).filter(User.email == "a@x.com").count() == 1

    response = client.post("/login", json={"email": "a@x.com", "password": "pw"})
    assert response.status_code == 200
    assert response.json()["token"]

    response = client.post("/login", json={"email": "a@x.com", "password": "wrong"})
    assert response.status_code == 401


def test_register_missing_field(client):
    """Test registration without a password is rejected."""
    response = client.post("/register", json={"email": "x@example.com", "name": "X"})
    assert response.status_code == 400


def test_register_invalid_email(client):
    """Test registration with a malformed email is rejected."""
    response = client.post(
        "/register", json={"email": "not-an-email", "password": "pw", "name": "X"}
    )
    assert response.status_code == 400


def test_login_unknown_user(client):
    """Test login for an email that was never registered."""
    response = client.post("/login", json={"email": "nobody@example.com", "password": "pw"})
    assert response.status_code == 404


def test_login_token_is_accepted(client, auth_headers):
    """Test the issued token passes the authentication gate."""
    response = client.get("/account", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email


def test_login_token_claims(client, auth_headers, settings, db):
    """Test the token carries the user's id and email and a 20 hour lifetime."""
    token = auth_headers["Authorization"].split(" ")[1]
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])

    user = db.query(User).filter(User.email == auth_headers.email).one()
    assert payload["sub"] == str(user.id)
    assert payload["email"] == auth_headers.email
    assert payload["exp"] - payload["iat"] == 20 * 60 * 60


def test_missing_token(client):
    """Test protected endpoints reject requests without a token."""
    response = client.get("/api/posts")
    assert response.status_code == 401


def test_non_bearer_scheme(client):
    """Test a non-bearer authorization header counts as missing."""
    response = client.get("/account", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401


def test_invalid_token(client):
    """Test a malformed token is forbidden."""
    response = client.get("/api/posts", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 403


def test_token_signed_with_other_secret(client, auth_headers, settings, db):
    """Test a token signed with a different secret is forbidden."""
    user = db.query(User).filter(User.email == auth_headers.email).one()
    forged_settings = settings.model_copy(update={"jwt_secret": "other-secret"})
    token = create_access_token(user.id, user.email, forged_settings)

    response = client.get("/account", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_token_within_lifetime(client, auth_headers, settings, db):
    """Test a token issued 19 hours ago is still accepted."""
    user = db.query(User).filter(User.email == auth_headers.email).one()
    issued_at = datetime.now(UTC) - timedelta(hours=19)
    token = create_access_token(user.id, user.email, settings, issued_at=issued_at)

    response = client.get("/account", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_expired_token(client, auth_headers, settings, db):
    """Test a token issued 21 hours ago is rejected as expired."""
    user = db.query(User).filter(User.email == auth_headers.email).one()
    issued_at = datetime.now(UTC) - timedelta(hours=21)
    token = create_access_token(user.id, user.email, settings, issued_at=issued_at)

    response = client.get("/account", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403


def test_logout(client, auth_headers):
    """Test logout acknowledges without invalidating the token server-side."""
    response = client.post("/logout", headers=auth_headers)
    assert response.status_code == 200

    # Tokens are stateless; the client is responsible for discarding it
    response = client.get("/account", headers=auth_headers)
    assert response.status_code == 200


def test_login_with_non_email_string(client):
    """Test login looks up any string and reports an unknown user as not found."""
    response = client.post("/login", json={"email": "not-an-email", "password": "pw"})
    assert response.status_code == 404


def test_blocking_endpoints_run_in_threadpool():
    """Test endpoints doing bcrypt or database work without awaiting are plain functions.

    FastAPI runs plain functions in its threadpool, so they never hold up the event loop.
    """
    blocking_endpoints = [
        auth.register,
        auth.login,
        auth.logout,
        posts.list_posts,
        posts.update_post,
        posts.delete_post,
        account.get_account,
    ]
    for endpoint in blocking_endpoints:
        assert not inspect.iscoroutinefunction(endpoint), endpoint.__name__
