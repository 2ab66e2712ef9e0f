from datetime import datetime, timedelta, timezone

import jwt
import pytest

from staffing_system.core.exceptions import AuthenticationError, ValidationError
from staffing_system.users.service import AuthService


@pytest.fixture
def user(container):
    return container.user_service.register(
        name="John Doe", username="john_doe", email="John@Example.com", password="password123"
    )


def test_register_hashes_password(user, repos):
    stored = repos.users.get_by_id(user.user_id)

    assert stored.password_hash != "password123"
    assert stored.email == "john@example.com"
    assert "password_hash" not in user.as_dict()


def test_register_rejects_duplicates(container, user):
    with pytest.raises(ValidationError, match="Username"):
        container.user_service.register(name="Other", username="john_doe", password="secret1")
    with pytest.raises(ValidationError, match="Email"):
        container.user_service.register(name="Other", username="other", email="john@example.com", password="secret1")


def test_register_requires_password_length(container):
    with pytest.raises(ValidationError):
        container.user_service.register(name="Short", username="short", password="12345")


def test_login_returns_token_for_user(container, user):
    result = container.auth_service.login("john_doe", "password123")

    assert result.user == user
    assert container.auth_service.verify_token(result.token) == user


def test_login_by_email(container, user):
    assert container.auth_service.login("john@example.com", "password123").user == user


@pytest.mark.parametrize("username, password", [("john_doe", "wrong-pass"), ("nobody", "password123")])
def test_bad_credentials(container, user, username, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        container.auth_service.login(username, password)


def test_token_carries_subject_and_thirty_day_expiry(container, user):
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    token = container.auth_service.issue_token(user, now=now)

    payload = jwt.decode(token, options={"verify_signature": False})

    assert payload["sub"] == str(user.user_id)
    assert payload["exp"] - payload["iat"] == int(timedelta(days=30).total_seconds())


def test_expired_token(container, user):
    token = container.auth_service.issue_token(user, now=datetime.now(timezone.utc) - timedelta(days=31))

    with pytest.raises(AuthenticationError, match="expired"):
        container.auth_service.verify_token(token)


def test_token_signed_with_another_secret(repos, user):
    foreign = AuthService(repos.users, secret="someone-else-entirely-0123456789abcdef")

    with pytest.raises(AuthenticationError):
        AuthService(repos.users, secret="staffing-test-jwt-secret-0123456789abcdef").verify_token(foreign.issue_token(user))


def test_token_for_deleted_user(container, repos, user):
    token = container.auth_service.issue_token(user)
    repos.users.rows.clear()

    with pytest.raises(AuthenticationError, match="User not found"):
        container.auth_service.verify_token(token)
