import pytest

from staffing_system.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def users(container):
    svc = container.user_service
    first = svc.register(name="John Doe", username="john_doe", email="john@example.com", password="password123")
    second = svc.register(name="Jane Smith", username="jane_smith", email="jane@example.com", password="demo1234")
    return first, second


def test_list_users_in_id_order(container, users):
    assert [u.username for u in container.user_service.list_users()] == ["john_doe", "jane_smith"]


def test_get_unknown_user(container):
    with pytest.raises(NotFoundError, match="User not found"):
        container.user_service.get(user_id=99)


def test_get_rejects_non_numeric_id(container):
    with pytest.raises(ValidationError):
        container.user_service.get(user_id="abc")


def test_update_name_keeps_other_fields(container, users):
    john, _ = users

    updated = container.user_service.update(user_id=str(john.user_id), name="Johnny Doe")

    assert updated.name == "Johnny Doe"
    assert updated.username == "john_doe"
    assert updated.password_hash == john.password_hash


def test_update_password_rehashes(container, users):
    john, _ = users

    container.user_service.update(user_id=john.user_id, password="new-secret")

    assert container.auth_service.login("john_doe", "new-secret").user.user_id == john.user_id


def test_update_rejects_taken_username_and_email(container, users):
    john, _ = users

    with pytest.raises(ValidationError, match="Username"):
        container.user_service.update(user_id=john.user_id, username="jane_smith")
    with pytest.raises(ValidationError, match="Email"):
        container.user_service.update(user_id=john.user_id, email="JANE@example.com")


def test_update_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.user_service.update(user_id=42, name="Nobody")


def test_delete_user(container, repos, users):
    john, _ = users

    container.user_service.delete(user_id=john.user_id)

    assert repos.users.get_by_id(john.user_id) is None
    with pytest.raises(NotFoundError):
        container.user_service.delete(user_id=john.user_id)


@pytest.mark.parametrize("name", [["John"], 42])
def test_register_rejects_non_string_name(container, name):
    with pytest.raises(ValidationError, match="Name must be a string"):
        container.user_service.register(name=name, username="odd", password="password123")
