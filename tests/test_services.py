"""Service layer tests (no HTTP)."""

import base64

import pytest

from src.errors import (
    AuthenticationRequired,
    ConflictError,
    Forbidden,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
    ValidationError,
)
from src.models.enums import TaskStatus
from src.services import tasks as task_service
from src.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    get_password_hash,
    issue_token,
    parse_basic_credentials,
    resolve_token_user_id,
    verify_password,
)


def encode(raw: str) -> str:
    return "Basic " + base64.b64encode(raw.encode()).decode()


def test_password_hash_round_trip():
    """Test that hashes are salted and verifiable."""
    first = get_password_hash("password123")
    second = get_password_hash("password123")
    assert first != second
    assert verify_password("password123", first)
    assert not verify_password("password124", first)


def test_access_token_round_trip():
    """Test that a token resolves back to its user id."""
    assert resolve_token_user_id(create_access_token(42)) == 42


def test_resolve_token_rejects_garbage():
    with pytest.raises(InvalidOrExpiredToken):
        resolve_token_user_id("garbage")


@pytest.mark.parametrize(
    "header",
    [None, "", "Bearer abc", "Digest realm=x"],
)
def test_parse_basic_credentials_requires_basic_scheme(header):
    with pytest.raises(AuthenticationRequired) as exc_info:
        parse_basic_credentials(header)
    assert exc_info.value.scheme == "Basic"


def test_parse_basic_credentials():
    """Test splitting on the first colon only."""
    assert parse_basic_credentials(encode("a@b.com:pa:ss")) == ("a@b.com", "pa:ss")
    assert parse_basic_credentials(encode("a@b.com:")) == ("a@b.com", "")


@pytest.mark.parametrize("header", ["Basic %%%", encode("no-separator"), encode(":password")])
def test_parse_basic_credentials_malformed(header):
    with pytest.raises(InvalidCredentials):
        parse_basic_credentials(header)


def test_create_user_conflict(db):
    """Test that a second registration of the same email is refused."""
    create_user(db, "dup@example.com", "password123")
    with pytest.raises(ConflictError):
        create_user(db, "dup@example.com", "password456")


def test_authenticate_user(db):
    user = create_user(db, "auth@example.com", "password123")
    assert authenticate_user(db, "auth@example.com", "password123").id == user.id
    assert authenticate_user(db, "auth@example.com", "wrong-password") is None
    assert authenticate_user(db, "missing@example.com", "password123") is None


def test_issue_token(db):
    user = create_user(db, "issue@example.com", "password123")
    token = issue_token(db, encode("issue@example.com:password123"))
    assert resolve_token_user_id(token) == user.id

    with pytest.raises(InvalidCredentials):
        issue_token(db, encode("issue@example.com:nope"))


def test_validate_task_create_defaults():
    task_data = task_service.validate_task_create({"title": "  Buy milk  "})
    assert task_data.title == "Buy milk"
    assert task_data.description is None
    assert task_data.status is TaskStatus.TODO
    assert task_data.is_archived is False


def test_validate_task_create_collects_errors():
    with pytest.raises(ValidationError) as exc_info:
        task_service.validate_task_create({"title": "", "status": "nope"})
    fields = {error["field"] for error in exc_info.value.errors}
    assert fields == {"title", "status"}


def test_validate_task_update_keeps_only_supplied_fields():
    """Test the distinction between omitted fields and explicit nulls."""
    assert task_service.validate_task_update({"status": "DONE"}) == {"status": TaskStatus.DONE}
    assert task_service.validate_task_update({"description": None}) == {"description": None}
    assert task_service.validate_task_update({}) == {}


def test_update_task_checks_existence_then_ownership(db):
    owner = create_user(db, "owner@example.com", "password123")
    intruder = create_user(db, "intruder@example.com", "password123")
    task = task_service.create_task(
        db, owner.id, task_service.validate_task_create({"title": "Mine"})
    )

    with pytest.raises(NotFound):
        task_service.update_task(db, owner.id, task.id + 1000, {"status": "bogus"})
    with pytest.raises(Forbidden):
        task_service.update_task(db, intruder.id, task.id, {"status": "bogus"})
    with pytest.raises(ValidationError):
        task_service.update_task(db, owner.id, task.id, {"status": "bogus"})

    updated = task_service.update_task(db, owner.id, task.id, {"isArchived": True})
    assert updated.is_archived is True
    assert updated.title == "Mine"
    assert updated.status is TaskStatus.TODO


def test_list_tasks_scoped_to_owner(db):
    alice = create_user(db, "alice@example.com", "password123")
    bob = create_user(db, "bob@example.com", "password123")
    for title in ["One", "Two"]:
        task_service.create_task(db, alice.id, task_service.validate_task_create({"title": title}))
    task_service.create_task(db, bob.id, task_service.validate_task_create({"title": "Bob's"}))

    assert [task.title for task in task_service.list_tasks(db, alice.id)] == ["Two", "One"]
    assert [task.title for task in task_service.list_tasks(db, bob.id)] == ["Bob's"]


def test_get_task_out_of_range_id(db):
    assert task_service.get_task(db, task_service.MAX_TASK_ID + 1) is None
    assert task_service.get_task(db, 10**20) is None
    assert task_service.get_task(db, 0) is None
