# tests/test_task_service.py

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from taskmaster.errors import InternalError, NotFound, ValidationError
from taskmaster.models import Task, TaskPriority, TaskStatus, User
from taskmaster.schemas.task import TaskResponse, TaskUpdate
from taskmaster.services.task_service import TaskService

from .fakes import FailingSession


def snapshot(task: Task) -> dict:
    return TaskResponse.model_validate(task).model_dump()


def test_create_applies_defaults(task_service: TaskService, users: tuple[User, User]) -> None:
    alice, _ = users

    task = task_service.create(alice.id, "buy milk")

    assert task.id is not None
    assert task.user_id == alice.id
    assert task.title == "buy milk"
    assert task.description is None
    assert task.category is None
    assert task.priority == TaskPriority.MEDIUM.value
    assert task.status == TaskStatus.TODO.value
    assert task.ai_analyzed is False
    assert task.suggested_deadline is None
    assert task.actual_deadline is None
    assert task.created_at == task.updated_at


@pytest.mark.parametrize("title", [None, "", "   "])
def test_create_requires_title(
    task_service: TaskService, users: tuple[User, User], title: str | None
) -> None:
    with pytest.raises(ValidationError):
        task_service.create(users[0].id, title)


def test_create_rejects_overlong_title(task_service: TaskService, users: tuple[User, User]) -> None:
    with pytest.raises(ValidationError):
        task_service.create(users[0].id, "x" * 256)


def test_create_then_get_round_trip(task_service: TaskService, users: tuple[User, User]) -> None:
    alice, _ = users
    created = snapshot(task_service.create(alice.id, "write report", "quarterly numbers"))

    fetched = snapshot(task_service.get(alice.id, created["id"]))

    assert fetched == created


def test_list_is_newest_first_and_filters_by_status(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, bob = users
    first = task_service.create(alice.id, "first")
    second = task_service.create(alice.id, "second")
    third = task_service.create(alice.id, "third")
    task_service.create(bob.id, "bob's task")
    task_service.update(alice.id, second.id, TaskUpdate(status=TaskStatus.DONE))

    everything = task_service.list(alice.id)
    done = task_service.list(alice.id, TaskStatus.DONE)
    todo = task_service.list(alice.id, TaskStatus.TODO)

    assert [t.id for t in everything] == [third.id, second.id, first.id]
    assert [t.id for t in done] == [second.id]
    assert [t.id for t in todo] == [third.id, first.id]
    assert task_service.list(alice.id, TaskStatus.IN_PROGRESS) == []


def test_list_for_owner_without_tasks_is_empty(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, bob = users
    task_service.create(alice.id, "only alice")

    assert task_service.list(bob.id) == []


def test_get_hides_other_owners_tasks(task_service: TaskService, users: tuple[User, User]) -> None:
    alice, bob = users
    task = task_service.create(bob.id, "private")

    with pytest.raises(NotFound) as foreign:
        task_service.get(alice.id, task.id)
    with pytest.raises(NotFound) as missing:
        task_service.get(alice.id, 9999)

    assert foreign.value.message == missing.value.message


def test_update_status_only_changes_status_and_updated_at(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, _ = users
    task = task_service.create(alice.id, "buy milk", "2 litres")
    before = snapshot(task)

    updated = snapshot(task_service.update(alice.id, task.id, TaskUpdate(status=TaskStatus.DONE)))

    assert updated["status"] == TaskStatus.DONE
    assert updated["updated_at"] > before["updated_at"]
    for field in ("title", "description", "category", "priority", "created_at", "user_id"):
        assert updated[field] == before[field]


def test_update_several_fields(task_service: TaskService, users: tuple[User, User]) -> None:
    alice, _ = users
    task = task_service.create(alice.id, "draft")

    patch = TaskUpdate(
        title="final",
        category="work",
        priority=TaskPriority.HIGH,
        status=TaskStatus.IN_PROGRESS,
    )
    updated = task_service.update(alice.id, task.id, patch)

    assert updated.title == "final"
    assert updated.category == "work"
    assert updated.priority == "HIGH"
    assert updated.status == "IN_PROGRESS"
    assert updated.description is None


def test_update_explicit_null_clears_optional_fields(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, _ = users
    task = task_service.create(alice.id, "call mum", "sunday")
    task_service.update(alice.id, task.id, TaskUpdate(category="family"))

    updated = task_service.update(alice.id, task.id, TaskUpdate(description=None, category=None))

    assert updated.description is None
    assert updated.category is None
    assert updated.title == "call mum"


@pytest.mark.parametrize(
    "patch",
    [
        TaskUpdate(),
        TaskUpdate.model_validate({"unknown": "field"}),
        TaskUpdate(title=None),
        TaskUpdate(title="  "),
        TaskUpdate(priority=None),
        TaskUpdate(status=None),
        TaskUpdate(category="c" * 101),
    ],
)
def test_update_rejects_invalid_patches(
    task_service: TaskService, users: tuple[User, User], patch: TaskUpdate
) -> None:
    alice, _ = users
    task = task_service.create(alice.id, "keep me")

    with pytest.raises(ValidationError):
        task_service.update(alice.id, task.id, patch)

    assert task_service.get(alice.id, task.id).title == "keep me"


def test_update_other_owners_task_is_not_found(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, bob = users
    task = task_service.create(bob.id, "bob's")

    with pytest.raises(NotFound):
        task_service.update(alice.id, task.id, TaskUpdate(title="hijacked"))
    with pytest.raises(NotFound):
        task_service.update(alice.id, 9999, TaskUpdate(title="nothing"))

    assert task_service.get(bob.id, task.id).title == "bob's"


def test_delete_is_idempotent(task_service: TaskService, users: tuple[User, User]) -> None:
    alice, _ = users
    task = task_service.create(alice.id, "temporary")

    assert task_service.delete(alice.id, task.id) is True
    with pytest.raises(NotFound):
        task_service.get(alice.id, task.id)
    assert task_service.delete(alice.id, task.id) is True
    assert task_service.delete(alice.id, 9999) is True


def test_delete_never_removes_other_owners_task(
    task_service: TaskService, users: tuple[User, User]
) -> None:
    alice, bob = users
    task = task_service.create(bob.id, "bob's")

    assert task_service.delete(alice.id, task.id) is True
    assert task_service.get(bob.id, task.id).id == task.id


def test_create_for_unknown_owner_is_internal_error(task_service: TaskService, session: Session) -> None:
    # Foreign keys are enforced, so an owner id without a user row cannot be stored
    with pytest.raises(InternalError):
        task_service.create(12345, "orphan")

    assert session.get(Task, 1) is None


@pytest.mark.parametrize(
    "call",
    [
        lambda s: s.create(1, "x"),
        lambda s: s.list(1),
        lambda s: s.get(1, 1),
        lambda s: s.update(1, 1, TaskUpdate(title="y")),
        lambda s: s.delete(1, 1),
    ],
)
def test_storage_failures_surface_as_internal_error(call) -> None:
    service = TaskService(FailingSession(OperationalError("SQL", {}, Exception("db down"))))

    with pytest.raises(InternalError) as exc_info:
        call(service)

    assert "db down" not in exc_info.value.message
