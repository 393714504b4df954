"""Task service: CRUD scoped to the authenticated owner."""
from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from typing import Callable, List, Optional
from datetime import datetime

from taskmaster.errors import InternalError, NotFound, ValidationError
from taskmaster.models.task import (
    CATEGORY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Task,
    TaskPriority,
    TaskStatus,
)
from taskmaster.schemas.task import TaskUpdate
from taskmaster.utils.clock import utcnow
from taskmaster.utils.logger import get_logger

logger = get_logger(__name__)


def _check_title(title: Optional[str]) -> None:
    if title is None or not title.strip():
        raise ValidationError("Title required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Title must be at most {TITLE_MAX_LENGTH} characters")


def _check_changes(changes: dict) -> None:
    if not changes:
        raise ValidationError("No updates provided")
    if "title" in changes:
        _check_title(changes["title"])
    category = changes.get("category")
    if category is not None and len(category) > CATEGORY_MAX_LENGTH:
        raise ValidationError(f"Category must be at most {CATEGORY_MAX_LENGTH} characters")
    for field in ("priority", "status"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field.capitalize()} cannot be null")


class TaskService:
    """
    Service class for task CRUD operations.

    Every query filters on the owner's id, so a task owned by someone
    else behaves exactly like a task that does not exist.
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    def create(self, owner_id: int, title: Optional[str], description: Optional[str] = None) -> Task:
        """Create a new task with default priority and status."""
        _check_title(title)

        now = self.clock()
        task = Task(
            user_id=owner_id,
            title=title,
            description=description,
            priority=TaskPriority.MEDIUM.value,
            status=TaskStatus.TODO.value,
            ai_analyzed=False,
            created_at=now,
            updated_at=now,
        )

        try:
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Task creation failed", user_id=owner_id)
            raise InternalError("Task creation failed")

        logger.info("Task created", task_id=task.id, user_id=owner_id)
        return task

    def list(self, owner_id: int, status: Optional[TaskStatus] = None) -> List[Task]:
        """All of the owner's tasks, newest first, optionally filtered by exact status."""
        statement = select(Task).where(Task.user_id == owner_id)
        if status is not None:
            statement = statement.where(Task.status == TaskStatus(status).value)
        statement = statement.order_by(Task.created_at.desc(), Task.id.desc())

        try:
            return list(self.session.exec(statement).all())
        except SQLAlchemyError:
            logger.exception("Failed to fetch tasks", user_id=owner_id)
            raise InternalError("Failed to fetch tasks")

    def get(self, owner_id: int, task_id: int) -> Task:
        """
        Get a task by id.

        Raises:
            NotFound: If the task does not exist or belongs to another user
        """
        statement = (
            select(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == owner_id)
        )
        try:
            task = self.session.exec(statement).first()
        except SQLAlchemyError:
            logger.exception("Failed to fetch task", task_id=task_id, user_id=owner_id)
            raise InternalError("Failed to fetch task")

        if task is None:
            raise NotFound("Task not found")
        return task

    def update(self, owner_id: int, task_id: int, patch: TaskUpdate) -> Task:
        """
        Apply a sparse patch and bump ``updated_at``.

        The ownership check and the mutation are one UPDATE statement.

        Raises:
            ValidationError: If the patch is empty or sets a required field to nothing
            NotFound: If no task with this id belongs to the owner
        """
        changes = patch.changes()
        _check_changes(changes)
        changes["updated_at"] = self.clock()

        statement = (
            update(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == owner_id)
            .values(**changes)
        )
        try:
            result = self.session.connection().execute(statement)
            if result.rowcount == 0:
                self.session.rollback()
                raise NotFound("Task not found")
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Update failed", task_id=task_id, user_id=owner_id)
            raise InternalError("Update failed")

        logger.info("Task updated", task_id=task_id, user_id=owner_id, fields=sorted(changes))
        return self.get(owner_id, task_id)

    def delete(self, owner_id: int, task_id: int) -> bool:
        """
        Delete a task owned by the caller.

        Succeeds whether or not a row matched, so repeating a delete is
        harmless.
        """
        statement = (
            delete(Task)
            .where(Task.id == task_id)
            .where(Task.user_id == owner_id)
        )
        try:
            result = self.session.connection().execute(statement)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Delete failed", task_id=task_id, user_id=owner_id)
            raise InternalError("Delete failed")

        if result.rowcount:
            logger.info("Task deleted", task_id=task_id, user_id=owner_id)
        else:
            logger.debug("Delete matched no task", task_id=task_id, user_id=owner_id)
        return True
