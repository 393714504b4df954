"""SQLModel table models."""
from taskmaster.models.user import User
from taskmaster.models.task import Task, TaskPriority, TaskStatus

__all__ = ["User", "Task", "TaskPriority", "TaskStatus"]
