"""Task model for SQLModel."""
from enum import Enum
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, Text
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from taskmaster.models.types import UTCDateTime
from taskmaster.utils.clock import utcnow

if TYPE_CHECKING:
    from taskmaster.models.user import User

TITLE_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class Task(SQLModel, table=True):
    """A task owned by exactly one user."""

    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    category: Optional[str] = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    # Stored as plain strings; values are checked against the enums at the API boundary
    priority: str = Field(default=TaskPriority.MEDIUM.value, max_length=50)
    status: str = Field(default=TaskStatus.TODO.value, max_length=50)
    suggested_deadline: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime()))
    actual_deadline: Optional[datetime] = Field(default=None, sa_column=Column(UTCDateTime()))
    ai_analyzed: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False)
    )

    # Relationships
    user: Optional["User"] = Relationship(back_populates="tasks")
