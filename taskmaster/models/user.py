"""User model for SQLModel."""
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from taskmaster.models.types import UTCDateTime
from taskmaster.utils.clock import utcnow

if TYPE_CHECKING:
    from taskmaster.models.task import Task


class User(SQLModel, table=True):
    """Registered account. Created by registration only; never updated or deleted."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=255)
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime(), nullable=False)
    )

    # Relationships
    tasks: List["Task"] = Relationship(back_populates="user")
