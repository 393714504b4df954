"""Task schemas."""
from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional

from taskmaster.models.task import TaskPriority, TaskStatus


class TaskCreate(BaseModel):
    """Schema for creating a task. Title presence is checked by the task service."""
    title: Optional[str] = None
    description: Optional[str] = None


class TaskUpdate(BaseModel):
    """
    Sparse patch for a task.

    Only keys present in the request are applied; a key that is absent
    leaves the stored value untouched. Unknown keys are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None

    def changes(self) -> dict:
        """Fields explicitly present in the patch, with enums reduced to their values."""
        values = self.model_dump(exclude_unset=True)
        return {
            key: value.value if isinstance(value, (TaskPriority, TaskStatus)) else value
            for key, value in values.items()
        }


class TaskResponse(BaseModel):
    """Schema for task API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    suggested_deadline: Optional[datetime] = None
    actual_deadline: Optional[datetime] = None
    ai_analyzed: bool
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]
    total: int


class DeleteResponse(BaseModel):
    success: bool
