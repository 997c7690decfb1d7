"""Schemas for tasks"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from tasktracker.models.task import TaskPriority, TaskStatus
from tasktracker.schemas.comment import CommentResponse
from tasktracker.schemas.common import ApiModel, NameStr, RecordId, TrimmedStr, UtcDateTime
from tasktracker.schemas.user import UserSummary


class ProjectRef(ApiModel):
    id: int
    name: str


class TaskCreate(ApiModel):
    title: NameStr
    description: TrimmedStr = ""
    project_id: RecordId
    assignee_id: Optional[RecordId] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[datetime] = None


class TaskUpdate(ApiModel):
    """Partial update: only the fields present in the request are written."""

    title: Optional[NameStr] = None
    description: Optional[TrimmedStr] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[RecordId] = None
    due_date: Optional[datetime] = None

    @model_validator(mode="after")
    def _reject_null_for_required_fields(self):
        for name in ("title", "description", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TaskResponse(ApiModel):
    id: int
    title: str
    description: str
    project_id: int
    project: Optional[ProjectRef] = None
    assignee_id: Optional[int] = None
    assignee: Optional[UserSummary] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[UtcDateTime] = None
    updates_count: int
    comments: List[CommentResponse] = Field(default_factory=list)
    created_at: UtcDateTime
    updated_at: UtcDateTime
