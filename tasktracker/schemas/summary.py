"""Schemas for the project summary"""
from typing import List

from pydantic import Field

from tasktracker.schemas.common import ApiModel


class TasksByStatus(ApiModel):
    todo: int = 0
    inprogress: int = 0
    done: int = 0


class AssigneeCount(ApiModel):
    id: int
    username: str
    email: str
    task_count: int


class ProjectSummary(ApiModel):
    total_tasks: int = 0
    tasks_by_status: TasksByStatus = Field(default_factory=TasksByStatus)
    overdue_tasks: int = 0
    top_assignees: List[AssigneeCount] = Field(default_factory=list)
