"""
Pydantic schemas for request/response validation
"""
from tasktracker.schemas.common import Envelope, envelope
from tasktracker.schemas.user import AuthPayload, UserLogin, UserRegister, UserResponse, UserSummary
from tasktracker.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate
from tasktracker.schemas.comment import CommentCreate, CommentResponse
from tasktracker.schemas.task import ProjectRef, TaskCreate, TaskResponse, TaskUpdate
from tasktracker.schemas.summary import AssigneeCount, ProjectSummary, TasksByStatus

__all__ = [
    "Envelope",
    "envelope",
    "AuthPayload",
    "UserLogin",
    "UserRegister",
    "UserResponse",
    "UserSummary",
    "ProjectCreate",
    "ProjectResponse",
    "ProjectUpdate",
    "CommentCreate",
    "CommentResponse",
    "ProjectRef",
    "TaskCreate",
    "TaskResponse",
    "TaskUpdate",
    "AssigneeCount",
    "ProjectSummary",
    "TasksByStatus",
]
