"""Project endpoints"""
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from tasktracker.api.v1.params import IdPath
from tasktracker.database import get_db
from tasktracker.dependencies import get_current_user
from tasktracker.models import User
from tasktracker.schemas import (
    Envelope,
    ProjectCreate,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
    TaskResponse,
    envelope,
)
from tasktracker.services import projects as project_service
from tasktracker.services import summary as summary_service
from tasktracker.services import tasks as task_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=Envelope[List[ProjectResponse]])
def list_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Return the caller's projects, newest first."""
    projects = project_service.list_projects(db, current_user)
    return envelope([ProjectResponse.model_validate(project) for project in projects])


@router.post("", response_model=Envelope[ProjectResponse], status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    project = project_service.create_project(db, current_user, project_in)
    return envelope(ProjectResponse.model_validate(project))


@router.put("/{project_id}", response_model=Envelope[ProjectResponse])
def update_project(
    project_id: IdPath,
    project_update: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a project. Only the owner may do this."""
    project = project_service.update_project(db, project_id, current_user, project_update)
    return envelope(ProjectResponse.model_validate(project))


@router.delete("/{project_id}", response_model=Envelope)
def delete_project(
    project_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a project and every task in it. Only the owner may do this."""
    project_service.delete_project(db, project_id, current_user)
    return envelope(message="Project and associated tasks deleted successfully")


@router.get("/{project_id}/tasks", response_model=Envelope[List[TaskResponse]])
def list_project_tasks(
    project_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tasks = task_service.list_project_tasks(db, project_id)
    return envelope([TaskResponse.model_validate(task) for task in tasks])


@router.get("/{project_id}/summary", response_model=Envelope[ProjectSummary])
def project_summary(
    project_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Task count, status histogram, overdue count and top assignees for a project."""
    return envelope(summary_service.summarize_project(db, project_id))
