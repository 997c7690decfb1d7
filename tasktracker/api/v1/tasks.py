"""Task and task comment endpoints"""
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from tasktracker.api.v1.params import IdPath
from tasktracker.database import get_db
from tasktracker.dependencies import get_current_user
from tasktracker.models import User
from tasktracker.schemas import CommentCreate, Envelope, TaskCreate, TaskResponse, TaskUpdate, envelope
from tasktracker.services import tasks as task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=Envelope[TaskResponse], status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.create_task(db, task_in)
    return envelope(TaskResponse.model_validate(task))


@router.get("/{task_id}", response_model=Envelope[TaskResponse])
def get_task(
    task_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return envelope(TaskResponse.model_validate(task_service.get_task(db, task_id)))


@router.patch("/{task_id}", response_model=Envelope[TaskResponse])
def update_task(
    task_id: IdPath,
    task_update: Optional[TaskUpdate] = Body(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Apply a partial update and count it in ``updatesCount``.

    A missing body is an empty patch and still counts.
    """
    task = task_service.patch_task(db, task_id, task_update or TaskUpdate())
    return envelope(TaskResponse.model_validate(task))


@router.delete("/{task_id}", response_model=Envelope)
def delete_task(
    task_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task_service.delete_task(db, task_id)
    return envelope(message="Task deleted successfully")


@router.post("/{task_id}/comments", response_model=Envelope[TaskResponse], status_code=status.HTTP_201_CREATED)
def add_comment(
    task_id: IdPath,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    task = task_service.append_comment(db, task_id, current_user, comment_in.text)
    return envelope(TaskResponse.model_validate(task))


@router.delete("/{task_id}/comments/{comment_id}", response_model=Envelope[TaskResponse])
def delete_comment(
    task_id: IdPath,
    comment_id: IdPath,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a comment from a task.

    Any authenticated user may remove any comment; authorship is not checked.
    """
    task = task_service.remove_comment(db, task_id, comment_id)
    return envelope(TaskResponse.model_validate(task), message="Comment deleted successfully")
