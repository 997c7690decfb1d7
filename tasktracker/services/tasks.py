"""Task mutation engine.

Patch, comment append and comment removal are each issued as a single SQL
statement so the store applies them atomically; none of them is a
read-modify-write performed in Python.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, insert, literal, select, update
from sqlalchemy.orm import Session, selectinload

from tasktracker.database import store_write
from tasktracker.errors import InvalidInput, NotFound
from tasktracker.models import Project, Task, TaskComment, User
from tasktracker.schemas import TaskCreate, TaskUpdate
from tasktracker.utils.timestamps import to_naive_utc, utc_now

logger = logging.getLogger(__name__)


def _task_query(db: Session):
    return db.query(Task).options(
        selectinload(Task.assignee),
        selectinload(Task.project),
        selectinload(Task.comments).selectinload(TaskComment.author),
    )


def load_task(db: Session, task_id: int) -> Optional[Task]:
    return _task_query(db).filter(Task.id == task_id).first()


def get_task(db: Session, task_id: int) -> Task:
    task = load_task(db, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


def _project_exists(db: Session, project_id: int) -> bool:
    return db.query(Project.id).filter(Project.id == project_id).first() is not None


def list_project_tasks(db: Session, project_id: int) -> List[Task]:
    """Return a project's tasks, newest first."""
    if not _project_exists(db, project_id):
        raise NotFound("Project not found")

    return (
        _task_query(db)
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


def create_task(db: Session, task_in: TaskCreate) -> Task:
    if not _project_exists(db, task_in.project_id):
        raise NotFound("Project not found")

    task = Task(
        title=task_in.title,
        description=task_in.description,
        project_id=task_in.project_id,
        assignee_id=task_in.assignee_id,
        status=task_in.status,
        priority=task_in.priority,
        due_date=to_naive_utc(task_in.due_date),
    )
    with store_write(db, "create task"):
        db.add(task)
        db.flush()
        task_id = task.id

    logger.info("Created task %s in project %s", task_id, task_in.project_id)
    return get_task(db, task_id)


def patch_task(db: Session, task_id: int, task_update: TaskUpdate) -> Task:
    """Write the fields present in ``task_update`` and bump ``updates_count``.

    Both happen in one UPDATE statement. An update carrying no fields still
    increments the counter.
    """
    changes = task_update.changes()
    if "due_date" in changes:
        changes["due_date"] = to_naive_utc(changes["due_date"])

    stmt = (
        update(Task)
        .where(Task.id == task_id)
        .values(**changes, updates_count=Task.updates_count + 1, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    with store_write(db, "update task"):
        result = db.execute(stmt)
        if result.rowcount == 0:
            raise NotFound("Task not found")

    logger.debug("Patched task %s fields=%s", task_id, sorted(changes))
    return get_task(db, task_id)


def append_comment(db: Session, task_id: int, author: User, text: Optional[str]) -> Task:
    """Push a comment onto the end of a task's thread.

    The INSERT selects from ``tasks`` so a missing task inserts nothing and is
    reported as NotFound from the same statement.
    """
    text = (text or "").strip()
    if not text:
        raise InvalidInput("Comment text is required")

    comments = TaskComment.__table__
    source = select(
        Task.id,
        literal(author.id),
        literal(text),
        literal(utc_now()),
    ).where(Task.id == task_id)
    stmt = insert(comments).from_select(
        [comments.c.task_id, comments.c.author_id, comments.c.text, comments.c.created_at],
        source,
    )
    with store_write(db, "add comment"):
        result = db.execute(stmt)
        if result.rowcount == 0:
            raise NotFound("Task not found")

    logger.debug("User %s commented on task %s", author.id, task_id)
    return get_task(db, task_id)


def remove_comment(db: Session, task_id: int, comment_id: int) -> Task:
    """Pull the comment with ``comment_id`` from a task's thread.

    Removing a comment that is not there is a no-op.
    """
    comments = TaskComment.__table__
    stmt = delete(comments).where(comments.c.task_id == task_id, comments.c.id == comment_id)
    with store_write(db, "delete comment"):
        result = db.execute(stmt)

    task = get_task(db, task_id)
    logger.debug("Removed %s comment(s) with id %s from task %s", result.rowcount, comment_id, task_id)
    return task


def delete_task(db: Session, task_id: int) -> None:
    task = get_task(db, task_id)
    with store_write(db, "delete task"):
        db.delete(task)
    logger.info("Deleted task %s", task_id)
