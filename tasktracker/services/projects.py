"""Project operations, ownership checks and cascade deletion."""
import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from tasktracker.database import store_write
from tasktracker.errors import Forbidden, InvalidInput, NotFound
from tasktracker.models import Project, Task, TaskComment, User
from tasktracker.schemas import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


def _project_query(db: Session):
    return db.query(Project).options(selectinload(Project.owner))


def get_project(db: Session, project_id: int) -> Project:
    project = _project_query(db).filter(Project.id == project_id).first()
    if project is None:
        raise NotFound("Project not found")
    return project


def ensure_project_owner(project: Project, user: User, action: str = "modify") -> None:
    if project.owner_id != user.id:
        raise Forbidden(f"Not authorized to {action} this project")


def list_projects(db: Session, owner: User) -> List[Project]:
    return (
        _project_query(db)
        .filter(Project.owner_id == owner.id)
        .order_by(Project.created_at.desc(), Project.id.desc())
        .all()
    )


def create_project(db: Session, owner: User, project_in: ProjectCreate) -> Project:
    project = Project(name=project_in.name, description=project_in.description, owner_id=owner.id)
    with store_write(db, "create project"):
        db.add(project)
        db.flush()
        project_id = project.id

    logger.info("User %s created project %s", owner.id, project_id)
    return get_project(db, project_id)


def update_project(db: Session, project_id: int, user: User, project_update: ProjectUpdate) -> Project:
    project = get_project(db, project_id)
    ensure_project_owner(project, user, "update")

    changes = project_update.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        raise InvalidInput("Project name cannot be empty")
    if "description" in changes and changes["description"] is None:
        changes["description"] = ""

    with store_write(db, "update project"):
        for field, value in changes.items():
            setattr(project, field, value)

    return get_project(db, project_id)


def delete_project(db: Session, project_id: int, user: User) -> int:
    """Delete an owned project together with all of its tasks and their comments.

    Everything is removed in one transaction: either the project and its
    tasks are all gone, or nothing changed. Returns the number of tasks removed.
    """
    project = get_project(db, project_id)
    ensure_project_owner(project, user, "delete")

    project_task_ids = select(Task.id).where(Task.project_id == project_id)
    with store_write(db, "delete project"):
        db.execute(delete(TaskComment.__table__).where(TaskComment.task_id.in_(project_task_ids)))
        result = db.execute(delete(Task.__table__).where(Task.project_id == project_id))
        db.execute(delete(Project.__table__).where(Project.id == project_id))

    logger.info("User %s deleted project %s and %s task(s)", user.id, project_id, result.rowcount)
    return result.rowcount
