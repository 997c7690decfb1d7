"""Populate the database with sample users, projects, tasks and comments.

Run with ``python -m tasktracker.seed``. Existing data is dropped first.
"""
import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from tasktracker.config import settings
from tasktracker.database import Base, SessionLocal, engine
from tasktracker.logging_setup import setup_logging
from tasktracker.models import Project, Task, TaskPriority, TaskStatus, User
from tasktracker.security import get_password_hash
from tasktracker.services.tasks import append_comment
from tasktracker.utils.timestamps import utc_now

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "password123"


def seed(db: Session) -> dict:
    """Create the sample data set and return the created ids."""
    now = utc_now()

    ali = User(username="ali", email="ali@example.com", password_hash=get_password_hash(SAMPLE_PASSWORD))
    alina = User(username="alina", email="alina@example.com", password_hash=get_password_hash(SAMPLE_PASSWORD))
    db.add_all([ali, alina])
    db.flush()

    website = Project(name="Website Redesign", description="Complete redesign of company website", owner_id=ali.id)
    mobile = Project(name="Mobile App Development", description="Build iOS and Android applications", owner_id=ali.id)
    db.add_all([website, mobile])
    db.flush()

    mockup = Task(
        title="Design homepage mockup",
        description="Create Figma designs for the new homepage",
        project_id=website.id,
        assignee_id=ali.id,
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        due_date=now + timedelta(days=14),
    )
    db.add_all(
        [
            mockup,
            Task(
                title="Implement authentication",
                description="Add JWT-based authentication system",
                project_id=website.id,
                assignee_id=alina.id,
                status=TaskStatus.TODO,
                priority=TaskPriority.HIGH,
                due_date=now + timedelta(days=7),
            ),
            Task(
                title="Setup database schema",
                description="Design and implement the database schema",
                project_id=website.id,
                assignee_id=ali.id,
                status=TaskStatus.DONE,
                priority=TaskPriority.MEDIUM,
                due_date=now - timedelta(days=10),
            ),
            Task(
                title="Create wireframes",
                description="Design wireframes for all app screens",
                project_id=mobile.id,
                assignee_id=alina.id,
                status=TaskStatus.IN_PROGRESS,
                priority=TaskPriority.MEDIUM,
                due_date=now + timedelta(days=21),
            ),
            # Past due and not done: shows up as overdue in the summary.
            Task(
                title="Write documentation",
                description="Complete API documentation",
                project_id=website.id,
                assignee_id=ali.id,
                status=TaskStatus.TODO,
                priority=TaskPriority.LOW,
                due_date=now - timedelta(days=3),
            ),
        ]
    )
    db.commit()

    append_comment(db, mockup.id, ali, "Started working on this task")
    append_comment(db, mockup.id, alina, "Looking great! Keep up the good work.")

    return {"users": [ali.id, alina.id], "projects": [website.id, mobile.id]}


def main() -> None:
    setup_logging(settings.LOG_LEVEL)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Cleared existing data in %s", engine.url)

    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()

    logger.info("Seed data created successfully")
    logger.info("Sample credentials: ali@example.com / %s, alina@example.com / %s", SAMPLE_PASSWORD, SAMPLE_PASSWORD)
    logger.info("Project ids: %s", ", ".join(str(project_id) for project_id in created["projects"]))


if __name__ == "__main__":
    main()
