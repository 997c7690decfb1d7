"""Project summary aggregation.

The task set of a project is read once, then reduced four ways. Every facet
is computed from that same snapshot so they always agree with each other.
"""
import logging
from datetime import datetime
from typing import Dict, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from tasktracker.errors import NotFound
from tasktracker.models import Project, Task, TaskStatus, User
from tasktracker.schemas import AssigneeCount, ProjectSummary, TasksByStatus
from tasktracker.utils.timestamps import to_naive_utc, utc_now

logger = logging.getLogger(__name__)

TOP_ASSIGNEES_LIMIT = 5


class TaskFacetRow(NamedTuple):
    status: TaskStatus
    due_date: Optional[datetime]
    assignee_id: Optional[int]
    assignee_username: Optional[str]
    assignee_email: Optional[str]


def load_snapshot(db: Session, project_id: int) -> List[TaskFacetRow]:
    """Fetch the columns every facet needs in one round-trip, oldest task first."""
    rows = (
        db.query(Task.status, Task.due_date, Task.assignee_id, User.username, User.email)
        .outerjoin(User, User.id == Task.assignee_id)
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.asc(), Task.id.asc())
        .all()
    )
    return [TaskFacetRow(*row) for row in rows]


def count_tasks(rows: List[TaskFacetRow]) -> int:
    return len(rows)


def status_histogram(rows: List[TaskFacetRow]) -> Dict[str, int]:
    """Count tasks per status; every status is present even when zero."""
    counts = {status.value: 0 for status in TaskStatus}
    for row in rows:
        counts[TaskStatus(row.status).value] += 1
    return counts


def count_overdue(rows: List[TaskFacetRow], now: datetime) -> int:
    """Tasks due strictly before ``now`` that are not done."""
    return sum(
        1
        for row in rows
        if row.due_date is not None
        and to_naive_utc(row.due_date) < now
        and TaskStatus(row.status) is not TaskStatus.DONE
    )


def rank_assignees(rows: List[TaskFacetRow], limit: int = TOP_ASSIGNEES_LIMIT) -> List[AssigneeCount]:
    """Group tasks by assignee and return the busiest ``limit`` of them.

    Assignees whose user record no longer resolves are left out. Equal counts
    keep the order in which the assignee first appears in ``rows``.
    """
    ranked: Dict[int, AssigneeCount] = {}
    for row in rows:
        if row.assignee_id is None or row.assignee_username is None:
            continue
        entry = ranked.get(row.assignee_id)
        if entry is None:
            ranked[row.assignee_id] = AssigneeCount(
                id=row.assignee_id,
                username=row.assignee_username,
                email=row.assignee_email,
                task_count=1,
            )
        else:
            entry.task_count += 1

    # sorted() is stable, reverse=True included.
    return sorted(ranked.values(), key=lambda entry: entry.task_count, reverse=True)[:limit]


def summarize_project(db: Session, project_id: int, now: Optional[datetime] = None) -> ProjectSummary:
    if db.query(Project.id).filter(Project.id == project_id).first() is None:
        raise NotFound("Project not found")

    now = to_naive_utc(now) if now is not None else utc_now()
    rows = load_snapshot(db, project_id)

    summary = ProjectSummary(
        total_tasks=count_tasks(rows),
        tasks_by_status=TasksByStatus(**status_histogram(rows)),
        overdue_tasks=count_overdue(rows, now),
        top_assignees=rank_assignees(rows),
    )
    logger.debug(
        "Summarized project %s: total=%s overdue=%s",
        project_id,
        summary.total_tasks,
        summary.overdue_tasks,
    )
    return summary
