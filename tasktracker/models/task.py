"""
Task Model
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from tasktracker.database import Base
from tasktracker.models.task_comment import TaskComment
from tasktracker.utils.timestamps import utc_now


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"


class TaskPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="", nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = Column(
        SQLEnum(TaskStatus, values_callable=_enum_values, name="task_status"),
        default=TaskStatus.TODO,
        nullable=False,
    )
    priority = Column(
        SQLEnum(TaskPriority, values_callable=_enum_values, name="task_priority"),
        default=TaskPriority.MEDIUM,
        nullable=False,
    )
    due_date = Column(DateTime, nullable=True)
    updates_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assignee_id])
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by=[TaskComment.created_at, TaskComment.id],
    )

    __table_args__ = (
        # Filtering a project's tasks by status is the common listing path.
        Index("ix_tasks_project_id_status", "project_id", "status"),
    )
