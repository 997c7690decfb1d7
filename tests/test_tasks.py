from datetime import timedelta, timezone, datetime

import pytest
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

import tasktracker.api.v1.projects as project_routes
import tasktracker.api.v1.tasks as task_routes
from tasktracker.models import Task, TaskComment, TaskPriority, TaskStatus, User
from tasktracker.schemas import CommentCreate, ProjectCreate, TaskCreate, TaskUpdate
from tasktracker.services import tasks as task_service
from tasktracker.utils.timestamps import utc_now


def _create_project(session: Session, owner: User, name: str = "Demo Project"):
    project_in = ProjectCreate(name=name, description="")
    return project_routes.create_project(project_in, current_user=owner, db=session).data


def _create_task(session: Session, user: User, project_id: int, title: str = "Write docs", **fields):
    task_in = TaskCreate(title=title, project_id=project_id, **fields)
    return task_routes.create_task(task_in, current_user=user, db=session).data


def _patch(session: Session, user: User, task_id: int, **fields):
    return task_routes.update_task(task_id, TaskUpdate(**fields), current_user=user, db=session).data


def test_create_task_applies_defaults_and_resolves_references(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner, name="Docs")

    task = _create_task(db_session, owner, project.id, title="  Outline  ", assignee_id=owner.id)

    assert task.title == "Outline"
    assert task.description == ""
    assert task.status == TaskStatus.TODO
    assert task.priority == TaskPriority.MEDIUM
    assert task.due_date is None
    assert task.updates_count == 0
    assert task.comments == []
    assert task.project.name == "Docs"
    assert task.assignee.username == "alice"
    assert task.assignee.email == "alice@example.com"


def test_create_task_for_missing_project_creates_nothing(db_session: Session, make_user):
    user = make_user("alice")

    with pytest.raises(HTTPException) as exc:
        _create_task(db_session, user, project_id=999)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Project not found"
    assert db_session.query(Task).count() == 0


def test_create_task_rejects_blank_title_and_unknown_enums():
    with pytest.raises(ValidationError):
        TaskCreate(title="   ", project_id=1)
    with pytest.raises(ValidationError):
        TaskCreate(title="Ship", project_id=1, status="blocked")
    with pytest.raises(ValidationError):
        TaskCreate(title="Ship", project_id=1, priority="urgent")


def test_titles_longer_than_255_characters_are_rejected():
    TaskCreate(title="x" * 255, project_id=1)
    with pytest.raises(ValidationError):
        TaskCreate(title="x" * 256, project_id=1)
    with pytest.raises(ValidationError):
        TaskUpdate(title="x" * 256)


@pytest.mark.parametrize("field", ["project_id", "assignee_id"])
def test_ids_outside_the_integer_column_range_are_rejected(field):
    fields = {"title": "Ship", "project_id": 1, field: 2**63}
    with pytest.raises(ValidationError):
        TaskCreate(**fields)
    with pytest.raises(ValidationError):
        TaskCreate(**{**fields, field: 0})


def test_create_task_accepts_camel_case_payload():
    task_in = TaskCreate.model_validate(
        {"title": "Ship", "projectId": 3, "assigneeId": 7, "dueDate": "2030-01-01T00:00:00Z"}
    )
    assert task_in.project_id == 3
    assert task_in.assignee_id == 7
    assert task_in.due_date.tzinfo is not None


def test_dangling_assignee_resolves_to_null(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)

    task = _create_task(db_session, owner, project.id, assignee_id=4242)

    assert task.assignee_id == 4242
    assert task.assignee is None


def test_updates_count_tracks_every_patch(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project.id)

    _patch(db_session, owner, task.id, title="Renamed")
    _patch(db_session, owner, task.id, status="inprogress")
    _patch(db_session, owner, task.id, priority="high", due_date=utc_now() + timedelta(days=2))
    updated = _patch(db_session, owner, task.id, assignee_id=owner.id)

    assert updated.updates_count == 4
    assert updated.title == "Renamed"
    assert updated.status == TaskStatus.IN_PROGRESS
    assert updated.priority == TaskPriority.HIGH
    assert updated.assignee.username == "alice"


def test_empty_patch_still_increments_and_changes_nothing_else(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project.id, title="Keep me", description="Body", priority="low")

    updated = _patch(db_session, owner, task.id)

    assert updated.updates_count == 1
    assert updated.title == "Keep me"
    assert updated.description == "Body"
    assert updated.priority == TaskPriority.LOW
    assert updated.status == TaskStatus.TODO


def test_patch_without_body_is_an_empty_patch(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project.id, title="Untouched")

    updated = task_routes.update_task(task.id, None, current_user=owner, db=db_session).data

    assert updated.updates_count == 1
    assert updated.title == "Untouched"


def test_patch_distinguishes_clearing_from_omission(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)
    due = utc_now() + timedelta(days=3)
    task = _create_task(
        db_session, owner, project.id, description="Body", assignee_id=owner.id, due_date=due
    )

    untouched = _patch(db_session, owner, task.id, title="Only title")
    assert untouched.description == "Body"
    assert untouched.assignee_id == owner.id
    assert untouched.due_date is not None

    cleared = _patch(db_session, owner, task.id, description="", assignee_id=None, due_date=None)
    assert cleared.description == ""
    assert cleared.assignee_id is None
    assert cleared.assignee is None
    assert cleared.due_date is None
    assert cleared.updates_count == 2


def test_patch_stores_aware_due_dates_as_utc(db_session: Session, make_user):
    owner = make_user("alice")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project.id)

    plus_two = timezone(timedelta(hours=2))
    updated = _patch(db_session, owner, task.id, due_date=datetime(2030, 5, 1, 12, 0, tzinfo=plus_two))

    assert updated.due_date == datetime(2030, 5, 1, 10, 0)


def test_patch_rejects_null_for_required_fields_and_unknown_enums():
    with pytest.raises(ValidationError):
        TaskUpdate(title=None)
    with pytest.raises(ValidationError):
        TaskUpdate(status=None)
    with pytest.raises(ValidationError):
        TaskUpdate(title="   ")
    with pytest.raises(ValidationError):
        TaskUpdate(status="archived")


def test_patch_missing_task_is_not_found(db_session: Session, make_user):
    user = make_user("alice")

    with pytest.raises(HTTPException) as exc:
        _patch(db_session, user, 12345, title="Nope")
    assert exc.value.status_code == 404
    assert exc.value.detail == "Task not found"


def test_any_authenticated_user_may_patch_any_task(db_session: Session, make_user):
    owner = make_user("alice")
    stranger = make_user("mallory")
    project = _create_project(db_session, owner)
    task = _create_task(db_session, owner, project.id)

    updated = _patch(db_session, stranger, task.id, status="done")

    assert updated.status == TaskStatus.DONE


def test_comments_append_in_order_and_do_not_count_as_updates(db_session: Session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)

    task_routes.add_comment(task.id, CommentCreate(text="First"), current_user=alice, db=db_session)
    result = task_routes.add_comment(task.id, CommentCreate(text="  Second  "), current_user=bob, db=db_session).data

    assert [comment.text for comment in result.comments] == ["First", "Second"]
    assert [comment.author.username for comment in result.comments] == ["alice", "bob"]
    assert result.comments[1].author.email == "bob@example.com"
    assert result.updates_count == 0


def test_comments_are_ordered_by_creation_time_then_id(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)
    noon = datetime(2030, 1, 1, 12, 0)
    db_session.add_all(
        [
            TaskComment(task_id=task.id, author_id=alice.id, text="late", created_at=noon + timedelta(hours=1)),
            TaskComment(task_id=task.id, author_id=alice.id, text="early", created_at=noon),
            TaskComment(task_id=task.id, author_id=alice.id, text="early too", created_at=noon),
        ]
    )
    db_session.commit()
    db_session.expire_all()

    loaded = task_service.get_task(db_session, task.id)

    assert [comment.text for comment in loaded.comments] == ["early", "early too", "late"]


def test_blank_comment_is_invalid_input(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)

    with pytest.raises(HTTPException) as exc:
        task_routes.add_comment(task.id, CommentCreate(text="   "), current_user=alice, db=db_session)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Comment text is required"
    assert db_session.query(TaskComment).count() == 0


def test_comment_on_missing_task_is_not_found(db_session: Session, make_user):
    alice = make_user("alice")

    with pytest.raises(HTTPException) as exc:
        task_service.append_comment(db_session, 777, alice, "Hello")
    assert exc.value.status_code == 404
    assert db_session.query(TaskComment).count() == 0


def test_append_then_remove_restores_comment_thread(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)
    task_service.append_comment(db_session, task.id, alice, "Keep")

    before = task_service.get_task(db_session, task.id)
    before_ids = [comment.id for comment in before.comments]
    appended = task_service.append_comment(db_session, task.id, alice, "Temporary")
    new_comment = appended.comments[-1]
    assert new_comment.text == "Temporary"

    result = task_routes.delete_comment(task.id, new_comment.id, current_user=alice, db=db_session)

    assert result.message == "Comment deleted successfully"
    assert [comment.id for comment in result.data.comments] == before_ids
    assert result.data.updates_count == 0


def test_removing_unknown_comment_is_a_noop(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)
    task_service.append_comment(db_session, task.id, alice, "Keep")

    result = task_routes.delete_comment(task.id, 9999, current_user=alice, db=db_session).data

    assert [comment.text for comment in result.comments] == ["Keep"]


def test_removing_comment_from_missing_task_is_not_found(db_session: Session, make_user):
    alice = make_user("alice")

    with pytest.raises(HTTPException) as exc:
        task_routes.delete_comment(31337, 1, current_user=alice, db=db_session)
    assert exc.value.status_code == 404


def test_comment_removal_is_not_restricted_to_author(db_session: Session, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)
    comment_id = task_service.append_comment(db_session, task.id, alice, "Mine").comments[0].id

    result = task_routes.delete_comment(task.id, comment_id, current_user=bob, db=db_session).data

    assert result.comments == []


def test_list_project_tasks_newest_first(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    other = _create_project(db_session, alice, name="Other")
    first = _create_task(db_session, alice, project.id, title="First")
    second = _create_task(db_session, alice, project.id, title="Second")
    _create_task(db_session, alice, other.id, title="Elsewhere")

    tasks = project_routes.list_project_tasks(project.id, current_user=alice, db=db_session).data

    assert [task.id for task in tasks] == [second.id, first.id]


def test_list_tasks_for_missing_project_is_not_found(db_session: Session, make_user):
    alice = make_user("alice")

    with pytest.raises(HTTPException) as exc:
        project_routes.list_project_tasks(404, current_user=alice, db=db_session)
    assert exc.value.status_code == 404


def test_delete_task_removes_its_comments(db_session: Session, make_user):
    alice = make_user("alice")
    project = _create_project(db_session, alice)
    task = _create_task(db_session, alice, project.id)
    task_service.append_comment(db_session, task.id, alice, "Bye")

    result = task_routes.delete_task(task.id, current_user=alice, db=db_session)

    assert result.message == "Task deleted successfully"
    assert db_session.query(Task).count() == 0
    assert db_session.query(TaskComment).count() == 0
    with pytest.raises(HTTPException) as exc:
        task_routes.get_task(task.id, current_user=alice, db=db_session)
    assert exc.value.status_code == 404
