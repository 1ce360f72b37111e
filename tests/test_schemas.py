"""
Tests for the record → response mappers and JSON field naming.
"""

import uuid
from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from database.models import Task, TaskStatus, User
from utils.schemas import TaskCreate, UserCreate, task_to_read, user_to_read

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _user() -> User:
    return User(
        user_id=uuid.uuid4(),
        first_name="John",
        last_name="Doe",
        email="john@example.com",
        password_hash="$2b$04$secret",
        date_of_birth=date(1990, 1, 15),
        is_admin=True,
        created_at=NOW,
        updated_at=NOW,
    )


class TestUserMapping:
    def test_every_public_field_copied(self):
        user = _user()
        read = user_to_read(user)
        assert read.id == user.user_id
        assert read.first_name == "John"
        assert read.last_name == "Doe"
        assert read.email == "john@example.com"
        assert read.date_of_birth == date(1990, 1, 15)
        assert read.created_at == read.updated_at == NOW

    def test_digest_and_admin_flag_never_serialized(self):
        payload = user_to_read(_user()).model_dump(by_alias=True)
        assert set(payload) == {"id", "firstName", "lastName", "email", "dateOfBirth", "createdAt", "updatedAt"}
        assert "$2b$04$secret" not in str(payload)


class TestTaskMapping:
    def test_every_field_copied(self):
        owner = uuid.uuid4()
        task = Task(
            task_id=uuid.uuid4(),
            title="T",
            description=None,
            due_date=date(2024, 2, 1),
            status=TaskStatus.DONE,
            owner_id=owner,
            created_at=NOW,
            updated_at=NOW,
        )
        payload = task_to_read(task).model_dump(by_alias=True, mode="json")
        assert payload == {
            "id": str(task.task_id),
            "title": "T",
            "description": None,
            "dueDate": "2024-02-01",
            "status": "DONE",
            "userId": str(owner),
            "createdAt": "2024-01-01T12:00:00Z",
            "updatedAt": "2024-01-01T12:00:00Z",
        }


class TestRequests:
    def test_camel_case_input(self):
        req = TaskCreate.model_validate({"title": "T", "dueDate": "2024-02-01"})
        assert req.due_date == date(2024, 2, 1)
        assert req.status is None

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate.model_validate({"title": "T", "dueDate": "2024-02-01", "status": "LATER"})

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            UserCreate.model_validate({
                "firstName": "J",
                "lastName": "D",
                "email": "not-an-email",
                "password": "pw",
                "dateOfBirth": "1990-01-15",
            })
