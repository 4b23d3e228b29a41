import re
from datetime import date

import pytest

from models.messages import Message
from models.progress import Progress
from schemas.students import StudentCreate
from services import student_service
from services.errors import BadRequest, NotFound


def _born(age: int) -> str:
    return f"{date.today().year - age}-06-01"


def test_temporary_password_format():
    for _ in range(20):
        assert re.fullmatch(r"MJA\d{4}", student_service.temporary_password())


@pytest.mark.parametrize(
    "age,club,fallback,expected",
    [
        (7, "AVENTURIERS", None, "av4"),
        (12, "EXPLORATEURS", None, "ex3"),
        (20, "EXPLORATEURS", "ex6", "ex6"),
        (12, None, "ex1", "ex3"),            # club taken from the fallback class
        (7, "EXPLORATEURS", "ex1", "ex1"),   # no explorer class for 7 year olds
    ],
)
def test_calculate_age_and_class(db, classes, age, club, fallback, expected):
    computed_age, class_id = student_service.calculate_age_and_class(db, _born(age), club, fallback)
    assert computed_age == age
    assert class_id == expected


def test_invalid_birth_date(db, classes):
    with pytest.raises(BadRequest):
        student_service.calculate_age_and_class(db, "14/03/2015", None, None)


def test_create_student_defaults(student):
    assert student.class_id == "av4"
    assert student.age == 7
    assert student.password_changed is False
    assert len(student.emergency_contacts) == 2
    assert student.diseases == []


def test_find_by_full_name_is_case_insensitive(db, student):
    assert student_service.find_by_full_name(db, "  JEAN dupont ").id == student.id
    assert student_service.find_by_full_name(db, "Jean") is None


def test_password_change(db, student):
    temp = student.temporary_password
    assert student_service.student_password_matches(student, temp)

    with pytest.raises(BadRequest):
        student_service.change_password(db, student, "wrong", "secret")

    student_service.change_password(db, student, temp, "secret")
    assert student.password_changed is True
    assert student_service.student_password_matches(student, "secret")
    assert not student_service.student_password_matches(student, temp)


def test_delete_student_removes_progress_and_messages(db, student):
    db.add(Progress(student_id=student.id, session_id="nosession", completed_subjects=[]))
    db.add(Message(id="m1", sender_id=student.id, receiver_id="admin", content="Bonjour", timestamp="2025-01-01T10:00:00Z"))
    db.add(Message(id="m2", sender_id="admin", receiver_id=student.id, content="Salut", timestamp="2025-01-01T10:01:00Z"))
    db.commit()
    student_id = student.id

    student_service.delete_student(db, student)

    assert db.get(Progress, (student_id, "nosession")) is None
    assert db.get(Message, "m1") is None and db.get(Message, "m2") is None
    with pytest.raises(NotFound):
        student_service.get_student(db, student_id)
