import hmac
import logging
import secrets
from datetime import date
from typing import List, Optional, Set, Tuple

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from models.classes import ClassLevel
from models.messages import Message
from models.progress import Progress
from models.students import Student
from schemas.students import StudentCreate
from services.errors import BadRequest, NotFound
from services.sync_service import delete_records, publish_upsert
from utils.ids import new_id

logger = logging.getLogger(__name__)

ADMIN_ID = "admin"


def temporary_password() -> str:
    """MJA followed by four digits, handed to the family at registration"""
    return f"MJA{secrets.randbelow(9000) + 1000}"


def birth_year(birth_date: str) -> int:
    try:
        return date.fromisoformat(birth_date[:10]).year
    except ValueError:
        raise BadRequest(f"Date de naissance invalide : {birth_date}")


def calculate_age_and_class(
    db: Session, birth_date: str, club: Optional[str], fallback_class_id: Optional[str]
) -> Tuple[int, Optional[str]]:
    """
    age = current year - birth year (no month/day adjustment).
    The class is the one of the club made for that age; otherwise the fallback.
    """
    age = date.today().year - birth_year(birth_date)

    if club is None and fallback_class_id:
        fallback = db.get(ClassLevel, fallback_class_id)
        club = fallback.club if fallback else None

    query = select(ClassLevel).where(ClassLevel.age == age)
    if club:
        query = query.where(ClassLevel.club == club)
    target = db.execute(query.order_by(ClassLevel.id)).scalars().first()
    return age, target.id if target else fallback_class_id


def get_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        raise NotFound("Élève introuvable")
    return student


def list_students(db: Session, class_id: Optional[str] = None, club: Optional[str] = None) -> List[Student]:
    query = select(Student)
    if class_id:
        query = query.where(Student.class_id == class_id)
    if club:
        query = query.join(ClassLevel, ClassLevel.id == Student.class_id).where(ClassLevel.club == club)
    return db.execute(query.order_by(Student.full_name)).scalars().all()


def search_students(db: Session, name: str) -> List[Student]:
    query = select(Student).where(Student.full_name.ilike(f"%{name}%"))
    return db.execute(query.order_by(Student.full_name)).scalars().all()


def find_by_full_name(db: Session, full_name: str) -> Optional[Student]:
    wanted = full_name.strip().lower()
    for student in db.execute(select(Student)).scalars():
        if student.full_name.lower() == wanted:
            return student
    return None


def students_with_unread(db: Session) -> Set[str]:
    query = select(Message.sender_id).where(Message.receiver_id == ADMIN_ID, Message.is_read.is_(False))
    return set(db.execute(query).scalars())


def create_student(db: Session, payload: StudentCreate) -> Student:
    age, class_id = calculate_age_and_class(db, payload.birth_date, payload.club, payload.class_id)
    data = payload.model_dump(exclude={"club", "class_id"})
    student = Student(
        id=new_id(),
        age=age,
        class_id=class_id,
        password_changed=False,
        temporary_password=temporary_password(),
        **data,
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    publish_upsert(student)
    logger.info(f"Student {student.id} registered in class {class_id}")
    return student


def update_student(db: Session, student: Student, payload: StudentCreate) -> Student:
    age, class_id = calculate_age_and_class(db, payload.birth_date, payload.club, payload.class_id or student.class_id)
    for key, value in payload.model_dump(exclude={"club", "class_id"}).items():
        setattr(student, key, value)
    student.age = age
    student.class_id = class_id
    db.commit()
    db.refresh(student)
    publish_upsert(student)
    return student


def delete_student(db: Session, student: Student):
    progress = db.execute(select(Progress).where(Progress.student_id == student.id)).scalars().all()
    messages = db.execute(
        select(Message).where(or_(Message.sender_id == student.id, Message.receiver_id == student.id))
    ).scalars().all()
    student_id = student.id
    delete_records(db, [*progress, *messages, student])
    logger.info(f"Student {student_id} deleted with {len(progress)} progress and {len(messages)} message rows")


def student_password_matches(student: Student, password: str) -> bool:
    """Changed passwords replace the temporary one."""
    expected = student.password if student.password_changed else student.temporary_password
    return bool(expected) and hmac.compare_digest(password.encode(), expected.encode())


def change_password(db: Session, student: Student, current_password: str, new_password: str) -> Student:
    if not student_password_matches(student, current_password):
        raise BadRequest("Mot de passe actuel incorrect")
    student.password = new_password
    student.password_changed = True
    db.commit()
    db.refresh(student)
    publish_upsert(student)
    return student
