"""
Student portal: everything a logged-in student sees.
Reads never change state; messages are marked read through an explicit POST.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import require_student
from models.classes import ClassLevel as ClassModel
from models.sessions import Session as SessionModel
from models.students import Student as StudentModel
from schemas.auth import CurrentUser
from schemas.classes import ClassLevel
from schemas.common import fail, ok
from schemas.messages import Message, MessageCreate
from schemas.progress import Progress, QuizResult, QuizSubmission
from schemas.sessions import Session as SessionOut
from schemas.students import Student
from services import messaging_service, progress_service, session_service, student_service
from services.student_service import ADMIN_ID

router = APIRouter(prefix="/portal", tags=["portal"])


def _progress(record) -> dict | None:
    return Progress.model_validate(record).dump() if record is not None else None


# ==========================================================
# [1] profile / courses
# ==========================================================

@router.get("/me")
def read_profile(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    student = db.get(StudentModel, user.id)
    cls = db.get(ClassModel, student.class_id) if student and student.class_id else None
    if student is None or cls is None:
        return fail(404, "Student or Class not found")
    return ok({
        "student": Student.model_validate(student).dump(),
        "class": ClassLevel.model_validate(cls).dump(),
        "mustChangePassword": not student.password_changed,
    })


# ✅ [READ] weeks of the student's class with lock state
@router.get("/courses")
def read_courses(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    student = student_service.get_student(db, user.id)
    if not student.class_id:
        return ok([])
    sessions = db.execute(select(SessionModel).where(SessionModel.class_id == student.class_id)).scalars().all()
    cards = progress_service.course_cards(sessions, progress_service.progress_for_student(db, student.id))
    return ok([
        {
            "session": SessionOut.model_validate(c["session"]).dump(),
            "progress": _progress(c["progress"]),
            "available": c["available"],
            "unlocked": c["unlocked"],
            "completed": c["completed"],
        }
        for c in cards
    ])


# ✅ [READ] session viewer, refused while the week is locked
@router.get("/sessions/{session_id}")
def read_session(session_id: str, user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    student = student_service.get_student(db, user.id)
    session = session_service.get_session(db, session_id)
    progress_service.ensure_unlocked(db, student, session)
    record = progress_service.get_progress(db, student.id, session.id)
    done = set(record.completed_subjects or []) if record else set()
    data = SessionOut.model_validate(session).dump()
    for subject in data["subjects"]:
        subject["completed"] = subject["id"] in done
    return ok({"session": data, "progress": _progress(record)})


# ==========================================================
# [2] quiz
# ==========================================================

# ✅ [QUIZ] a passing score validates the subject
@router.post("/sessions/{session_id}/subjects/{subject_id}/quiz")
def submit_quiz(
    session_id: str,
    subject_id: str,
    submission: QuizSubmission,
    user: CurrentUser = Depends(require_student),
    db: Session = Depends(get_db),
):
    student = student_service.get_student(db, user.id)
    session = session_service.get_session(db, session_id)
    progress_service.ensure_unlocked(db, student, session)
    subject = session_service.find_subject(session, subject_id)

    score = progress_service.grade_quiz(subject.get("quiz") or [], submission.answers)
    passed = score >= settings.QUIZ_PASS_SCORE
    if passed:
        record = progress_service.complete_subject(db, student.id, session, subject_id)
    else:
        record = progress_service.get_progress(db, student.id, session.id)

    result = QuizResult(
        score=score,
        passed=passed,
        message=progress_service.quiz_feedback(subject.get("name", ""), score),
        progress=Progress.model_validate(record) if record is not None else None,
    )
    return ok(result.dump())


# ✅ [READ] own progress + yearly target
@router.get("/progress")
def read_progress(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    records = progress_service.progress_for_student(db, user.id)
    return ok({
        "records": [_progress(r) for r in records],
        "annual": progress_service.annual_progress(records),
    })


# ==========================================================
# [3] messages with the instructors
# ==========================================================

@router.get("/messages")
def read_messages(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    return ok([Message.model_validate(m).dump() for m in messaging_service.thread(db, user.id)])


@router.get("/messages/unread")
def read_unread(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    return ok({"unread": messaging_service.unread_count(db, user.id, sender_id=ADMIN_ID)})


@router.post("/messages")
def send_message(payload: MessageCreate, user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    message = messaging_service.send(db, user.id, ADMIN_ID, payload.content)
    return ok(Message.model_validate(message).dump(), "Message envoyé")


@router.post("/messages/read")
def mark_read(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    return ok({"marked": messaging_service.mark_read(db, ADMIN_ID, user.id)})
