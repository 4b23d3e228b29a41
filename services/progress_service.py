"""
Progress rules.

- score = round(validated subjects / subjects of the week * 100)
- completed = every subject of the week validated
- a subject is validated by a quiz score >= QUIZ_PASS_SCORE, or toggled by an instructor
- a week opens on its availability date and, with LINEAR_PROGRESSION,
  once the previous week of the class is completed
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from config.settings import settings
from models.progress import Progress
from models.sessions import Session as SessionModel
from models.students import Student
from services.errors import BadRequest, Forbidden
from services.session_service import find_subject
from services.sync_service import publish_upsert
from utils.ids import now_iso

logger = logging.getLogger(__name__)


# ==========================================================
# [1] arithmetic
# ==========================================================
def compute_score(completed_count: int, subject_count: int) -> Tuple[int, bool]:
    if subject_count <= 0:
        return 0, False
    # round half up
    score = int(completed_count / subject_count * 100 + 0.5)
    return score, completed_count == subject_count


def grade_quiz(quiz: Sequence[dict], answers: Sequence[int]) -> int:
    if not quiz:
        raise BadRequest("Pas de quiz disponible pour cette matière pour le moment.")
    if len(answers) != len(quiz) or any(a < 0 for a in answers):
        raise BadRequest("Réponds à toutes les questions avant de valider.")
    correct = sum(1 for q, a in zip(quiz, answers) if q.get("correctIndex") == a)
    return int(correct / len(quiz) * 100 + 0.5)


def quiz_feedback(subject_name: str, score: int) -> str:
    if score >= settings.QUIZ_PASS_SCORE:
        return f'Bravo ! Tu as réussi avec {score}%. La matière "{subject_name}" est validée !'
    return f"Tu as obtenu {score}%. Relis bien le cours et réessaie pour atteindre {settings.QUIZ_PASS_SCORE}% !"


# ==========================================================
# [2] progress records
# ==========================================================
def get_progress(db: Session, student_id: str, session_id: str) -> Optional[Progress]:
    return db.get(Progress, (student_id, session_id))


def progress_for_student(db: Session, student_id: str) -> List[Progress]:
    return db.execute(select(Progress).where(Progress.student_id == student_id)).scalars().all()


def _apply(record: Progress, session: SessionModel, completed_subjects: List[str]):
    record.completed_subjects = completed_subjects
    record.score, record.completed = compute_score(len(completed_subjects), len(session.subjects or []))
    record.completion_date = now_iso()


def complete_subject(db: Session, student_id: str, session: SessionModel, subject_id: str) -> Progress:
    """Adds the subject to the student's record; already validated subjects leave it untouched."""
    find_subject(session, subject_id)
    record = get_progress(db, student_id, session.id)

    if record is not None:
        if subject_id in (record.completed_subjects or []):
            return record
        _apply(record, session, [*(record.completed_subjects or []), subject_id])
    else:
        record = Progress(student_id=student_id, session_id=session.id)
        _apply(record, session, [subject_id])
        db.add(record)

    db.commit()
    db.refresh(record)
    publish_upsert(record)
    logger.info(f"Student {student_id} validated subject {subject_id} of session {session.id}")
    return record


def toggle_subject(db: Session, student_id: str, session: SessionModel, subject_id: str) -> Progress:
    """Instructor override from the tracking grid: add the subject if missing, remove it otherwise."""
    find_subject(session, subject_id)
    record = get_progress(db, student_id, session.id)

    if record is not None:
        current = list(record.completed_subjects or [])
        if subject_id in current:
            current = [s for s in current if s != subject_id]
        else:
            current.append(subject_id)
        _apply(record, session, current)
    else:
        record = Progress(student_id=student_id, session_id=session.id)
        _apply(record, session, [subject_id])
        db.add(record)

    db.commit()
    db.refresh(record)
    publish_upsert(record)
    return record


# ==========================================================
# [3] availability / unlocking
# ==========================================================
def is_available(session: SessionModel, today: Optional[date] = None) -> bool:
    today = today or date.today()
    try:
        return date.fromisoformat(session.availability_date[:10]) <= today
    except (TypeError, ValueError):
        return False


def course_cards(
    sessions: Sequence[SessionModel], progress: Sequence[Progress], today: Optional[date] = None
) -> List[Dict]:
    """
    sessions: the class's weeks; returned ordered by number with
    available / unlocked / completed flags and the matching progress record.
    """
    by_session = {p.session_id: p for p in progress}
    cards = []
    previous_completed = True
    for session in sorted(sessions, key=lambda s: s.number):
        record = by_session.get(session.id)
        available = is_available(session, today)
        unlocked = available and (previous_completed or not settings.LINEAR_PROGRESSION)
        completed = bool(record and record.completed)
        cards.append({
            "session": session,
            "progress": record,
            "available": available,
            "unlocked": unlocked,
            "completed": completed,
        })
        previous_completed = completed
    return cards


def ensure_unlocked(db: Session, student: Student, session: SessionModel):
    if session.class_id != student.class_id:
        raise Forbidden("Cette séance n'appartient pas à ta classe.")
    siblings = db.execute(select(SessionModel).where(SessionModel.class_id == student.class_id)).scalars().all()
    for card in course_cards(siblings, progress_for_student(db, student.id)):
        if card["session"].id == session.id:
            if not card["available"]:
                raise Forbidden(f"Séance verrouillée jusqu'au {session.availability_date}.")
            if not card["unlocked"]:
                raise Forbidden("Termine la semaine précédente pour débloquer celle-ci.")
            return


def annual_progress(progress: Sequence[Progress]) -> Dict:
    done = sum(1 for p in progress if p.completed)
    target = settings.ANNUAL_SESSION_TARGET
    return {
        "completedSessions": done,
        "target": target,
        "percent": min(100, int(done / target * 100 + 0.5)) if target else 0,
    }


# ==========================================================
# [4] tracking grid
# ==========================================================
def tracking_matrix(sessions: Sequence[SessionModel], students: Sequence[Student], progress: Sequence[Progress]) -> Dict:
    done = {(p.student_id, p.session_id): set(p.completed_subjects or []) for p in progress}
    rows = []
    for session in sorted(sessions, key=lambda s: s.number):
        for subject in session.subjects or []:
            rows.append({
                "sessionId": session.id,
                "sessionNumber": session.number,
                "subjectId": subject.get("id"),
                "subjectName": subject.get("name"),
                "completedBy": {
                    st.id: subject.get("id") in done.get((st.id, session.id), set()) for st in students
                },
            })
    return {
        "students": [{"id": st.id, "fullName": st.full_name} for st in students],
        "rows": rows,
    }
