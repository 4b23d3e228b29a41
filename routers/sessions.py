from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.sessions import Session as SessionModel
from schemas.classes import Club
from schemas.common import fail, ok
from schemas.sessions import Session as SessionOut, SessionCreate, SessionUpdate, Subject
from services import ai_service, session_service
from services.sync_service import upsert_records

router = APIRouter(prefix="/sessions", tags=["sessions"], dependencies=[Depends(require_admin)])


def _out(session: SessionModel) -> dict:
    return SessionOut.model_validate(session).dump()


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] next week of the class
@router.post("/")
def create_session(payload: SessionCreate, db: Session = Depends(get_db)):
    session = session_service.create_session(db, payload)
    return ok(_out(session), f"Semaine {session.number} créée")


# ✅ [READ] weeks of a club / class, by number
@router.get("/")
def read_sessions(club: Optional[Club] = None, class_id: Optional[str] = None, db: Session = Depends(get_db)):
    return ok([_out(s) for s in session_service.list_sessions(db, club=club, class_id=class_id)])


# ==========================================================
# [2] static routes
# ==========================================================

# ✅ [SYNC] whole list upsert
@router.put("/bulk")
def bulk_upsert_sessions(sessions: List[SessionOut], db: Session = Depends(get_db)):
    records = []
    for s in sessions:
        record = s.model_dump(exclude={"subjects"})
        record["subjects"] = [session_service.subject_to_json(sub) for sub in s.subjects]
        records.append(record)
    changed = upsert_records(db, SessionModel, records)
    return ok({"changed": len(changed)}, "Séances synchronisées")


# ==========================================================
# [4] dynamic routes
# ==========================================================

@router.get("/{session_id}")
def read_session(session_id: str, db: Session = Depends(get_db)):
    return ok(_out(session_service.get_session(db, session_id)))


@router.put("/{session_id}")
def update_session(session_id: str, payload: SessionUpdate, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    return ok(_out(session_service.update_session(db, session, payload)), "Séance modifiée")


# ✅ [DELETE] progress of the week goes with it
@router.delete("/{session_id}")
def delete_session(session_id: str, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    session_service.delete_session(db, session)
    return ok({"sessionId": session_id}, "Séance supprimée")


# ✅ [SUBJECT] add / replace / remove
@router.post("/{session_id}/subjects")
def add_subject(session_id: str, subject: Subject, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    return ok(session_service.add_subject(db, session, subject), "Matière ajoutée")


@router.put("/{session_id}/subjects/{subject_id}")
def update_subject(session_id: str, subject_id: str, subject: Subject, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    return ok(session_service.update_subject(db, session, subject_id, subject), "Matière modifiée")


@router.delete("/{session_id}/subjects/{subject_id}")
def remove_subject(session_id: str, subject_id: str, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    return ok(_out(session_service.remove_subject(db, session, subject_id)), "Matière retirée")


# ✅ [AI] quiz from the subject's written content, stored on the subject
@router.post("/{session_id}/subjects/{subject_id}/quiz")
async def generate_subject_quiz(session_id: str, subject_id: str, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    subject = session_service.find_subject(session, subject_id)
    if not subject.get("name") or not subject.get("content"):
        return fail(400, "Veuillez d'abord écrire le contenu du cours pour générer un quiz.")

    quiz = await ai_service.generate_quiz(subject["name"], subject["content"])
    if not quiz:
        return fail(502, "Le quiz n'a pas pu être généré. Réessayez.")

    updated = Subject.model_validate({**subject, "quiz": quiz})
    return ok(session_service.update_subject(db, session, subject_id, updated), "Quiz généré")
