from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.progress import Progress as ProgressModel
from models.sessions import Session as SessionModel
from schemas.common import ok
from schemas.progress import Progress, SubjectToggle
from services import progress_service, session_service, student_service
from services.sync_service import upsert_records

router = APIRouter(prefix="/tracking", tags=["tracking"], dependencies=[Depends(require_admin)])


# ✅ [READ] subject x student grid of one class
@router.get("/{class_id}")
def read_tracking(class_id: str, db: Session = Depends(get_db)):
    sessions = db.execute(select(SessionModel).where(SessionModel.class_id == class_id)).scalars().all()
    students = student_service.list_students(db, class_id=class_id)
    progress = db.execute(
        select(ProgressModel).where(ProgressModel.session_id.in_([s.id for s in sessions]))
    ).scalars().all()
    return ok(progress_service.tracking_matrix(sessions, students, progress))


# ✅ [TOGGLE] validate / unvalidate a subject for a student
@router.post("/toggle")
def toggle_subject(payload: SubjectToggle, db: Session = Depends(get_db)):
    student_service.get_student(db, payload.student_id)
    session = session_service.get_session(db, payload.session_id)
    record = progress_service.toggle_subject(db, payload.student_id, session, payload.subject_id)
    return ok(Progress.model_validate(record).dump(), "Suivi mis à jour")


# ✅ [SYNC] whole list upsert
@router.put("/progress/bulk")
def bulk_upsert_progress(records: List[Progress], db: Session = Depends(get_db)):
    changed = upsert_records(db, ProgressModel, [r.model_dump() for r in records])
    return ok({"changed": len(changed)}, "Progression synchronisée")
