from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.students import Student as StudentModel
from schemas.classes import Club
from schemas.common import fail, ok
from schemas.students import Student, StudentCreate, StudentRecord
from services import student_service
from services.auth_service import tokens
from services.sync_service import upsert_records

router = APIRouter(prefix="/students", tags=["students"], dependencies=[Depends(require_admin)])


def _out(student: StudentModel, unread: bool = False) -> dict:
    return Student.model_validate(student).dump() | {"hasUnread": unread}


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] age, class and temporary password are computed
@router.post("/")
def create_student(student: StudentCreate, db: Session = Depends(get_db)):
    db_student = student_service.create_student(db, student)
    return ok(_out(db_student), "Élève inscrit avec succès")


# ✅ [READ] students of a class or of a club
@router.get("/")
def read_students(class_id: Optional[str] = None, club: Optional[Club] = None, db: Session = Depends(get_db)):
    records = student_service.list_students(db, class_id=class_id, club=club)
    unread = student_service.students_with_unread(db)
    return ok([_out(r, r.id in unread) for r in records])


# ==========================================================
# [2] static routes (search / sync)
# ==========================================================

# ✅ [SEARCH] by name
@router.get("/search")
def search_students(name: str = "", db: Session = Depends(get_db)):
    results = student_service.search_students(db, name)
    if not results:
        return fail(404, "Aucun élève ne correspond à cette recherche")
    unread = student_service.students_with_unread(db)
    return ok([_out(r, r.id in unread) for r in results])


# ✅ [SYNC] whole list upsert
@router.put("/bulk")
def bulk_upsert_students(students: List[StudentRecord], db: Session = Depends(get_db)):
    changed = upsert_records(db, StudentModel, [s.model_dump(exclude_unset=True) for s in students])
    return ok({"changed": len(changed)}, "Élèves synchronisés")


# ==========================================================
# [4] dynamic routes
# ==========================================================

# ✅ [READ] one student
@router.get("/{student_id}")
def read_student(student_id: str, db: Session = Depends(get_db)):
    student = student_service.get_student(db, student_id)
    return ok(_out(student, student.id in student_service.students_with_unread(db)))


# ✅ [UPDATE] age and class recomputed from the birth date
@router.put("/{student_id}")
def update_student(student_id: str, updated: StudentCreate, db: Session = Depends(get_db)):
    student = student_service.get_student(db, student_id)
    student = student_service.update_student(db, student, updated)
    return ok(_out(student), "Fiche élève modifiée")


# ✅ [DELETE] progress, messages and open logins go with the student
@router.delete("/{student_id}")
def delete_student(student_id: str, db: Session = Depends(get_db)):
    student = student_service.get_student(db, student_id)
    student_service.delete_student(db, student)
    tokens.revoke_user(student_id)
    return ok({"studentId": student_id}, "Élève supprimé")
