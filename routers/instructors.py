from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.instructors import Instructor as InstructorModel
from schemas.common import fail, ok
from schemas.instructors import Instructor, InstructorCreate, InstructorUpdate
from services.auth_service import tokens
from services.sync_service import delete_records, publish_upsert
from utils.ids import new_id

router = APIRouter(prefix="/instructors", tags=["instructors"], dependencies=[Depends(require_admin)])


def _out(instructor: InstructorModel) -> dict:
    return Instructor.model_validate(instructor).dump()


def _get(db: Session, instructor_id: str):
    return db.get(InstructorModel, instructor_id)


# ✅ [READ]
@router.get("/")
def read_instructors(db: Session = Depends(get_db)):
    records = db.execute(select(InstructorModel).order_by(InstructorModel.full_name)).scalars().all()
    return ok([_out(r) for r in records])


# ✅ [CREATE] usernames are unique
@router.post("/")
def create_instructor(payload: InstructorCreate, db: Session = Depends(get_db)):
    taken = db.execute(
        select(InstructorModel).where(InstructorModel.username == payload.username)
    ).scalar_one_or_none()
    if taken is not None:
        return fail(409, f"L'identifiant {payload.username} est déjà utilisé")
    instructor = InstructorModel(id=new_id(), **payload.model_dump())
    db.add(instructor)
    db.commit()
    db.refresh(instructor)
    publish_upsert(instructor)
    return ok(_out(instructor), "Instructeur ajouté")


@router.get("/{instructor_id}")
def read_instructor(instructor_id: str, db: Session = Depends(get_db)):
    instructor = _get(db, instructor_id)
    if instructor is None:
        return fail(404, "Instructeur introuvable")
    return ok(_out(instructor))


@router.put("/{instructor_id}")
def update_instructor(instructor_id: str, payload: InstructorUpdate, db: Session = Depends(get_db)):
    instructor = _get(db, instructor_id)
    if instructor is None:
        return fail(404, "Instructeur introuvable")
    for key, value in payload.model_dump(exclude_none=True).items():
        setattr(instructor, key, value)
    db.commit()
    db.refresh(instructor)
    publish_upsert(instructor)
    return ok(_out(instructor), "Instructeur modifié")


# ✅ [DELETE] open sessions of the instructor are closed too
@router.delete("/{instructor_id}")
def delete_instructor(instructor_id: str, db: Session = Depends(get_db)):
    instructor = _get(db, instructor_id)
    if instructor is None:
        return fail(404, "Instructeur introuvable")
    delete_records(db, [instructor])
    tokens.revoke_user(instructor_id)
    return ok({"instructorId": instructor_id}, "Instructeur supprimé")
