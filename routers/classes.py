from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import get_current_user, require_admin
from models.classes import ClassLevel as ClassModel
from models.progress import Progress as ProgressModel
from models.sessions import Session as SessionModel
from models.students import Student as StudentModel
from schemas.classes import Club, ClassLevel, ClassLevelCreate
from schemas.common import fail, ok
from services.sync_service import delete_records, publish_upsert, upsert_records
from utils.ids import new_id

router = APIRouter(prefix="/classes", tags=["classes"])


def _out(cls: ClassModel) -> dict:
    return ClassLevel.model_validate(cls).dump()


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [READ] all classes, youngest first
@router.get("/", dependencies=[Depends(get_current_user)])
def read_classes(club: Optional[Club] = None, db: Session = Depends(get_db)):
    query = select(ClassModel)
    if club:
        query = query.where(ClassModel.club == club)
    records = db.execute(query.order_by(ClassModel.age)).scalars().all()
    return ok([_out(r) for r in records])


# ✅ [CREATE]
@router.post("/", dependencies=[Depends(require_admin)])
def create_class(new_class: ClassLevelCreate, db: Session = Depends(get_db)):
    class_id = new_class.id or new_id()
    if db.get(ClassModel, class_id) is not None:
        return fail(409, f"La classe {class_id} existe déjà")
    cls = ClassModel(**new_class.model_dump(exclude={"id"}), id=class_id)
    db.add(cls)
    db.commit()
    db.refresh(cls)
    publish_upsert(cls)
    return ok(_out(cls), "Classe créée")


# ==========================================================
# [2] static routes
# ==========================================================

# ✅ [SYNC] whole list upsert
@router.put("/bulk", dependencies=[Depends(require_admin)])
def bulk_upsert_classes(classes: List[ClassLevel], db: Session = Depends(get_db)):
    changed = upsert_records(db, ClassModel, [c.model_dump() for c in classes])
    return ok({"changed": len(changed)}, "Classes synchronisées")


# ==========================================================
# [4] dynamic routes
# ==========================================================

# ✅ [READ] one class
@router.get("/{class_id}", dependencies=[Depends(get_current_user)])
def read_class(class_id: str, db: Session = Depends(get_db)):
    cls = db.get(ClassModel, class_id)
    if cls is None:
        return fail(404, "Classe introuvable")
    return ok(_out(cls))


# ✅ [UPDATE]
@router.put("/{class_id}", dependencies=[Depends(require_admin)])
def update_class(class_id: str, updated: ClassLevelCreate, db: Session = Depends(get_db)):
    cls = db.get(ClassModel, class_id)
    if cls is None:
        return fail(404, "Classe introuvable")

    for key, value in updated.model_dump(exclude={"id"}).items():
        setattr(cls, key, value)

    db.commit()
    db.refresh(cls)
    publish_upsert(cls)
    return ok(_out(cls), "Classe modifiée")


# ✅ [DELETE] weeks and their progress go with the class; students stay, without a class
@router.delete("/{class_id}", dependencies=[Depends(require_admin)])
def delete_class(class_id: str, db: Session = Depends(get_db)):
    cls = db.get(ClassModel, class_id)
    if cls is None:
        return fail(404, "Classe introuvable")

    students = db.execute(select(StudentModel).where(StudentModel.class_id == class_id)).scalars().all()
    for student in students:
        student.class_id = None
    sessions = db.execute(select(SessionModel).where(SessionModel.class_id == class_id)).scalars().all()
    progress = db.execute(
        select(ProgressModel).where(ProgressModel.session_id.in_([s.id for s in sessions]))
    ).scalars().all()
    delete_records(db, [*progress, *sessions, cls])
    for student in students:
        db.refresh(student)
        publish_upsert(student)
    return ok({"classId": class_id}, "Classe supprimée")
