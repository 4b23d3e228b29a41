import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.classes import ClassLevel
from models.progress import Progress
from models.sessions import Session as SessionModel
from schemas.sessions import SessionCreate, SessionUpdate, Subject
from services.errors import BadRequest, NotFound
from services.sync_service import delete_records, publish_upsert
from utils.ids import new_id, today_iso

logger = logging.getLogger(__name__)


def subject_to_json(subject: Subject) -> dict:
    """Subjects are stored as camelCase JSON, the way the front end reads them."""
    data = subject.model_dump(by_alias=True, exclude_none=True)
    data["id"] = subject.id or new_id(5)
    return data


def find_subject(session: SessionModel, subject_id: str) -> dict:
    for subject in session.subjects or []:
        if subject.get("id") == subject_id:
            return subject
    raise NotFound("Matière introuvable dans cette séance")


def get_session(db: Session, session_id: str) -> SessionModel:
    session = db.get(SessionModel, session_id)
    if session is None:
        raise NotFound("Séance introuvable")
    return session


def list_sessions(db: Session, club: Optional[str] = None, class_id: Optional[str] = None) -> List[SessionModel]:
    query = select(SessionModel)
    if club:
        query = query.where(SessionModel.club == club)
    if class_id:
        query = query.where(SessionModel.class_id == class_id)
    return db.execute(query.order_by(SessionModel.class_id, SessionModel.number)).scalars().all()


def next_number(db: Session, class_id: str) -> int:
    count = db.execute(
        select(func.count()).select_from(SessionModel).where(SessionModel.class_id == class_id)
    ).scalar_one()
    return count + 1


def create_session(db: Session, payload: SessionCreate) -> SessionModel:
    cls = db.get(ClassLevel, payload.class_id)
    if cls is None:
        raise BadRequest("Classe introuvable")

    session = SessionModel(
        id=new_id(),
        club=cls.club,
        class_id=cls.id,
        number=next_number(db, cls.id),
        subjects=[subject_to_json(s) for s in payload.subjects],
        availability_date=payload.availability_date or today_iso(),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    publish_upsert(session)
    logger.info(f"Session {session.id} created as week {session.number} of class {cls.id}")
    return session


def update_session(db: Session, session: SessionModel, payload: SessionUpdate) -> SessionModel:
    if payload.subjects is not None:
        session.subjects = [subject_to_json(s) for s in payload.subjects]
    if payload.availability_date is not None:
        session.availability_date = payload.availability_date
    if payload.number is not None:
        session.number = payload.number
    db.commit()
    db.refresh(session)
    publish_upsert(session)
    return session


def delete_session(db: Session, session: SessionModel):
    progress = db.execute(select(Progress).where(Progress.session_id == session.id)).scalars().all()
    delete_records(db, [*progress, session])


def add_subject(db: Session, session: SessionModel, subject: Subject) -> dict:
    data = subject_to_json(subject)
    # JSON columns only notice reassignment, never in-place mutation
    session.subjects = [*(session.subjects or []), data]
    db.commit()
    db.refresh(session)
    publish_upsert(session)
    return data


def update_subject(db: Session, session: SessionModel, subject_id: str, subject: Subject) -> dict:
    find_subject(session, subject_id)
    data = subject_to_json(subject.model_copy(update={"id": subject_id}))
    session.subjects = [data if s.get("id") == subject_id else s for s in session.subjects]
    db.commit()
    db.refresh(session)
    publish_upsert(session)
    return data


def remove_subject(db: Session, session: SessionModel, subject_id: str) -> SessionModel:
    find_subject(session, subject_id)
    session.subjects = [s for s in session.subjects if s.get("id") != subject_id]
    db.commit()
    db.refresh(session)
    publish_upsert(session)
    return session
