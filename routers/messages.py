from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import require_admin
from models.messages import Message as MessageModel
from schemas.common import ok
from schemas.messages import Conversation, Message, MessageCreate
from services import messaging_service, student_service
from services.student_service import ADMIN_ID
from services.sync_service import upsert_records

router = APIRouter(prefix="/messages", tags=["messages"], dependencies=[Depends(require_admin)])


def _out(message: MessageModel) -> dict:
    return Message.model_validate(message).dump()


# ==========================================================
# [1] inbox
# ==========================================================

# ✅ [READ] conversation list, most recent first
@router.get("/conversations")
def read_conversations(include: Optional[str] = None, db: Session = Depends(get_db)):
    items = messaging_service.conversations(db, include_student_id=include)
    return ok([
        Conversation(
            student_id=i["student"].id,
            full_name=i["student"].full_name,
            last_message=Message.model_validate(i["last_message"]) if i["last_message"] else None,
            unread_count=i["unread_count"],
        ).dump()
        for i in items
    ])


# ✅ [READ] unread total for the sidebar badge
@router.get("/unread")
def read_unread(db: Session = Depends(get_db)):
    return ok({"unread": messaging_service.unread_count(db, ADMIN_ID)})


# ✅ [SYNC] whole list upsert
@router.put("/bulk")
def bulk_upsert_messages(messages: List[Message], db: Session = Depends(get_db)):
    changed = upsert_records(db, MessageModel, [m.model_dump() for m in messages])
    return ok({"changed": len(changed)}, "Messages synchronisés")


# ==========================================================
# [2] one conversation
# ==========================================================

@router.get("/{student_id}")
def read_thread(student_id: str, db: Session = Depends(get_db)):
    student_service.get_student(db, student_id)
    return ok([_out(m) for m in messaging_service.thread(db, student_id)])


# ✅ [CREATE] admin -> student
@router.post("/{student_id}")
def send_message(student_id: str, payload: MessageCreate, db: Session = Depends(get_db)):
    student_service.get_student(db, student_id)
    message = messaging_service.send(db, ADMIN_ID, student_id, payload.content)
    return ok(_out(message), "Message envoyé")


# ✅ [UPDATE] the student's messages are read once the thread is opened
@router.post("/{student_id}/read")
def mark_thread_read(student_id: str, db: Session = Depends(get_db)):
    count = messaging_service.mark_read(db, student_id, ADMIN_ID)
    return ok({"marked": count})
