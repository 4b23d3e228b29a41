import logging
from typing import Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from models.messages import Message
from models.students import Student
from services.student_service import ADMIN_ID
from services.sync_service import publish_upsert
from utils.ids import new_id, now_iso

logger = logging.getLogger(__name__)


def thread(db: Session, student_id: str) -> List[Message]:
    """Every message between the student and the admin, oldest first."""
    query = select(Message).where(or_(Message.sender_id == student_id, Message.receiver_id == student_id))
    return db.execute(query.order_by(Message.timestamp)).scalars().all()


def send(db: Session, sender_id: str, receiver_id: str, content: str) -> Message:
    message = Message(
        id=new_id(),
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        timestamp=now_iso(),
        is_read=False,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    publish_upsert(message)
    return message


def mark_read(db: Session, sender_id: str, receiver_id: str) -> int:
    """Marks sender -> receiver messages as read; returns how many changed."""
    unread = db.execute(
        select(Message).where(
            Message.sender_id == sender_id,
            Message.receiver_id == receiver_id,
            Message.is_read.is_(False),
        )
    ).scalars().all()
    if not unread:
        return 0
    for message in unread:
        message.is_read = True
    db.commit()
    for message in unread:
        db.refresh(message)
        publish_upsert(message)
    return len(unread)


def unread_count(db: Session, receiver_id: str, sender_id: Optional[str] = None) -> int:
    query = select(Message).where(Message.receiver_id == receiver_id, Message.is_read.is_(False))
    if sender_id:
        query = query.where(Message.sender_id == sender_id)
    return len(db.execute(query).scalars().all())


def conversations(db: Session, include_student_id: Optional[str] = None) -> List[Dict]:
    """
    Students having at least one message (plus include_student_id), with the
    last message and the number of unread messages sent to the admin.
    Most recent conversation first; students without messages last.
    """
    messages = db.execute(select(Message)).scalars().all()
    student_ids = {m.receiver_id if m.sender_id == ADMIN_ID else m.sender_id for m in messages}
    if include_student_id:
        student_ids.add(include_student_id)

    students = db.execute(select(Student).where(Student.id.in_(student_ids))).scalars().all()
    items = []
    for student in students:
        own = [m for m in messages if student.id in (m.sender_id, m.receiver_id)]
        last = max(own, key=lambda m: m.timestamp) if own else None
        unread = sum(1 for m in own if m.receiver_id == ADMIN_ID and not m.is_read)
        items.append({"student": student, "last_message": last, "unread_count": unread})

    with_messages = sorted((i for i in items if i["last_message"]), key=lambda i: i["last_message"].timestamp, reverse=True)
    without = [i for i in items if not i["last_message"]]
    return with_messages + without
