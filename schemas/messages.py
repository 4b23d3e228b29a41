from typing import Optional
from pydantic import Field
from schemas.common import CamelModel


class MessageCreate(CamelModel):
    content: str = Field(..., min_length=1)


class Message(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    timestamp: str
    is_read: bool = False


class Conversation(CamelModel):
    student_id: str
    full_name: str
    last_message: Optional[Message] = None
    unread_count: int = 0
