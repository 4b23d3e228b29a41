from sqlalchemy import Boolean, Column, Text
from database.db import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Text, primary_key=True)
    sender_id = Column("senderId", Text, nullable=False)     # student id or "admin"
    receiver_id = Column("receiverId", Text, nullable=False) # student id or "admin"
    content = Column(Text, nullable=False)
    timestamp = Column(Text, nullable=False)                 # ISO timestamp
    is_read = Column("isRead", Boolean, default=False)
