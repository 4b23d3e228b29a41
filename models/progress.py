from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from database.db import Base
from models.types import TextList


class Progress(Base):
    __tablename__ = "progress"

    student_id = Column("studentId", Text, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True)
    session_id = Column("sessionId", Text, ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True)
    score = Column(Integer, default=0)                                   # % of subjects validated
    completed = Column(Boolean, default=False)                           # every subject validated
    completed_subjects = Column("completedSubjects", TextList, default=list)
    completion_date = Column("completionDate", Text)                     # ISO timestamp of the last change
