from sqlalchemy import Column, ForeignKey, Integer, Text
from database.db import Base
from models.types import JSONList


class Session(Base):
    __tablename__ = "sessions"  # weekly lesson units ("Semaine")

    id = Column(Text, primary_key=True)
    club = Column(Text, nullable=False)
    class_id = Column("classId", Text, ForeignKey("classes.id", ondelete="CASCADE"))
    number = Column(Integer, nullable=False)                             # week number inside the class
    subjects = Column(JSONList, nullable=False, default=list)            # [{id, name, prerequisite, content, quiz}]
    availability_date = Column("availabilityDate", Text, nullable=False) # ISO date, locked before it
