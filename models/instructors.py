from sqlalchemy import Column, Text
from database.db import Base


class Instructor(Base):
    __tablename__ = "instructors"

    id = Column(Text, primary_key=True)
    full_name = Column("fullName", Text, nullable=False)
    username = Column(Text, nullable=False, unique=True)
    password = Column(Text, nullable=False)                  # plaintext, matched at login
    role = Column(Text, nullable=False, default="instructor")  # admin / instructor
