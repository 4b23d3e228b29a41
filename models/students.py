from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from database.db import Base
from models.types import JSONList, TextList


class Student(Base):
    __tablename__ = "students"

    id = Column(Text, primary_key=True)
    full_name = Column("fullName", Text, nullable=False)                 # also the login name
    birth_date = Column("birthDate", Text)                               # ISO date string
    age = Column(Integer)
    class_id = Column("classId", Text, ForeignKey("classes.id", ondelete="SET NULL"))
    photo = Column(Text)                                                 # data URL or link
    address = Column(Text)
    mother_name = Column("motherName", Text)
    father_name = Column("fatherName", Text)
    emergency_contacts = Column("emergencyContacts", JSONList, default=list)   # [{name, phone, relationship}]
    diseases = Column(TextList, default=list)
    allergies = Column(TextList, default=list)
    medications = Column(TextList, default=list)

    # plaintext, as in the existing Supabase schema
    password_changed = Column("passwordChanged", Boolean, default=False)
    temporary_password = Column("temporaryPassword", Text)
    password = Column(Text)
