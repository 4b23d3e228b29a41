from sqlalchemy import Column, Integer, Text
from database.db import Base


class ClassLevel(Base):
    __tablename__ = "classes"

    id = Column(Text, primary_key=True)                  # class id (e.g. av1, ex3)
    name = Column(Text, nullable=False)                  # class name (Petit Agneau, Pionnier...)
    age = Column(Integer, nullable=False)                # age the class is meant for
    club = Column(Text, nullable=False)                  # AVENTURIERS / EXPLORATEURS
    icon = Column(Text)                                  # emoji or image URL
