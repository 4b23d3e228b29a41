from typing import List, Optional
from pydantic import Field
from schemas.classes import Club
from schemas.common import CamelModel


class QuizQuestion(CamelModel):
    text: str
    options: List[str]
    correct_index: int


class Subject(CamelModel):
    id: Optional[str] = None              # generated when omitted
    name: str = ""
    prerequisite: str = ""
    content: str = ""                     # HTML
    quiz: Optional[List[QuizQuestion]] = None


# ✅ create (number and club are derived from the class)
class SessionCreate(CamelModel):
    class_id: str
    subjects: List[Subject] = Field(default_factory=list)
    availability_date: Optional[str] = None   # defaults to today


class SessionUpdate(CamelModel):
    subjects: Optional[List[Subject]] = None
    availability_date: Optional[str] = None
    number: Optional[int] = None


class Session(CamelModel):
    id: str
    club: Club
    class_id: Optional[str] = None
    number: int
    subjects: List[Subject] = Field(default_factory=list)
    availability_date: str
