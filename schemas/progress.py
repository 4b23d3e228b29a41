from typing import List, Optional
from pydantic import Field
from schemas.common import CamelModel


class Progress(CamelModel):
    student_id: str
    session_id: str
    score: int = 0
    completed: bool = False
    completed_subjects: List[str] = Field(default_factory=list)
    completion_date: Optional[str] = None


class SubjectToggle(CamelModel):
    student_id: str
    session_id: str
    subject_id: str


class QuizSubmission(CamelModel):
    answers: List[int]                    # chosen option per question, -1 = unanswered


class QuizResult(CamelModel):
    score: int
    passed: bool
    message: str
    progress: Optional[Progress] = None
