from pydantic import Field
from schemas.common import CamelModel


class ContentRequest(CamelModel):
    title: str = ""
    subject_name: str = Field(..., min_length=1)
    description: str = ""


class QuizRequest(CamelModel):
    subject_name: str = ""
    content: str = ""
