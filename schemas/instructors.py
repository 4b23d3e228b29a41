from typing import Literal, Optional
from pydantic import Field
from schemas.common import CamelModel

Role = Literal["admin", "instructor"]


class InstructorCreate(CamelModel):
    full_name: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=4)
    role: Role = "instructor"


class InstructorUpdate(CamelModel):
    full_name: Optional[str] = None
    password: Optional[str] = None
    role: Optional[Role] = None


class Instructor(CamelModel):
    id: str
    full_name: str
    username: str
    role: Role
