from typing import Literal
from schemas.common import CamelModel

UserType = Literal["admin", "student"]


class LoginRequest(CamelModel):
    username: str                          # instructor username or the student's full name
    password: str


class CurrentUser(CamelModel):
    type: UserType
    id: str
    name: str


class LoginResponse(CurrentUser):
    token: str
