from typing import List, Optional
from pydantic import Field
from schemas.classes import Club
from schemas.common import CamelModel


class EmergencyContact(CamelModel):
    name: str = ""
    phone: str = ""
    relationship: str = ""


def _blank_contacts() -> List[EmergencyContact]:
    return [EmergencyContact(), EmergencyContact()]


# ✅ input (POST/PUT)
class StudentCreate(CamelModel):
    full_name: str = Field(..., min_length=1)
    birth_date: str = Field(..., min_length=4)            # YYYY-MM-DD
    club: Optional[Club] = None                           # club whose classes are matched by age
    class_id: Optional[str] = None                        # fallback when no class matches the age
    photo: Optional[str] = None
    address: str = ""
    mother_name: str = ""
    father_name: str = ""
    emergency_contacts: List[EmergencyContact] = Field(default_factory=_blank_contacts)
    diseases: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)


# ✅ output; the stored password never leaves the server
class Student(CamelModel):
    id: str
    full_name: str
    birth_date: Optional[str] = None
    age: Optional[int] = None
    class_id: Optional[str] = None
    photo: Optional[str] = None
    address: Optional[str] = ""
    mother_name: Optional[str] = ""
    father_name: Optional[str] = ""
    emergency_contacts: List[EmergencyContact] = Field(default_factory=list)
    diseases: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    password_changed: bool = False
    temporary_password: Optional[str] = None


# ✅ bulk sync: the full row as stored
class StudentRecord(Student):
    password: Optional[str] = None


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(..., min_length=4)
