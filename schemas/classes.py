from typing import Literal, Optional
from schemas.common import CamelModel

Club = Literal["AVENTURIERS", "EXPLORATEURS"]


# ✅ create / update payload
class ClassLevelCreate(CamelModel):
    id: Optional[str] = None              # generated when omitted
    name: str
    age: int
    club: Club
    icon: Optional[str] = None


# ✅ read / bulk sync
class ClassLevel(ClassLevelCreate):
    id: str
