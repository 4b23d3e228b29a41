"""
Documentation page of the admin dashboard:
- schema.sql rendered from the model metadata for PostgreSQL
- credentials cheat sheet (temporary passwords per club)
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy import select
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Session
from sqlalchemy.schema import CreateTable

from database.db import Base, get_db, init_models
from database.seed import STANDARD_CLASSES
from dependencies.security import require_admin
from models.classes import ClassLevel
from models.students import Student
from schemas.classes import Club
from schemas.common import ok

router = APIRouter(prefix="/documentation", tags=["documentation"], dependencies=[Depends(require_admin)])


def _quote(value) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, int):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


def schema_sql() -> str:
    init_models()
    dialect = postgresql.dialect()
    parts = ["-- e-CP MJA : schéma Supabase / PostgreSQL", ""]
    for table in Base.metadata.sorted_tables:
        parts.append(f"{str(CreateTable(table).compile(dialect=dialect)).strip()};")
        parts.append("")

    rows = [
        "  (" + ", ".join(_quote(v) for v in row) + ")"
        for row in STANDARD_CLASSES
    ]
    parts.append('INSERT INTO classes (id, name, age, club, icon) VALUES')
    parts.append(",\n".join(rows))
    parts.append("ON CONFLICT (id) DO NOTHING;")
    return "\n".join(parts) + "\n"


# ✅ [READ] schema.sql
@router.get("/schema.sql", response_class=PlainTextResponse)
def read_schema():
    return schema_sql()


# ✅ [READ] login sheet handed to families
@router.get("/credentials")
def read_credentials(club: Optional[Club] = None, db: Session = Depends(get_db)):
    query = select(Student, ClassLevel).outerjoin(ClassLevel, Student.class_id == ClassLevel.id)
    if club:
        query = query.where(ClassLevel.club == club)
    rows = db.execute(query.order_by(ClassLevel.age, Student.full_name)).all()
    return ok([
        {
            "studentId": student.id,
            "fullName": student.full_name,
            "className": cls.name if cls else None,
            "club": cls.club if cls else None,
            "login": student.full_name,
            "temporaryPassword": student.temporary_password,
            "passwordChanged": bool(student.password_changed),
        }
        for student, cls in rows
    ])
