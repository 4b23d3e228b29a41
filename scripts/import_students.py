import argparse
import csv
import logging

from sqlalchemy.orm import Session

from config.override import resolve_database_url
from database.db import store
from schemas.students import StudentCreate
from services import student_service

logger = logging.getLogger(__name__)

CSV_PATH = "data/students.csv"  # ✅ columns: fullName, birthDate, club, classId, address, motherName, fatherName


def _row_to_payload(row: dict) -> StudentCreate:
    return StudentCreate(
        full_name=row["fullName"].strip(),
        birth_date=row["birthDate"].strip(),
        club=(row.get("club") or "").strip().upper() or None,
        class_id=(row.get("classId") or "").strip() or None,
        address=row.get("address") or "",
        mother_name=row.get("motherName") or "",
        father_name=row.get("fatherName") or "",
    )


def migrate_students(csv_path: str = CSV_PATH) -> int:
    url, source = resolve_database_url()
    status = store.reconnect(url)
    logger.info(f"Importing {csv_path} into the {'cloud' if status == 'connected' else 'local'} database ({source})")

    db: Session = store.session()
    count = 0
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                student = student_service.create_student(db, _row_to_payload(row))
                print(f"{student.full_name} -> {student.class_id} (mot de passe : {student.temporary_password})")
                count += 1
    finally:
        db.close()

    print(f"✅ {count} élève(s) importé(s)")
    return count


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Import students from a CSV file")
    parser.add_argument("csv_path", nargs="?", default=CSV_PATH)
    args = parser.parse_args()
    migrate_students(args.csv_path)
