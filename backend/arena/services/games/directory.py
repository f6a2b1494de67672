"""Player directory: roll number lookup and bulk JSON import."""

import json
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from arena import db
from arena.models import Student
from .errors import StorageUnavailable


def normalize_record(raw) -> Optional[dict]:
    if not isinstance(raw, dict):
        return None
    roll = str(raw.get('roll') or raw.get('rollNumber') or '').strip()
    if not roll:
        return None
    return {
        'roll_number': roll,
        'name': str(raw.get('name') or '').strip(),
        'email': str(raw.get('email') or '').strip(),
        'mobile': str(raw.get('mobile') or '').strip(),
    }


class StudentDirectory:
    def resolve(self, roll) -> Optional[dict]:
        """Return the PlayerRef for ``roll`` or None when it is not registered."""
        try:
            student = Student.query.filter_by(roll_number=str(roll).strip()).first()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(f"[directory-error] lookup roll={roll} failed: {exc}")
            raise StorageUnavailable('Player directory unavailable') from exc
        return student.to_player() if student else None

    def import_file(self, path) -> Tuple[int, int]:
        with open(path, encoding='utf-8') as fh:
            items = json.load(fh)
        if not isinstance(items, list):
            raise ValueError('JSON root must be an array of students')
        return self.import_records(items)

    def import_records(self, items) -> Tuple[int, int]:
        """Upsert records by roll number. Returns (inserted, updated)."""
        docs = {}
        for raw in items:
            doc = normalize_record(raw)
            if doc:
                docs[doc['roll_number']] = doc
        if not docs:
            current_app.logger.info('[directory-import] no valid records to import')
            return 0, 0

        inserted = updated = 0
        try:
            existing = {
                s.roll_number: s
                for s in Student.query.filter(Student.roll_number.in_(list(docs))).all()
            }
            for roll, doc in docs.items():
                student = existing.get(roll)
                if student is None:
                    db.session.add(Student(**doc))
                    inserted += 1
                    continue
                if (student.name, student.email, student.mobile) != (doc['name'], doc['email'], doc['mobile']):
                    student.name = doc['name']
                    student.email = doc['email']
                    student.mobile = doc['mobile']
                    updated += 1
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise StorageUnavailable('Player directory unavailable') from exc
        current_app.logger.info(f"[directory-import] inserted={inserted} updated={updated}")
        return inserted, updated
