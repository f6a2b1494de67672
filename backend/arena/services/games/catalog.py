"""Durable game records and the time-ordered upcoming listing."""

from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from arena import db
from arena.models import GameRecord
from .errors import StorageUnavailable
from .scheduler import time_to_minutes


def clamp_limit(raw, default: int = 5, maximum: int = 50) -> int:
    """Coerce a user-supplied limit into [1, maximum]; missing or zero means default."""
    try:
        value = float(raw) if raw is not None else 0
    except (TypeError, ValueError):
        value = 0
    if value != value or not value:  # NaN or 0
        value = default
    return int(max(1.0, min(float(maximum), value)))


class GameCatalog:
    def _fail(self, action: str, exc: Exception):
        db.session.rollback()
        current_app.logger.error(f"[catalog-error] {action} failed: {exc}")
        return StorageUnavailable(f"Game store unavailable during {action}")

    def add(self, game_no: int, team_one, team_two, play_time: str) -> GameRecord:
        record = GameRecord(game_no=game_no, team_one=team_one, team_two=team_two, play_time=play_time)
        try:
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail('insert', exc) from exc
        return record

    def all(self) -> List[GameRecord]:
        try:
            return GameRecord.query.order_by(GameRecord.id.asc()).all()
        except SQLAlchemyError as exc:
            raise self._fail('find-all', exc) from exc

    def oldest(self) -> Optional[GameRecord]:
        try:
            return GameRecord.query.order_by(GameRecord.id.asc()).first()
        except SQLAlchemyError as exc:
            raise self._fail('find-oldest', exc) from exc

    def delete(self, record_id: int) -> bool:
        try:
            deleted = GameRecord.query.filter_by(id=record_id).delete()
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail('delete', exc) from exc
        return bool(deleted)

    def list_upcoming(self, limit: int) -> Tuple[List[GameRecord], int]:
        """Return the first ``limit`` games by play time and the total count.

        Python's sort is stable, so games sharing a play time keep insertion order.
        """
        records = self.all()
        ordered = sorted(records, key=lambda r: time_to_minutes(r.play_time))
        return ordered[:limit], len(records)
