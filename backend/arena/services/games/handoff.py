"""Single-slot mailbox between the scoring display and the result screen.

The scoring display posts live stats for the game being played (the oldest
stored record). The result screen takes the merged snapshot exactly once;
taking it retires the stored record.
"""

import math
import threading
from typing import Optional

from flask import current_app

from .errors import NoGamesError, StorageUnavailable


def _roster_index(player) -> Optional[int]:
    try:
        value = float(player.get('id'))
    except (TypeError, ValueError, AttributeError):
        return None
    # only whole positions match a roster slot
    if not math.isfinite(value) or value != int(value):
        return None
    return int(value) - 1


def enrich_players(players, roster):
    """Attach roster identity to submitted stats by 1-based position.

    Submitted player ``id`` N maps to roster entry N-1 of team one followed
    by team two. Unmatched positions keep the submitted name.
    """
    enriched = []
    for player in players or []:
        if not isinstance(player, dict):
            continue
        idx = _roster_index(player)
        member = roster[idx] if idx is not None and 0 <= idx < len(roster) else {}
        enriched.append({
            **player,
            'name': member.get('name') or player.get('name'),
            'rollNumber': member.get('rollNumber') or member.get('roll'),
            'email': member.get('email'),
            'mobile': member.get('mobile'),
        })
    return enriched


class LiveHandoffBuffer:
    def __init__(self, catalog):
        self._catalog = catalog
        self._lock = threading.Lock()
        self._stored = None
        self._source_id = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._stored is not None

    def submit(self, players, team1_score=0, team2_score=0, active=False) -> dict:
        """Merge live stats into the oldest stored game and park the result.

        An unconsumed previous result is overwritten.
        """
        with self._lock:
            record = self._catalog.oldest()
            if record is None:
                raise NoGamesError('No registrations found')
            data = record.to_dict()
            roster = list(data['team_one']) + list(data['team_two'])
            merged = {
                **data,
                'players': enrich_players(players, roster),
                'team1Score': team1_score or 0,
                'team2Score': team2_score or 0,
                'gameIsActive': bool(active),
            }
            if self._stored is not None:
                current_app.logger.info(f"[handoff-store] overwriting unconsumed result for record={self._source_id}")
            self._stored = merged
            self._source_id = record.id
            current_app.logger.info(f"[handoff-store] game={data['game_no']} record={record.id} players={len(merged['players'])}")
            return merged

    def take(self) -> Optional[dict]:
        """Return the parked result and retire its record, or None when empty."""
        with self._lock:
            if self._stored is None:
                return None
            snapshot, source_id = self._stored, self._source_id
            self._stored = None
            self._source_id = None
            if source_id is not None:
                try:
                    self._catalog.delete(source_id)
                    current_app.logger.info(f"[handoff-take] record={source_id} deleted after handoff")
                except StorageUnavailable as exc:
                    current_app.logger.error(f"[handoff-take] record={source_id} not deleted: {exc}")
            return snapshot
