"""Team assembly for the game currently being filled.

Identity events arrive one at a time from the card reader or the guest
registration form. Side A fills first, then side B; once B is full the
pair is scheduled, persisted and the lobby starts over empty.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from flask import current_app

ACCEPTED = 'accepted'
UNKNOWN_PLAYER = 'unknown-player'
INVALID_ID = 'invalid-id'
DUPLICATE_IN_TARGET = 'already-in-target'
DUPLICATE_ACROSS_TEAMS = 'already-in-other'
TEAM_FULL = 'team-full'

SIDE_A = 'A'
SIDE_B = 'B'


def player_id(player) -> Optional[str]:
    """Stable deduplication key for a player-like dict."""
    if not player:
        return None
    for key in ('id', 'rollNumber', 'roll'):
        value = player.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def guest_player(payload: dict, guest_roll: str) -> dict:
    """Build an ad-hoc PlayerRef from a guest registration body.

    The guest is keyed on the roll carried in the body (rollNumber, then
    roll, then id). Guests normally send the sentinel roll, so a second
    guest in the same game is rejected as a duplicate.
    """
    key = None
    for field_name in ('rollNumber', 'roll', 'id'):
        value = payload.get(field_name)
        if value is not None and str(value).strip():
            key = str(value).strip()
            break
    if key is None:
        key = guest_roll
    return {
        'id': key,
        'rollNumber': key,
        'name': str(payload.get('name') or '').strip(),
        'email': str(payload.get('email') or '').strip(),
        'mobile': str(payload.get('mobile') or '').strip(),
    }


@dataclass
class SubmitResult:
    accepted: bool
    reason: str = ACCEPTED
    player: Optional[dict] = None
    side: Optional[str] = None
    game: Any = None


@dataclass
class InProgressGame:
    team_a: List[dict] = field(default_factory=list)
    team_b: List[dict] = field(default_factory=list)
    filling_side: str = SIDE_A

    def target_and_other(self):
        if self.filling_side == SIDE_A:
            return self.team_a, self.team_b
        return self.team_b, self.team_a


class TeamAssembler:
    def __init__(self, resolve: Callable[[str], Optional[dict]], clock, catalog,
                 team_size: int = 4, guest_roll: str = '1'):
        self._resolve = resolve
        self._clock = clock
        self._catalog = catalog
        self.team_size = team_size
        self.guest_roll = guest_roll
        self._lock = threading.Lock()
        self._game = InProgressGame()

    def submit(self, identifier, payload: Optional[dict] = None) -> SubmitResult:
        """Process one identity event as a single indivisible step.

        Rejections come back as a result, never as an exception. Only
        StorageUnavailable propagates, and it leaves the lobby untouched.
        """
        with self._lock:
            if str(identifier) == self.guest_roll:
                player = guest_player(payload or {}, self.guest_roll)
            else:
                player = self._resolve(identifier)
                if player is None:
                    current_app.logger.info(f"[assembler-skip] roll={identifier} reason={UNKNOWN_PLAYER}")
                    return SubmitResult(False, UNKNOWN_PLAYER)
            return self._place(player)

    def _place(self, player: dict) -> SubmitResult:
        game = self._game
        side = game.filling_side
        target, other = game.target_and_other()
        pid = player_id(player)

        reason = None
        if pid is None:
            reason = INVALID_ID
        elif any(player_id(p) == pid for p in target):
            reason = DUPLICATE_IN_TARGET
        elif any(player_id(p) == pid for p in other):
            reason = DUPLICATE_ACROSS_TEAMS
        elif len(target) >= self.team_size:
            reason = TEAM_FULL
        if reason:
            current_app.logger.info(f"[assembler-skip] player={pid} side={side} reason={reason}")
            return SubmitResult(False, reason, player=player, side=side)

        if side == SIDE_A:
            target.append(player)
            current_app.logger.info(f"[assembler-add] player={pid} side=A size={len(target)}/{self.team_size}")
            if len(target) == self.team_size:
                game.filling_side = SIDE_B
                current_app.logger.info('[assembler] team A complete, filling team B')
            return SubmitResult(True, player=player, side=side)

        if len(target) + 1 < self.team_size:
            target.append(player)
            current_app.logger.info(f"[assembler-add] player={pid} side=B size={len(target)}/{self.team_size}")
            return SubmitResult(True, player=player, side=side)

        # Last seat: persist before touching the lobby so a store failure can be retried
        record = self._clock.schedule(game.team_a, game.team_b + [player], self._catalog.add)
        current_app.logger.info(
            f"[schedule] game={record.game_no} play_time={record.play_time} "
            f"team_one={[player_id(p) for p in record.team_one]} team_two={[player_id(p) for p in record.team_two]}"
        )
        self._game = InProgressGame()
        return SubmitResult(True, player=player, side=side, game=record)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                'team_a': list(self._game.team_a),
                'team_b': list(self._game.team_b),
                'filling_side': self._game.filling_side,
                'team_size': self.team_size,
            }
