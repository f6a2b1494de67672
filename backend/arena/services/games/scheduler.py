"""Play-time slot allocation for completed games."""

import threading
from datetime import datetime
from typing import Callable, Optional


def minutes_to_time(total_minutes: int) -> str:
    """Render minutes since midnight as zero-padded HH:MM.

    Values past midnight are not wrapped, so 1455 renders as "24:15".
    """
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours:02d}:{minutes:02d}"


def time_to_minutes(value) -> int:
    """Parse "HH:MM" into minutes since midnight; anything unparseable is 0."""
    if not value or not isinstance(value, str):
        return 0
    parts = value.split(':')
    if len(parts) < 2:
        return 0
    try:
        hours = int(parts[0].strip())
        minutes = int(parts[1].strip())
    except ValueError:
        return 0
    return hours * 60 + minutes


def _minutes_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


class SchedulingClock:
    """Hands out monotonically non-decreasing play slots.

    The first game plays now. Every later game plays SLOT_GAP_MIN after the
    previous one, or now if that would already be in the past.
    """

    def __init__(self, gap_minutes: int = 30, now: Optional[Callable[[], datetime]] = None):
        self.gap_minutes = gap_minutes
        self._now = now or datetime.now
        self._lock = threading.Lock()
        self.game_counter = 0
        self.last_slot_minutes: Optional[int] = None

    def next_slot(self) -> int:
        current = _minutes_of_day(self._now())
        if self.game_counter == 0 or self.last_slot_minutes is None:
            return current
        return max(self.last_slot_minutes + self.gap_minutes, current)

    def schedule(self, team_one, team_two, persist):
        """Allocate the next slot and persist the game through ``persist``.

        ``persist(game_no=, team_one=, team_two=, play_time=)`` must return the
        stored record. The counter and last slot only advance once it returns,
        so a storage failure leaves the clock exactly as it was.
        """
        with self._lock:
            slot = self.next_slot()
            game_no = self.game_counter + 1
            record = persist(
                game_no=game_no,
                team_one=list(team_one),
                team_two=list(team_two),
                play_time=minutes_to_time(slot),
            )
            self.game_counter = game_no
            self.last_slot_minutes = slot
            return record

    def snapshot(self) -> dict:
        with self._lock:
            return {
                'game_counter': self.game_counter,
                'last_slot': minutes_to_time(self.last_slot_minutes) if self.last_slot_minutes is not None else None,
            }
