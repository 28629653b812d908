"""Tip lock gate: whether a race still accepts tip writes."""

from datetime import datetime
from typing import Optional, Union
from zoneinfo import ZoneInfo

from tipster.config import UK_TZ
from tipster.scoring.types import Race

Instant = Union[int, float, datetime]


class TipLockedError(ValueError):
    """Raised when a tip write arrives at or after the race's lock instant."""

    def __init__(self, race: Race):
        self.race = race
        super().__init__(
            f"{race.name} is locked. You can't submit or change your tip now."
        )


def to_epoch_ms(now: Instant, tz: ZoneInfo = UK_TZ) -> int:
    """Normalise an instant to epoch milliseconds.

    Naive datetimes are read as wall-clock time in ``tz``, never in the
    host's zone.
    """
    if isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=tz)
        return int(now.timestamp() * 1000)
    return int(now)


class LockGate:
    """Strict cutoff check. No grace period and no clock-skew tolerance."""

    def __init__(self, tz: ZoneInfo = UK_TZ):
        self.tz = tz

    def is_locked(self, race: Race, now: Instant) -> bool:
        if not race.lock_at:
            return False
        return to_epoch_ms(now, self.tz) >= race.lock_at

    def check(self, race: Race, now: Instant) -> None:
        """Raise TipLockedError if the race is locked at ``now``."""
        if self.is_locked(race, now):
            raise TipLockedError(race)

    def time_remaining_ms(self, race: Race, now: Instant) -> Optional[int]:
        """Milliseconds until lock, or None when the race has no lock time."""
        if not race.lock_at:
            return None
        return race.lock_at - to_epoch_ms(now, self.tz)
