"""Active race-day resolution."""

from datetime import datetime
from typing import Iterable, Optional

from tipster.config import ScoringConfig
from tipster.scoring.types import Race


def race_days(races: Iterable[Race]) -> list[str]:
    """Sorted distinct race dates on the card."""
    return sorted({r.date for r in races})


def races_on(races: Iterable[Race], day: Optional[str]) -> list[Race]:
    """Races run on a given day, in card order."""
    if not day:
        return []
    return [r for r in races if r.date == day]


class ActiveDayResolver:
    """Decides which race day is currently live.

    The live day rolls over to the next card at ``day_rollover_hour`` local
    time rather than at midnight, so evening visitors see tomorrow's races.
    Pure given (races, now); callers re-run it on a periodic tick.
    """

    def __init__(self, config: ScoringConfig):
        self.config = config

    def resolve(self, races: Iterable[Race], now: datetime) -> Optional[str]:
        days = race_days(races)
        if not days:
            return None

        local = self._localize(now)
        today = local.date().isoformat()
        hour = local.hour

        if today not in days:
            if today > days[-1]:
                return days[-1]
            # Before the card, or a blank day inside it
            return days[0]

        index = days.index(today)
        if hour >= self.config.day_rollover_hour and index < len(days) - 1:
            return days[index + 1]
        return today

    def _localize(self, now: datetime) -> datetime:
        if now.tzinfo is None:
            return now.replace(tzinfo=self.config.tz)
        return now.astimezone(self.config.tz)
