"""The race card: configured races that tips can be placed against."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator

from tipster.config import get_settings
from tipster.scoring.types import Race

logger = logging.getLogger(__name__)


class RaceConfig(BaseModel):
    """One race as written in a card file."""

    id: str
    name: str
    date: str
    lock_at: Optional[int] = None  # epoch millis
    horses: list[str]

    @field_validator("date")
    @classmethod
    def _check_date(cls, v: str) -> str:
        date.fromisoformat(v)
        return v

    @field_validator("lock_at", mode="before")
    @classmethod
    def _parse_lock_at(cls, v):
        # Card files may give an ISO timestamp instead of epoch millis
        if isinstance(v, str):
            return _ms(v)
        return v

    @field_validator("horses")
    @classmethod
    def _check_horses(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("a race needs at least one horse")
        if len(set(v)) != len(v):
            raise ValueError("horse names must be distinct")
        return v

    def to_race(self) -> Race:
        return Race(
            id=self.id,
            name=self.name,
            date=self.date,
            lock_at=self.lock_at,
            horses=tuple(self.horses),
        )


def _ms(iso: str) -> int:
    return int(datetime.fromisoformat(iso.replace("Z", "+00:00")).timestamp() * 1000)


DEFAULT_CARD: tuple[Race, ...] = (
    Race(
        id="race-1",
        name="Kempton 14:30",
        date="2026-01-13",
        lock_at=_ms("2026-01-13T14:25:00Z"),
        horses=("Red Comet", "Blue Derby", "Night Runner", "Golden Gale"),
    ),
    Race(
        id="race-2",
        name="Cheltenham 15:05",
        date="2026-01-13",
        lock_at=_ms("2026-01-13T14:25:00Z"),
        horses=("Silver Arrow", "Misty Ridge", "King’s Honour", "River Jet"),
    ),
)


def parse_card(data: list[dict]) -> list[Race]:
    """Validate raw card entries and return races in card order."""
    races = [RaceConfig.model_validate(entry).to_race() for entry in data]
    ids = [r.id for r in races]
    if len(set(ids)) != len(ids):
        raise ValueError("race ids must be unique within a card")
    return races


def load_card(path: Optional[Path] = None) -> list[Race]:
    """Load the race card from JSON, or fall back to the built-in card."""
    if path is None:
        path = get_settings().card_path
    if path is None:
        return list(DEFAULT_CARD)

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    races = parse_card(data)
    logger.info(f"Loaded {len(races)} races from {path}")
    return races


def races_by_id(races: list[Race]) -> dict[str, Race]:
    return {r.id: r for r in races}
