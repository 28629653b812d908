"""Admin result drafts and their validation into authoritative results."""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from tipster.config import ScoringConfig
from tipster.scoring.odds import parse_fraction, parse_fractional_or_decimal
from tipster.scoring.types import FullResult, Placement, Race

POSITIONS = tuple(range(1, 9))


class ResultValidationError(ValueError):
    """A result draft that cannot become an authoritative result."""

    title = "Invalid result"


class MissingWinnerError(ResultValidationError):
    title = "Missing winner"

    def __init__(self):
        super().__init__("Please set the 1st place horse.")


class MissingOddsError(ResultValidationError):
    title = "Missing odds"

    def __init__(self):
        super().__init__("Enter odds for at least the winner.")


class DuplicateHorseError(ResultValidationError):
    title = "Duplicate horse"

    def __init__(self, horse_name: str):
        self.horse_name = horse_name
        super().__init__(f"{horse_name} is set for more than one position.")


class UnknownHorseError(ResultValidationError):
    title = "Unknown horse"

    def __init__(self, horse_name: str, race: Race):
        self.horse_name = horse_name
        super().__init__(f"{horse_name} is not in the field for {race.name}.")


@dataclass
class DraftPlacement:
    horse_name: str = ""
    odds_input: str = ""


@dataclass
class ResultDraft:
    """Admin input for one race, positions 1-8.

    ``places_paid`` and ``each_way_fraction`` hold whatever was typed, or None;
    the validator coerces them and falls back to the configured defaults.
    """

    placements: dict[int, DraftPlacement] = field(
        default_factory=lambda: {pos: DraftPlacement() for pos in POSITIONS}
    )
    places_paid: Any = None
    each_way_fraction: Any = None

    def assign_horse(self, position: int, horse_name: str) -> None:
        """Put a horse in a position, clearing it from any other position."""
        if position not in POSITIONS:
            raise ValueError(f"Position must be 1-8, got {position}")
        for entry in self.placements.values():
            if entry.horse_name == horse_name:
                entry.horse_name = ""
        self.placements.setdefault(position, DraftPlacement()).horse_name = horse_name

    def set_odds(self, position: int, text: str) -> None:
        if position not in POSITIONS:
            raise ValueError(f"Position must be 1-8, got {position}")
        self.placements.setdefault(position, DraftPlacement()).odds_input = text

    def horse_at(self, position: int) -> str:
        entry = self.placements.get(position)
        return entry.horse_name if entry else ""

    @classmethod
    def from_result(cls, result: FullResult) -> "ResultDraft":
        """Start a draft from an existing result so it can be corrected."""
        draft = cls()
        for placement in result.placements:
            draft.assign_horse(placement.position, placement.horse_name)
            draft.set_odds(
                placement.position,
                placement.odds_display or str(placement.odds_decimal),
            )
        if result.winner is None and result.winner_horse:
            draft.assign_horse(1, result.winner_horse)
        if result.places_paid is not None:
            draft.places_paid = result.places_paid
        if result.each_way_fraction is not None:
            draft.each_way_fraction = result.each_way_fraction
        return draft


class ResultDraftValidator:
    """Turns a draft into a FullResult or raises ResultValidationError."""

    def __init__(self, config: ScoringConfig):
        self.config = config

    def validate(self, draft: ResultDraft, race: Optional[Race] = None) -> FullResult:
        if not draft.horse_at(1):
            raise MissingWinnerError()

        seen: set[str] = set()
        for pos in POSITIONS:
            name = draft.horse_at(pos)
            if not name:
                continue
            if name in seen:
                raise DuplicateHorseError(name)
            seen.add(name)
            if race is not None and not race.has_horse(name):
                raise UnknownHorseError(name, race)

        placements = []
        for pos in POSITIONS:
            entry = draft.placements.get(pos)
            if entry is None or not entry.horse_name:
                continue
            odds = parse_fractional_or_decimal(entry.odds_input)
            if odds is None or not math.isfinite(odds) or odds <= 1:
                # Unpriced positions are treated as not recorded
                continue
            placements.append(
                Placement(
                    position=pos,
                    horse_name=entry.horse_name,
                    odds_decimal=odds,
                    odds_display=str(entry.odds_input).strip(),
                )
            )

        if not placements:
            raise MissingOddsError()

        return FullResult(
            placements=tuple(placements),
            places_paid=self._coerce_places_paid(draft.places_paid),
            each_way_fraction=self._coerce_each_way_fraction(draft.each_way_fraction),
            winner_horse=draft.horse_at(1),
        )

    def _coerce_places_paid(self, value: Any) -> int:
        try:
            places = int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return self.config.default_places_paid
        if places < 1:
            return self.config.default_places_paid
        return places

    def _coerce_each_way_fraction(self, value: Any) -> float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            fraction = float(value)
        else:
            fraction = parse_fraction(value)
        if fraction is None or not math.isfinite(fraction) or not 0 < fraction <= 1:
            return self.config.default_each_way_fraction
        return fraction
