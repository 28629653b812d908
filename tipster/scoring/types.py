"""Value types shared by the scoring components."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Race:
    """A scheduled race on the card."""

    id: str
    name: str
    date: str  # YYYY-MM-DD, race-local
    lock_at: Optional[int] = None  # epoch millis; tips frozen from this instant
    horses: tuple[str, ...] = ()

    def has_horse(self, horse_name: str) -> bool:
        return horse_name in self.horses


def tip_id_for(user_id: str, race_id: str) -> str:
    """Deterministic tip id: one tip per (user, race)."""
    return f"{user_id}_{race_id}"


@dataclass(frozen=True)
class Tip:
    """A player's selection for one race."""

    user_id: str
    race_id: str
    horse_name: str
    user_email: str = ""
    race_name: str = ""
    date: str = ""
    lock_at: Optional[int] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @property
    def id(self) -> str:
        return tip_id_for(self.user_id, self.race_id)


@dataclass(frozen=True)
class Placement:
    """A recorded finishing position with its settled odds."""

    position: int
    horse_name: str
    odds_decimal: float
    odds_display: str = ""

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "horse_name": self.horse_name,
            "odds_decimal": self.odds_decimal,
            "odds_display": self.odds_display,
        }


# --- Race result variants ---


@dataclass(frozen=True)
class Pending:
    """No result recorded yet."""


@dataclass(frozen=True)
class WinnerOnly:
    """Legacy result carrying only the winner's name."""

    horse_name: str


@dataclass(frozen=True)
class FullResult:
    """Authoritative result with placings and each-way terms.

    ``places_paid`` / ``each_way_fraction`` may be None for documents stored
    without terms; settlement then applies the configured defaults.
    ``winner_horse`` is the declared 1st place, kept even when its odds were
    unusable and its placement was dropped.
    """

    placements: tuple[Placement, ...] = ()
    places_paid: Optional[int] = None
    each_way_fraction: Optional[float] = None
    winner_horse: Optional[str] = None

    def placement_for(self, horse_name: str) -> Optional[Placement]:
        for placement in self.placements:
            if placement.horse_name == horse_name:
                return placement
        return None

    def at_position(self, position: int) -> Optional[Placement]:
        for placement in self.placements:
            if placement.position == position:
                return placement
        return None

    @property
    def winner(self) -> Optional[Placement]:
        return self.at_position(1)


RaceResult = Union[Pending, WinnerOnly, FullResult]

PENDING = Pending()


def is_settled(result: Optional[RaceResult]) -> bool:
    """Whether a result has been recorded (pending and missing are not)."""
    return result is not None and not isinstance(result, Pending)


def winner_name(result: Optional[RaceResult]) -> Optional[str]:
    """Name of the winning horse, if the result declares one."""
    if isinstance(result, WinnerOnly):
        return result.horse_name
    if isinstance(result, FullResult):
        winner = result.winner
        return winner.horse_name if winner else result.winner_horse or None
    return None


def result_from_document(doc) -> RaceResult:
    """Coerce a stored result document into a result variant.

    Accepts None (pending), a bare winner string (legacy), a dict with only
    ``winner_horse`` (legacy), or a dict with ``placements``.
    """
    if doc is None:
        return PENDING
    if isinstance(doc, str):
        return WinnerOnly(doc) if doc else PENDING
    if not isinstance(doc, dict):
        raise TypeError(f"Unsupported result document: {type(doc).__name__}")

    raw_placements = doc.get("placements")
    if not raw_placements:
        winner = doc.get("winner_horse")
        return WinnerOnly(winner) if winner else PENDING

    placements = []
    for p in raw_placements:
        try:
            odds = float(p.get("odds_decimal"))
        except (TypeError, ValueError):
            odds = 0.0
        placements.append(
            Placement(
                position=int(p["position"]),
                horse_name=p["horse_name"],
                odds_decimal=odds,
                odds_display=p.get("odds_display") or "",
            )
        )
    placements.sort(key=lambda p: p.position)

    return FullResult(
        placements=tuple(placements),
        places_paid=doc.get("places_paid"),
        each_way_fraction=doc.get("each_way_fraction"),
        winner_horse=doc.get("winner_horse"),
    )


@dataclass
class LeaderboardRow:
    """A single row in the leaderboard."""

    user_id: str
    display_name: str
    total_profit: float = 0.0
    tip_count: int = 0
    rank: int = 0
    behind_leader: float = 0.0
