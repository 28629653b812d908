"""Each-way settlement of fixed-stake tips."""

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from tipster.config import ScoringConfig
from tipster.scoring.types import (
    FullResult,
    Pending,
    RaceResult,
    Tip,
    WinnerOnly,
    winner_name,
)

OUTCOME_PENDING = "pending"
OUTCOME_WON = "won"
OUTCOME_PLACED = "placed"
OUTCOME_LOST = "lost"


@dataclass(frozen=True)
class TipOutcome:
    """How a single tip fared against its race result."""

    status: str  # pending | won | placed | lost
    profit: float = 0.0
    position: Optional[int] = None
    winner: Optional[str] = None


class SettlementCalculator:
    """Pure profit calculator for one tip against one race result."""

    def __init__(self, config: ScoringConfig):
        self.config = config

    def settle(
        self,
        tip: Tip,
        result: Optional[RaceResult],
        stake: Optional[float] = None,
    ) -> float:
        """Profit for a tip. Never negative; 0 while the race is pending.

        Winner pays ``stake * (odds - 1)``; positions 2..places_paid pay that
        amount times the each-way fraction; anything else pays nothing.
        """
        if stake is None:
            stake = self.config.stake_amount

        if result is None or isinstance(result, Pending):
            return 0.0

        if isinstance(result, WinnerOnly):
            return float(stake) if result.horse_name == tip.horse_name else 0.0

        placement = result.placement_for(tip.horse_name)
        if placement is None:
            return 0.0

        odds = placement.odds_decimal
        if odds is None or not math.isfinite(odds) or odds <= 1:
            return 0.0

        win_profit = stake * (odds - 1)

        if placement.position == 1:
            return win_profit

        places_paid = self._places_paid(result)
        if 1 < placement.position <= places_paid:
            return win_profit * self._each_way_fraction(result)

        return 0.0

    def describe(self, tip: Tip, result: Optional[RaceResult]) -> TipOutcome:
        """Settle a tip and classify the outcome for display."""
        if result is None or isinstance(result, Pending):
            return TipOutcome(OUTCOME_PENDING)

        profit = self.settle(tip, result)
        winner = winner_name(result)

        position = None
        if isinstance(result, FullResult):
            placement = result.placement_for(tip.horse_name)
            position = placement.position if placement else None
        elif winner == tip.horse_name:
            position = 1

        if profit <= 0:
            return TipOutcome(OUTCOME_LOST, 0.0, position, winner)
        if position == 1:
            return TipOutcome(OUTCOME_WON, profit, position, winner)
        return TipOutcome(OUTCOME_PLACED, profit, position, winner)

    def total_for(
        self,
        tips: Iterable[Tip],
        results_by_id: Mapping[str, RaceResult],
        stake: Optional[float] = None,
    ) -> float:
        """Sum of a player's profit across their tips."""
        return sum(
            self.settle(tip, results_by_id.get(tip.race_id), stake)
            for tip in tips
        )

    def _places_paid(self, result: FullResult) -> int:
        if result.places_paid is None:
            return self.config.default_places_paid
        return result.places_paid

    def _each_way_fraction(self, result: FullResult) -> float:
        if result.each_way_fraction is None:
            return self.config.default_each_way_fraction
        return result.each_way_fraction
