"""Unit tests for each-way settlement."""

import math

import pytest

from tipster.config import ScoringConfig
from tipster.scoring.formatting import outcome_text
from tipster.scoring.settlement import (
    OUTCOME_LOST,
    OUTCOME_PENDING,
    OUTCOME_PLACED,
    OUTCOME_WON,
    SettlementCalculator,
)
from tipster.scoring.types import PENDING, FullResult, Placement, Tip, WinnerOnly


@pytest.fixture
def calc(config) -> SettlementCalculator:
    return SettlementCalculator(config)


def tip_on(horse: str, race_id: str = "race-1") -> Tip:
    return Tip(user_id="u1", race_id=race_id, horse_name=horse)


class TestSettle:
    """Tests for SettlementCalculator.settle."""

    def test_winner_pays_full_odds(self, calc):
        result = FullResult((Placement(1, "A", 6.0, "5/1"),), 3, 0.25)
        assert calc.settle(tip_on("A"), result, stake=1) == 5.0

    def test_second_pays_each_way_fraction(self, calc, race_one_result):
        # 1 * (4.0 - 1) * 0.25
        assert calc.settle(tip_on("Blue Derby"), race_one_result, stake=1) == 0.75

    def test_third_is_paid(self, calc, race_one_result):
        assert calc.settle(tip_on("Night Runner"), race_one_result, stake=1) == 2.0

    def test_fourth_outside_places(self, calc, race_one_result):
        assert calc.settle(tip_on("Golden Gale"), race_one_result, stake=1) == 0

    def test_unplaced_horse(self, calc, race_one_result):
        assert calc.settle(tip_on("Nobody"), race_one_result) == 0

    def test_pending_result(self, calc):
        assert calc.settle(tip_on("A"), None, 1) == 0
        assert calc.settle(tip_on("A"), PENDING, 1) == 0

    def test_stake_defaults_to_config(self):
        calc = SettlementCalculator(ScoringConfig(stake_amount=2.0))
        result = FullResult((Placement(1, "A", 3.0),), 3, 0.25)
        assert calc.settle(tip_on("A"), result) == 4.0

    def test_stake_scales(self, calc, race_one_result):
        assert calc.settle(tip_on("Red Comet"), race_one_result, stake=10) == 50.0

    def test_places_paid_respected(self, calc):
        result = FullResult(
            (Placement(1, "A", 5.0), Placement(2, "B", 5.0), Placement(3, "C", 5.0)),
            places_paid=2,
            each_way_fraction=0.2,
        )
        assert calc.settle(tip_on("B"), result, 1) == pytest.approx(0.8)
        assert calc.settle(tip_on("C"), result, 1) == 0

    def test_missing_terms_use_defaults(self, calc):
        result = FullResult((Placement(1, "A", 5.0), Placement(3, "C", 5.0)))
        assert calc.settle(tip_on("C"), result, 1) == 1.0

    @pytest.mark.parametrize("odds", [1.0, 0.5, 0.0, math.nan, math.inf])
    def test_bad_odds_pay_nothing(self, calc, odds):
        result = FullResult((Placement(1, "A", odds),), 3, 0.25)
        assert calc.settle(tip_on("A"), result, 1) == 0

    def test_legacy_winner_only(self, calc):
        assert calc.settle(tip_on("A"), WinnerOnly("A"), 1) == 1
        assert calc.settle(tip_on("B"), WinnerOnly("A"), 1) == 0

    def test_never_negative(self, calc, race_one_result):
        for horse in ("Red Comet", "Blue Derby", "Night Runner", "Golden Gale", "X"):
            assert calc.settle(tip_on(horse), race_one_result) >= 0

    def test_repeat_calls_identical(self, calc, race_one_result):
        tip = tip_on("Blue Derby")
        assert calc.settle(tip, race_one_result) == calc.settle(tip, race_one_result)


class TestDescribe:
    """Tests for outcome classification."""

    def test_pending(self, calc):
        assert calc.describe(tip_on("A"), None).status == OUTCOME_PENDING

    def test_won(self, calc, race_one_result):
        outcome = calc.describe(tip_on("Red Comet"), race_one_result)
        assert outcome.status == OUTCOME_WON
        assert outcome.profit == 5.0
        assert outcome.position == 1

    def test_placed(self, calc, race_one_result):
        outcome = calc.describe(tip_on("Blue Derby"), race_one_result)
        assert outcome.status == OUTCOME_PLACED
        assert outcome.position == 2

    def test_lost_reports_winner(self, calc, race_one_result):
        outcome = calc.describe(tip_on("Golden Gale"), race_one_result)
        assert outcome.status == OUTCOME_LOST
        assert outcome.profit == 0
        assert outcome.winner == "Red Comet"

    def test_unpriced_winner_still_reported(self, calc):
        result = FullResult((Placement(2, "B", 4.0, "3/1"),), 3, 0.25, winner_horse="A")
        outcome = calc.describe(tip_on("C"), result)
        assert outcome.status == OUTCOME_LOST
        assert outcome.winner == "A"
        assert outcome_text(outcome) == "Result: Lost (winner was A)"

    def test_unpriced_winner_pays_nothing(self, calc):
        result = FullResult((Placement(2, "B", 4.0, "3/1"),), 3, 0.25, winner_horse="A")
        assert calc.settle(tip_on("A"), result) == 0
        assert calc.settle(tip_on("B"), result) == 0.75

    def test_legacy_win(self, calc):
        outcome = calc.describe(tip_on("A"), WinnerOnly("A"))
        assert outcome.status == OUTCOME_WON
        assert outcome.profit == 1.0


class TestTotalFor:
    def test_sums_across_races(self, calc, race_one_result):
        tips = [tip_on("Red Comet", "race-1"), tip_on("Misty Ridge", "race-2")]
        results = {"race-1": race_one_result}
        assert calc.total_for(tips, results) == 5.0
