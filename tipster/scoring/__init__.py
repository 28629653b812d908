"""Pure scoring core: odds, settlement, race-day gating and leaderboards."""

from tipster.scoring.calendar import ActiveDayResolver, race_days, races_on
from tipster.scoring.drafts import ResultDraft, ResultDraftValidator, ResultValidationError
from tipster.scoring.leaderboard import LeaderboardAggregator, Scope, position_of
from tipster.scoring.lock import LockGate, TipLockedError
from tipster.scoring.odds import parse_fraction, parse_fractional_or_decimal
from tipster.scoring.settlement import SettlementCalculator, TipOutcome

__all__ = [
    "ActiveDayResolver",
    "LeaderboardAggregator",
    "LockGate",
    "ResultDraft",
    "ResultDraftValidator",
    "ResultValidationError",
    "Scope",
    "SettlementCalculator",
    "TipLockedError",
    "TipOutcome",
    "parse_fraction",
    "parse_fractional_or_decimal",
    "position_of",
    "race_days",
    "races_on",
]
