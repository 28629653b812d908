"""Leaderboard aggregation over tips and race results."""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from tipster.config import ScoringConfig
from tipster.scoring.settlement import SettlementCalculator
from tipster.scoring.types import LeaderboardRow, Race, RaceResult, Tip, is_settled

SCOPE_DAY = "day"
SCOPE_ALL = "all"


@dataclass(frozen=True)
class Scope:
    """Which tips a leaderboard covers: one race day, or everything."""

    kind: str
    day: Optional[str] = None

    @classmethod
    def for_day(cls, day: Optional[str]) -> "Scope":
        return cls(SCOPE_DAY, day)

    @classmethod
    def cumulative(cls) -> "Scope":
        return cls(SCOPE_ALL)


class LeaderboardAggregator:
    """Folds tips and results into ranked standings.

    Only races with a recorded result count, in either scope, so nobody can
    lead on tips for races that have not been run. Rows are rebuilt from
    scratch on every call.

    Ties on profit are broken by fewer tips, then display name
    (case-insensitive), then user id.
    """

    def __init__(self, config: ScoringConfig, races: Iterable[Race] = ()):
        self.config = config
        self.calculator = SettlementCalculator(config)
        self.races_by_id = {r.id: r for r in races}

    def aggregate(
        self,
        tips: Iterable[Tip],
        results_by_id: Mapping[str, RaceResult],
        scope: Scope,
        users_by_id: Optional[Mapping[str, str]] = None,
    ) -> list[LeaderboardRow]:
        users_by_id = users_by_id or {}

        completed = [t for t in tips if is_settled(results_by_id.get(t.race_id))]
        if scope.kind == SCOPE_DAY:
            if not scope.day:
                return []
            completed = [t for t in completed if self._race_date(t) == scope.day]

        by_user: dict[str, LeaderboardRow] = {}
        for tip in completed:
            user_id = tip.user_id or "unknown"
            row = by_user.get(user_id)
            if row is None:
                row = LeaderboardRow(
                    user_id=user_id,
                    display_name=self._display_name(user_id, tip, users_by_id),
                )
                by_user[user_id] = row

            row.tip_count += 1
            row.total_profit += self.calculator.settle(
                tip, results_by_id.get(tip.race_id)
            )

        rows = sorted(
            by_user.values(),
            key=lambda r: (
                -r.total_profit,
                r.tip_count,
                r.display_name.casefold(),
                r.user_id,
            ),
        )

        leader_profit = rows[0].total_profit if rows else 0.0
        for i, row in enumerate(rows):
            row.rank = i + 1
            row.behind_leader = leader_profit - row.total_profit

        return rows

    def _race_date(self, tip: Tip) -> Optional[str]:
        race = self.races_by_id.get(tip.race_id)
        if race is not None:
            return race.date
        return tip.date or None

    @staticmethod
    def _display_name(
        user_id: str, tip: Tip, users_by_id: Mapping[str, str]
    ) -> str:
        return users_by_id.get(user_id) or tip.user_email or user_id


def position_of(
    rows: list[LeaderboardRow], user_id: str
) -> Optional[LeaderboardRow]:
    """A player's row, or None if they are not on the board."""
    for row in rows:
        if row.user_id == user_id:
            return row
    return None
