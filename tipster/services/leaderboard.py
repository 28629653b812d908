"""Leaderboard loading service."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from tipster.config import ScoringConfig
from tipster.scoring.leaderboard import LeaderboardAggregator, Scope, position_of
from tipster.scoring.types import LeaderboardRow, Race
from tipster.services.profiles import ProfileService
from tipster.services.results import ResultService
from tipster.services.tips import TipService


class LeaderboardService:
    """Reads the current tips, results and profiles and ranks players."""

    def __init__(self, db: AsyncSession, races: list[Race], config: ScoringConfig):
        self.db = db
        self.races = list(races)
        self.config = config
        self.aggregator = LeaderboardAggregator(config, races)

    async def get_leaderboard(self, scope: Scope) -> list[LeaderboardRow]:
        """Full recompute of the standings for a scope."""
        tips = await TipService(self.db, self.races).get_all_tips()
        results = await ResultService(self.db, self.races, self.config).get_results()
        names = await ProfileService(self.db).get_display_names()
        return self.aggregator.aggregate(tips, results, scope, names)

    async def get_user_position(
        self, user_id: str, scope: Scope
    ) -> Optional[LeaderboardRow]:
        """A user's row for a scope, if they have any settled tips in it."""
        return position_of(await self.get_leaderboard(scope), user_id)

    async def get_summary(self, scope: Scope) -> dict:
        """Headline figures for a leaderboard scope."""
        rows = await self.get_leaderboard(scope)
        if not rows:
            return {"total_players": 0, "leader": None, "top_3": []}

        return {
            "total_players": len(rows),
            "leader": {
                "display_name": rows[0].display_name,
                "profit": rows[0].total_profit,
            },
            "top_3": [
                {
                    "rank": r.rank,
                    "display_name": r.display_name,
                    "profit": r.total_profit,
                    "tips": r.tip_count,
                }
                for r in rows[:3]
            ],
        }
