"""Tests for leaderboards computed from the store."""

import pytest

from tipster.scoring.drafts import ResultDraft
from tipster.scoring.leaderboard import Scope
from tipster.services.leaderboard import LeaderboardService
from tipster.services.profiles import ProfileService
from tipster.services.results import ResultService
from tipster.services.tips import TipService

ADMIN = "admin@example.com"


def winner_draft(horse: str, odds: str) -> ResultDraft:
    draft = ResultDraft()
    draft.assign_horse(1, horse)
    draft.set_odds(1, odds)
    return draft


@pytest.fixture
async def seeded(db_session, races, config):
    tips = TipService(db_session, races, clock=lambda: races[0].lock_at - 1)
    await tips.submit_tip("alice", "alice@example.com", "race-1", "Red Comet")
    await tips.submit_tip("bob", "bob@example.com", "race-1", "Blue Derby")
    await tips.submit_tip("bob", "bob@example.com", "race-2", "River Jet")
    await ProfileService(db_session).set_display_name("bob", "bob@example.com", "Bobby")
    await ResultService(db_session, races, config).save_result(
        "race-1", winner_draft("Red Comet", "5/1"), ADMIN
    )
    return db_session


class TestLeaderboardService:
    async def test_cumulative(self, seeded, races, config):
        service = LeaderboardService(seeded, races, config)
        rows = await service.get_leaderboard(Scope.cumulative())
        assert [(r.display_name, r.total_profit, r.tip_count) for r in rows] == [
            ("alice@example.com", 5.0, 1),
            ("Bobby", 0.0, 1),
        ]

    async def test_day_scope_excludes_other_days(self, seeded, races, config):
        service = LeaderboardService(seeded, races, config)
        assert await service.get_leaderboard(Scope.for_day("2026-01-14")) == []

    async def test_result_replacement_resettles(self, seeded, races, config):
        await ResultService(seeded, races, config).save_result(
            "race-1", winner_draft("Blue Derby", "2/1"), ADMIN
        )
        rows = await LeaderboardService(seeded, races, config).get_leaderboard(Scope.cumulative())
        assert rows[0].display_name == "Bobby"
        assert rows[0].total_profit == 2.0

    async def test_user_position(self, seeded, races, config):
        service = LeaderboardService(seeded, races, config)
        row = await service.get_user_position("bob", Scope.cumulative())
        assert row.rank == 2
        assert await service.get_user_position("nobody", Scope.cumulative()) is None

    async def test_summary(self, seeded, races, config):
        summary = await LeaderboardService(seeded, races, config).get_summary(Scope.cumulative())
        assert summary["total_players"] == 2
        assert summary["leader"] == {"display_name": "alice@example.com", "profit": 5.0}

    async def test_empty_summary(self, db_session, races, config):
        summary = await LeaderboardService(db_session, races, config).get_summary(Scope.cumulative())
        assert summary == {"total_players": 0, "leader": None, "top_3": []}
