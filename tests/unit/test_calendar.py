"""Unit tests for active race-day resolution."""

from datetime import datetime, timezone

import pytest

from tipster.config import ScoringConfig, UK_TZ
from tipster.scoring.calendar import ActiveDayResolver, race_days, races_on
from tipster.scoring.types import Race


def card(*dates: str) -> list[Race]:
    return [Race(id=f"r{i}", name=f"Race {i}", date=d) for i, d in enumerate(dates)]


def local(y, m, d, hour, minute=0) -> datetime:
    return datetime(y, m, d, hour, minute, tzinfo=UK_TZ)


@pytest.fixture
def resolver(config) -> ActiveDayResolver:
    return ActiveDayResolver(config)


class TestRaceDays:
    def test_sorted_distinct(self):
        assert race_days(card("2026-01-14", "2026-01-13", "2026-01-14")) == [
            "2026-01-13",
            "2026-01-14",
        ]

    def test_races_on(self):
        races = card("2026-01-13", "2026-01-14", "2026-01-13")
        assert [r.id for r in races_on(races, "2026-01-13")] == ["r0", "r2"]
        assert races_on(races, None) == []


class TestResolve:
    """Tests for ActiveDayResolver.resolve."""

    def test_no_races(self, resolver):
        assert resolver.resolve([], local(2026, 1, 13, 10)) is None

    def test_morning_of_race_day(self, resolver):
        races = card("2026-01-13")
        assert resolver.resolve(races, local(2026, 1, 13, 10)) == "2026-01-13"

    def test_evening_rolls_to_next_day(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 1, 13, 19)) == "2026-01-14"

    def test_rollover_exactly_at_switch_hour(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 1, 13, 18, 0)) == "2026-01-14"
        assert resolver.resolve(races, local(2026, 1, 13, 17, 59)) == "2026-01-13"

    def test_last_day_stays_after_switch_hour(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 1, 14, 22)) == "2026-01-14"

    def test_before_first_day_clamps(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 1, 1, 20)) == "2026-01-13"

    def test_after_last_day_clamps(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 2, 1, 9)) == "2026-01-14"

    def test_gap_day_falls_back_to_first_day(self, resolver):
        races = card("2026-01-13", "2026-01-15", "2026-01-16")
        assert resolver.resolve(races, local(2026, 1, 14, 9)) == "2026-01-13"

    def test_gap_day_ignores_rollover_hour(self, resolver):
        races = card("2026-01-13", "2026-01-15", "2026-01-16")
        assert resolver.resolve(races, local(2026, 1, 14, 20)) == "2026-01-13"

    def test_uses_local_time_not_utc(self, resolver):
        # 17:30 UTC is 18:30 BST, past the switch hour
        races = card("2026-06-13", "2026-06-14")
        utc_now = datetime(2026, 6, 13, 17, 30, tzinfo=timezone.utc)
        assert resolver.resolve(races, utc_now) == "2026-06-14"

    def test_naive_now_is_local(self, resolver):
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, datetime(2026, 1, 13, 10)) == "2026-01-13"

    def test_configurable_switch_hour(self):
        resolver = ActiveDayResolver(ScoringConfig(day_rollover_hour=21))
        races = card("2026-01-13", "2026-01-14")
        assert resolver.resolve(races, local(2026, 1, 13, 19)) == "2026-01-13"
