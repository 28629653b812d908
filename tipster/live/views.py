"""Live leaderboards recomputed from the store on every change."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tipster.config import ScoringConfig, uk_now
from tipster.live.feed import ChangeFeed, TOPIC_PROFILES, TOPIC_RESULTS, TOPIC_TIPS
from tipster.scoring.calendar import ActiveDayResolver
from tipster.scoring.leaderboard import SCOPE_ALL, LeaderboardAggregator, Scope
from tipster.scoring.types import LeaderboardRow, Race
from tipster.services.profiles import ProfileService
from tipster.services.results import ResultService
from tipster.services.tips import TipService

logger = logging.getLogger(__name__)


class LiveBoard:
    """Holds the current active day and both leaderboards.

    Every tip, result or profile notification triggers a full recompute
    from the store; clock ticks re-resolve the active day. Recomputes are
    serialised, and a duplicate notification just produces the same rows.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        races: list[Race],
        config: ScoringConfig,
        feed: ChangeFeed,
        clock: Callable[[], datetime] = uk_now,
    ):
        self.session_factory = session_factory
        self.races = list(races)
        self.config = config
        self.feed = feed
        self.clock = clock
        self.resolver = ActiveDayResolver(config)
        self.aggregator = LeaderboardAggregator(config, races)

        self.active_day: Optional[str] = None
        self.day_rows: list[LeaderboardRow] = []
        self.all_rows: list[LeaderboardRow] = []
        self.recomputes = 0

        self._lock = asyncio.Lock()
        self._unsubscribers: list[Callable[[], None]] = []

    def attach(self) -> None:
        """Subscribe to store changes."""
        if self._unsubscribers:
            return
        for topic in (TOPIC_TIPS, TOPIC_RESULTS, TOPIC_PROFILES):
            self._unsubscribers.append(self.feed.subscribe(topic, self._on_change))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def _on_change(self, topic: str, payload) -> None:
        logger.debug(f"Recompute triggered by {topic} ({payload})")
        await self.refresh()

    def rows_for(self, scope: Scope) -> list[LeaderboardRow]:
        if scope.kind == SCOPE_ALL:
            return self.all_rows
        if scope.day == self.active_day:
            return self.day_rows
        return []

    async def refresh(self) -> bool:
        """Recompute both leaderboards. Returns True if either changed."""
        async with self._lock:
            async with self.session_factory() as db:
                tips = await TipService(db, self.races).get_all_tips()
                results = await ResultService(db, self.races, self.config).get_results()
                names = await ProfileService(db).get_display_names()

            if self.active_day is None:
                self.active_day = self.resolver.resolve(self.races, self.clock())

            day_rows = self.aggregator.aggregate(
                tips, results, Scope.for_day(self.active_day), names
            )
            all_rows = self.aggregator.aggregate(
                tips, results, Scope.cumulative(), names
            )

            changed = day_rows != self.day_rows or all_rows != self.all_rows
            self.day_rows = day_rows
            self.all_rows = all_rows
            self.recomputes += 1
            return changed

    async def tick(self, now: Optional[datetime] = None) -> bool:
        """Clock tick: re-resolve the active day, refreshing on rollover.

        Returns True when the active day changed.
        """
        day = self.resolver.resolve(self.races, now or self.clock())
        if day == self.active_day:
            return False

        logger.info(f"Active race day changed: {self.active_day} -> {day}")
        self.active_day = day
        await self.refresh()
        return True
