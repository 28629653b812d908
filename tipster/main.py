"""Runtime wiring: store, change feed, live board and clock ticks."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tipster.card import load_card
from tipster.config import ScoringConfig, Settings, get_settings
from tipster.live.feed import ChangeFeed
from tipster.live.views import LiveBoard
from tipster.models.database import async_session, init_db
from tipster.scheduler.manager import SchedulerManager
from tipster.scoring.types import Race
from tipster.services.leaderboard import LeaderboardService
from tipster.services.profiles import ProfileService
from tipster.services.results import ResultService
from tipster.services.tips import TipService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


class TippingRuntime:
    """Owns the long-lived pieces an embedding process needs.

    Services are created per session via the ``*_service`` helpers and share
    one change feed, so every write reaches the live board.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_factory: async_sessionmaker[AsyncSession] = async_session,
        races: Optional[list[Race]] = None,
    ):
        self.settings = settings or get_settings()
        self.config = ScoringConfig.from_settings(self.settings)
        self.session_factory = session_factory
        self.races = races if races is not None else load_card(self.settings.card_path)
        self.feed = ChangeFeed()
        self.board = LiveBoard(session_factory, self.races, self.config, self.feed)
        self.scheduler = SchedulerManager(self.config.tz)

    async def startup(self, create_tables: bool = True) -> None:
        configure_logging(self.settings)
        if create_tables:
            await init_db()
        self.board.attach()
        if not await self.board.tick():
            await self.board.refresh()
        self.scheduler.setup_clock_tick(self.board.tick, seconds=self.settings.tick_seconds)
        await self.scheduler.start()
        logger.info(
            f"Tipping runtime started: {len(self.races)} races, active day {self.board.active_day}"
        )

    async def shutdown(self) -> None:
        await self.scheduler.stop()
        self.board.detach()
        logger.info("Tipping runtime stopped")

    def tip_service(self, db: AsyncSession) -> TipService:
        return TipService(db, self.races, self.feed)

    def result_service(self, db: AsyncSession) -> ResultService:
        return ResultService(db, self.races, self.config, self.feed)

    def profile_service(self, db: AsyncSession) -> ProfileService:
        return ProfileService(db, self.feed)

    def leaderboard_service(self, db: AsyncSession) -> LeaderboardService:
        return LeaderboardService(db, self.races, self.config)
