"""Tip submission service."""

import logging
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tipster.config import ScoringConfig, now_ms
from tipster.live.feed import ChangeFeed, TOPIC_TIPS
from tipster.models.tipping import TipRecord
from tipster.scoring.lock import LockGate, TipLockedError
from tipster.scoring.settlement import SettlementCalculator
from tipster.scoring.types import Race, RaceResult, Tip, tip_id_for

logger = logging.getLogger(__name__)


class TipError(ValueError):
    """A tip that refers to an unknown race or horse."""


class TipService:
    """Service for creating and reading players' tips."""

    def __init__(
        self,
        db: AsyncSession,
        races: list[Race],
        feed: Optional[ChangeFeed] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.db = db
        self.races = {r.id: r for r in races}
        self.feed = feed
        self.clock = clock
        self.lock_gate = LockGate()

    async def submit_tip(
        self,
        user_id: str,
        user_email: str,
        race_id: str,
        horse_name: str,
    ) -> TipRecord:
        """Create or replace the user's tip for a race.

        The lock is checked against a fresh clock reading right before the
        write, so a form rendered before the cutoff cannot sneak a tip in
        after it.
        """
        race = self.races.get(race_id)
        if not race:
            raise TipError("Race not found")
        if not race.has_horse(horse_name):
            raise TipError(f"{horse_name} is not running in {race.name}")

        now = self.clock()
        try:
            self.lock_gate.check(race, now)
        except TipLockedError:
            logger.info(f"Rejected tip from {user_id} on locked race {race_id}")
            raise

        tip_id = tip_id_for(user_id, race_id)
        tip = await self.db.get(TipRecord, tip_id)

        if tip:
            tip.horse_name = horse_name
            tip.user_email = user_email or ""
            tip.race_name = race.name
            tip.date = race.date
            tip.lock_at = race.lock_at
            tip.updated_at = now
        else:
            tip = TipRecord(
                id=tip_id,
                user_id=user_id,
                user_email=user_email or "",
                race_id=race.id,
                race_name=race.name,
                date=race.date,
                horse_name=horse_name,
                lock_at=race.lock_at,
                created_at=now,
                updated_at=now,
            )
            self.db.add(tip)

        await self.db.commit()
        await self.db.refresh(tip)
        logger.info(f"Tip saved: {user_id} -> {horse_name} ({race.name})")

        if self.feed:
            await self.feed.publish(TOPIC_TIPS, tip.id)
        return tip

    async def get_tip(self, user_id: str, race_id: str) -> Optional[TipRecord]:
        return await self.db.get(TipRecord, tip_id_for(user_id, race_id))

    async def get_user_tips(self, user_id: str) -> list[Tip]:
        """All of a user's tips, in race date order."""
        result = await self.db.execute(
            select(TipRecord)
            .where(TipRecord.user_id == user_id)
            .order_by(TipRecord.date, TipRecord.race_id)
        )
        return [t.to_tip() for t in result.scalars().all()]

    async def get_all_tips(self) -> list[Tip]:
        result = await self.db.execute(
            select(TipRecord).order_by(TipRecord.id)
        )
        return [t.to_tip() for t in result.scalars().all()]

    async def get_user_summary(
        self,
        user_id: str,
        results_by_id: dict[str, RaceResult],
        config: ScoringConfig,
    ) -> dict:
        """Tip count and running profit for a user's home screen."""
        tips = await self.get_user_tips(user_id)
        calculator = SettlementCalculator(config)
        return {
            "total_tips": len(tips),
            "total_profit": calculator.total_for(tips, results_by_id),
        }
