"""Race result entry and lookup."""

import json
import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tipster.config import ScoringConfig
from tipster.live.feed import ChangeFeed, TOPIC_RESULTS
from tipster.models.tipping import ResultRecord
from tipster.scoring.calendar import race_days, races_on
from tipster.scoring.drafts import ResultDraft, ResultDraftValidator, ResultValidationError
from tipster.scoring.types import FullResult, Race, RaceResult, PENDING, winner_name

logger = logging.getLogger(__name__)


class NotAdminError(PermissionError):
    """Only results administrators may write or clear results."""


class ResultService:
    """Service for entering and reading race results.

    A saved result replaces any previous one for the race; tips are re-settled
    on the next recompute since payouts are never stored.
    """

    def __init__(
        self,
        db: AsyncSession,
        races: list[Race],
        config: ScoringConfig,
        feed: Optional[ChangeFeed] = None,
    ):
        self.db = db
        self.races = list(races)
        self.races_by_id = {r.id: r for r in races}
        self.config = config
        self.feed = feed
        self.validator = ResultDraftValidator(config)

    def _require_admin(self, actor_email: Optional[str]) -> None:
        if not self.config.is_admin(actor_email):
            logger.warning(f"Result write refused for non-admin {actor_email!r}")
            raise NotAdminError("Only admins can enter results")

    async def save_result(
        self,
        race_id: str,
        draft: ResultDraft,
        actor_email: Optional[str],
    ) -> FullResult:
        """Validate a draft and store it as the race's result."""
        self._require_admin(actor_email)

        race = self.races_by_id.get(race_id)
        if not race:
            raise ValueError(f"Race {race_id} not found")

        try:
            result = self.validator.validate(draft, race)
        except ResultValidationError as e:
            logger.info(f"Result for {race_id} rejected: {e.title}: {e}")
            raise

        record = await self.db.get(ResultRecord, race_id)
        if record is None:
            record = ResultRecord(race_id=race_id)
            self.db.add(record)

        record.placements_json = json.dumps([p.to_dict() for p in result.placements])
        record.places_paid = result.places_paid
        record.each_way_fraction = result.each_way_fraction
        record.winner_horse = winner_name(result)
        record.updated_by = actor_email

        await self.db.commit()
        logger.info(f"Result saved for {race.name}: winner {record.winner_horse}")

        if self.feed:
            await self.feed.publish(TOPIC_RESULTS, race_id)
        return result

    async def get_result(self, race_id: str) -> RaceResult:
        record = await self.db.get(ResultRecord, race_id)
        return record.to_result() if record else PENDING

    async def get_results(self) -> dict[str, RaceResult]:
        """All recorded results keyed by race id."""
        result = await self.db.execute(select(ResultRecord))
        return {r.race_id: r.to_result() for r in result.scalars().all()}

    async def clear_results(self, actor_email: Optional[str]) -> int:
        """Remove every result. Returns the number of results deleted."""
        self._require_admin(actor_email)

        result = await self.db.execute(delete(ResultRecord))
        await self.db.commit()
        logger.warning(f"All results cleared by {actor_email} ({result.rowcount} removed)")

        if self.feed:
            await self.feed.publish(TOPIC_RESULTS, None)
        return result.rowcount

    async def results_by_day(self) -> list[dict]:
        """Card days with each race's winner (None while pending)."""
        results = await self.get_results()
        days = []
        for day in race_days(self.races):
            entries = []
            for race in races_on(self.races, day):
                res = results.get(race.id, PENDING)
                winner = res.winner if isinstance(res, FullResult) else None
                entries.append({
                    "race_id": race.id,
                    "race_name": race.name,
                    "winner": winner_name(res),
                    "odds": (winner.odds_display or str(winner.odds_decimal)) if winner else None,
                })
            days.append({"date": day, "races": entries})
        return days
