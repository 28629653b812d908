"""Player profiles and display names."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tipster.live.feed import ChangeFeed, TOPIC_PROFILES
from tipster.models.tipping import UserProfile

logger = logging.getLogger(__name__)


class DisplayNameRequiredError(ValueError):
    def __init__(self):
        super().__init__("Please enter a display name.")


class DisplayNameTakenError(ValueError):
    def __init__(self, display_name: str):
        self.display_name = display_name
        super().__init__("That display name is already in use.")


class ProfileService:
    """Service for player profiles.

    Display names are unique by exact match only (no trimming or case
    folding). The uniqueness check is a read followed by a write, so two
    players racing for the same name can both succeed; the game tolerates
    that.
    """

    def __init__(self, db: AsyncSession, feed: Optional[ChangeFeed] = None):
        self.db = db
        self.feed = feed

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return await self.db.get(UserProfile, user_id)

    async def ensure_profile(self, user_id: str, email: str) -> UserProfile:
        """Create an empty profile for a first-time player."""
        profile = await self.get_profile(user_id)
        if profile:
            return profile

        profile = UserProfile(id=user_id, email=email or "", display_name="")
        self.db.add(profile)
        await self.db.commit()
        await self.db.refresh(profile)
        logger.info(f"Created profile for {user_id}")
        return profile

    async def set_display_name(
        self, user_id: str, email: str, display_name: str
    ) -> UserProfile:
        if not display_name:
            raise DisplayNameRequiredError()

        result = await self.db.execute(
            select(UserProfile.id)
            .where(UserProfile.display_name == display_name)
            .limit(1)
        )
        owner = result.scalar_one_or_none()
        if owner is not None and owner != user_id:
            logger.info(f"Display name {display_name!r} already taken by {owner}")
            raise DisplayNameTakenError(display_name)

        profile = await self.get_profile(user_id)
        if profile is None:
            profile = UserProfile(id=user_id)
            self.db.add(profile)
        profile.display_name = display_name
        profile.email = email or profile.email or ""

        await self.db.commit()
        await self.db.refresh(profile)

        if self.feed:
            await self.feed.publish(TOPIC_PROFILES, user_id)
        return profile

    async def get_display_names(self) -> dict[str, str]:
        """Map of user id to display name, for every profile that has one."""
        result = await self.db.execute(select(UserProfile))
        return {
            p.id: p.display_name
            for p in result.scalars().all()
            if p.display_name
        }
