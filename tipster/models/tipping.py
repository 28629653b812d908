"""Stored documents for the tipping game: tips, results and profiles."""

import json
from datetime import datetime
from typing import Optional

from sqlalchemy import Float, Index, Integer, String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from tipster.config import uk_now
from tipster.models.database import Base
from tipster.scoring.types import Tip, RaceResult, result_from_document


def _now_naive() -> datetime:
    """UK local time as naive datetime (SQLite stores no tzinfo)."""
    return uk_now().replace(tzinfo=None)


class TipRecord(Base):
    """A player's tip for a race. One row per (user, race)."""

    __tablename__ = "tips"
    __table_args__ = (
        Index("ix_tips_user_id", "user_id"),
        Index("ix_tips_race_id", "race_id"),
    )

    id: Mapped[str] = mapped_column(String(160), primary_key=True)  # "{user_id}_{race_id}"
    user_id: Mapped[str] = mapped_column(String(64))
    user_email: Mapped[str] = mapped_column(String(255), default="")
    race_id: Mapped[str] = mapped_column(String(64))
    race_name: Mapped[str] = mapped_column(String(200), default="")
    date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    horse_name: Mapped[str] = mapped_column(String(100))
    lock_at: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # epoch millis snapshot
    created_at: Mapped[int] = mapped_column(Integer)  # epoch millis
    updated_at: Mapped[int] = mapped_column(Integer)

    def to_tip(self) -> Tip:
        return Tip(
            user_id=self.user_id,
            race_id=self.race_id,
            horse_name=self.horse_name,
            user_email=self.user_email or "",
            race_name=self.race_name or "",
            date=self.date or "",
            lock_at=self.lock_at,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_email": self.user_email,
            "race_id": self.race_id,
            "race_name": self.race_name,
            "date": self.date,
            "horse_name": self.horse_name,
            "lock_at": self.lock_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class ResultRecord(Base):
    """The authoritative result for a race (last write wins)."""

    __tablename__ = "results"

    race_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    placements_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON array
    places_paid: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    each_way_fraction: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    winner_horse: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_now_naive, onupdate=_now_naive
    )

    @property
    def placements(self) -> list[dict]:
        if not self.placements_json:
            return []
        return json.loads(self.placements_json)

    def to_document(self) -> dict:
        return {
            "race_id": self.race_id,
            "placements": self.placements,
            "places_paid": self.places_paid,
            "each_way_fraction": self.each_way_fraction,
            "winner_horse": self.winner_horse,
        }

    def to_result(self) -> RaceResult:
        return result_from_document(self.to_document())


class UserProfile(Base):
    """Player profile; display_name is stored exactly as typed."""

    __tablename__ = "user_profiles"
    __table_args__ = (Index("ix_user_profiles_display_name", "display_name"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # user id
    email: Mapped[str] = mapped_column(String(255), default="")
    display_name: Mapped[str] = mapped_column(String(100), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now_naive)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_now_naive, onupdate=_now_naive
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
