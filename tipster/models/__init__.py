"""Database models for the tipping game."""

from tipster.models.database import Base, get_db, init_db
from tipster.models.tipping import TipRecord, ResultRecord, UserProfile

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "TipRecord",
    "ResultRecord",
    "UserProfile",
]
