"""Tipping game services."""

from tipster.services.tips import TipService, TipError
from tipster.services.results import ResultService, NotAdminError
from tipster.services.profiles import ProfileService, DisplayNameRequiredError, DisplayNameTakenError
from tipster.services.leaderboard import LeaderboardService

__all__ = [
    "TipService",
    "TipError",
    "ResultService",
    "NotAdminError",
    "ProfileService",
    "DisplayNameRequiredError",
    "DisplayNameTakenError",
    "LeaderboardService",
]
