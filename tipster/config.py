"""Application configuration using Pydantic settings."""

from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

UK_TZ = ZoneInfo("Europe/London")


def uk_now() -> datetime:
    """Current time in the UK (GMT/BST automatically)."""
    return datetime.now(UK_TZ)


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(datetime.now(UK_TZ).timestamp() * 1000)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TIPSTER_",
        extra="ignore",
    )

    # Database
    db_path: Path = Path("./data/tipster.db")

    # App
    debug: bool = False
    log_level: str = "INFO"
    timezone: str = "Europe/London"

    # Scoring
    stake_amount: float = 1.0  # £1 per tip
    default_places_paid: int = 3
    default_each_way_fraction: float = 0.25
    day_rollover_hour: int = 18  # 6pm local

    # Race card JSON; the built-in card is used when unset
    card_path: Optional[Path] = None

    # Comma-separated list of emails allowed to enter results
    admin_emails: str = ""

    # Seconds between clock ticks for the live board
    tick_seconds: int = 60

    @property
    def database_url(self) -> str:
        """SQLite database URL for SQLAlchemy."""
        return f"sqlite+aiosqlite:///{self.db_path}"

    @property
    def admin_email_list(self) -> list[str]:
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters injected into every scoring component."""

    stake_amount: float = 1.0
    default_places_paid: int = 3
    default_each_way_fraction: float = 0.25
    day_rollover_hour: int = 18
    tz: ZoneInfo = field(default=UK_TZ)
    admin_emails: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringConfig":
        return cls(
            stake_amount=settings.stake_amount,
            default_places_paid=settings.default_places_paid,
            default_each_way_fraction=settings.default_each_way_fraction,
            day_rollover_hour=settings.day_rollover_hour,
            tz=ZoneInfo(settings.timezone),
            admin_emails=tuple(settings.admin_email_list),
        )

    def is_admin(self, email: Optional[str]) -> bool:
        """Whether an email belongs to a results administrator."""
        return bool(email and email.strip().lower() in self.admin_emails)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_scoring_config() -> ScoringConfig:
    """Scoring config derived from the cached settings."""
    return ScoringConfig.from_settings(get_settings())


# Export for convenience
settings = get_settings()
