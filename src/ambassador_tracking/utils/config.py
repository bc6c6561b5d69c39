# src/ambassador_tracking/utils/config.py
"""
Roster engine settings, loaded from the environment or a project .env file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[3]


class RosterSettings(BaseSettings):
    """
    Tunables for the roster views and the command line.

    None of these change compliance semantics; the warning threshold
    and the exempt rule are fixed in the compliance package.
    """
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    refresh_interval_seconds: int = Field(default=180, gt=0)
    inactive_days: int = Field(default=7, ge=0)
    top_performers_limit: int = Field(default=10, gt=0)
    default_sort_field: str = "activity"
    default_sort_order: str = "desc"

    def __repr__(self):
        return (
            f"<RosterSettings refresh={self.refresh_interval_seconds}s "
            f"inactive_days={self.inactive_days} sort={self.default_sort_field}/{self.default_sort_order}>"
        )


# Singleton
settings = RosterSettings()
