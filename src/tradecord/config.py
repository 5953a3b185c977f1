"""Runtime configuration for the TradeCord engine."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, overridable through ``TRADECORD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRADECORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///tradecord.db", description="SQLAlchemy URL of the player store"
    )
    database_echo: bool = Field(default=False, description="Echo emitted SQL to the log")
    log_level: str = Field(default="INFO", description="Root log level for the service")

    catch_rate: int = Field(default=90, ge=0, le=100, description="Percent chance to catch")
    egg_rate: int = Field(default=30, ge=0, le=100, description="Percent chance of a daycare egg")
    item_rate: int = Field(default=20, ge=0, le=100, description="Percent chance of an item drop")
    cherish_rate: int = Field(
        default=5, ge=0, le=100, description="Percent chance to escalate into the cherish tier"
    )
    gmax_rate: int = Field(
        default=5, ge=0, le=100, description="Percent chance for the gigantamax sub-roll"
    )
    star_shiny_rate: int = Field(
        default=5, ge=0, le=150, description="Shiny roll window (out of 150) for a star shiny"
    )
    square_shiny_rate: int = Field(
        default=2, ge=0, le=150, description="Shiny roll window (out of 150) for a square shiny"
    )

    enable_event: bool = Field(default=False, description="Whether an event is running")
    event_end: datetime | None = Field(
        default=None, description="Instant after which the event no longer applies (UTC if naive)"
    )
    event_species: list[int] = Field(
        default_factory=list, description="Species ids favoured while the event is running"
    )
    event_form: int = Field(default=-1, description="Form forced on event species, -1 for none")

    maintenance_poll_seconds: float = Field(
        default=0.1, gt=0.0, description="Polling interval while maintenance blocks commands"
    )
    trade_marker_timeout_seconds: float = Field(
        default=600.0,
        gt=0.0,
        description="Age after which a pending trade is considered abandoned",
    )
    instance_guard_port: int = Field(
        default=47813, ge=1, le=65535, description="Loopback port bound by the instance guard"
    )
    banned_words: list[str] = Field(
        default_factory=list, description="Extra words rejected by the nickname filter"
    )
    species_data_path: Path | None = Field(
        default=None, description="Override for the bundled species table"
    )
    clear_inactive: bool = Field(
        default=False, description="Delete inactive players when the service starts"
    )
    inactive_days: int = Field(
        default=30, ge=1, description="Days without a command after which a player is inactive"
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
