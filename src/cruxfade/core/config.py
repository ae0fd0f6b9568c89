"""Configuration management for the Cruxfade simulation core.

Settings are loaded with pydantic-settings from environment variables and
an optional .env file. Gameplay tuning lives in GameSettings; the location
of external content data lives in ContentSettings.

Example:
    >>> from cruxfade.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.game.max_hand_size
    5

Environment Variables:
    CRUXFADE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CRUXFADE_JSON_LOGS: Emit JSON log lines instead of console output
    CRUXFADE_DEFAULT_SEED: Seed used when a run is started without one
    CRUXFADE_GAME_MAX_HAND_SIZE: Hand size cap
    CRUXFADE_CONTENT_CONTENT_PATH: Directory holding JSON content files
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cruxfade.core.constants import (
    BOSS_REWARD_ATK,
    BOSS_REWARD_MAX_HP,
    DEFAULT_SEED,
    FALLBACK_FINAL_LEVEL,
    FLEE_BASE_DIFFICULTY,
    HAZARD_BONUS_ITEM_CHANCE,
    MAX_HAND_SIZE,
    MAX_LOG_ENTRIES,
    MAX_PARTY_SIZE,
    RARE_ENEMY_CHANCE,
)
from cruxfade.core.exceptions import ConfigurationError


class GameSettings(BaseSettings):
    """Tuning values for the game engine.

    Attributes:
        max_hand_size: Hard cap on cards held in hand.
        max_party_size: Maximum number of party members.
        log_limit: Number of player log entries kept before the oldest drop.
        rare_enemy_chance: Probability a fight draws from the rare pool.
        hazard_bonus_item_chance: Probability of a bonus item after a hazard.
        final_level: Level past which the run is won when no boss content exists.
        boss_reward_atk: Permanent attack bonus for beating a mid-campaign boss.
        boss_reward_max_hp: Permanent max HP bonus for beating a mid-campaign boss.
        flee_base_difficulty: Base flee difficulty before adding enemy attack.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUXFADE_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_hand_size: int = Field(
        default=MAX_HAND_SIZE,
        ge=1,
        le=20,
        description="Hard cap on cards held in hand",
    )
    max_party_size: int = Field(
        default=MAX_PARTY_SIZE,
        ge=1,
        le=8,
        description="Maximum number of party members",
    )
    log_limit: int = Field(
        default=MAX_LOG_ENTRIES,
        ge=1,
        description="Player log entries kept",
    )
    rare_enemy_chance: float = Field(
        default=RARE_ENEMY_CHANCE,
        ge=0.0,
        le=1.0,
        description="Probability of drawing from the rare enemy pool",
    )
    hazard_bonus_item_chance: float = Field(
        default=HAZARD_BONUS_ITEM_CHANCE,
        ge=0.0,
        le=1.0,
        description="Probability of a bonus item after clearing a hazard",
    )
    final_level: int = Field(
        default=FALLBACK_FINAL_LEVEL,
        ge=1,
        description="Winning level when no boss content is loaded",
    )
    boss_reward_atk: int = Field(
        default=BOSS_REWARD_ATK,
        ge=0,
        description="Leader attack bonus for a mid-campaign boss",
    )
    boss_reward_max_hp: int = Field(
        default=BOSS_REWARD_MAX_HP,
        ge=0,
        description="Leader max HP bonus for a mid-campaign boss",
    )
    flee_base_difficulty: int = Field(
        default=FLEE_BASE_DIFFICULTY,
        ge=1,
        description="Flee difficulty before enemy attack is added",
    )


class ContentSettings(BaseSettings):
    """Location of external content data.

    Attributes:
        content_path: Directory with JSON content files, or None for the
            built-in content pack.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUXFADE_CONTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    content_path: Path | None = Field(
        default=None,
        description="Directory holding JSON content files",
    )

    @field_validator("content_path", mode="after")
    @classmethod
    def ensure_directory(cls, value: Path | None) -> Path | None:
        """Reject a content path that points at a regular file.

        Args:
            value: The configured path.

        Returns:
            The validated path.

        Raises:
            ConfigurationError: If the path exists but is not a directory.
        """
        if value is not None and value.exists() and not value.is_dir():
            raise ConfigurationError(
                f"Content path {value} is not a directory",
                config_key="content_path",
            )
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render log lines as JSON.
        default_seed: Seed used when a run starts without an explicit one.
        game: Game engine settings.
        content: Content location settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CRUXFADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Cruxfade",
        description="Application name",
    )
    app_version: str = Field(
        default="0.3.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log lines as JSON",
    )
    default_seed: int = Field(
        default=DEFAULT_SEED,
        description="Seed for runs started without one",
    )

    game: GameSettings = Field(default_factory=GameSettings)
    content: ContentSettings = Field(default_factory=ContentSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access.

    Example:
        >>> clear_settings_cache()
        >>> settings = get_settings()  # Reloads from environment
    """
    get_settings.cache_clear()


__all__ = [
    "GameSettings",
    "ContentSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
