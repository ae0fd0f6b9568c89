"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CruxfadeError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ContentError / ContentLoadError: Missing or malformed content data.
        GameEngineError and subclasses: Rejected gameplay operations.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from cruxfade.core.config import (
    ContentSettings,
    GameSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from cruxfade.core.exceptions import (
    BossEncounterError,
    CardError,
    CombatError,
    ConfigurationError,
    ContentError,
    ContentLoadError,
    CruxfadeError,
    GameEngineError,
    IllegalActionError,
    InvalidGameStateError,
)
from cruxfade.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Base exception
    "CruxfadeError",
    # Configuration exceptions
    "ConfigurationError",
    "ContentError",
    "ContentLoadError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "IllegalActionError",
    "CombatError",
    "CardError",
    "BossEncounterError",
    # Configuration
    "Settings",
    "GameSettings",
    "ContentSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
