"""Custom exception hierarchy for the Cruxfade simulation core.

All exceptions inherit from CruxfadeError so the session facade can turn
any engine failure into a rejected action at a single boundary, while the
subclasses keep domain-specific context in ``details``.

Example:
    >>> from cruxfade.core.exceptions import IllegalActionError
    >>> raise IllegalActionError("Target tile is not adjacent", action="move")
"""

from __future__ import annotations

from typing import Any


class CruxfadeError(Exception):
    """Base exception for all Cruxfade errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception.

        Returns:
            String representation suitable for debugging.
        """
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Content Exceptions
# =============================================================================


class ConfigurationError(CruxfadeError):
    """Raised when application configuration is invalid.

    This includes invalid environment values and incompatible
    setting combinations.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ContentError(ConfigurationError):
    """Raised when a required content record cannot be found.

    Unknown enemy ids, missing boss definitions and similar lookups land
    here. During play these are recoverable: the operation is rejected and
    the run state is left untouched.
    """

    def __init__(
        self,
        message: str,
        *,
        record_type: str | None = None,
        record_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content error with record context.

        Args:
            message: Human-readable error description.
            record_type: Kind of record that was looked up (enemy, boss, ...).
            record_id: Key that failed to resolve.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if record_type:
            combined_details["record_type"] = record_type
        if record_id:
            combined_details["record_id"] = record_id
        super().__init__(message, details=combined_details)


class ContentLoadError(ContentError):
    """Raised when a content file is missing, unreadable or malformed.

    This is the only error allowed to halt initialization.
    """

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize content load error with source file context.

        Args:
            message: Human-readable error description.
            source_file: Path to the file that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


# =============================================================================
# Game Engine Domain Exceptions
# =============================================================================


class GameEngineError(CruxfadeError):
    """Base exception for all game engine errors."""


class InvalidGameStateError(GameEngineError):
    """Raised when an operation is attempted from the wrong state.

    Typical causes are acting after the run has ended or starting a
    second combat while one is active.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize invalid game state error with state context.

        Args:
            message: Human-readable error description.
            current_state: The current state identifier.
            expected_states: List of valid states that were expected.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if current_state:
            combined_details["current_state"] = current_state
        if expected_states:
            combined_details["expected_states"] = expected_states
        super().__init__(message, details=combined_details)


class IllegalActionError(GameEngineError):
    """Raised when a player action breaks a movement or gameplay rule."""

    def __init__(
        self,
        message: str,
        *,
        action: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize illegal action error.

        Args:
            message: Human-readable error description.
            action: Name of the rejected action.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if action:
            combined_details["action"] = action
        super().__init__(message, details=combined_details)


class CombatError(GameEngineError):
    """Raised when a combat action is not valid in the current combat."""

    def __init__(
        self,
        message: str,
        *,
        enemy_id: str | None = None,
        turn: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with combat context.

        Args:
            message: Human-readable error description.
            enemy_id: Identifier of the enemy involved.
            turn: Whose turn it was when the error occurred.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if enemy_id:
            combined_details["enemy_id"] = enemy_id
        if turn:
            combined_details["turn"] = turn
        super().__init__(message, details=combined_details)


class CardError(GameEngineError):
    """Raised when a card operation references a card that is not available."""

    def __init__(
        self,
        message: str,
        *,
        card_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize card error.

        Args:
            message: Human-readable error description.
            card_id: Identifier of the card involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if card_id:
            combined_details["card_id"] = card_id
        super().__init__(message, details=combined_details)


class BossEncounterError(GameEngineError):
    """Raised when a boss phase cannot be started or advanced."""

    def __init__(
        self,
        message: str,
        *,
        boss_id: str | None = None,
        phase_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize boss encounter error with phase context.

        Args:
            message: Human-readable error description.
            boss_id: Identifier of the boss.
            phase_index: Index of the phase involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if boss_id:
            combined_details["boss_id"] = boss_id
        if phase_index is not None:
            combined_details["phase_index"] = phase_index
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "CruxfadeError",
    # Configuration & content exceptions
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
]
