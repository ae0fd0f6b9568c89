"""Cruxfade - seeded roguelike dungeon-crawler simulation core.

A run crosses 4x4 fog-covered levels: fights, hazards, items, allies,
a key and a door on each, and multi-phase bosses on some. Every random
outcome is drawn from one seeded stream held in the run state, so the
same seed and the same actions always produce the same run.

Example:
    >>> from cruxfade import GameSession
    >>>
    >>> session = GameSession(seed=12345)
    >>> session.move(1, 1).success
    True
    >>> session.current_tile.explored
    True

Modules:
    core: Configuration, logging, exceptions and the random stream.
    models: Pydantic V2 schemas for the run state.
    content: Content record schemas, built-in tables and the JSON loader.
    engine: Rules of play and the GameSession facade.
    cli: Autopilot harness behind the ``cruxfade`` command.
"""

from __future__ import annotations

# Core
from cruxfade.core.config import Settings, get_settings
from cruxfade.core.exceptions import CruxfadeError
from cruxfade.core.logging import configure_logging, get_logger
from cruxfade.core.rng import RngStream

# Models
from cruxfade.models import Board, Card, GameState, PartyMember, Tile, TileType

# Content
from cruxfade.content import ContentPack, builtin_content, load_content

# Engine
from cruxfade.engine import ActionResult, GameContext, GameSession, new_run


__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "CruxfadeError",
    "configure_logging",
    "get_logger",
    "RngStream",
    # Models
    "Board",
    "Card",
    "GameState",
    "PartyMember",
    "Tile",
    "TileType",
    # Content
    "ContentPack",
    "builtin_content",
    "load_content",
    # Engine
    "ActionResult",
    "GameContext",
    "GameSession",
    "new_run",
]
