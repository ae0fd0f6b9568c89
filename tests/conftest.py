"""Pytest configuration and shared fixtures.

This module provides common fixtures for the Cruxfade test suite: a
content pack, sessions on fixed seeds, and a scripted random stream for
forcing dice results.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Any

import pytest
import structlog
from pydantic import PrivateAttr

from cruxfade.core.rng import RngStream


if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from cruxfade.content.models import ContentPack
    from cruxfade.core.config import Settings
    from cruxfade.engine.context import GameContext
    from cruxfade.engine.session import GameSession
    from cruxfade.models import Tile, TileType


# =============================================================================
# Scripted Random Stream
# =============================================================================


def face(value: int, sides: int) -> float:
    """Stream value that makes a die of ``sides`` land on ``value``."""
    return (value - 0.5) / sides


class ScriptedRng(RngStream):
    """RngStream that serves queued values before falling back to the LCG."""

    _queue: deque[float] = PrivateAttr(default_factory=deque)

    def push(self, *values: float) -> ScriptedRng:
        self._queue.extend(values)
        return self

    def push_rolls(self, sides: int, *faces: int) -> ScriptedRng:
        """Queue die results for ``sides``-sided rolls."""
        return self.push(*(face(value, sides) for value in faces))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next01(self) -> float:
        if self._queue:
            self.draws += 1
            return self._queue.popleft()
        return super().next01()


@pytest.fixture
def scripted_stream() -> ScriptedRng:
    """A standalone scripted stream seeded with 1."""
    return ScriptedRng.from_seed(1)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from cruxfade.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def quiet_logging() -> Generator[None, None, None]:
    """Keep developer logs off the captured output."""
    structlog.configure(logger_factory=structlog.ReturnLoggerFactory(), cache_logger_on_first_use=False)
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def reset_log_context() -> Generator[None, None, None]:
    """Drop log context bound by sessions."""
    from cruxfade.core.logging import clear_context

    yield
    clear_context()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only, ignoring any local .env file."""
    from cruxfade.core.config import ContentSettings, GameSettings, Settings

    return Settings(
        _env_file=None,
        game=GameSettings(_env_file=None),
        content=ContentSettings(_env_file=None),
    )


# =============================================================================
# Content Fixtures
# =============================================================================


@pytest.fixture
def content() -> ContentPack:
    """The built-in content pack."""
    from cruxfade.content.loader import builtin_content

    return builtin_content()


@pytest.fixture
def boss_content_data() -> dict[str, Any]:
    """Raw content with a four-phase boss guarding level 1."""
    return {
        "enemies": {
            "goblin": {"name": "Goblin", "hp": 6, "atk": 2},
            "scout-a": {"name": "Scout A", "hp": 1, "atk": 1},
            "scout-b": {"name": "Scout B", "hp": 1, "atk": 1},
        },
        "boss_enemies": {
            "gatekeeper": {"name": "Gatekeeper", "hp": 1, "atk": 1},
        },
        "bosses": {
            "gatekeeper": {
                "name": "The Gatekeeper",
                "unlockLevel": 1,
                "phases": [
                    {"type": "fight", "name": "Outriders", "enemies": ["scout-a", "scout-b"]},
                    {"type": "hazard", "name": "Falling Stones", "difficulty": 10, "damage": 2},
                    {"type": "party-choice", "name": "Crossroads"},
                    {"type": "boss-fight", "name": "The Gate", "enemy": "gatekeeper"},
                ],
                "victoryRewards": {"gold": 10, "experience": 25},
            }
        },
    }


@pytest.fixture
def boss_content(boss_content_data: dict[str, Any]) -> ContentPack:
    """Content pack whose first level is a boss level."""
    from cruxfade.content.loader import build_content

    return build_content(boss_content_data)


# =============================================================================
# Session Fixtures
# =============================================================================


@pytest.fixture
def session(content: ContentPack, settings: Settings) -> GameSession:
    """A fresh session on seed 12345 with the built-in content."""
    from cruxfade.engine.session import GameSession

    return GameSession(12345, content=content, settings=settings)


@pytest.fixture
def boss_session(boss_content: ContentPack, settings: Settings) -> GameSession:
    """A session that starts on a boss level."""
    from cruxfade.engine.session import GameSession

    return GameSession(7, content=boss_content, settings=settings)


@pytest.fixture
def ctx(session: GameSession) -> GameContext:
    """Engine context of the default session."""
    return session.context


@pytest.fixture
def scripted(ctx: GameContext) -> ScriptedRng:
    """Swap the default session's stream for a scripted one."""
    rng = ScriptedRng.from_seed(ctx.state.seed)
    ctx.state.rng = rng
    return rng


@pytest.fixture
def on_tile(ctx: GameContext) -> Callable[[TileType], Tile]:
    """Turn the tile under the player into a fresh tile of a given type."""
    from cruxfade.models import FightStage

    def convert(tile_type: TileType) -> Tile:
        tile = ctx.state.board.current_tile
        tile.type = tile_type
        tile.consumed = False
        tile.fight_stage = FightStage.UNENGAGED
        return tile

    return convert


@pytest.fixture
def in_combat(ctx: GameContext, on_tile: Callable[[TileType], Tile]) -> Callable[..., Tile]:
    """Start a fight against ``enemy_id`` on a fresh fight tile."""
    from cruxfade.engine.combat import start_combat
    from cruxfade.models import TileType

    def begin(enemy_id: str = "goblin") -> Tile:
        tile = on_tile(TileType.FIGHT)
        start_combat(ctx, enemy_id)
        return tile

    return begin
