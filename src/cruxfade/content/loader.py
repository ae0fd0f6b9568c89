"""Load content packs from JSON files.

A content directory must contain ``enemies.json``. Every other file is
optional and falls back to the built-in tables:

    enemies.json     {enemy_id: {name, hp, atk, mag?}}
    cards.json       {card_key: {name, type, effect, description}}
    encounters.json  {"grid-N": {encounterWeights, enemyPools}}
    items.json       {consumables, equipment, lootTables}
    allies.json      {ally_id: {name, hp, atk, mag, tags, cards}}
    hazards.json     [{name, difficulty, damage, stat}]
    bosses.json      {boss_id: {...}, "boss-enemies": {enemy_id: {...}}}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cruxfade.content.defaults import (
    BUILTIN_BOSS_ENEMIES,
    BUILTIN_BOSSES,
    BUILTIN_ENCOUNTERS,
    BUILTIN_ENEMIES,
    BUILTIN_ITEMS,
    copy_table,
)
from cruxfade.content.models import ContentPack
from cruxfade.core.exceptions import ContentLoadError
from cruxfade.core.logging import get_logger


logger = get_logger(__name__)

BOSS_ENEMIES_KEY = "boss-enemies"

OPTIONAL_FILES = {
    "cards": "cards.json",
    "encounter_tables": "encounters.json",
    "items": "items.json",
    "allies": "allies.json",
    "hazards": "hazards.json",
}


def _read_json(path: Path) -> Any:
    """Read a JSON file, wrapping IO and syntax errors in ContentLoadError."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ContentLoadError(
            f"Cannot read content file: {exc}",
            source_file=str(path),
        ) from exc
    except json.JSONDecodeError as exc:
        raise ContentLoadError(
            f"Malformed JSON at line {exc.lineno}",
            source_file=str(path),
        ) from exc


def build_content(raw: dict[str, Any], *, source: str = "<memory>") -> ContentPack:
    """Validate raw tables into a ContentPack.

    Args:
        raw: Table name to raw JSON data, using ContentPack field names.
        source: Where the data came from, for error messages.

    Returns:
        The validated content pack.

    Raises:
        ContentLoadError: If any table fails validation.
    """
    try:
        return ContentPack.model_validate(raw)
    except ValidationError as exc:
        raise ContentLoadError(
            f"Invalid content data: {exc.error_count()} error(s)",
            source_file=source,
            details={"errors": [err["loc"] for err in exc.errors()]},
        ) from exc


def load_content(directory: Path | str) -> ContentPack:
    """Load a content pack from a directory of JSON files.

    Args:
        directory: Directory containing at least ``enemies.json``.

    Returns:
        The validated content pack.

    Raises:
        ContentLoadError: If the directory or the required enemy table is
            missing, or any file is malformed.
    """
    root = Path(directory)
    if not root.is_dir():
        raise ContentLoadError("Content directory not found", source_file=str(root))

    enemies_file = root / "enemies.json"
    if not enemies_file.is_file():
        raise ContentLoadError("Required enemy data is missing", source_file=str(enemies_file))

    raw: dict[str, Any] = {"enemies": _read_json(enemies_file)}
    for table, filename in OPTIONAL_FILES.items():
        path = root / filename
        if path.is_file():
            raw[table] = _read_json(path)
        else:
            logger.debug("Optional content file absent, using defaults", file=filename)

    bosses_file = root / "bosses.json"
    if bosses_file.is_file():
        bosses = _read_json(bosses_file)
        if not isinstance(bosses, dict):
            raise ContentLoadError("Boss data must be an object", source_file=str(bosses_file))
        raw["boss_enemies"] = bosses.pop(BOSS_ENEMIES_KEY, {})
        raw["bosses"] = bosses

    pack = build_content(raw, source=str(root))
    logger.info(
        "Content loaded",
        directory=str(root),
        enemies=len(pack.enemies),
        bosses=len(pack.bosses),
        encounter_tables=len(pack.encounter_tables),
    )
    return pack


def builtin_content() -> ContentPack:
    """The content pack shipped with the package."""
    return build_content(
        {
            "enemies": copy_table(BUILTIN_ENEMIES),
            "encounter_tables": copy_table(BUILTIN_ENCOUNTERS),
            "items": copy_table(BUILTIN_ITEMS),
            "boss_enemies": copy_table(BUILTIN_BOSS_ENEMIES),
            "bosses": copy_table(BUILTIN_BOSSES),
        },
        source="<builtin>",
    )


__all__ = [
    "BOSS_ENEMIES_KEY",
    "build_content",
    "load_content",
    "builtin_content",
]
