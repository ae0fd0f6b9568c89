"""Non-combat tile encounters: hazards, items, the key and the door."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.content.defaults import FALLBACK_ITEMS
from cruxfade.content.models import ConsumableItem
from cruxfade.core.exceptions import IllegalActionError
from cruxfade.core.logging import get_logger
from cruxfade.engine.grid import generate_level
from cruxfade.engine.party import damage_leader, heal_member, raise_base_stat
from cruxfade.engine.results import ActionResult
from cruxfade.models import BossState, EquipmentItem, StatName, TileType


if TYPE_CHECKING:
    from cruxfade.content.models import EquipmentTemplate
    from cruxfade.engine.context import GameContext
    from cruxfade.models import Tile

logger = get_logger(__name__)

_FALLBACK_CONSUMABLES = [ConsumableItem.model_validate(item) for item in FALLBACK_ITEMS]


def _unspent_tile(ctx: GameContext, tile_type: TileType, action: str) -> Tile:
    ctx.ensure_running(action)
    ctx.ensure_no_combat(action)
    tile = ctx.state.board.current_tile
    if tile.type != tile_type or tile.consumed:
        raise IllegalActionError(f"There is no {tile_type} to resolve here", action=action)
    return tile


# =============================================================================
# Hazards
# =============================================================================


def resolve_hazard(ctx: GameContext) -> ActionResult:
    """Face the hazard on the current tile.

    A hazard is drawn from the hazard table and the leader rolls d20 plus
    the hazard's stat. Success clears the tile and may turn up a bonus
    item; failure hurts the leader and leaves the hazard in place.

    Raises:
        IllegalActionError: Off an unresolved hazard tile.
    """
    tile = _unspent_tile(ctx, TileType.HAZARD, "resolve_hazard")
    leader = ctx.living_leader("resolve_hazard")

    hazard = ctx.rng.pick(ctx.content.hazards)
    check = ctx.dice.check(leader.stat(hazard.stat), hazard.difficulty)
    logger.info(
        "Hazard resolved",
        hazard=hazard.name,
        total=check.total,
        difficulty=hazard.difficulty,
        success=check.success,
    )

    if check.success:
        tile.consume()
        message = f"✅ {hazard.name} overcome ({check.total} vs {hazard.difficulty})."
        ctx.log(message)
        data = {"hazard": hazard.name}
        if ctx.rng.next01() < ctx.settings.hazard_bonus_item_chance:
            data["bonus_item"] = grant_random_item(ctx)
        return ActionResult(
            success=True,
            message=message,
            roll=check.roll.value,
            total=check.total,
            data=data,
        )

    message = f"💥 {hazard.name}! ({check.total} vs {hazard.difficulty}) {leader.name} takes {hazard.damage} damage."
    ctx.log(message)
    damage_leader(ctx, hazard.damage)
    return ActionResult(
        success=False,
        message=message,
        roll=check.roll.value,
        total=check.total,
        damage=hazard.damage,
        data={"hazard": hazard.name},
    )


# =============================================================================
# Items
# =============================================================================


def apply_consumable(ctx: GameContext, item: ConsumableItem) -> None:
    """Use a consumable on the leader."""
    leader = ctx.state.leader
    if item.stat == StatName.HP:
        healed = heal_member(ctx, leader, item.boost)
        raise_base_stat(ctx, leader, StatName.HP, item.max_boost)
        ctx.log(f"🧪 {item.name}: healed {healed} HP, +{item.max_boost} max HP ({leader.hp}/{leader.max_hp} HP).")
    else:
        raise_base_stat(ctx, leader, item.stat, item.boost)
        stat = item.stat.upper()
        ctx.log(f"🧪 {item.name}: +{item.boost} {stat} ({stat}: {leader.stat(item.stat)}).")


def _mint_equipment(ctx: GameContext, key: str, template: EquipmentTemplate) -> EquipmentItem:
    item = EquipmentItem(
        id=f"{key}-{ctx.state.next_serial()}",
        name=template.name,
        slot=template.slot,
        stat_bonus=dict(template.stat_bonus),
        description=template.description,
    )
    ctx.state.inventory.append(item)
    ctx.log(f"🎒 Found {item.name}! Added to the inventory.")
    return item


def grant_random_item(ctx: GameContext) -> str:
    """Draw a random item and give it to the party.

    Without item tables a fallback consumable is used. Otherwise the
    level's loot table decides between a consumable and a piece of
    equipment.

    Returns:
        The name of the item found.
    """
    tables = ctx.content.items
    if tables is None:
        item = ctx.rng.pick(_FALLBACK_CONSUMABLES)
        apply_consumable(ctx, item)
        return item.name

    loot = tables.loot_table(ctx.state.level)
    use_consumable = ctx.rng.next01() < loot.consumables
    if not tables.equipment:
        use_consumable = True
    elif not tables.consumables:
        use_consumable = False
    if use_consumable:
        item = tables.consumables[ctx.rng.pick(list(tables.consumables))]
        apply_consumable(ctx, item)
        return item.name

    key = ctx.rng.pick(list(tables.equipment))
    return _mint_equipment(ctx, key, tables.equipment[key]).name


def take_item(ctx: GameContext) -> ActionResult:
    """Pick up the item on the current tile.

    Raises:
        IllegalActionError: Off an unclaimed item tile.
    """
    tile = _unspent_tile(ctx, TileType.ITEM, "take_item")
    ctx.living_leader("take_item")
    name = grant_random_item(ctx)
    tile.consume()
    return ActionResult(success=True, message=f"Found {name}.", data={"item": name})


# =============================================================================
# Key, Door & Levels
# =============================================================================


def take_key(ctx: GameContext) -> ActionResult:
    """Pick up the level's key.

    Raises:
        IllegalActionError: Off an untaken key tile.
    """
    tile = _unspent_tile(ctx, TileType.KEY, "take_key")
    ctx.state.key_found = True
    tile.consume()
    message = "🗝️ Found the key! The door can now be opened."
    ctx.log(message)
    return ActionResult(success=True, message=message)


def next_level(ctx: GameContext) -> ActionResult:
    """Go through the door to the next level.

    The new level's entrance is the exit door mirrored through the grid
    centre. Without boss content, passing the final level wins the run.

    Raises:
        IllegalActionError: Off the door or without the key.
    """
    ctx.ensure_running("next_level")
    ctx.ensure_no_combat("next_level")
    state = ctx.state
    if state.board.current_tile.type != TileType.DOOR:
        raise IllegalActionError("You need to be standing on the door", action="next_level")
    if not state.key_found:
        raise IllegalActionError("The door is locked; find the key first", action="next_level")

    entry = state.board.player.mirrored()
    level = state.level + 1
    if not ctx.content.bosses and level > ctx.settings.final_level:
        state.level = level
        state.victory = True
        state.over = True
        message = "🏆 You escaped the dungeon! Victory!"
        ctx.log(message)
        logger.info("Run won", level=state.level, seed=state.seed)
        return ActionResult(success=True, message=message, data={"victory": True})

    board = generate_level(ctx.content, ctx.rng, level, entry)
    state.level = level
    state.key_found = False
    state.board = board
    boss_id = ctx.content.boss_for_level(level)
    state.boss = BossState(active=True, boss_id=boss_id) if boss_id else BossState()

    message = f"🌟 Entered Grid Level {level}! (Entered from {entry.name})"
    ctx.log(message)
    if boss_id:
        ctx.log(f"👑 {ctx.content.boss(boss_id).name} guards this level.")
    logger.info("Level entered", level=level, entry=entry.name, boss_id=boss_id)
    return ActionResult(success=True, message=message, data={"level": level, "boss_id": boss_id})


__all__ = [
    "resolve_hazard",
    "apply_consumable",
    "grant_random_item",
    "take_item",
    "take_key",
    "next_level",
]
