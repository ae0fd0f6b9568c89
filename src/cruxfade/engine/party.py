"""Party rules: damage, healing, succession, leadership and equipment.

The leader is always ``party[0]``. During combat the leader's HP is
mirrored into ``CombatState.player_hp``; every function here that touches
the leader's HP keeps the two in step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.core.exceptions import IllegalActionError
from cruxfade.core.logging import get_logger
from cruxfade.models import EquipmentSlot, StatName


if TYPE_CHECKING:
    from cruxfade.engine.context import GameContext
    from cruxfade.models import EquipmentItem, GameState, PartyMember

logger = get_logger(__name__)


# =============================================================================
# Health
# =============================================================================


def sync_combat_hp(ctx: GameContext) -> None:
    """Copy the leader's HP into the active combat, if any."""
    combat = ctx.state.combat
    leader = ctx.state.leader
    if combat.active and leader is not None:
        combat.player_hp = leader.hp


def damage_leader(ctx: GameContext, amount: int) -> int:
    """Deal damage to the leader, handling a fall.

    Args:
        ctx: Game context.
        amount: Damage to apply.

    Returns:
        HP actually lost.
    """
    leader = ctx.state.leader
    if leader is None:
        return 0
    lost = leader.take_damage(amount)
    sync_combat_hp(ctx)
    if not leader.is_alive:
        handle_leader_down(ctx)
    return lost


def heal_member(ctx: GameContext, member: PartyMember, amount: int) -> int:
    """Heal a member and return the HP restored."""
    restored = member.heal(amount)
    if member is ctx.state.leader:
        sync_combat_hp(ctx)
    return restored


def handle_leader_down(ctx: GameContext) -> bool:
    """Resolve a leader at 0 HP.

    The first living member takes the lead and the fallen leader is
    removed along with their equipment and cards. With nobody left
    standing the run ends in defeat.

    Returns:
        True if a successor took over, False if the run is over.
    """
    state = ctx.state
    fallen = state.leader
    if fallen is None or fallen.is_alive:
        return True

    successor = next((member for member in state.party[1:] if member.is_alive), None)
    if successor is None:
        state.over = True
        state.victory = False
        ctx.log(f"💀 {fallen.name} has fallen. The party is wiped out.")
        logger.info("Party defeated", level=state.level, fallen=fallen.id)
        return False

    state.party.remove(successor)
    state.party.insert(0, successor)
    _tag_leader(state, successor)
    sync_combat_hp(ctx)
    ctx.log(f"💀 {fallen.name} has fallen! {successor.name} takes the lead.")
    logger.info("Leader succession", fallen=fallen.id, successor=successor.id)
    remove_member(ctx, fallen.id)
    return True


def _tag_leader(state: GameState, leader: PartyMember) -> None:
    for member in state.party:
        if member is leader:
            member.tags = member.tags | {"leader"}
        elif "leader" in member.tags:
            member.tags = member.tags - {"leader"}


# =============================================================================
# Membership
# =============================================================================


def remove_member(ctx: GameContext, member_id: str) -> PartyMember:
    """Remove a member together with their equipment and cards.

    Equipped items are dropped with the member. Cards the member
    contributed leave the hand, deck and discard pile.

    Raises:
        IllegalActionError: If no member has that id.
    """
    state = ctx.state
    member = state.member(member_id)
    if member is None:
        raise IllegalActionError(f"No party member '{member_id}'", action="remove_member")

    state.party.remove(member)
    state.equipment.pop(member_id, None)
    state.hand = [card for card in state.hand if card.owner_id != member_id]
    state.deck = [card for card in state.deck if card.owner_id != member_id]
    state.discard = [card for card in state.discard if card.owner_id != member_id]
    logger.debug("Member removed", member_id=member_id, party_size=len(state.party))
    return member


def dismiss_member(ctx: GameContext, member_id: str) -> PartyMember:
    """Dismiss an ally from the party outside combat.

    Raises:
        IllegalActionError: When dismissing the leader, an unknown member,
            or while a fight is in progress.
    """
    state = ctx.state
    ctx.ensure_running("dismiss_member")
    ctx.ensure_no_combat("dismiss_member")
    member = state.member(member_id)
    if member is None:
        raise IllegalActionError(f"No party member '{member_id}'", action="dismiss_member")
    if member is state.leader:
        raise IllegalActionError("The leader cannot be dismissed", action="dismiss_member")

    remove_member(ctx, member_id)
    ctx.log(f"👋 {member.name} leaves the party.")
    return member


def switch_leader(ctx: GameContext, member_id: str) -> PartyMember:
    """Move a living member to the front of the party.

    Raises:
        IllegalActionError: If the member is unknown or has fallen.
    """
    ctx.ensure_running("switch_leader")
    state = ctx.state
    member = state.member(member_id)
    if member is None:
        raise IllegalActionError(f"No party member '{member_id}'", action="switch_leader")
    if not member.is_alive:
        raise IllegalActionError(f"{member.name} cannot lead while down", action="switch_leader")
    if member is state.leader:
        return member

    state.party.remove(member)
    state.party.insert(0, member)
    _tag_leader(state, member)
    sync_combat_hp(ctx)
    ctx.log(f"👑 {member.name} now leads the party.")
    return member


# =============================================================================
# Stats & Equipment
# =============================================================================


def refresh_stats(ctx: GameContext, member: PartyMember) -> None:
    """Recompute a member's derived stats from base stats and equipment."""
    member.apply_equipment(ctx.state.equipment.get(member.id, []))
    if member is ctx.state.leader:
        sync_combat_hp(ctx)


def raise_base_stat(ctx: GameContext, member: PartyMember, stat: StatName, amount: int) -> None:
    """Permanently raise a base stat.

    Raising max HP also raises current HP by the same amount.
    """
    if amount <= 0:
        return
    base = member.base_stats
    match stat:
        case StatName.HP:
            base.max_hp += amount
        case StatName.ATK:
            base.atk += amount
        case StatName.MAG:
            base.mag += amount
    refresh_stats(ctx, member)
    if stat == StatName.HP:
        heal_member(ctx, member, amount)


def equipped_item(state: GameState, member_id: str, slot: EquipmentSlot) -> EquipmentItem | None:
    """The item a member has in a slot, if any."""
    for item in state.equipment.get(member_id, []):
        if item.slot == slot:
            return item
    return None


def available_equipment(state: GameState, slot: EquipmentSlot | None = None) -> list[EquipmentItem]:
    """Inventory items, optionally limited to one slot."""
    return [item for item in state.inventory if slot is None or item.slot == slot]


def equip_item(ctx: GameContext, member_id: str, item_id: str) -> EquipmentItem | None:
    """Equip an inventory item on a member.

    Returns:
        The item previously in that slot, now back in the inventory.

    Raises:
        IllegalActionError: If the member or item is unknown.
    """
    ctx.ensure_running("equip_item")
    state = ctx.state
    member = state.member(member_id)
    if member is None:
        raise IllegalActionError(f"No party member '{member_id}'", action="equip_item")
    item = next((entry for entry in state.inventory if entry.id == item_id), None)
    if item is None:
        raise IllegalActionError(f"No item '{item_id}' in the inventory", action="equip_item")

    previous = equipped_item(state, member_id, item.slot)
    items = state.equipment.setdefault(member_id, [])
    if previous is not None:
        items.remove(previous)
        state.inventory.append(previous)
    state.inventory.remove(item)
    items.append(item)
    refresh_stats(ctx, member)

    ctx.log(f"🛡️ {member.name} equips {item.name}.")
    logger.debug("Item equipped", member_id=member_id, item_id=item_id, slot=item.slot)
    return previous


def unequip_item(ctx: GameContext, member_id: str, slot: EquipmentSlot) -> EquipmentItem:
    """Return a member's item in ``slot`` to the inventory.

    Raises:
        IllegalActionError: If the member is unknown or the slot is empty.
    """
    ctx.ensure_running("unequip_item")
    state = ctx.state
    member = state.member(member_id)
    if member is None:
        raise IllegalActionError(f"No party member '{member_id}'", action="unequip_item")
    item = equipped_item(state, member_id, slot)
    if item is None:
        raise IllegalActionError(f"{member.name} has nothing in the {slot} slot", action="unequip_item")

    state.equipment[member_id].remove(item)
    state.inventory.append(item)
    refresh_stats(ctx, member)
    ctx.log(f"🎒 {member.name} unequips {item.name}.")
    return item


def heal_party(ctx: GameContext) -> None:
    """Restore every living member to full HP."""
    for member in ctx.state.party:
        if member.is_alive:
            heal_member(ctx, member, member.missing_hp)


__all__ = [
    "sync_combat_hp",
    "damage_leader",
    "heal_member",
    "handle_leader_down",
    "remove_member",
    "dismiss_member",
    "switch_leader",
    "refresh_stats",
    "raise_base_stat",
    "equipped_item",
    "available_equipment",
    "equip_item",
    "unequip_item",
    "heal_party",
]
