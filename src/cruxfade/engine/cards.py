"""Card hand management and effect resolution.

The hand is capped (five cards by default). Adding to a full hand never
drops a card silently: ``add_card_to_hand`` hands the rejected card back
and ``force_add_card`` discards the oldest card to make room.

Played cards always end up in the discard pile, whether or not their
effect fired. Effect keys the engine does not know are no-ops.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, assert_never

from cruxfade.content.defaults import STARTER_DECK
from cruxfade.core.constants import ATTACK_DIE
from cruxfade.core.exceptions import CardError, CombatError
from cruxfade.core.logging import get_logger
from cruxfade.engine.combat import damage_enemy
from cruxfade.engine.fog import reveal_hidden
from cruxfade.engine.party import heal_member
from cruxfade.engine.results import ActionResult, CardAddResult
from cruxfade.models import Card, EffectKind, Turn


if TYPE_CHECKING:
    from cruxfade.content.models import ContentPack
    from cruxfade.engine.context import GameContext

logger = get_logger(__name__)

HEAL_AMOUNT = 4
FIRST_AID_AMOUNT = 2
TAUNT_REDUCTION = 2
SNEAK_ATTACK_MULTIPLIER = 2


# =============================================================================
# Card Creation
# =============================================================================


def make_card(content: ContentPack, card_key: str, card_id: str, *, owner_id: str | None = None) -> Card:
    """Build a card instance from its definition.

    Raises:
        ContentError: If the card key is unknown.
    """
    definition = content.card(card_key)
    return Card(
        id=card_id,
        name=definition.name,
        type=definition.type,
        effect_key=definition.effect,
        description=definition.description,
        owner_id=owner_id,
    )


def starting_hand(content: ContentPack) -> list[Card]:
    """The opening hand; repeated cards get numbered ids."""
    seen: Counter[str] = Counter()
    hand = []
    for key in STARTER_DECK:
        seen[key] += 1
        card_id = key if seen[key] == 1 else f"{key}-{seen[key]}"
        hand.append(make_card(content, key, card_id))
    return hand


# =============================================================================
# Hand Operations
# =============================================================================


def is_hand_full(ctx: GameContext) -> bool:
    return len(ctx.state.hand) >= ctx.settings.max_hand_size


def add_card_to_hand(ctx: GameContext, card: Card) -> CardAddResult:
    """Add a card if there is room, else return it as overflow."""
    if is_hand_full(ctx):
        logger.debug("Hand full, card rejected", card_id=card.id)
        return CardAddResult(added=False, card=card)
    ctx.state.hand.append(card)
    return CardAddResult(added=True, card=card)


def force_add_card(ctx: GameContext, card: Card) -> CardAddResult:
    """Add a card, discarding the oldest card in hand if it is full."""
    discarded = None
    if is_hand_full(ctx):
        discarded = ctx.state.hand.pop(0)
        ctx.state.discard.append(discarded)
        ctx.log(f"🗑️ Discarded {discarded.name} to make room for {card.name}.")
    ctx.state.hand.append(card)
    return CardAddResult(added=True, card=card, discarded=discarded)


def find_card(ctx: GameContext, card_id: str) -> Card:
    """A card in hand by id.

    Raises:
        CardError: If the card is not in hand.
    """
    for card in ctx.state.hand:
        if card.id == card_id:
            return card
    raise CardError(f"No card '{card_id}' in hand", card_id=card_id)


def discard_card(ctx: GameContext, card_id: str) -> Card:
    """Move a card from the hand to the discard pile."""
    card = find_card(ctx, card_id)
    ctx.state.hand.remove(card)
    ctx.state.discard.append(card)
    ctx.log(f"🗑️ Discarded {card.name}.")
    return card


def draw_cards(ctx: GameContext, count: int) -> tuple[list[Card], list[Card]]:
    """Draw up to ``count`` cards from the top of the deck.

    Cards that do not fit in the hand go to the discard pile.

    Returns:
        The cards drawn into the hand and the overflow cards.
    """
    drawn: list[Card] = []
    overflow: list[Card] = []
    for _ in range(count):
        if not ctx.state.deck:
            break
        card = ctx.state.deck.pop()
        if add_card_to_hand(ctx, card).added:
            drawn.append(card)
        else:
            overflow.append(card)
            ctx.state.discard.append(card)
    if overflow:
        ctx.log(f"🗑️ Hand full: {', '.join(card.name for card in overflow)} discarded.")
    return drawn, overflow


# =============================================================================
# Playing Cards
# =============================================================================


def play_card(ctx: GameContext, card_id: str) -> ActionResult:
    """Play a card from the hand.

    The card leaves the hand, its effect resolves and it goes to the
    discard pile whatever the effect did.

    Raises:
        CardError: If the card is not in hand.
        CombatError: When playing during the enemy's turn.
    """
    ctx.ensure_running("play_card")
    card = find_card(ctx, card_id)
    combat = ctx.state.combat
    if combat.active and combat.turn != Turn.PLAYER:
        raise CombatError(
            "Cards can only be played on the player's turn",
            enemy_id=combat.enemy.id if combat.enemy else None,
            turn=combat.turn.value,
        )
    leader = ctx.living_leader("play_card")

    ctx.state.hand.remove(card)
    ctx.log(f"🃏 {leader.name} plays {card.name}.")
    kind = card.effect
    if kind is None:
        result = ActionResult(success=False, message=f"{card.name} has no effect.")
        logger.debug("Unknown card effect", card_id=card.id, effect=card.effect_key)
    elif kind.requires_combat and not combat.active:
        result = ActionResult(success=False, message=f"{card.name} needs a target.")
    else:
        result = _resolve_effect(ctx, kind, leader.name)
    ctx.state.discard.append(card)

    ctx.log(result.message)
    logger.info("Card played", card_id=card.id, effect=card.effect_key, fired=result.success)
    result.data.setdefault("card_id", card.id)
    return result


def _resolve_effect(ctx: GameContext, kind: EffectKind, actor: str) -> ActionResult:
    state = ctx.state
    leader = state.leader
    combat = state.combat

    match kind:
        case EffectKind.BASIC_STRIKE:
            roll = ctx.dice.roll(ATTACK_DIE).value
            return _strike(ctx, max(1, leader.atk + roll - 2), roll)
        case EffectKind.SHIELD_BASH:
            roll = ctx.dice.roll(ATTACK_DIE).value
            combat.status.stunned = True
            return _strike(
                ctx,
                max(2, leader.atk + roll - 1),
                roll,
                keep_turn=True,
                note="The enemy is stunned.",
            )
        case EffectKind.TAUNT:
            combat.status.damage_reduction = TAUNT_REDUCTION
            combat.turn = Turn.ENEMY
            return ActionResult(success=True, message=f"The next hit is reduced by {TAUNT_REDUCTION}.")
        case EffectKind.MAGIC_BOLT:
            return _strike(ctx, max(2, leader.mag + 3), None)
        case EffectKind.SNEAK_ATTACK:
            opening = combat.turn == Turn.PLAYER and combat.last_roll is None
            multiplier = SNEAK_ATTACK_MULTIPLIER if opening else 1
            roll = ctx.dice.roll(ATTACK_DIE).value
            return _strike(ctx, max(1, (leader.atk + roll) * multiplier), roll)
        case EffectKind.DODGE:
            combat.status.dodge_next = True
            combat.turn = Turn.ENEMY
            return ActionResult(success=True, message="Ready to dodge the next attack.")
        case EffectKind.DEFEND:
            combat.status.defending = True
            combat.turn = Turn.ENEMY
            return ActionResult(success=True, message="Bracing for the next attack.")
        case EffectKind.HEAL:
            return _heal(ctx, HEAL_AMOUNT)
        case EffectKind.FIRST_AID:
            return _heal(ctx, FIRST_AID_AMOUNT)
        case EffectKind.TRACK:
            revealed = reveal_hidden(state.board)
            if revealed:
                return ActionResult(
                    success=True,
                    message=f"Tracked {revealed} hidden tile(s).",
                    data={"revealed": revealed},
                )
            return ActionResult(success=False, message="Nothing left to track.")
        case EffectKind.MOVE:
            return ActionResult(success=True, message=f"{actor} moves swiftly.")
        case _:
            assert_never(kind)


def _strike(
    ctx: GameContext,
    damage: int,
    roll: int | None,
    *,
    keep_turn: bool = False,
    note: str = "",
) -> ActionResult:
    combat = ctx.state.combat
    if roll is not None:
        combat.last_roll = roll
    message = f"Deals {damage} damage." + (f" {note}" if note else "")
    outcome = damage_enemy(ctx, damage)
    if outcome is None and not keep_turn:
        combat.turn = Turn.ENEMY
    return ActionResult(success=True, message=message, outcome=outcome, roll=roll, damage=damage)


def _heal(ctx: GameContext, amount: int) -> ActionResult:
    leader = ctx.state.leader
    healed = heal_member(ctx, leader, min(amount, leader.missing_hp))
    if not healed:
        return ActionResult(success=False, message=f"{leader.name} is already at full health.")
    return ActionResult(success=True, message=f"Restores {healed} HP.", data={"healed": healed})


__all__ = [
    "make_card",
    "starting_hand",
    "is_hand_full",
    "add_card_to_hand",
    "force_add_card",
    "find_card",
    "discard_card",
    "draw_cards",
    "play_card",
]
