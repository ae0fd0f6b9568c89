"""Recruiting allies from ally tiles.

An ally brings its own cards. When those cards would overflow the hand
the ally waits in ``GameState.pending_recruit`` until the player frees
room with ``resolve_pending_ally``; the tile is spent either way.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cruxfade.core.exceptions import CardError, IllegalActionError, InvalidGameStateError
from cruxfade.core.logging import get_logger
from cruxfade.engine.cards import add_card_to_hand, make_card
from cruxfade.engine.results import ActionResult
from cruxfade.models import PartyMember, PendingRecruit, TileType


if TYPE_CHECKING:
    from collections.abc import Sequence

    from cruxfade.engine.context import GameContext
    from cruxfade.models import Card

logger = get_logger(__name__)


def _mint_ally(ctx: GameContext) -> tuple[PartyMember, list[Card]]:
    """Draw an ally template and build the member and their cards."""
    template_key = ctx.rng.pick(list(ctx.content.allies))
    template = ctx.content.allies[template_key]
    member_id = f"{template_key}-{ctx.state.next_serial()}"
    member = PartyMember.create(
        member_id,
        template.name,
        hp=template.hp,
        atk=template.atk,
        mag=template.mag,
        tags=set(template.tags),
    )
    cards = [
        make_card(ctx.content, key, f"{key}-{member_id}", owner_id=member_id)
        for key in template.cards
    ]
    return member, cards


def _join(ctx: GameContext, member: PartyMember, cards: list[Card]) -> ActionResult:
    state = ctx.state
    state.party.append(member)
    state.equipment[member.id] = []
    lost = [card for card in cards if not add_card_to_hand(ctx, card).added]
    message = f"🤝 {member.name} joins the party!"
    ctx.log(message)
    if lost:
        ctx.log(f"🗑️ No room for {', '.join(card.name for card in lost)}; the card is lost.")
    logger.info("Ally joined", member_id=member.id, cards=len(cards), lost=len(lost))
    return ActionResult(
        success=True,
        message=message,
        data={"member_id": member.id, "lost_cards": [card.id for card in lost]},
    )


def recruit_ally(ctx: GameContext) -> ActionResult:
    """Recruit the ally on the current tile.

    With a full party the tile is spent and nobody joins. If the ally's
    cards do not fit in the hand the recruit is left pending.

    Raises:
        IllegalActionError: Off an unspent ally tile.
        InvalidGameStateError: While a fight or another recruit is pending.
    """
    ctx.ensure_running("recruit_ally")
    ctx.ensure_no_combat("recruit_ally")
    state = ctx.state
    if state.pending_recruit is not None:
        raise InvalidGameStateError(
            "Another ally is waiting for room in the hand",
            current_state="pending_recruit",
        )
    tile = state.board.current_tile
    if tile.type != TileType.ALLY or tile.consumed:
        raise IllegalActionError("There is no one here to recruit", action="recruit_ally")

    if len(state.party) >= ctx.settings.max_party_size:
        tile.consume()
        message = "👥 The party is full; the stranger goes their own way."
        ctx.log(message)
        return ActionResult(success=False, message=message, data={"party_full": True})

    member, cards = _mint_ally(ctx)
    tile.consume()
    if len(state.hand) + len(cards) > ctx.settings.max_hand_size:
        state.pending_recruit = PendingRecruit(member=member, cards=cards)
        overflow = len(state.hand) + len(cards) - ctx.settings.max_hand_size
        message = f"✋ {member.name} wants to join, but the hand is full. Discard {overflow} card(s)."
        ctx.log(message)
        return ActionResult(
            success=False,
            message=message,
            data={"pending": True, "member_id": member.id, "overflow": overflow},
        )
    return _join(ctx, member, cards)


def resolve_pending_ally(ctx: GameContext, discard_ids: Sequence[str] = ()) -> ActionResult:
    """Discard the chosen cards and let the pending ally join.

    Cards that still do not fit after the discards are lost.

    Raises:
        InvalidGameStateError: Without a pending recruit.
        CardError: If a discard id is not in hand.
    """
    ctx.ensure_running("resolve_pending_ally")
    state = ctx.state
    pending = state.pending_recruit
    if pending is None:
        raise InvalidGameStateError(
            "No ally is waiting to join",
            current_state="idle",
            expected_states=["pending_recruit"],
        )
    hand_ids = {card.id for card in state.hand}
    for card_id in discard_ids:
        if card_id not in hand_ids:
            raise CardError(f"No card '{card_id}' in hand", card_id=card_id)

    for card_id in dict.fromkeys(discard_ids):
        card = next(card for card in state.hand if card.id == card_id)
        state.hand.remove(card)
        state.discard.append(card)
        ctx.log(f"🗑️ Discarded {card.name}.")
    state.pending_recruit = None

    if len(state.party) >= ctx.settings.max_party_size:
        message = f"👥 The party is full; {pending.member.name} leaves."
        ctx.log(message)
        return ActionResult(success=False, message=message, data={"party_full": True})
    return _join(ctx, pending.member, pending.cards)


__all__ = [
    "recruit_ally",
    "resolve_pending_ally",
]
