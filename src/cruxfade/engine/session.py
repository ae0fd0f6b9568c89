"""GameSession: the public surface of a run.

The session owns a GameContext and exposes every player action as a
method returning an ActionResult. Engine functions raise CruxfadeError
subclasses for rejected actions before touching any state; the session
turns those into refused results, records the reason in the player log
and the developer log, and never lets the exception escape.

Example:
    >>> session = GameSession(seed=12345)
    >>> session.move(1, 1).success
    True
    >>> session.move(3, 3).rejected
    True
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from cruxfade.content.loader import builtin_content, load_content
from cruxfade.core.config import get_settings
from cruxfade.core.exceptions import CruxfadeError, IllegalActionError
from cruxfade.core.logging import bind_context, get_logger
from cruxfade.engine import allies, boss, cards, combat, encounters, exploration, party
from cruxfade.engine.results import ActionResult
from cruxfade.engine.run import new_run
from cruxfade.models import EquipmentSlot


if TYPE_CHECKING:
    from cruxfade.content.models import ContentPack
    from cruxfade.core.config import Settings
    from cruxfade.engine.context import GameContext
    from cruxfade.models import Card, EquipmentItem, GameState, PartyMember, Tile

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., ActionResult])


def guarded(action: str) -> Callable[[F], F]:
    """Convert engine errors raised by a session method into refusals."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: GameSession, *args: Any, **kwargs: Any) -> ActionResult:
            try:
                return func(self, *args, **kwargs)
            except CruxfadeError as exc:
                return self._refuse(action, exc)

        return wrapper  # type: ignore[return-value]

    return decorator


def _slot(value: EquipmentSlot | str) -> EquipmentSlot:
    try:
        return EquipmentSlot(value)
    except ValueError:
        raise IllegalActionError(f"Unknown equipment slot '{value}'", action="equip") from None


class GameSession:
    """One run of the game and every action that can be taken in it.

    Attributes:
        settings: Application settings the session was created with.
        content: Content pack the run plays with.
    """

    def __init__(
        self,
        seed: int | None = None,
        *,
        content: ContentPack | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Start a session and its first run.

        Args:
            seed: Run seed; the configured default seed when omitted.
            content: Content pack; loaded from the configured content
                directory, or the built-in pack, when omitted.
            settings: Application settings; the cached settings when
                omitted.

        Raises:
            ContentLoadError: If the configured content cannot be loaded.
            ConfigurationError: If the settings are invalid.
        """
        self.settings = settings or get_settings()
        if content is None:
            content_path = self.settings.content.content_path
            content = load_content(content_path) if content_path else builtin_content()
        self.content = content
        self._ctx = self._start(self.settings.default_seed if seed is None else seed)

    def _start(self, seed: int) -> GameContext:
        ctx = new_run(seed, self.content, self.settings.game)
        bind_context(seed=ctx.state.seed)
        return ctx

    def _refuse(self, action: str, exc: CruxfadeError) -> ActionResult:
        logger.warning(
            "Action rejected",
            action=action,
            error_type=type(exc).__name__,
            reason=exc.message,
            details=exc.details,
        )
        self._ctx.log(f"⛔ {exc.message}")
        return ActionResult.refused(exc.message, error=type(exc).__name__, **exc.details)

    # =========================================================================
    # Run
    # =========================================================================

    @property
    def context(self) -> GameContext:
        return self._ctx

    @property
    def state(self) -> GameState:
        return self._ctx.state

    @property
    def seed(self) -> int:
        return self._ctx.state.seed

    def new_run(self, seed: int | None = None) -> ActionResult:
        """Throw away the current run and start another.

        Args:
            seed: Seed for the new run; the current seed when omitted.
        """
        self._ctx = self._start(self.seed if seed is None else seed)
        return ActionResult(success=True, message=f"New run with seed {self.seed}", data={"seed": self.seed})

    def reset(self) -> ActionResult:
        """Restart the current run from its seed."""
        return self.new_run(self.seed)

    def replay(self, actions: Iterable[Sequence[Any]]) -> GameSession:
        """Apply ``(method_name, *args)`` actions in order.

        Returns:
            The session, for chaining.

        Raises:
            IllegalActionError: If an action names no session method.
        """
        for name, *args in actions:
            method = getattr(self, name, None)
            if name.startswith("_") or not callable(method):
                raise IllegalActionError(f"Unknown action '{name}'", action=name)
            method(*args)
        return self

    # =========================================================================
    # Movement & Tiles
    # =========================================================================

    @guarded("move")
    def move(self, row: int, col: int) -> ActionResult:
        return exploration.move_player(self._ctx, row, col)

    @guarded("resolve_hazard")
    def resolve_hazard(self) -> ActionResult:
        return encounters.resolve_hazard(self._ctx)

    @guarded("take_item")
    def take_item(self) -> ActionResult:
        return encounters.take_item(self._ctx)

    @guarded("take_key")
    def take_key(self) -> ActionResult:
        return encounters.take_key(self._ctx)

    @guarded("next_level")
    def next_level(self) -> ActionResult:
        return encounters.next_level(self._ctx)

    # =========================================================================
    # Combat
    # =========================================================================

    @guarded("start_fight")
    def start_fight(self) -> ActionResult:
        return combat.start_fight(self._ctx)

    @guarded("start_combat")
    def start_combat(self, enemy_id: str) -> ActionResult:
        return combat.start_combat(self._ctx, enemy_id)

    @guarded("attack")
    def attack(self) -> ActionResult:
        return combat.player_attack(self._ctx)

    @guarded("enemy_attack")
    def enemy_attack(self) -> ActionResult:
        return combat.enemy_attack(self._ctx)

    @guarded("flee")
    def flee(self) -> ActionResult:
        return combat.attempt_flee(self._ctx)

    # =========================================================================
    # Cards
    # =========================================================================

    @guarded("play_card")
    def play_card(self, card_id: str) -> ActionResult:
        return cards.play_card(self._ctx, card_id)

    @guarded("discard_card")
    def discard_card(self, card_id: str) -> ActionResult:
        self._ctx.ensure_running("discard_card")
        card = cards.discard_card(self._ctx, card_id)
        return ActionResult(success=True, message=f"Discarded {card.name}", data={"card_id": card.id})

    @guarded("add_card")
    def add_card(self, card_key: str) -> ActionResult:
        """Offer a new card to the hand; a full hand rejects it."""
        self._ctx.ensure_running("add_card")
        result = cards.add_card_to_hand(self._ctx, self._mint_card(card_key))
        if not result.added:
            return ActionResult(
                success=False,
                message=f"Hand full: {result.card.name} not added",
                data={"overflow": result.card.id},
            )
        return ActionResult(success=True, message=f"Added {result.card.name}", data={"card_id": result.card.id})

    @guarded("force_add_card")
    def force_add_card(self, card_key: str) -> ActionResult:
        """Add a new card, discarding the oldest card in a full hand."""
        self._ctx.ensure_running("force_add_card")
        result = cards.force_add_card(self._ctx, self._mint_card(card_key))
        return ActionResult(
            success=True,
            message=f"Added {result.card.name}",
            data={
                "card_id": result.card.id,
                "discarded": result.discarded.id if result.discarded else None,
            },
        )

    @guarded("draw_cards")
    def draw_cards(self, count: int = 1) -> ActionResult:
        self._ctx.ensure_running("draw_cards")
        drawn, overflow = cards.draw_cards(self._ctx, count)
        return ActionResult(
            success=bool(drawn),
            message=f"Drew {len(drawn)} card(s)",
            data={"drawn": [card.id for card in drawn], "overflow": [card.id for card in overflow]},
        )

    def _mint_card(self, card_key: str) -> Card:
        self.content.card(card_key)
        return cards.make_card(self.content, card_key, f"{card_key}-{self.state.next_serial()}")

    # =========================================================================
    # Boss
    # =========================================================================

    @guarded("start_boss_phase")
    def start_boss_phase(self) -> ActionResult:
        return boss.start_boss_phase(self._ctx)

    @guarded("complete_boss_phase")
    def complete_boss_phase(self) -> ActionResult:
        """Complete the current phase when it is a party choice."""
        return boss.resolve_choice_phase(self._ctx)

    # =========================================================================
    # Party
    # =========================================================================

    @guarded("recruit_ally")
    def recruit_ally(self) -> ActionResult:
        return allies.recruit_ally(self._ctx)

    @guarded("resolve_pending_ally")
    def resolve_pending_ally(self, discard_ids: Sequence[str] = ()) -> ActionResult:
        return allies.resolve_pending_ally(self._ctx, discard_ids)

    @guarded("dismiss_ally")
    def dismiss_ally(self, member_id: str) -> ActionResult:
        member = party.dismiss_member(self._ctx, member_id)
        return ActionResult(success=True, message=f"{member.name} left the party", data={"member_id": member.id})

    @guarded("switch_leader")
    def switch_leader(self, member_id: str) -> ActionResult:
        member = party.switch_leader(self._ctx, member_id)
        return ActionResult(success=True, message=f"{member.name} leads", data={"member_id": member.id})

    @guarded("equip")
    def equip(self, member_id: str, item_id: str) -> ActionResult:
        previous = party.equip_item(self._ctx, member_id, item_id)
        return ActionResult(
            success=True,
            message=f"Equipped {item_id}",
            data={"item_id": item_id, "replaced": previous.id if previous else None},
        )

    @guarded("unequip")
    def unequip(self, member_id: str, slot: EquipmentSlot | str) -> ActionResult:
        item = party.unequip_item(self._ctx, member_id, _slot(slot))
        return ActionResult(success=True, message=f"Unequipped {item.name}", data={"item_id": item.id})

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def current_tile(self) -> Tile:
        return self.state.board.current_tile

    @property
    def leader(self) -> PartyMember | None:
        return self.state.leader

    @property
    def hand(self) -> list[Card]:
        return list(self.state.hand)

    def is_current_tile_completed(self) -> bool:
        return exploration.is_tile_completed(self.state)

    def requirement_text(self) -> str:
        return exploration.requirement_text(self.state)

    def is_hand_full(self) -> bool:
        return cards.is_hand_full(self._ctx)

    def equipped_item(self, member_id: str, slot: EquipmentSlot | str) -> EquipmentItem | None:
        return party.equipped_item(self.state, member_id, _slot(slot))

    def available_equipment(self, slot: EquipmentSlot | str | None = None) -> list[EquipmentItem]:
        return party.available_equipment(self.state, _slot(slot) if slot else None)

    def log_entries(self, limit: int | None = None) -> list[str]:
        """Player log entries, oldest first; the newest ``limit`` if given."""
        entries = list(self.state.log)
        return entries[-limit:] if limit else entries

    def fingerprint(self) -> str:
        """Hash of the full run state, equal for identical replays."""
        return self.state.fingerprint()


__all__ = [
    "GameSession",
    "guarded",
]
