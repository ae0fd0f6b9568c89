"""Command line harness.

Runs a deterministic autopilot through a seeded run and prints the player
log, the final board and a summary. The same seed always prints the same
output.

Usage:
    cruxfade --seed 12345
    cruxfade --seed 7 --content ./data --max-actions 500
    cruxfade --seed 7 --json-logs --log-level INFO
"""

from __future__ import annotations

import argparse
import sys
from collections import deque
from typing import TYPE_CHECKING

from cruxfade import __version__
from cruxfade.content.loader import load_content
from cruxfade.core.config import get_settings
from cruxfade.core.exceptions import ConfigurationError
from cruxfade.core.logging import configure_logging, get_logger
from cruxfade.engine.exploration import is_tile_completed
from cruxfade.engine.session import GameSession
from cruxfade.models import CardType, EffectKind, Position, TileType, Turn


if TYPE_CHECKING:
    from collections.abc import Sequence

    from cruxfade.engine.results import ActionResult
    from cruxfade.models import Board

logger = get_logger(__name__)

TILE_SYMBOLS = {
    TileType.START: "S",
    TileType.FIGHT: "F",
    TileType.HAZARD: "H",
    TileType.ITEM: "I",
    TileType.ALLY: "A",
    TileType.KEY: "K",
    TileType.DOOR: "D",
    TileType.EMPTY: ".",
    TileType.BOSS_ENCOUNTER: "B",
}

LOW_HP_FLEE_THRESHOLD = 3


# =============================================================================
# Output Formatting
# =============================================================================


def format_board(board: Board) -> str:
    """Render the board: '?' hidden, '+' discovered, a tile letter once explored, '@' player."""
    lines = []
    for row in range(4):
        cells = []
        for col in range(4):
            tile = board.tile_at(row, col)
            if board.player.row == row and board.player.col == col:
                cells.append("@")
            elif tile.explored:
                cells.append(TILE_SYMBOLS[tile.type])
            elif tile.discovered:
                cells.append("+")
            else:
                cells.append("?")
        lines.append(" ".join(cells))
    return "\n".join(lines)


def format_summary(session: GameSession, actions: int) -> str:
    state = session.state
    outcome = "victory" if state.victory else ("defeat" if state.over else "in progress")
    party = ", ".join(f"{member.name} {member.hp}/{member.max_hp}" for member in state.party)
    return "\n".join(
        [
            f"Seed: {state.seed}",
            f"Outcome: {outcome}",
            f"Level: {state.level}",
            f"Actions: {actions}",
            f"Party: {party or '-'}",
            f"Gold: {state.gold}  XP: {state.experience}",
            f"Fingerprint: {session.fingerprint()}",
        ]
    )


# =============================================================================
# Autopilot
# =============================================================================


class Autopilot:
    """Plays a run with a fixed, simple policy.

    The policy resolves whatever is on the current tile, then walks
    toward the key, then the door, then the nearest unexplored tile.
    """

    def __init__(self, session: GameSession) -> None:
        self.session = session

    def step(self) -> ActionResult | None:
        """Take one action, or return None when there is nothing to do."""
        session = self.session
        state = session.state
        if state.over:
            return None
        if state.pending_recruit is not None:
            overflow = len(state.hand) + len(state.pending_recruit.cards) - session.settings.game.max_hand_size
            return session.resolve_pending_ally([card.id for card in state.hand[: max(0, overflow)]])
        if state.combat.active:
            return self._fight()
        if state.boss.active and session.current_tile.type == TileType.BOSS_ENCOUNTER:
            return session.start_boss_phase()

        tile = session.current_tile
        if not session.is_current_tile_completed():
            match tile.type:
                case TileType.FIGHT:
                    return session.start_fight()
                case TileType.HAZARD:
                    return session.resolve_hazard()
                case TileType.ITEM:
                    return session.take_item()
                case TileType.ALLY:
                    return session.recruit_ally()
                case TileType.KEY:
                    return session.take_key()
        if tile.type == TileType.DOOR and state.key_found:
            return session.next_level()
        spare = next(
            (item for item in state.inventory if session.equipped_item(state.leader.id, item.slot) is None),
            None,
        )
        if spare is not None:
            return session.equip(state.leader.id, spare.id)

        target = self._next_step()
        if target is None:
            return None
        return session.move(target.row, target.col)

    def _fight(self) -> ActionResult:
        session = self.session
        state = session.state
        if state.combat.turn == Turn.ENEMY:
            return session.enemy_attack()
        leader = state.leader
        if leader.hp <= LOW_HP_FLEE_THRESHOLD and state.combat.boss_phase_ref is None:
            heal = next((card for card in state.hand if card.effect == EffectKind.HEAL), None)
            if heal is not None and leader.missing_hp:
                return session.play_card(heal.id)
            return session.flee()
        attack_card = next((card for card in state.hand if card.type == CardType.ATTACK), None)
        if attack_card is not None:
            return session.play_card(attack_card.id)
        return session.attack()

    def _next_step(self) -> Position | None:
        """First step of the shortest walk to the most useful tile."""
        state = self.session.state
        board = state.board
        key_found = state.key_found

        def goal(row: int, col: int) -> int:
            tile = board.tile_at(row, col)
            if not tile.explored:
                return 1
            if tile.type == TileType.BOSS_ENCOUNTER and not tile.consumed:
                return 0
            if tile.type == TileType.KEY and not key_found:
                return 0
            if tile.type == TileType.DOOR and key_found:
                return 0
            return 2

        start = (board.player.row, board.player.col)
        parents: dict[tuple[int, int], tuple[int, int] | None] = {start: None}
        queue = deque([start])
        best: tuple[int, int] | None = None
        best_rank = 2
        while queue:
            current = queue.popleft()
            if current != start:
                rank = goal(*current)
                if rank < best_rank:
                    best, best_rank = current, rank
                    if rank == 0:
                        break
                tile = board.tile_at(*current)
                if not tile.explored or not is_tile_completed(state, tile):
                    continue
            for neighbour in board.neighbors(*current):
                cell = (neighbour.row, neighbour.col)
                if neighbour.discovered and cell not in parents:
                    parents[cell] = current
                    queue.append(cell)

        if best is None:
            return None
        while parents[best] != start:
            best = parents[best]
        return Position(row=best[0], col=best[1])

    def run(self, max_actions: int) -> int:
        """Play until the run ends, the policy stalls or the limit is hit."""
        actions = 0
        while actions < max_actions:
            result = self.step()
            if result is None:
                break
            actions += 1
            if result.rejected:
                logger.info("Autopilot action refused", reason=result.message)
                break
        return actions


# =============================================================================
# Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cruxfade",
        description="Run a seeded Cruxfade dungeon with a deterministic autopilot.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Run seed (default from settings)")
    parser.add_argument("--content", default=None, help="Directory of JSON content files")
    parser.add_argument("--max-actions", type=int, default=1000, help="Stop after this many actions")
    parser.add_argument("--json-logs", action="store_true", help="Emit developer logs as JSON")
    parser.add_argument("--log-level", default=None, help="Developer log level")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the harness.

    Returns:
        0 on a completed harness run, 1 if configuration or required
        content could not be loaded.
    """
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
        configure_logging(
            level=args.log_level or settings.log_level,
            json_format=args.json_logs or settings.json_logs,
        )
        content = load_content(args.content) if args.content else None
        session = GameSession(args.seed, content=content, settings=settings)
    except ConfigurationError as exc:
        print(f"cruxfade: {exc}", file=sys.stderr)
        return 1

    actions = Autopilot(session).run(args.max_actions)
    if not args.quiet:
        for entry in session.log_entries():
            print(entry)
        print()
        print(format_board(session.state.board))
        print()
    print(format_summary(session, actions))
    return 0


__all__ = [
    "Autopilot",
    "build_parser",
    "format_board",
    "format_summary",
    "main",
]
