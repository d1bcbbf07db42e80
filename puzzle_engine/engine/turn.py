"""One player turn through every engine stage."""

import logging
from collections.abc import Iterable, Sequence

from puzzle_engine import storage
from puzzle_engine.models import CompletionResult, DiscoveryResult, ExitDiscoveryResult, TurnResult

from .discovery import discover_from_action, discover_from_item, discover_on_room_entry
from .exits import discover_hidden_exits
from .steps import complete_eligible_steps

logger = logging.getLogger(__name__)


def _merge(turn: TurnResult, part: DiscoveryResult | ExitDiscoveryResult | CompletionResult) -> None:
    if isinstance(part, DiscoveryResult):
        turn.discovered_puzzles.extend(part.discovered_puzzles)
    elif isinstance(part, ExitDiscoveryResult):
        turn.discovered_exits.extend(part.discovered_exits)
    else:
        turn.completed_steps.extend(part.completed_steps)
        turn.completed_puzzles.extend(part.completed_puzzles)
        turn.activated_puzzles.extend(part.activated_puzzles)
    turn.narratives.extend(part.narratives)


def run_turn(
    story_id: str,
    action: str,
    room_id: str,
    inventory: Sequence[str] | None = None,
    entered_room: bool = False,
    acquired_items: Iterable[str] = (),
) -> TurnResult:
    """Run room entry, hidden exits, item and action discovery, then step completion.

    When inventory is None the player's held objects are read from the store.
    Narratives come back in stage order.
    """
    turn = TurnResult()

    if entered_room:
        _merge(turn, discover_on_room_entry(story_id, room_id))
    _merge(turn, discover_hidden_exits(story_id, room_id, action))
    for item in acquired_items:
        _merge(turn, discover_from_item(story_id, item))
    _merge(turn, discover_from_action(story_id, action))

    if inventory is None:
        inventory = storage.get_inventory(story_id)
    _merge(turn, complete_eligible_steps(story_id, action, room_id, inventory))

    logger.debug(f"Turn in {story_id!r}: {len(turn.narratives)} narrative(s)")
    return turn
