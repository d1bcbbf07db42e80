"""Discovery triggers: acquiring an item, performing an action, entering a room.

Only undiscovered pending puzzles are candidates. Each flip is a
compare-and-set, so when two triggers reach the same puzzle in one turn the
second finds it already discovered and stays silent.
"""

import logging

from puzzle_engine import storage
from puzzle_engine.matching import action_discovers, item_discovers
from puzzle_engine.models import DiscoveryResult, Puzzle, StepRequirements

logger = logging.getLogger(__name__)


def _candidates(story_id: str) -> list[Puzzle]:
    return storage.list_puzzles(story_id, statuses=["pending"], is_discovered=False)


def _discover_matching(story_id: str, matches, trigger: str) -> DiscoveryResult:
    result = DiscoveryResult()
    for puzzle in _candidates(story_id):
        if not any(matches(step.requirements) for step in puzzle.steps):
            continue
        if not storage.discover_puzzle(puzzle.id):
            continue
        logger.info(f"Puzzle {puzzle.name!r} discovered by {trigger}")
        result.discovered_puzzles.append(storage.get_puzzle(puzzle.id) or puzzle)
        result.narratives.append(f"[Objective discovered: {puzzle.name}]")
    return result


def discover_from_item(story_id: str, item_name: str) -> DiscoveryResult:
    """Discover puzzles with a step that needs (something like) this item."""

    def matches(requirements: StepRequirements) -> bool:
        return item_discovers(requirements, item_name)

    return _discover_matching(story_id, matches, f"item {item_name!r}")


def discover_from_action(story_id: str, action: str) -> DiscoveryResult:
    """Discover puzzles with a step whose required action the player just did."""

    def matches(requirements: StepRequirements) -> bool:
        return action_discovers(requirements, action)

    return _discover_matching(story_id, matches, "action")


def discover_on_room_entry(story_id: str, room_id: str) -> DiscoveryResult:
    """Discover and activate the room's entry-triggered puzzles."""
    result = DiscoveryResult()
    puzzles = storage.list_puzzles(
        story_id,
        statuses=["pending"],
        is_discovered=False,
        room_id=room_id,
        discovers_on_room_entry=True,
    )
    for puzzle in puzzles:
        if not storage.discover_and_activate_puzzle(puzzle.id):
            continue
        logger.info(f"Puzzle {puzzle.name!r} discovered on room entry")
        result.discovered_puzzles.append(storage.get_puzzle(puzzle.id) or puzzle)
        result.narratives.append(f"[New objective: {puzzle.name}]")
    return result
