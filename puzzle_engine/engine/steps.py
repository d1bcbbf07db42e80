"""Step completion and chain activation."""

import logging
from collections.abc import Sequence

from puzzle_engine import storage
from puzzle_engine.matching import step_satisfied
from puzzle_engine.models import CompletionResult, Puzzle

from .rewards import apply_reward

logger = logging.getLogger(__name__)


def complete_eligible_steps(
    story_id: str,
    player_action: str,
    current_room_id: str,
    inventory: Sequence[str],
) -> CompletionResult:
    """Advance every active puzzle whose current step the action satisfies.

    At most one step per puzzle completes per call. Puzzles activated by a
    completion here wait for the next call.
    """
    result = CompletionResult()

    room = storage.get_room(current_room_id)
    if room is None:
        logger.debug(f"Room {current_room_id!r} not found; no steps checked")
        return result

    for puzzle in storage.list_puzzles(story_id, statuses=["active"]):
        step = puzzle.current_step()
        if step is None:
            continue
        if not step_satisfied(step.requirements, room.name, inventory, player_action):
            continue
        if not storage.complete_step(step.id):
            logger.debug(f"Step {step.step_number} of {puzzle.name!r} already taken")
            continue

        logger.info(f"Step {step.step_number} of {puzzle.name!r} completed")
        result.completed_steps.append(storage.get_step(step.id) or step)
        result.narratives.append(f"[Objective progress: {step.description}]")

        if storage.count_incomplete_steps(puzzle.id) > 0:
            continue
        if not storage.complete_puzzle(puzzle.id):
            continue

        completed = storage.get_puzzle(puzzle.id) or puzzle
        logger.info(f"Puzzle {puzzle.name!r} completed")
        result.completed_puzzles.append(completed)
        result.narratives.append(f"[Objective complete: {puzzle.name}]")

        apply_reward(story_id, completed)

        for activated in activate_linked(puzzle.id):
            result.activated_puzzles.append(activated)
            result.narratives.append(f"[New objective: {activated.name}]")

    return result


def activate_linked(completed_puzzle_id: str) -> list[Puzzle]:
    """Activate pending targets of sequential links from the completed puzzle."""
    activated: list[Puzzle] = []
    for link in storage.list_links(completed_puzzle_id, "sequential"):
        if not storage.activate_puzzle(link.target_puzzle_id):
            continue
        target = storage.get_puzzle(link.target_puzzle_id)
        if target is not None:
            logger.info(f"Puzzle {target.name!r} activated by chain")
            activated.append(target)
    return activated
