"""Read-only objective views and manual puzzle transitions."""

import logging

from puzzle_engine import storage
from puzzle_engine.models import Objective, ObjectiveStep, Puzzle, PuzzleStep

logger = logging.getLogger(__name__)


def list_objectives(story_id: str) -> list[Objective]:
    """Discovered puzzles that are still open (active or pending), in display order."""
    puzzles = storage.list_puzzles(story_id, statuses=["active", "pending"], is_discovered=True)
    return [
        Objective(
            id=p.id,
            name=p.name,
            description=p.description,
            steps=[
                ObjectiveStep(
                    step_number=s.step_number,
                    description=s.description,
                    is_completed=s.is_completed,
                    hint=s.hint,
                )
                for s in p.steps
            ],
            is_active=p.status == "active",
        )
        for p in puzzles
    ]


def active_objective_count(story_id: str) -> int:
    return storage.count_puzzles(story_id, "active", is_active=True)


def completed_objective_count(story_id: str) -> int:
    return storage.count_puzzles(story_id, "completed")


def find_puzzle_by_name(story_id: str, name: str) -> Puzzle | None:
    return storage.find_puzzle_by_name(story_id, name)


def current_step(puzzle_id: str) -> PuzzleStep | None:
    return storage.get_current_step(puzzle_id)


# Manual transitions return the puzzle as stored afterwards, or None if it
# does not exist. A transition from the wrong state is a no-op.


def activate_puzzle(puzzle_id: str) -> Puzzle | None:
    if storage.activate_puzzle(puzzle_id):
        logger.info(f"Puzzle {puzzle_id} activated manually")
    return storage.get_puzzle(puzzle_id)


def fail_puzzle(puzzle_id: str) -> Puzzle | None:
    if storage.fail_puzzle(puzzle_id):
        logger.info(f"Puzzle {puzzle_id} failed")
    return storage.get_puzzle(puzzle_id)


def discover_puzzle(puzzle_id: str) -> Puzzle | None:
    if storage.discover_puzzle(puzzle_id):
        logger.info(f"Puzzle {puzzle_id} discovered manually")
    return storage.get_puzzle(puzzle_id)
