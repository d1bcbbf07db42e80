"""Objective views and manual puzzle transitions."""

from fastapi import APIRouter, HTTPException

from puzzle_engine import engine, storage

router = APIRouter()


@router.get("/stories/{story_id}/objectives")
async def list_objectives(story_id: str):
    """Discovered, still-open puzzles with their steps."""
    if not storage.get_story(story_id):
        raise HTTPException(404, "Story not found")
    return engine.list_objectives(story_id)


@router.get("/stories/{story_id}/objectives/counts")
async def objective_counts(story_id: str):
    """Number of active and completed objectives."""
    if not storage.get_story(story_id):
        raise HTTPException(404, "Story not found")
    return {
        "active": engine.active_objective_count(story_id),
        "completed": engine.completed_objective_count(story_id),
    }


@router.get("/stories/{story_id}/puzzles/by-name")
async def puzzle_by_name(story_id: str, name: str):
    """Look up a puzzle by its exact name."""
    puzzle = engine.find_puzzle_by_name(story_id, name)
    if not puzzle:
        raise HTTPException(404, "Puzzle not found")
    return puzzle


@router.get("/puzzles/{puzzle_id}/current-step")
async def current_step(puzzle_id: str):
    """The lowest-numbered incomplete step, or null when all are done."""
    if not storage.get_puzzle(puzzle_id):
        raise HTTPException(404, "Puzzle not found")
    return engine.current_step(puzzle_id)


@router.post("/puzzles/{puzzle_id}/activate")
async def activate_puzzle(puzzle_id: str):
    """Manually activate a pending puzzle."""
    puzzle = engine.activate_puzzle(puzzle_id)
    if not puzzle:
        raise HTTPException(404, "Puzzle not found")
    return puzzle


@router.post("/puzzles/{puzzle_id}/fail")
async def fail_puzzle(puzzle_id: str):
    """Manually fail an active puzzle."""
    puzzle = engine.fail_puzzle(puzzle_id)
    if not puzzle:
        raise HTTPException(404, "Puzzle not found")
    return puzzle


@router.post("/puzzles/{puzzle_id}/discover")
async def discover_puzzle(puzzle_id: str):
    """Manually mark a puzzle discovered."""
    puzzle = engine.discover_puzzle(puzzle_id)
    if not puzzle:
        raise HTTPException(404, "Puzzle not found")
    return puzzle
