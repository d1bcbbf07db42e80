"""Player turn endpoint plus the individual engine stages.

Requests that change state are serialized per story: one in-flight action
per story at a time.
"""

import asyncio

from fastapi import APIRouter, HTTPException

from puzzle_engine import engine, storage

from .models import ActionBody, ExitsBody, ItemBody, RoomBody, StepsBody, TurnBody

router = APIRouter()

_locks: dict[str, asyncio.Lock] = {}


def _get_lock(story_id: str) -> asyncio.Lock:
    lock = _locks.get(story_id)
    if lock is None:
        lock = asyncio.Lock()
        _locks[story_id] = lock
    return lock


def forget_lock(story_id: str) -> None:
    """Drop the lock of a deleted story."""
    _locks.pop(story_id, None)


def _require_story(story_id: str) -> None:
    if not storage.get_story(story_id):
        raise HTTPException(404, "Story not found")


@router.post("/stories/{story_id}/turns")
async def run_turn(story_id: str, body: TurnBody):
    """Run every engine stage for one player action."""
    _require_story(story_id)
    async with _get_lock(story_id):
        return engine.run_turn(
            story_id,
            body.action,
            body.room_id,
            inventory=body.inventory,
            entered_room=body.entered_room,
            acquired_items=body.acquired_items,
        )


@router.post("/stories/{story_id}/steps")
async def complete_steps(story_id: str, body: StepsBody):
    """Complete eligible steps only."""
    _require_story(story_id)
    async with _get_lock(story_id):
        inventory = body.inventory
        if inventory is None:
            inventory = storage.get_inventory(story_id)
        return engine.complete_eligible_steps(story_id, body.action, body.room_id, inventory)


@router.post("/stories/{story_id}/discover/item")
async def discover_item(story_id: str, body: ItemBody):
    """Discover puzzles that need an item like this one."""
    _require_story(story_id)
    async with _get_lock(story_id):
        return engine.discover_from_item(story_id, body.item_name)


@router.post("/stories/{story_id}/discover/action")
async def discover_action(story_id: str, body: ActionBody):
    """Discover puzzles that ask for this action."""
    _require_story(story_id)
    async with _get_lock(story_id):
        return engine.discover_from_action(story_id, body.action)


@router.post("/stories/{story_id}/discover/room")
async def discover_room(story_id: str, body: RoomBody):
    """Discover and activate puzzles triggered by entering a room."""
    _require_story(story_id)
    async with _get_lock(story_id):
        return engine.discover_on_room_entry(story_id, body.room_id)


@router.post("/stories/{story_id}/discover/exits")
async def discover_exits(story_id: str, body: ExitsBody):
    """Reveal hidden exits of a room the action unlocks."""
    _require_story(story_id)
    async with _get_lock(story_id):
        return engine.discover_hidden_exits(story_id, body.room_id, body.action)
