"""Story CRUD endpoints. A story is created by posting its seed."""

from fastapi import APIRouter, HTTPException

from puzzle_engine import storage
from puzzle_engine.models import StorySeed

from .actions import forget_lock

router = APIRouter()


@router.post("/stories", status_code=201)
async def create_story(seed: StorySeed):
    """Load a story seed and return the new story."""
    return storage.create_story(seed)


@router.get("/stories")
async def list_stories():
    """List all loaded stories."""
    return storage.list_stories()


@router.get("/stories/{story_id}")
async def get_story(story_id: str):
    """Get a single story with counts of what its seed created."""
    story = storage.get_story(story_id)
    if not story:
        raise HTTPException(404, "Story not found")
    return {
        **story.model_dump(by_alias=True),
        "summary": storage.story_summary(story_id),
        "inventory": storage.get_inventory(story_id),
    }


@router.delete("/stories/{story_id}")
async def delete_story(story_id: str):
    """Delete a story and all its world state."""
    if not storage.delete_story(story_id):
        raise HTTPException(404, "Story not found")
    forget_lock(story_id)
    return {"ok": True}


@router.get("/stories/{story_id}/rooms")
async def list_rooms(story_id: str):
    """Rooms of a story with their hidden and discovered exits."""
    if not storage.get_story(story_id):
        raise HTTPException(404, "Story not found")
    return storage.list_rooms(story_id)
