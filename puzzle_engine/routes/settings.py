"""Health check and engine settings endpoints."""

from fastapi import APIRouter

from puzzle_engine import storage

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings():
    """Get engine settings (exit synonyms, reward defaults, root activation)."""
    return storage.get_config()


@router.patch("/settings")
async def update_settings(body: dict):
    """Update engine settings (partial merge)."""
    return storage.update_config(body)
