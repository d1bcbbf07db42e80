"""FastAPI API endpoints under /api.

Endpoint groups: health + settings, stories (load a seed, list, inspect,
delete), actions (full turn and the five individual stages), objectives
(views, lookups, manual activate/fail/discover). Everything that belongs to
a story is nested under /api/stories/{story_id}/; manual transitions address
puzzles directly under /api/puzzles/{puzzle_id}/.
"""

from fastapi import APIRouter

from .actions import router as actions_router
from .objectives import router as objectives_router
from .settings import router as settings_router
from .stories import router as stories_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(stories_router)
router.include_router(actions_router)
router.include_router(objectives_router)
