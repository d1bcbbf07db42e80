import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from puzzle_engine import storage
from puzzle_engine.routes import router

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


async def storage_error_handler(request: Request, exc: storage.StorageError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed in storage: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable, retry the action"})


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)

    app = FastAPI(title="Puzzle Engine")
    app.include_router(router, prefix="/api")
    app.add_exception_handler(storage.StorageError, storage_error_handler)

    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
