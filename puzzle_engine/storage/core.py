"""Storage initialization, SQLite connection, schema, and slug utilities."""

import logging
import re
import sqlite3
import unicodedata
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

_data_dir: Path | None = None

DB_FILENAME = "engine.db"

SCHEMA = """
CREATE TABLE IF NOT EXISTS stories (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    seed TEXT NOT NULL,
    starting_room_id TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS rooms (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    hidden_exits TEXT NOT NULL DEFAULT '[]'
);
CREATE INDEX IF NOT EXISTS idx_rooms_story ON rooms(story_id);

CREATE TABLE IF NOT EXISTS room_discovered_exits (
    room_id TEXT NOT NULL REFERENCES rooms(id) ON DELETE CASCADE,
    direction TEXT NOT NULL,
    discovered_at TEXT NOT NULL,
    PRIMARY KEY (room_id, direction)
);

CREATE TABLE IF NOT EXISTS game_objects (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    room_id TEXT REFERENCES rooms(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    is_takeable INTEGER NOT NULL DEFAULT 1
);
CREATE INDEX IF NOT EXISTS idx_objects_story ON game_objects(story_id);

CREATE TABLE IF NOT EXISTS player_abilities (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    level INTEGER NOT NULL DEFAULT 1,
    description TEXT NOT NULL DEFAULT '',
    UNIQUE (story_id, name)
);

CREATE TABLE IF NOT EXISTS story_facts (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    content TEXT NOT NULL,
    is_secret INTEGER NOT NULL DEFAULT 1,
    is_revealed INTEGER NOT NULL DEFAULT 0,
    revealed_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_facts_story ON story_facts(story_id);

CREATE TABLE IF NOT EXISTS dilemmas (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    room_id TEXT REFERENCES rooms(id) ON DELETE SET NULL,
    is_triggered INTEGER NOT NULL DEFAULT 0,
    triggered_at TEXT
);

CREATE TABLE IF NOT EXISTS puzzles (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    room_id TEXT REFERENCES rooms(id) ON DELETE SET NULL,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'active', 'completed', 'failed')),
    is_active INTEGER NOT NULL DEFAULT 0,
    is_discovered INTEGER NOT NULL DEFAULT 0,
    discovers_on_room_entry INTEGER NOT NULL DEFAULT 0,
    reward TEXT NOT NULL DEFAULT '{"type": "none"}',
    target_dilemma_id TEXT REFERENCES dilemmas(id) ON DELETE SET NULL,
    display_order INTEGER NOT NULL DEFAULT 0,
    started_at TEXT,
    completed_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_puzzles_story_status ON puzzles(story_id, status);

CREATE TABLE IF NOT EXISTS puzzle_steps (
    id TEXT PRIMARY KEY,
    puzzle_id TEXT NOT NULL REFERENCES puzzles(id) ON DELETE CASCADE,
    step_number INTEGER NOT NULL,
    description TEXT NOT NULL,
    hint TEXT,
    requirements TEXT NOT NULL DEFAULT '{}',
    is_completed INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT,
    UNIQUE (puzzle_id, step_number)
);

CREATE TABLE IF NOT EXISTS puzzle_links (
    id TEXT PRIMARY KEY,
    story_id TEXT NOT NULL REFERENCES stories(id) ON DELETE CASCADE,
    source_puzzle_id TEXT NOT NULL REFERENCES puzzles(id) ON DELETE CASCADE,
    target_puzzle_id TEXT NOT NULL REFERENCES puzzles(id) ON DELETE CASCADE,
    link_type TEXT NOT NULL DEFAULT 'sequential',
    condition TEXT
);
CREATE INDEX IF NOT EXISTS idx_links_source ON puzzle_links(source_puzzle_id);
"""


class StorageError(Exception):
    """The persistent store failed; the whole action should be retried."""


def slugify(title: str) -> str:
    """Convert a title to a URL-safe slug.

    "The Sunken Library" → "the-sunken-library"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


def new_id() -> str:
    return uuid.uuid4().hex


def now() -> str:
    return datetime.now(timezone.utc).isoformat()


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    with connect() as conn:
        conn.executescript(SCHEMA)
    logger.debug(f"Storage initialised at {db_path()}")


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def db_path() -> Path:
    return data_dir() / DB_FILENAME


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    """Open a WAL-mode connection as one transaction.

    Commits on success. Any sqlite error rolls back and surfaces as
    StorageError so callers never see a half-written turn.
    """
    try:
        conn = sqlite3.connect(str(db_path()), timeout=30.0)
    except sqlite3.Error as e:
        raise StorageError(f"Cannot open database: {e}") from e
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA foreign_keys=ON")
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error(f"Storage failure: {e}")
        raise StorageError(str(e)) from e
    finally:
        conn.close()
