"""Rooms and their monotonic discovered-exit sets."""

import json

from puzzle_engine.models import Room

from .core import connect, now


def _room_from_row(conn, row) -> Room:
    exits = conn.execute(
        "SELECT direction FROM room_discovered_exits WHERE room_id = ? ORDER BY rowid",
        (row["id"],),
    ).fetchall()
    return Room(
        id=row["id"],
        story_id=row["story_id"],
        name=row["name"],
        description=row["description"],
        hidden_exits=json.loads(row["hidden_exits"] or "[]"),
        discovered_exits=[e["direction"] for e in exits],
    )


def get_room(room_id: str) -> Room | None:
    with connect() as conn:
        row = conn.execute(
            "SELECT id, story_id, name, description, hidden_exits FROM rooms WHERE id = ?",
            (room_id,),
        ).fetchone()
        return _room_from_row(conn, row) if row else None


def find_room_by_name(story_id: str, name: str) -> Room | None:
    """Case-insensitive lookup within one story."""
    with connect() as conn:
        row = conn.execute(
            "SELECT id, story_id, name, description, hidden_exits FROM rooms "
            "WHERE story_id = ? AND lower(name) = lower(?) ORDER BY rowid LIMIT 1",
            (story_id, name),
        ).fetchone()
        return _room_from_row(conn, row) if row else None


def list_rooms(story_id: str) -> list[Room]:
    with connect() as conn:
        rows = conn.execute(
            "SELECT id, story_id, name, description, hidden_exits FROM rooms "
            "WHERE story_id = ? ORDER BY rowid",
            (story_id,),
        ).fetchall()
        return [_room_from_row(conn, r) for r in rows]


def add_discovered_exit(room_id: str, direction: str) -> bool:
    """Add a direction to the room's discovered exits.

    Returns True only if this call added it; an exit already present is left
    as is, so the set never shrinks and never holds duplicates.
    """
    with connect() as conn:
        cur = conn.execute(
            "INSERT OR IGNORE INTO room_discovered_exits (room_id, direction, discovered_at) "
            "SELECT id, ?, ? FROM rooms WHERE id = ?",
            (direction.lower(), now(), room_id),
        )
    return cur.rowcount == 1
