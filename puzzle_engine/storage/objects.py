"""Game objects and the player inventory.

An object with no room belongs to the player.
"""

import logging

from puzzle_engine.models import GameObject

from .core import connect, new_id

logger = logging.getLogger(__name__)

_COLUMNS = "id, story_id, room_id, name, description, is_takeable"


def _object_from_row(row) -> GameObject:
    data = dict(row)
    data["is_takeable"] = bool(data["is_takeable"])
    return GameObject.model_validate(data)


def create_object(
    story_id: str,
    name: str,
    description: str = "",
    room_id: str | None = None,
    is_takeable: bool = True,
) -> GameObject:
    """Create an object in a room, or straight into the inventory when room_id is None."""
    obj = GameObject(
        id=new_id(), story_id=story_id, room_id=room_id,
        name=name, description=description, is_takeable=is_takeable,
    )
    with connect() as conn:
        conn.execute(
            f"INSERT INTO game_objects ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (obj.id, story_id, room_id, name, description, int(is_takeable)),
        )
    logger.debug(f"Created object {name!r} in story {story_id!r}")
    return obj


def list_objects(story_id: str, room_id: str | None = None) -> list[GameObject]:
    sql = f"SELECT {_COLUMNS} FROM game_objects WHERE story_id = ?"
    params: list = [story_id]
    if room_id is not None:
        sql += " AND room_id = ?"
        params.append(room_id)
    with connect() as conn:
        rows = conn.execute(sql + " ORDER BY rowid", params).fetchall()
    return [_object_from_row(r) for r in rows]


def get_inventory(story_id: str) -> list[str]:
    """Names of the objects the player holds."""
    with connect() as conn:
        rows = conn.execute(
            "SELECT name FROM game_objects WHERE story_id = ? AND room_id IS NULL ORDER BY rowid",
            (story_id,),
        ).fetchall()
    return [r["name"] for r in rows]
