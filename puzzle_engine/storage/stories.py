"""Story creation from a seed, lookup, deletion, and generation summary."""

import json
import logging
from typing import Any

from puzzle_engine.models import Story, StorySeed

from .config import get_config
from .core import connect, new_id, now, slugify

logger = logging.getLogger(__name__)


def _unique_story_id(conn, title: str) -> str:
    base_slug = slugify(title)
    target_slug = base_slug
    counter = 2
    while conn.execute("SELECT 1 FROM stories WHERE id = ?", (target_slug,)).fetchone():
        target_slug = f"{base_slug}-{counter}"
        counter += 1
    return target_slug


def create_story(seed: StorySeed) -> Story:
    """Persist a whole seed atomically and return the new story.

    Root puzzles (not the target of any sequential link) start active and
    discovered unless they wait for room entry or opt out via starts_active.
    Everything else starts pending and undiscovered.
    """
    auto_activate = get_config()["auto_activate_root_puzzles"]
    created_at = now()

    with connect() as conn:
        story_id = _unique_story_id(conn, seed.title)
        conn.execute(
            "INSERT INTO stories (id, title, seed, created_at) VALUES (?, ?, ?, ?)",
            (story_id, seed.title, seed.model_dump_json(by_alias=True), created_at),
        )
        room_ids: dict[str, str] = {}
        dilemma_ids: dict[str, str] = {}
        puzzle_ids: dict[str, str] = {}

        for room in seed.rooms:
            room_id = new_id()
            room_ids[room.name.lower()] = room_id
            hidden = [c.direction for c in room.connections if c.is_hidden]
            conn.execute(
                "INSERT INTO rooms (id, story_id, name, description, hidden_exits) "
                "VALUES (?, ?, ?, ?, ?)",
                (room_id, story_id, room.name, room.description, json.dumps(hidden)),
            )
            for obj in room.objects:
                conn.execute(
                    "INSERT INTO game_objects (id, story_id, room_id, name, description, is_takeable) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (new_id(), story_id, room_id, obj.name, obj.description, int(obj.is_takeable)),
                )

        starting_room_id = None
        if seed.starting_room_name:
            starting_room_id = room_ids.get(seed.starting_room_name.lower())
        conn.execute(
            "UPDATE stories SET starting_room_id = ? WHERE id = ?",
            (starting_room_id, story_id),
        )

        # Starting items go straight into the player's inventory.
        for item in seed.starting_items:
            conn.execute(
                "INSERT INTO game_objects (id, story_id, room_id, name, description, is_takeable) "
                "VALUES (?, ?, NULL, ?, ?, 1)",
                (new_id(), story_id, item.name, item.description),
            )

        for skill in seed.skills:
            conn.execute(
                "INSERT INTO player_abilities (id, story_id, name, level, description) "
                "VALUES (?, ?, ?, ?, ?) ON CONFLICT(story_id, name) DO NOTHING",
                (new_id(), story_id, skill.name, skill.level, skill.description),
            )

        for fact in seed.facts:
            conn.execute(
                "INSERT INTO story_facts (id, story_id, content, is_secret) VALUES (?, ?, ?, ?)",
                (new_id(), story_id, fact.content, int(fact.is_secret)),
            )

        for dilemma in seed.dilemmas:
            dilemma_id = new_id()
            dilemma_ids[dilemma.name] = dilemma_id
            room_id = room_ids.get((dilemma.trigger_room_name or "").lower())
            conn.execute(
                "INSERT INTO dilemmas (id, story_id, name, description, room_id) "
                "VALUES (?, ?, ?, ?, ?)",
                (dilemma_id, story_id, dilemma.name, dilemma.description, room_id),
            )

        gated = {
            link.target_puzzle
            for link in seed.puzzle_chains
            if link.link_type == "sequential"
        }

        for order, puzzle in enumerate(seed.puzzles):
            puzzle_id = new_id()
            puzzle_ids[puzzle.name] = puzzle_id
            room_id = room_ids.get((puzzle.room_name or "").lower())
            dilemma_id = dilemma_ids.get(puzzle.leads_to_dilemma or "")
            is_root = (
                auto_activate
                and puzzle.name not in gated
                and puzzle.starts_active
                and not puzzle.discovers_on_room_entry
            )
            conn.execute(
                "INSERT INTO puzzles (id, story_id, room_id, name, description, status, "
                "is_active, is_discovered, discovers_on_room_entry, reward, target_dilemma_id, "
                "display_order, started_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    puzzle_id, story_id, room_id, puzzle.name, puzzle.description,
                    "active" if is_root else "pending",
                    int(is_root), int(is_root), int(puzzle.discovers_on_room_entry),
                    puzzle.reward.model_dump_json(by_alias=True), dilemma_id, order,
                    created_at if is_root else None,
                ),
            )
            for step in puzzle.steps:
                conn.execute(
                    "INSERT INTO puzzle_steps (id, puzzle_id, step_number, description, hint, "
                    "requirements) VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        new_id(), puzzle_id, step.step_number, step.description, step.hint,
                        step.requirements.model_dump_json(by_alias=True),
                    ),
                )

        for link in seed.puzzle_chains:
            conn.execute(
                "INSERT INTO puzzle_links (id, story_id, source_puzzle_id, target_puzzle_id, "
                "link_type, condition) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    new_id(), story_id, puzzle_ids[link.source_puzzle],
                    puzzle_ids[link.target_puzzle], link.link_type, link.condition,
                ),
            )

    logger.info(
        f"Created story {story_id!r}: {len(seed.rooms)} rooms, "
        f"{len(seed.puzzles)} puzzles, {len(seed.puzzle_chains)} links"
    )
    return Story(
        id=story_id, title=seed.title,
        starting_room_id=starting_room_id, created_at=created_at,
    )


def _story_from_row(row) -> Story:
    return Story(
        id=row["id"], title=row["title"],
        starting_room_id=row["starting_room_id"], created_at=row["created_at"],
    )


def get_story(story_id: str) -> Story | None:
    with connect() as conn:
        row = conn.execute(
            "SELECT id, title, starting_room_id, created_at FROM stories WHERE id = ?",
            (story_id,),
        ).fetchone()
    return _story_from_row(row) if row else None


def list_stories() -> list[Story]:
    with connect() as conn:
        rows = conn.execute(
            "SELECT id, title, starting_room_id, created_at FROM stories ORDER BY created_at, id"
        ).fetchall()
    return [_story_from_row(r) for r in rows]


def get_story_seed(story_id: str) -> StorySeed | None:
    """The authored seed exactly as it was loaded, or None."""
    with connect() as conn:
        row = conn.execute("SELECT seed FROM stories WHERE id = ?", (story_id,)).fetchone()
    if row is None:
        return None
    return StorySeed.model_validate_json(row["seed"])


def delete_story(story_id: str) -> bool:
    with connect() as conn:
        cur = conn.execute("DELETE FROM stories WHERE id = ?", (story_id,))
    return cur.rowcount > 0


def story_summary(story_id: str) -> dict[str, Any]:
    """Counts of what the seed created."""
    queries = {
        "rooms": "SELECT COUNT(*) FROM rooms WHERE story_id = ?",
        "puzzles": "SELECT COUNT(*) FROM puzzles WHERE story_id = ?",
        "dilemmas": "SELECT COUNT(*) FROM dilemmas WHERE story_id = ?",
        "secrets": "SELECT COUNT(*) FROM story_facts WHERE story_id = ? AND is_secret = 1",
        "skills": "SELECT COUNT(*) FROM player_abilities WHERE story_id = ?",
        "objects": "SELECT COUNT(*) FROM game_objects WHERE story_id = ?",
    }
    with connect() as conn:
        return {
            key: conn.execute(sql, (story_id,)).fetchone()[0]
            for key, sql in queries.items()
        }
