"""Puzzles, steps and links.

Every state transition is a single conditional UPDATE whose WHERE clause
names the state the caller expects to leave. The functions return True only
when this caller performed the transition; a False return means another
caller got there first (or the row is gone) and nothing was changed.
"""

import json
import logging
from collections.abc import Iterable

from puzzle_engine.models import Puzzle, PuzzleLink, PuzzleStep

from .core import connect, now

logger = logging.getLogger(__name__)

_PUZZLE_COLUMNS = (
    "id, story_id, room_id, name, description, status, is_active, is_discovered, "
    "discovers_on_room_entry, reward, target_dilemma_id, display_order, started_at, completed_at"
)

_STEP_COLUMNS = (
    "id, puzzle_id, step_number, description, hint, requirements, is_completed, completed_at"
)


def _step_from_row(row) -> PuzzleStep:
    data = dict(row)
    data["requirements"] = json.loads(data["requirements"] or "{}")
    data["is_completed"] = bool(data["is_completed"])
    return PuzzleStep.model_validate(data)


def _puzzle_from_row(row, steps: list[PuzzleStep]) -> Puzzle:
    data = dict(row)
    data["reward"] = json.loads(data["reward"] or "{}")
    for flag in ("is_active", "is_discovered", "discovers_on_room_entry"):
        data[flag] = bool(data[flag])
    data["steps"] = steps
    return Puzzle.model_validate(data)


def _load_steps(conn, puzzle_ids: list[str]) -> dict[str, list[PuzzleStep]]:
    by_puzzle: dict[str, list[PuzzleStep]] = {pid: [] for pid in puzzle_ids}
    if not puzzle_ids:
        return by_puzzle
    placeholders = ", ".join("?" for _ in puzzle_ids)
    rows = conn.execute(
        f"SELECT {_STEP_COLUMNS} FROM puzzle_steps WHERE puzzle_id IN ({placeholders}) "
        "ORDER BY puzzle_id, step_number",
        puzzle_ids,
    ).fetchall()
    for row in rows:
        by_puzzle[row["puzzle_id"]].append(_step_from_row(row))
    return by_puzzle


def _fetch_puzzles(conn, where: str, params: Iterable) -> list[Puzzle]:
    rows = conn.execute(
        f"SELECT {_PUZZLE_COLUMNS} FROM puzzles WHERE {where} ORDER BY display_order, name",
        tuple(params),
    ).fetchall()
    steps = _load_steps(conn, [r["id"] for r in rows])
    return [_puzzle_from_row(r, steps[r["id"]]) for r in rows]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def get_puzzle(puzzle_id: str) -> Puzzle | None:
    with connect() as conn:
        puzzles = _fetch_puzzles(conn, "id = ?", (puzzle_id,))
    return puzzles[0] if puzzles else None


def list_puzzles(
    story_id: str,
    *,
    statuses: Iterable[str] | None = None,
    is_discovered: bool | None = None,
    room_id: str | None = None,
    discovers_on_room_entry: bool | None = None,
) -> list[Puzzle]:
    """Puzzles of a story with their ordered steps, in display order."""
    clauses = ["story_id = ?"]
    params: list = [story_id]
    if statuses is not None:
        statuses = list(statuses)
        if not statuses:
            return []
        clauses.append(f"status IN ({', '.join('?' for _ in statuses)})")
        params.extend(statuses)
    if is_discovered is not None:
        clauses.append("is_discovered = ?")
        params.append(int(is_discovered))
    if room_id is not None:
        clauses.append("room_id = ?")
        params.append(room_id)
    if discovers_on_room_entry is not None:
        clauses.append("discovers_on_room_entry = ?")
        params.append(int(discovers_on_room_entry))
    with connect() as conn:
        return _fetch_puzzles(conn, " AND ".join(clauses), params)


def find_puzzle_by_name(story_id: str, name: str) -> Puzzle | None:
    with connect() as conn:
        puzzles = _fetch_puzzles(conn, "story_id = ? AND name = ?", (story_id, name))
    return puzzles[0] if puzzles else None


def get_current_step(puzzle_id: str) -> PuzzleStep | None:
    """Lowest-numbered incomplete step, or None."""
    with connect() as conn:
        row = conn.execute(
            f"SELECT {_STEP_COLUMNS} FROM puzzle_steps "
            "WHERE puzzle_id = ? AND is_completed = 0 ORDER BY step_number LIMIT 1",
            (puzzle_id,),
        ).fetchone()
    return _step_from_row(row) if row else None


def get_step(step_id: str) -> PuzzleStep | None:
    with connect() as conn:
        row = conn.execute(
            f"SELECT {_STEP_COLUMNS} FROM puzzle_steps WHERE id = ?", (step_id,)
        ).fetchone()
    return _step_from_row(row) if row else None


def count_incomplete_steps(puzzle_id: str) -> int:
    with connect() as conn:
        return conn.execute(
            "SELECT COUNT(*) FROM puzzle_steps WHERE puzzle_id = ? AND is_completed = 0",
            (puzzle_id,),
        ).fetchone()[0]


def count_puzzles(story_id: str, status: str, *, is_active: bool | None = None) -> int:
    sql = "SELECT COUNT(*) FROM puzzles WHERE story_id = ? AND status = ?"
    params: list = [story_id, status]
    if is_active is not None:
        sql += " AND is_active = ?"
        params.append(int(is_active))
    with connect() as conn:
        return conn.execute(sql, params).fetchone()[0]


def list_links(source_puzzle_id: str, link_type: str | None = "sequential") -> list[PuzzleLink]:
    sql = (
        "SELECT id, source_puzzle_id, target_puzzle_id, link_type, condition "
        "FROM puzzle_links WHERE source_puzzle_id = ?"
    )
    params: list = [source_puzzle_id]
    if link_type is not None:
        sql += " AND link_type = ?"
        params.append(link_type)
    with connect() as conn:
        rows = conn.execute(sql + " ORDER BY rowid", params).fetchall()
    return [PuzzleLink.model_validate(dict(r)) for r in rows]


# ---------------------------------------------------------------------------
# Conditional transitions
# ---------------------------------------------------------------------------


def complete_step(step_id: str) -> bool:
    """Mark a step completed if it is still incomplete and no earlier step is.

    The ordering guard is part of the UPDATE, so steps can never complete out
    of order even when two callers race.
    """
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzle_steps SET is_completed = 1, completed_at = ? "
            "WHERE id = ? AND is_completed = 0 AND NOT EXISTS ("
            "  SELECT 1 FROM puzzle_steps earlier"
            "  WHERE earlier.puzzle_id = puzzle_steps.puzzle_id"
            "    AND earlier.step_number < puzzle_steps.step_number"
            "    AND earlier.is_completed = 0"
            ")",
            (now(), step_id),
        )
    return cur.rowcount == 1


def complete_puzzle(puzzle_id: str) -> bool:
    """active → completed, only once every step is completed."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzles SET status = 'completed', is_active = 0, completed_at = ? "
            "WHERE id = ? AND status = 'active' AND NOT EXISTS ("
            "  SELECT 1 FROM puzzle_steps WHERE puzzle_id = puzzles.id AND is_completed = 0"
            ")",
            (now(), puzzle_id),
        )
    return cur.rowcount == 1


def activate_puzzle(puzzle_id: str) -> bool:
    """pending → active; also latches discovery."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzles SET status = 'active', is_active = 1, is_discovered = 1, "
            "started_at = ? WHERE id = ? AND status = 'pending'",
            (now(), puzzle_id),
        )
    return cur.rowcount == 1


def fail_puzzle(puzzle_id: str) -> bool:
    """active → failed."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzles SET status = 'failed', is_active = 0 "
            "WHERE id = ? AND status = 'active'",
            (puzzle_id,),
        )
    return cur.rowcount == 1


def discover_puzzle(puzzle_id: str) -> bool:
    """Latch is_discovered; status is left alone."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzles SET is_discovered = 1 WHERE id = ? AND is_discovered = 0",
            (puzzle_id,),
        )
    return cur.rowcount == 1


def discover_and_activate_puzzle(puzzle_id: str) -> bool:
    """Undiscovered pending → discovered active, in one step (room entry)."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE puzzles SET is_discovered = 1, status = 'active', is_active = 1, "
            "started_at = ? WHERE id = ? AND is_discovered = 0 AND status = 'pending'",
            (now(), puzzle_id),
        )
    return cur.rowcount == 1
