"""Moral dilemmas a puzzle can lead into."""

from puzzle_engine.models import Dilemma

from .core import connect, now


def _dilemma_from_row(row) -> Dilemma:
    data = dict(row)
    data["is_triggered"] = bool(data["is_triggered"])
    return Dilemma.model_validate(data)


def get_dilemma(dilemma_id: str) -> Dilemma | None:
    with connect() as conn:
        row = conn.execute(
            "SELECT id, story_id, name, description, room_id, is_triggered, triggered_at "
            "FROM dilemmas WHERE id = ?",
            (dilemma_id,),
        ).fetchone()
    return _dilemma_from_row(row) if row else None


def list_dilemmas(story_id: str) -> list[Dilemma]:
    with connect() as conn:
        rows = conn.execute(
            "SELECT id, story_id, name, description, room_id, is_triggered, triggered_at "
            "FROM dilemmas WHERE story_id = ? ORDER BY rowid",
            (story_id,),
        ).fetchall()
    return [_dilemma_from_row(r) for r in rows]


def trigger_dilemma(dilemma_id: str) -> bool:
    """Untriggered → triggered. True only for the call that flipped it."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE dilemmas SET is_triggered = 1, triggered_at = ? "
            "WHERE id = ? AND is_triggered = 0",
            (now(), dilemma_id),
        )
    return cur.rowcount == 1
