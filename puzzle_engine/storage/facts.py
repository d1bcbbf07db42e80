"""Story facts and secret reveals."""

from puzzle_engine.models import StoryFact

from .core import connect, now


def _fact_from_row(row) -> StoryFact:
    data = dict(row)
    data["is_secret"] = bool(data["is_secret"])
    data["is_revealed"] = bool(data["is_revealed"])
    return StoryFact.model_validate(data)


def list_facts(story_id: str, *, revealed: bool | None = None) -> list[StoryFact]:
    sql = (
        "SELECT id, story_id, content, is_secret, is_revealed, revealed_at "
        "FROM story_facts WHERE story_id = ?"
    )
    params: list = [story_id]
    if revealed is not None:
        sql += " AND is_revealed = ?"
        params.append(int(revealed))
    with connect() as conn:
        rows = conn.execute(sql + " ORDER BY rowid", params).fetchall()
    return [_fact_from_row(r) for r in rows]


def reveal_secret_facts(story_id: str, fragment: str) -> int:
    """Reveal every unrevealed secret whose content contains fragment.

    Matching is case-sensitive. Returns how many facts this call revealed.
    """
    with connect() as conn:
        cur = conn.execute(
            "UPDATE story_facts SET is_revealed = 1, revealed_at = ? "
            "WHERE story_id = ? AND is_secret = 1 AND is_revealed = 0 "
            "AND instr(content, ?) > 0",
            (now(), story_id, fragment),
        )
    return cur.rowcount
