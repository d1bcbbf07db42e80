"""Player abilities (skills)."""

from puzzle_engine.models import PlayerAbility

from .core import connect


def list_abilities(story_id: str) -> list[PlayerAbility]:
    with connect() as conn:
        rows = conn.execute(
            "SELECT id, story_id, name, level, description FROM player_abilities "
            "WHERE story_id = ? ORDER BY rowid",
            (story_id,),
        ).fetchall()
    return [PlayerAbility.model_validate(dict(r)) for r in rows]


def get_ability(story_id: str, name: str) -> PlayerAbility | None:
    with connect() as conn:
        row = conn.execute(
            "SELECT id, story_id, name, level, description FROM player_abilities "
            "WHERE story_id = ? AND name = ?",
            (story_id, name),
        ).fetchone()
    return PlayerAbility.model_validate(dict(row)) if row else None


def boost_ability(story_id: str, name: str, amount: int) -> bool:
    """Add amount to the named ability's level. False if there is no such ability."""
    with connect() as conn:
        cur = conn.execute(
            "UPDATE player_abilities SET level = level + ? WHERE story_id = ? AND name = ?",
            (amount, story_id, name),
        )
    return cur.rowcount > 0
