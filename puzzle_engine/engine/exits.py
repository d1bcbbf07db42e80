"""Hidden exits revealed by the player's action."""

import logging

from puzzle_engine import storage
from puzzle_engine.matching import UnlockPhraseMatcher
from puzzle_engine.models import ExitDiscoveryResult

logger = logging.getLogger(__name__)


def discover_hidden_exits(
    story_id: str, current_room_id: str, player_action: str
) -> ExitDiscoveryResult:
    """Reveal each hidden connection of the room whose unlock phrase the action meets.

    Unlock phrases come from the seed (the connection's hidden_until); the
    live room row says which directions are hidden and which are already
    found. Several exits can open in one call.
    """
    result = ExitDiscoveryResult()

    room = storage.get_room(current_room_id)
    if room is None:
        logger.debug(f"Room {current_room_id!r} not found; no exits checked")
        return result
    seed = storage.get_story_seed(story_id)
    if seed is None:
        logger.warning(f"Story {story_id!r} has no seed; hidden exits unavailable")
        return result
    seed_room = seed.find_room(room.name)
    if seed_room is None:
        logger.debug(f"Room {room.name!r} is not in the seed")
        return result

    matcher = UnlockPhraseMatcher(storage.get_config()["exit_synonyms"])
    hidden = set(room.hidden_exits)
    discovered = set(room.discovered_exits)

    for connection in seed_room.connections:
        if not connection.is_hidden or not connection.hidden_until:
            continue
        direction = connection.direction
        if direction not in hidden or direction in discovered:
            continue
        if not matcher.matches(connection.hidden_until, player_action):
            continue
        discovered.add(direction)
        if not storage.add_discovered_exit(room.id, direction):
            continue
        logger.info(f"Hidden exit {direction!r} discovered in {room.name!r}")
        result.discovered_exits.append(direction)
        result.narratives.append(f"[You discovered a hidden passage to the {direction}!]")

    return result
