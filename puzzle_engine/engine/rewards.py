"""Reward dispatch for completed puzzles."""

import logging

from puzzle_engine import storage
from puzzle_engine.models import (
    CharacterInfoReward,
    DilemmaReward,
    ItemReward,
    Puzzle,
    RoomUnlockReward,
    SecretRevealReward,
    SkillBoostReward,
)

logger = logging.getLogger(__name__)


def apply_reward(story_id: str, puzzle: Puzzle) -> None:
    """Apply the puzzle's reward to the world.

    Missing data or missing targets make the reward a no-op. Storage
    failures propagate.
    """
    reward = puzzle.reward

    if isinstance(reward, ItemReward):
        if not reward.item_name:
            logger.debug(f"Item reward of {puzzle.name!r} has no item name")
            return
        storage.create_object(story_id, reward.item_name, reward.description)
        logger.info(f"Reward: {reward.item_name!r} added to inventory")

    elif isinstance(reward, SkillBoostReward):
        if not reward.skill_name:
            return
        amount = reward.amount
        if amount is None:
            amount = storage.get_config()["default_skill_boost"]
        if storage.boost_ability(story_id, reward.skill_name, amount):
            logger.info(f"Reward: {reward.skill_name!r} +{amount}")
        else:
            logger.debug(f"Skill {reward.skill_name!r} not found; boost skipped")

    elif isinstance(reward, SecretRevealReward):
        if not reward.fact_content:
            return
        revealed = storage.reveal_secret_facts(story_id, reward.fact_content)
        logger.info(f"Reward: {revealed} secret(s) revealed")

    elif isinstance(reward, RoomUnlockReward):
        _unlock_room(story_id, puzzle, reward)

    elif isinstance(reward, DilemmaReward):
        if not puzzle.target_dilemma_id:
            logger.debug(f"Dilemma reward of {puzzle.name!r} has no target dilemma")
            return
        if storage.trigger_dilemma(puzzle.target_dilemma_id):
            logger.info(f"Reward: dilemma {puzzle.target_dilemma_id} triggered")

    elif isinstance(reward, CharacterInfoReward):
        # Informational only; nothing is persisted.
        logger.info(f"Reward: info about {reward.character_name!r}: {reward.info}")


def _unlock_room(story_id: str, puzzle: Puzzle, reward: RoomUnlockReward) -> None:
    if not reward.direction:
        return
    if reward.room_name:
        room = storage.find_room_by_name(story_id, reward.room_name)
    elif puzzle.room_id:
        room = storage.get_room(puzzle.room_id)
    else:
        room = None
    if room is None:
        logger.debug(f"Room unlock of {puzzle.name!r}: no such room {reward.room_name!r}")
        return
    if storage.add_discovered_exit(room.id, reward.direction):
        logger.info(f"Reward: exit {reward.direction!r} opened in {room.name!r}")
