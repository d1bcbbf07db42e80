"""Tests for reward dispatch."""

from puzzle_engine import engine, storage
from puzzle_engine.models import (
    CharacterInfoReward,
    DilemmaReward,
    ItemReward,
    NoReward,
    RoomUnlockReward,
    SecretRevealReward,
    SkillBoostReward,
)


def _door(story_id: str, **update):
    door = storage.find_puzzle_by_name(story_id, "Locked Door")
    return door.model_copy(update=update)


# ── Items and skills ─────────────────────────────────────


def test_item_reward(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=ItemReward(item_name="lantern")))
    assert storage.get_inventory(manor.id) == ["lantern"]


def test_item_reward_without_name_is_noop(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=ItemReward()))
    assert storage.get_inventory(manor.id) == []


def test_skill_boost_amount(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Lockpicking", amount=4)))
    assert storage.get_ability(manor.id, "Lockpicking").level == 5


def test_skill_boost_default_from_config(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Lockpicking")))
    assert storage.get_ability(manor.id, "Lockpicking").level == 2

    storage.update_config({"default_skill_boost": 3})
    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Lockpicking")))
    assert storage.get_ability(manor.id, "Lockpicking").level == 5


def test_skill_boost_non_positive_amount_uses_default(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Lockpicking", amount=-5)))
    assert storage.get_ability(manor.id, "Lockpicking").level == 2

    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Lockpicking", amount=0)))
    assert storage.get_ability(manor.id, "Lockpicking").level == 3


def test_skill_boost_missing_skill_is_noop(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SkillBoostReward(skill_name="Flying", amount=1)))
    assert storage.get_ability(manor.id, "Flying") is None


# ── Secrets ──────────────────────────────────────────────


def test_secret_reveal(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SecretRevealReward(fact_content="butler")))
    revealed = storage.list_facts(manor.id, revealed=True)
    assert [f.content for f in revealed] == ["The butler knows about the vault."]


def test_secret_reveal_without_content_is_noop(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=SecretRevealReward()))
    assert storage.list_facts(manor.id, revealed=True) == []


# ── Room unlock ──────────────────────────────────────────


def test_room_unlock_named_room(manor, rooms):
    reward = RoomUnlockReward(room_name="cellar", direction="Up")
    engine.apply_reward(manor.id, _door(manor.id, reward=reward))
    assert storage.get_room(rooms["Cellar"].id).discovered_exits == ["up"]


def test_room_unlock_defaults_to_puzzle_room(manor, rooms):
    engine.apply_reward(manor.id, _door(manor.id, reward=RoomUnlockReward(direction="down")))
    assert storage.get_room(rooms["Hallway"].id).discovered_exits == ["down"]


def test_room_unlock_unknown_room_is_noop(manor, rooms):
    engine.apply_reward(manor.id, _door(manor.id, reward=RoomUnlockReward(room_name="Attic", direction="up")))
    assert all(r.discovered_exits == [] for r in storage.list_rooms(manor.id))


def test_room_unlock_twice_keeps_one_exit(manor, rooms):
    reward = RoomUnlockReward(direction="east")
    engine.apply_reward(manor.id, _door(manor.id, reward=reward))
    engine.apply_reward(manor.id, _door(manor.id, reward=reward))
    assert storage.get_room(rooms["Hallway"].id).discovered_exits == ["east"]


# ── Dilemmas and informational rewards ───────────────────


def test_dilemma_reward(manor):
    dilemma = storage.list_dilemmas(manor.id)[0]
    puzzle = _door(manor.id, reward=DilemmaReward(), target_dilemma_id=dilemma.id)
    engine.apply_reward(manor.id, puzzle)
    assert storage.get_dilemma(dilemma.id).is_triggered


def test_dilemma_reward_without_target_is_noop(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=DilemmaReward()))
    assert not storage.list_dilemmas(manor.id)[0].is_triggered


def test_informational_rewards_change_nothing(manor):
    engine.apply_reward(manor.id, _door(manor.id, reward=CharacterInfoReward(character_name="Butler", info="Lies")))
    engine.apply_reward(manor.id, _door(manor.id, reward=NoReward()))
    assert storage.get_inventory(manor.id) == []
    assert storage.list_facts(manor.id, revealed=True) == []
