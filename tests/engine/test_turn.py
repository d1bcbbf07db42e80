"""End-to-end turns through every engine stage."""

from puzzle_engine import engine, storage
from puzzle_engine.models import ObjectSeed


def test_walkthrough(manor, rooms):
    """Key, door, bookcase, study, vault, notes: the whole manor in six turns."""
    story = manor.id

    turn = engine.run_turn(story, "take the key", rooms["Entrance"].id,
                           inventory=["rusty key"], acquired_items=["rusty key"])
    assert turn.narratives == ["[Objective progress: Find a key]"]

    turn = engine.run_turn(story, "unlock the door", rooms["Hallway"].id,
                           inventory=["rusty key"], entered_room=True)
    assert turn.narratives == [
        "[Objective progress: Unlock the door]",
        "[Objective complete: Locked Door]",
        "[New objective: Vault]",
    ]
    assert storage.get_inventory(story) == ["brass key"]

    turn = engine.run_turn(story, "look at the old bookcase", rooms["Hallway"].id)
    assert turn.discovered_exits == ["east"]
    assert turn.narratives == ["[You discovered a hidden passage to the east!]"]

    turn = engine.run_turn(story, "squeeze through", rooms["Study"].id, entered_room=True)
    assert [p.name for p in turn.discovered_puzzles] == ["Study Notes"]
    assert turn.narratives == ["[New objective: Study Notes]"]

    turn = engine.run_turn(story, "open vault with the brass key", rooms["Study"].id)
    assert [p.name for p in turn.completed_puzzles] == ["Vault"]
    assert turn.narratives == ["[Objective progress: Open the vault]", "[Objective complete: Vault]"]
    assert storage.get_ability(story, "Lockpicking").level == 3

    turn = engine.run_turn(story, "read notes", rooms["Study"].id)
    assert turn.narratives == ["[Objective progress: Read the notes]", "[Objective complete: Study Notes]"]
    assert len(storage.list_facts(story, revealed=True)) == 2

    assert engine.list_objectives(story) == []
    assert engine.completed_objective_count(story) == 3


def test_stage_order(manor, rooms):
    turn = engine.run_turn(manor.id, "examine bookcase and open vault", rooms["Hallway"].id,
                           inventory=["rusty key"], entered_room=True)
    assert turn.narratives == [
        "[You discovered a hidden passage to the east!]",
        "[Objective discovered: Vault]",
        "[Objective progress: Find a key]",
    ]
    assert [p.name for p in turn.discovered_puzzles] == ["Vault"]
    assert [s.step_number for s in turn.completed_steps] == [1]


def test_item_discovery_runs_per_acquired_item(manor_seed):
    storage.update_config({"auto_activate_root_puzzles": False})
    story = storage.create_story(manor_seed)
    entrance = storage.find_room_by_name(story.id, "Entrance")
    turn = engine.run_turn(story.id, "pick up everything", entrance.id,
                           inventory=[], acquired_items=["lamp", "keyboard"])
    assert turn.narratives == ["[Objective discovered: Locked Door]"]


def test_room_entry_only_when_entered(manor, rooms):
    turn = engine.run_turn(manor.id, "wait", rooms["Study"].id)
    assert turn.discovered_puzzles == []
    assert storage.find_puzzle_by_name(manor.id, "Study Notes").status == "pending"


def test_inventory_read_from_store(manor, rooms):
    storage.create_object(manor.id, "rusty key")
    turn = engine.run_turn(manor.id, "wait", rooms["Entrance"].id)
    assert turn.narratives == ["[Objective progress: Find a key]"]


def test_quiet_turn(manor, rooms):
    turn = engine.run_turn(manor.id, "wait", rooms["Entrance"].id)
    assert turn.narratives == []
    assert turn.completed_steps == []


def test_starting_items_satisfy_steps(manor_seed):
    seed = manor_seed.model_copy(update={"starting_items": [ObjectSeed(name="rusty key")]})
    story = storage.create_story(seed)
    entrance = storage.find_room_by_name(story.id, "Entrance")
    turn = engine.run_turn(story.id, "wait", entrance.id)
    assert turn.narratives == ["[Objective progress: Find a key]"]
