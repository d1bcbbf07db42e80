"""Tests for rooms and their discovered exits."""

from puzzle_engine import storage


def test_find_room_by_name_case_insensitive(manor, rooms):
    assert storage.find_room_by_name(manor.id, "HALLWAY").id == rooms["Hallway"].id
    assert storage.find_room_by_name(manor.id, "Attic") is None


def test_list_rooms_in_seed_order(manor):
    assert [r.name for r in storage.list_rooms(manor.id)] == ["Entrance", "Hallway", "Study", "Cellar"]


def test_get_room_missing():
    assert storage.get_room("nope") is None


def test_add_discovered_exit_once(rooms):
    hallway = rooms["Hallway"]
    assert storage.add_discovered_exit(hallway.id, "East")
    assert not storage.add_discovered_exit(hallway.id, "east")
    assert storage.get_room(hallway.id).discovered_exits == ["east"]


def test_discovered_exits_keep_insertion_order(rooms):
    hallway = rooms["Hallway"]
    storage.add_discovered_exit(hallway.id, "down")
    storage.add_discovered_exit(hallway.id, "east")
    storage.add_discovered_exit(hallway.id, "down")
    assert storage.get_room(hallway.id).discovered_exits == ["down", "east"]


def test_add_discovered_exit_missing_room():
    assert not storage.add_discovered_exit("nope", "north")
