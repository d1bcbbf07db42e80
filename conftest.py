import shutil
from pathlib import Path

import pytest

from puzzle_engine import storage
from puzzle_engine.models import StorySeed

TEST_DATA_DIR = Path("data-tests")

# Two rooms, a two-step door puzzle chained to a vault puzzle, a hidden exit
# behind a bookcase, an entry-triggered puzzle and a secret fact.
MANOR_SEED = {
    "title": "Manor",
    "startingRoomName": "Entrance",
    "rooms": [
        {
            "name": "Entrance",
            "connections": [{"direction": "north", "targetRoomName": "Hallway"}],
            "objects": [{"name": "rusty key"}],
        },
        {
            "name": "Hallway",
            "connections": [
                {"direction": "south", "targetRoomName": "Entrance"},
                {
                    "direction": "East",
                    "targetRoomName": "Study",
                    "isHidden": True,
                    "hiddenUntil": "examine bookcase",
                },
                {
                    "direction": "down",
                    "targetRoomName": "Cellar",
                    "isHidden": True,
                    "hiddenUntil": "pull lever",
                },
            ],
        },
        {"name": "Study"},
        {"name": "Cellar"},
    ],
    "skills": [{"name": "Lockpicking", "level": 1}],
    "facts": [
        {"content": "The vault hides a letter."},
        {"content": "The butler knows about the vault."},
        {"content": "The vault is common knowledge.", "isSecret": False},
    ],
    "dilemmas": [{"name": "The Letter", "description": "Read it or burn it."}],
    "puzzles": [
        {
            "name": "Locked Door",
            "roomName": "Hallway",
            "steps": [
                {"stepNumber": 1, "description": "Find a key", "requirements": {"requiredItems": ["key"]}},
                {
                    "stepNumber": 2,
                    "description": "Unlock the door",
                    "requirements": {"requiredActions": ["unlock door"], "requiredRoom": "Hallway"},
                },
            ],
            "reward": {"type": "item", "data": {"itemName": "brass key"}},
        },
        {
            "name": "Vault",
            "roomName": "Study",
            "steps": [
                {
                    "stepNumber": 1,
                    "description": "Open the vault",
                    "requirements": {"requiredItems": ["brass key"], "requiredActions": ["open vault"]},
                },
            ],
            "reward": {"type": "skill_boost", "data": {"skillName": "Lockpicking", "amount": 2}},
        },
        {
            "name": "Study Notes",
            "roomName": "Study",
            "discoversOnRoomEntry": True,
            "steps": [
                {"stepNumber": 1, "description": "Read the notes", "requirements": {"requiredActions": ["read notes"]}},
            ],
            "reward": {"type": "secret_reveal", "data": {"factContent": "vault"}},
        },
    ],
    "puzzleChains": [
        {"sourcePuzzle": "Locked Door", "targetPuzzle": "Vault", "linkType": "sequential"},
    ],
}


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe and re-init data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    storage.init_storage(TEST_DATA_DIR)
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


@pytest.fixture
def manor_seed() -> StorySeed:
    return StorySeed.model_validate(MANOR_SEED)


@pytest.fixture
def manor(manor_seed):
    """The manor story loaded into storage."""
    return storage.create_story(manor_seed)


@pytest.fixture
def rooms(manor):
    """Room name → Room for the loaded manor."""
    return {r.name: r for r in storage.list_rooms(manor.id)}
