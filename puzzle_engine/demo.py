"""Create a demo story for development/testing."""

from puzzle_engine import storage
from puzzle_engine.models import StorySeed

DEMO_SEED = {
    "title": "The Founder's Manor",
    "startingRoomName": "Entrance Hall",
    "rooms": [
        {
            "name": "Entrance Hall",
            "description": "Dust sheets cover the furniture. A coat rack leans by the door.",
            "connections": [
                {"direction": "east", "targetRoomName": "Hallway"},
            ],
            "objects": [
                {"name": "rusty key", "description": "Hangs from the coat rack on a frayed string."},
            ],
        },
        {
            "name": "Hallway",
            "description": "A long corridor ending in a heavy oak door.",
            "connections": [
                {"direction": "west", "targetRoomName": "Entrance Hall"},
                {"direction": "north", "targetRoomName": "Library"},
            ],
        },
        {
            "name": "Library",
            "description": "Shelves to the ceiling. One bookcase sits slightly out from the wall.",
            "connections": [
                {"direction": "south", "targetRoomName": "Hallway"},
                {
                    "direction": "east",
                    "targetRoomName": "Secret Study",
                    "descriptionFromHere": "A gap behind the bookcase",
                    "isHidden": True,
                    "hiddenUntil": "examine bookcase",
                },
            ],
            "objects": [
                {"name": "old bookcase", "isTakeable": False},
            ],
        },
        {
            "name": "Secret Study",
            "description": "A cramped room with a writing desk and an iron vault.",
            "connections": [
                {"direction": "west", "targetRoomName": "Library"},
            ],
            "objects": [
                {"name": "founder's journal"},
            ],
        },
    ],
    "skills": [
        {"name": "Lockpicking", "level": 1, "description": "Opening what was meant to stay shut."},
    ],
    "facts": [
        {"content": "The vault holds the founder's last letter."},
        {"content": "The manor was sealed after the founder vanished.", "isSecret": False},
    ],
    "dilemmas": [
        {
            "name": "The Last Letter",
            "description": "Deliver the letter to the heirs, or burn it as the founder asked.",
            "triggerRoomName": "Secret Study",
        },
    ],
    "puzzles": [
        {
            "name": "Locked Door",
            "description": "The oak door at the end of the hallway is locked.",
            "roomName": "Hallway",
            "steps": [
                {"stepNumber": 1, "description": "Find a key", "requirements": {"requiredItems": ["key"]}},
                {
                    "stepNumber": 2,
                    "description": "Unlock the hallway door",
                    "hint": "The key might fit the oak door.",
                    "requirements": {"requiredActions": ["unlock door"], "requiredRoom": "Hallway"},
                },
            ],
            "reward": {"type": "item", "data": {"itemName": "brass key", "description": "Was wedged in the lock."}},
        },
        {
            "name": "Founder's Journal",
            "description": "The desk holds a journal full of cramped notes.",
            "roomName": "Secret Study",
            "discoversOnRoomEntry": True,
            "steps": [
                {"stepNumber": 1, "description": "Read the journal", "requirements": {"requiredActions": ["read journal"]}},
            ],
            "reward": {"type": "secret_reveal", "data": {"factContent": "the vault"}},
        },
        {
            "name": "Open the Vault",
            "description": "An iron vault set into the wall.",
            "roomName": "Secret Study",
            "steps": [
                {
                    "stepNumber": 1,
                    "description": "Open the vault with the brass key",
                    "requirements": {"requiredItems": ["brass key"], "requiredActions": ["open vault"]},
                },
            ],
            "reward": {"type": "dilemma"},
            "leadsToDilemma": "The Last Letter",
        },
    ],
    "puzzleChains": [
        {"sourcePuzzle": "Locked Door", "targetPuzzle": "Open the Vault", "linkType": "sequential"},
    ],
}


def create_demo_data() -> None:
    """Wipe existing stories and load the demo story fresh."""
    for story in storage.list_stories():
        storage.delete_story(story.id)

    story = storage.create_story(StorySeed.model_validate(DEMO_SEED))
    summary = storage.story_summary(story.id)

    print(
        f"Created demo story {story.id!r}: {summary['rooms']} rooms, "
        f"{summary['puzzles']} puzzles, {summary['secrets']} secret(s)."
    )
