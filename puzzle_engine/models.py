"""Core domain models.

All engine stages and storage functions operate on these types.
Pydantic is used for validation and serialisation at every data boundary:
the story seed is validated once when it is loaded, so requirement and
reward payloads never need to be re-checked at the read sites.

Python attributes are snake_case; JSON (seed documents, API output) is
camelCase. Both spellings are accepted on input.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

PuzzleStatus = Literal["pending", "active", "completed", "failed"]

LinkType = Literal["sequential", "parallel", "conditional"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


# ---------------------------------------------------------------------------
# Step requirements
# ---------------------------------------------------------------------------


class StepRequirements(_Model):
    """What the player must have, say and where they must stand.

    Every field is optional; an absent field is vacuously satisfied.
    """

    required_items: list[str] = Field(default_factory=list)
    required_actions: list[str] = Field(default_factory=list)
    required_room: str | None = None

    lists_default_empty = field_validator("required_items", "required_actions", mode="before")(
        _none_to_list
    )

    @field_validator("required_items", "required_actions")
    @classmethod
    def drop_blank(cls, values: list[str]) -> list[str]:
        return [v for v in values if v and v.strip()]

    @field_validator("required_room")
    @classmethod
    def blank_room(cls, value: str | None) -> str | None:
        return value if value and value.strip() else None


# ---------------------------------------------------------------------------
# Rewards: tagged union on "type"
# ---------------------------------------------------------------------------


class ItemReward(_Model):
    type: Literal["item"] = "item"
    item_name: str | None = None
    description: str = ""


class SkillBoostReward(_Model):
    type: Literal["skill_boost"] = "skill_boost"
    skill_name: str | None = None
    amount: int | None = None  # None → config default_skill_boost

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, value: int | None) -> int | None:
        # Levels only ever go up; zero or less falls back to the default.
        if value is not None and value < 1:
            logger.warning(f"Skill boost amount {value} is not positive; using default")
            return None
        return value


class SecretRevealReward(_Model):
    type: Literal["secret_reveal"] = "secret_reveal"
    fact_content: str | None = None


class RoomUnlockReward(_Model):
    type: Literal["room_unlock"] = "room_unlock"
    room_name: str | None = None  # None → the puzzle's own room
    direction: str | None = None


class DilemmaReward(_Model):
    type: Literal["dilemma"] = "dilemma"


class CharacterInfoReward(_Model):
    type: Literal["character_info"] = "character_info"
    character_name: str | None = None
    info: str = ""


class NoReward(_Model):
    type: Literal["none"] = "none"


Reward = Annotated[
    Union[
        ItemReward,
        SkillBoostReward,
        SecretRevealReward,
        RoomUnlockReward,
        DilemmaReward,
        CharacterInfoReward,
        NoReward,
    ],
    Field(discriminator="type"),
]

REWARD_TYPES = {
    "item",
    "skill_boost",
    "secret_reveal",
    "room_unlock",
    "dilemma",
    "character_info",
    "none",
}

_reward_adapter: TypeAdapter[Any] = TypeAdapter(Reward)


def normalize_reward(raw: Any) -> dict[str, Any]:
    """Flatten {"type", "data": {...}} into one dict and map junk to "none".

    Accepts the generator's shape ({"type": "item", "data": {"itemName": ...}})
    as well as the already-flat stored shape. Fields of the wrong type are
    dropped so they fall back to their no-op defaults.
    """
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    if not isinstance(raw, dict):
        return {"type": "none"}
    reward_type = raw.get("type")
    if reward_type not in REWARD_TYPES:
        if reward_type is not None:
            logger.warning(f"Unknown reward type {reward_type!r}, treated as no reward")
        return {"type": "none"}
    flat = {k: v for k, v in raw.items() if k != "data"}
    data = raw.get("data")
    if isinstance(data, dict):
        flat.update(data)
    try:
        _reward_adapter.validate_python(flat)
    except ValueError:
        model = _reward_adapter.validate_python({"type": reward_type})
        fields = type(model).model_fields
        kept = {"type": reward_type}
        for key, value in flat.items():
            name = _field_name(fields, key)
            if name is None or name == "type":
                continue
            try:
                _reward_adapter.validate_python({"type": reward_type, key: value})
            except ValueError:
                logger.warning(f"Dropping malformed reward field {key!r}={value!r}")
                continue
            kept[key] = value
        flat = kept
    return flat


def _field_name(fields: dict[str, Any], key: str) -> str | None:
    for name, info in fields.items():
        if key in (name, info.alias):
            return name
    return None


def parse_reward(raw: Any) -> Reward:
    return _reward_adapter.validate_python(normalize_reward(raw))


# ---------------------------------------------------------------------------
# Persistent records
# ---------------------------------------------------------------------------


class PuzzleStep(_Model):
    """One ordered, individually-completable unit of a puzzle."""

    id: str
    puzzle_id: str
    step_number: int
    description: str
    hint: str | None = None
    requirements: StepRequirements = Field(default_factory=StepRequirements)
    is_completed: bool = False
    completed_at: str | None = None


class Puzzle(_Model):
    """A multi-step objective with discovery, activation and reward state."""

    id: str
    story_id: str
    room_id: str | None = None
    name: str
    description: str = ""
    status: PuzzleStatus = "pending"
    is_active: bool = False
    is_discovered: bool = False
    discovers_on_room_entry: bool = False
    reward: Reward = Field(default_factory=NoReward)
    target_dilemma_id: str | None = None
    display_order: int = 0
    started_at: str | None = None
    completed_at: str | None = None
    steps: list[PuzzleStep] = Field(default_factory=list)

    reward_normalized = field_validator("reward", mode="before")(normalize_reward)

    def current_step(self) -> PuzzleStep | None:
        """First incomplete step by step number, or None when all are done."""
        for step in sorted(self.steps, key=lambda s: s.step_number):
            if not step.is_completed:
                return step
        return None


class PuzzleLink(_Model):
    id: str
    source_puzzle_id: str
    target_puzzle_id: str
    link_type: LinkType = "sequential"
    condition: str | None = None


class Room(_Model):
    id: str
    story_id: str
    name: str
    description: str = ""
    hidden_exits: list[str] = Field(default_factory=list)
    discovered_exits: list[str] = Field(default_factory=list)


class StoryFact(_Model):
    id: str
    story_id: str
    content: str
    is_secret: bool = True
    is_revealed: bool = False
    revealed_at: str | None = None


class PlayerAbility(_Model):
    id: str
    story_id: str
    name: str
    level: int = 1
    description: str = ""


class GameObject(_Model):
    """An item in a room, or in the player's inventory when room_id is None."""

    id: str
    story_id: str
    room_id: str | None = None
    name: str
    description: str = ""
    is_takeable: bool = True


class Dilemma(_Model):
    id: str
    story_id: str
    name: str
    description: str = ""
    room_id: str | None = None
    is_triggered: bool = False
    triggered_at: str | None = None


class Story(_Model):
    id: str
    title: str
    starting_room_id: str | None = None
    created_at: str


# ---------------------------------------------------------------------------
# Story seed: the authored document produced by world generation
# ---------------------------------------------------------------------------


class ConnectionSeed(_Model):
    direction: str
    target_room_name: str = ""
    description_from_here: str = ""
    is_hidden: bool = False
    hidden_until: str | None = None

    @field_validator("direction")
    @classmethod
    def lower_direction(cls, value: str) -> str:
        return value.strip().lower()


class ObjectSeed(_Model):
    name: str
    description: str = ""
    is_takeable: bool = True


class RoomSeed(_Model):
    name: str
    description: str = ""
    connections: list[ConnectionSeed] = Field(default_factory=list)
    objects: list[ObjectSeed] = Field(default_factory=list)

    lists_default_empty = field_validator("connections", "objects", mode="before")(_none_to_list)


class SkillSeed(_Model):
    name: str
    level: int = 1
    description: str = ""


class FactSeed(_Model):
    content: str
    is_secret: bool = True


class DilemmaSeed(_Model):
    name: str
    description: str = ""
    trigger_room_name: str | None = None


class StepSeed(_Model):
    step_number: int
    description: str
    hint: str | None = None
    requirements: StepRequirements = Field(default_factory=StepRequirements)

    @field_validator("requirements", mode="before")
    @classmethod
    def requirements_dict(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, StepRequirements)) else {}


class PuzzleSeed(_Model):
    name: str
    description: str = ""
    room_name: str | None = None
    steps: list[StepSeed] = Field(default_factory=list)
    reward: Reward = Field(default_factory=NoReward)
    leads_to_dilemma: str | None = None
    discovers_on_room_entry: bool = False
    starts_active: bool = True

    reward_normalized = field_validator("reward", mode="before")(normalize_reward)

    @model_validator(mode="after")
    def unique_step_numbers(self) -> PuzzleSeed:
        numbers = [s.step_number for s in self.steps]
        if len(numbers) != len(set(numbers)):
            raise ValueError(f"Puzzle {self.name!r} has duplicate step numbers")
        return self


class ChainLinkSeed(_Model):
    source_puzzle: str
    target_puzzle: str
    link_type: LinkType = "sequential"
    condition: str | None = None


class StorySeed(_Model):
    """Immutable world snapshot; consulted by the engine, never written."""

    title: str
    starting_room_name: str | None = None
    starting_items: list[ObjectSeed] = Field(default_factory=list)
    rooms: list[RoomSeed] = Field(default_factory=list)
    skills: list[SkillSeed] = Field(default_factory=list)
    facts: list[FactSeed] = Field(default_factory=list)
    dilemmas: list[DilemmaSeed] = Field(default_factory=list)
    puzzles: list[PuzzleSeed] = Field(default_factory=list)
    puzzle_chains: list[ChainLinkSeed] = Field(default_factory=list)

    lists_default_empty = field_validator(
        "starting_items", "rooms", "skills", "facts", "dilemmas", "puzzles", "puzzle_chains",
        mode="before",
    )(_none_to_list)

    @model_validator(mode="after")
    def check_references(self) -> StorySeed:
        names = [p.name for p in self.puzzles]
        if len(names) != len(set(names)):
            raise ValueError("Puzzle names must be unique within a story")
        known = set(names)
        for link in self.puzzle_chains:
            for name in (link.source_puzzle, link.target_puzzle):
                if name not in known:
                    raise ValueError(f"Puzzle chain references unknown puzzle {name!r}")
        return self

    def find_room(self, name: str) -> RoomSeed | None:
        """Case-insensitive room lookup by name."""
        wanted = name.lower()
        for room in self.rooms:
            if room.name.lower() == wanted:
                return room
        return None


# ---------------------------------------------------------------------------
# Engine results and read-only views
# ---------------------------------------------------------------------------


class CompletionResult(_Model):
    completed_steps: list[PuzzleStep] = Field(default_factory=list)
    completed_puzzles: list[Puzzle] = Field(default_factory=list)
    activated_puzzles: list[Puzzle] = Field(default_factory=list)
    narratives: list[str] = Field(default_factory=list)


class DiscoveryResult(_Model):
    discovered_puzzles: list[Puzzle] = Field(default_factory=list)
    narratives: list[str] = Field(default_factory=list)


class ExitDiscoveryResult(_Model):
    discovered_exits: list[str] = Field(default_factory=list)
    narratives: list[str] = Field(default_factory=list)


class ObjectiveStep(_Model):
    step_number: int
    description: str
    is_completed: bool
    hint: str | None = None


class Objective(_Model):
    id: str
    name: str
    description: str
    steps: list[ObjectiveStep]
    is_active: bool


class TurnResult(_Model):
    """Everything one player action changed, with narratives in call order."""

    completed_steps: list[PuzzleStep] = Field(default_factory=list)
    completed_puzzles: list[Puzzle] = Field(default_factory=list)
    activated_puzzles: list[Puzzle] = Field(default_factory=list)
    discovered_puzzles: list[Puzzle] = Field(default_factory=list)
    discovered_exits: list[str] = Field(default_factory=list)
    narratives: list[str] = Field(default_factory=list)
