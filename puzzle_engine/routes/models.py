"""Pydantic request bodies for API endpoints.

Story seeds are posted as puzzle_engine.models.StorySeed directly. Bodies
accept camelCase keys like the rest of the API, and snake_case too.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TurnBody(_Body):
    action: str
    room_id: str
    inventory: list[str] | None = None
    entered_room: bool = False
    acquired_items: list[str] = Field(default_factory=list)


class StepsBody(_Body):
    action: str
    room_id: str
    inventory: list[str] | None = None


class ItemBody(_Body):
    item_name: str


class ActionBody(_Body):
    action: str


class RoomBody(_Body):
    room_id: str


class ExitsBody(_Body):
    room_id: str
    action: str
