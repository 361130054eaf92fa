"""Story Data — the author's world definition as loaded from JSON."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from story_kernel.models.acts import Act
from story_kernel.models.world import EntityId, time_to_minutes


class _StoryModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Person(_StoryModel):
    id: EntityId
    name: str
    color: Optional[str] = None


class Location(_StoryModel):
    """A place. ``connections`` is the declared neighbor list, possibly asymmetric."""

    id: EntityId
    name: str
    connections: List[EntityId] = []


class Prop(_StoryModel):
    """An item. Optionally seeded with an owner or a location."""

    id: EntityId
    name: str
    owner_id: Optional[EntityId] = None
    location_id: Optional[EntityId] = None


class Information(_StoryModel):
    """A fact that people can know and share."""

    id: EntityId
    content: str
    known_by: List[EntityId] = []       # People who know it at the start


class InitialState(_StoryModel):
    person_id: EntityId
    location_id: EntityId
    time: float = 0.0                   # Minutes since midnight

    @field_validator("time", mode="before")
    @classmethod
    def _parse_clock_time(cls, value):
        if isinstance(value, str):
            return time_to_minutes(value)
        return value


class StoryData(_StoryModel):
    """Everything an author declares: entities, act sequence and starting positions."""

    persons: List[Person] = []
    locations: List[Location] = []
    acts: List[Act] = []
    props: List[Prop] = []
    informations: List[Information] = []
    initial_states: List[InitialState] = []
