"""World State — immutable snapshot of every simulated fact at one instant."""

import re
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

EntityId = Union[int, str]

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def time_to_minutes(value: str) -> float:
    """Convert an ``HH:MM`` or ``HH:MM:SS`` clock string to minutes since midnight.

    Hours and minutes take exactly two digits. Anything else, including an
    empty string, maps to 0, matching how authored story files treat a
    missing time.
    """
    match = _TIME_PATTERN.match(value.strip()) if value else None
    if not match:
        return 0.0
    hours, minutes, seconds = match.groups()
    return int(hours) * 60 + int(minutes) + int(seconds or 0) / 60


class ReadOnlyDict(dict):
    """A dict that refuses in-place changes. Copy it with ``dict(...)`` to edit."""

    def _readonly(self, *args, **kwargs):
        raise TypeError("WorldState mappings are read-only; derive a new state with evolve()")

    __setitem__ = _readonly
    __delitem__ = _readonly
    __ior__ = _readonly
    clear = _readonly
    pop = _readonly
    popitem = _readonly
    setdefault = _readonly
    update = _readonly

    def __reduce__(self):
        return (type(self), (dict(self),))


class WorldState(BaseModel):
    """
    Snapshot of the world at ``timestamp``.

    Never mutated after creation: every mapping is stored read-only. New
    snapshots are derived with ``evolve``, which copies every mapping so no
    two snapshots share a dict.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    timestamp: float = 0.0
    person_positions: Dict[EntityId, EntityId] = {}     # person -> location
    item_ownership: Dict[EntityId, EntityId] = {}       # item -> owner (person or location)
    item_locations: Dict[EntityId, EntityId] = {}       # item -> location
    knowledge: Dict[EntityId, Tuple[EntityId, ...]] = {}  # person -> facts, acquisition order

    @field_validator("person_positions", "item_ownership", "item_locations", "knowledge")
    @classmethod
    def _freeze_mapping(cls, value):
        return ReadOnlyDict(value)

    def evolve(self, **changes) -> "WorldState":
        """Return a new snapshot with ``changes`` applied on top of fresh copies."""
        data = {
            "timestamp": self.timestamp,
            "person_positions": dict(self.person_positions),
            "item_ownership": dict(self.item_ownership),
            "item_locations": dict(self.item_locations),
            "knowledge": dict(self.knowledge),
        }
        data.update(changes)
        return WorldState(**data)

    def has_person(self, person_id: EntityId) -> bool:
        return person_id in self.person_positions

    def location_of(self, person_id: EntityId) -> Optional[EntityId]:
        return self.person_positions.get(person_id)

    def owner_of(self, item_id: EntityId) -> Optional[EntityId]:
        return self.item_ownership.get(item_id)

    def item_location_of(self, item_id: EntityId) -> Optional[EntityId]:
        return self.item_locations.get(item_id)

    def knows(self, person_id: EntityId, information_id: EntityId) -> bool:
        return information_id in self.knowledge.get(person_id, ())


class StateChange(BaseModel):
    """One fact that differs between two consecutive snapshots."""

    model_config = ConfigDict(frozen=True)

    kind: str                               # "position" | "ownership" | "item_location" | "knowledge"
    entity_id: EntityId
    old_value: Optional[Union[EntityId, Tuple[EntityId, ...]]] = None
    new_value: Optional[Union[EntityId, Tuple[EntityId, ...]]] = None
