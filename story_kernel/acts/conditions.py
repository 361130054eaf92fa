"""Shared building blocks for act precondition checks and postcondition transforms."""

from typing import Dict, List, Optional

from story_kernel.models.validation import ValidationIssue
from story_kernel.models.world import EntityId, WorldState


def issue(
    code: str,
    message: str,
    *entity_ids: Optional[EntityId],
    suggestion: Optional[str] = None,
) -> ValidationIssue:
    """Build a precondition error. ``None`` ids (unknown positions) are dropped."""
    return ValidationIssue(
        code=code,
        message=message,
        related_entity_ids=unique(list(entity_ids)),
        suggestion=suggestion,
    )


def ownership_hint(state: WorldState, item_id: EntityId) -> str:
    owner = state.owner_of(item_id)
    if owner is not None:
        return f"Item is currently owned by {owner}"
    location = state.item_location_of(item_id)
    if location is not None:
        return f"Item is at location {location}"
    return "Item ownership is unknown"


def transfer_ownership(state: WorldState, item_id: EntityId, owner_id: EntityId, timestamp: float) -> WorldState:
    """Give ``item_id`` to ``owner_id``. A held item is no longer placed anywhere."""
    ownership = dict(state.item_ownership)
    locations = dict(state.item_locations)
    ownership[item_id] = owner_id
    locations.pop(item_id, None)
    return state.evolve(timestamp=timestamp, item_ownership=ownership, item_locations=locations)


def place_item(state: WorldState, item_id: EntityId, location_id: EntityId, timestamp: float) -> WorldState:
    """Put ``item_id`` down at ``location_id``, releasing ownership."""
    ownership = dict(state.item_ownership)
    locations = dict(state.item_locations)
    locations[item_id] = location_id
    ownership.pop(item_id, None)
    return state.evolve(timestamp=timestamp, item_ownership=ownership, item_locations=locations)


def add_knowledge(
    knowledge: Dict[EntityId, tuple],
    person_id: EntityId,
    information_id: EntityId,
) -> None:
    """Append a fact to a person's knowledge in a working copy, skipping duplicates."""
    known = knowledge.get(person_id, ())
    if information_id not in known:
        knowledge[person_id] = known + (information_id,)


def unique(ids: List[Optional[EntityId]]) -> tuple:
    """Declaration-ordered ids without ``None`` or repeats."""
    seen: List[EntityId] = []
    for entity_id in ids:
        if entity_id is not None and entity_id not in seen:
            seen.append(entity_id)
    return tuple(seen)
