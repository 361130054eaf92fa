"""
World Model Builder — seeds the initial WorldState from the author's story.

Sources:
- initialStates -> person positions (a later entry for the same person wins)
- props         -> item ownership / item locations
- informations  -> knowledge (via known_by)
"""

from typing import Dict, Tuple

from story_kernel.acts.conditions import add_knowledge
from story_kernel.models.story import StoryData
from story_kernel.models.world import EntityId, WorldState


def build_initial_state(story: StoryData) -> WorldState:
    """Initial snapshot, stamped with the earliest initial-state time (0 if none)."""
    positions: Dict[EntityId, EntityId] = {}
    for initial in story.initial_states:
        positions[initial.person_id] = initial.location_id

    ownership: Dict[EntityId, EntityId] = {}
    item_locations: Dict[EntityId, EntityId] = {}
    for prop in story.props:
        if prop.owner_id is not None:
            ownership[prop.id] = prop.owner_id
        if prop.location_id is not None:
            item_locations[prop.id] = prop.location_id

    knowledge: Dict[EntityId, Tuple[EntityId, ...]] = {}
    for information in story.informations:
        for person_id in information.known_by:
            add_knowledge(knowledge, person_id, information.id)

    timestamp = min((s.time for s in story.initial_states), default=0.0)

    return WorldState(
        timestamp=timestamp,
        person_positions=positions,
        item_ownership=ownership,
        item_locations=item_locations,
        knowledge=knowledge,
    )
