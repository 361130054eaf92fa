"""
Act Contract — the three operations every act variant supports.

Behavioral Contract:
- check_preconditions never mutates the state it is given
- apply_postconditions is pure and returns a fresh WorldState; it is only
  meaningful after check_preconditions reported the act valid, and the
  Simulation Runner is its only caller
- affected_entities is exhaustive: every id the act reads or writes

Each operation is a registry keyed by ActType. Import fails if a variant
is missing from any registry, so no act can silently omit an operation.
"""

from typing import Callable, Dict, FrozenSet, Iterable, List, Tuple

from story_kernel.acts.items import (
    apply_combine,
    apply_give,
    apply_place,
    apply_take,
    apply_use,
    check_combine,
    check_give,
    check_place,
    check_take,
    check_use,
    combine_entities,
    give_entities,
    place_entities,
    take_entities,
    use_entities,
)
from story_kernel.acts.knowledge import apply_speak, check_speak, speak_entities
from story_kernel.acts.movement import apply_move, check_move, move_entities
from story_kernel.models.acts import ACT_VARIANTS, ActType, BaseAct
from story_kernel.models.validation import ValidationResult
from story_kernel.models.world import EntityId, WorldState

_PRECONDITIONS: Dict[ActType, Callable] = {
    ActType.MOVE: check_move,
    ActType.GIVE_ITEM: check_give,
    ActType.TAKE_ITEM: check_take,
    ActType.PLACE_ITEM: check_place,
    ActType.SPEAK: check_speak,
    ActType.USE_ITEM: check_use,
    ActType.COMBINE_ITEMS: check_combine,
}

_POSTCONDITIONS: Dict[ActType, Callable] = {
    ActType.MOVE: apply_move,
    ActType.GIVE_ITEM: apply_give,
    ActType.TAKE_ITEM: apply_take,
    ActType.PLACE_ITEM: apply_place,
    ActType.SPEAK: apply_speak,
    ActType.USE_ITEM: apply_use,
    ActType.COMBINE_ITEMS: apply_combine,
}

_AFFECTED: Dict[ActType, Callable] = {
    ActType.MOVE: move_entities,
    ActType.GIVE_ITEM: give_entities,
    ActType.TAKE_ITEM: take_entities,
    ActType.PLACE_ITEM: place_entities,
    ActType.SPEAK: speak_entities,
    ActType.USE_ITEM: use_entities,
    ActType.COMBINE_ITEMS: combine_entities,
}

for _name, _registry in (
    ("preconditions", _PRECONDITIONS),
    ("postconditions", _POSTCONDITIONS),
    ("affected entities", _AFFECTED),
):
    _missing = set(ACT_VARIANTS) - set(_registry)
    if _missing:
        raise RuntimeError(
            f"Act variants without {_name}: {sorted(t.value for t in _missing)}"
        )


def _act_type(act: BaseAct) -> ActType:
    return ActType(act.type)


def check_preconditions(act: BaseAct, state: WorldState) -> ValidationResult:
    """Evaluate the act's conditions against ``state``. One issue per violation."""
    return _PRECONDITIONS[_act_type(act)](act, state)


def apply_postconditions(act: BaseAct, state: WorldState) -> WorldState:
    """New snapshot reflecting the act's effect, stamped with the act's timestamp."""
    return _POSTCONDITIONS[_act_type(act)](act, state)


def ordered_affected_entities(act: BaseAct) -> Tuple[EntityId, ...]:
    """Affected ids in declaration order, without duplicates."""
    return _AFFECTED[_act_type(act)](act)


def affected_entities(act: BaseAct) -> FrozenSet[EntityId]:
    return frozenset(ordered_affected_entities(act))


def order_acts(acts: Iterable[BaseAct]) -> List[BaseAct]:
    """Non-decreasing timestamp order. ``sorted`` is stable, so ties keep declaration order."""
    return sorted(acts, key=lambda act: act.timestamp)
