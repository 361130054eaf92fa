"""
Simulation Runner — replays an ordered act list into a timeline of snapshots.

States:
  per act:  PENDING → VALIDATING → (APPLIED | REJECTED)
  per run:  RUNNING → COMPLETED

Behavioral Contract:
- Each act is checked against the current state: the result of every
  previously applied act, never the original input
- A rejected act is logged with its ValidationResult and the run continues
  against the last applied state (unless halt_on_rejection is set)
- The runner is the only caller of apply_postconditions, always after a
  successful precondition check
- Same initial state and acts always produce the same result
"""

import logging
from typing import Dict, Iterable, List, Optional

from story_kernel.acts.contract import apply_postconditions, check_preconditions, order_acts
from story_kernel.models.acts import BaseAct
from story_kernel.models.config import RunnerConfig
from story_kernel.models.simulation import ActStatus, RunStatus, SimulationResult, TimelineEntry
from story_kernel.models.validation import ValidationResult
from story_kernel.models.world import EntityId, StateChange, WorldState

logger = logging.getLogger(__name__)


class SimulationError(Exception):
    """Raised when the act sequence breaks the runner's input contract."""
    pass


def _diff_mapping(kind: str, before: dict, after: dict) -> List[StateChange]:
    changes = []
    for key, value in after.items():
        if before.get(key) != value:
            changes.append(StateChange(
                kind=kind, entity_id=key, old_value=before.get(key), new_value=value,
            ))
    for key, value in before.items():
        if key not in after:
            changes.append(StateChange(kind=kind, entity_id=key, old_value=value, new_value=None))
    return changes


def diff_states(before: WorldState, after: WorldState) -> List[StateChange]:
    """Every fact that differs between two snapshots, in a fixed order."""
    return (
        _diff_mapping("position", before.person_positions, after.person_positions)
        + _diff_mapping("ownership", before.item_ownership, after.item_ownership)
        + _diff_mapping("item_location", before.item_locations, after.item_locations)
        + _diff_mapping("knowledge", before.knowledge, after.knowledge)
    )


class SimulationRunner:
    """Deterministic, single-threaded replay of acts over immutable snapshots."""

    def __init__(self, config: Optional[RunnerConfig] = None):
        self.config = config or RunnerConfig()
        self._status: Optional[RunStatus] = None

    @property
    def status(self) -> Optional[RunStatus]:
        """Status of the most recent run, None before the first one."""
        return self._status

    def run(self, initial_state: WorldState, acts: Iterable[BaseAct]) -> SimulationResult:
        """Replay ``acts`` from ``initial_state``."""
        ordered = order_acts(acts)
        self._check_unique_ids(ordered)

        self._status = RunStatus.RUNNING
        statuses: Dict[EntityId, ActStatus] = {act.id: ActStatus.PENDING for act in ordered}
        rejected: Dict[EntityId, ValidationResult] = {}
        timeline: List[TimelineEntry] = []
        current = initial_state

        for act in ordered:
            statuses[act.id] = ActStatus.VALIDATING
            validation = check_preconditions(act, current)

            if not validation.valid:
                statuses[act.id] = ActStatus.REJECTED
                rejected[act.id] = validation
                logger.warning(
                    "Act %s rejected at t=%s: %s",
                    act.id, act.timestamp, ", ".join(validation.codes()),
                )
                if self.config.halt_on_rejection:
                    break
                continue

            next_state = apply_postconditions(act, current)
            timeline.append(TimelineEntry(
                act=act,
                world_state=next_state,
                changes=tuple(diff_states(current, next_state)),
            ))
            statuses[act.id] = ActStatus.APPLIED
            current = next_state

        self._status = RunStatus.COMPLETED
        logger.info(
            "Simulation completed: %d applied, %d rejected, %d pending",
            len(timeline),
            len(rejected),
            sum(1 for s in statuses.values() if s == ActStatus.PENDING),
        )

        return SimulationResult(
            status=self._status,
            initial_state=initial_state,
            timeline=tuple(timeline),
            rejected=rejected,
            act_statuses=statuses,
        )

    def _check_unique_ids(self, acts: List[BaseAct]) -> None:
        seen = set()
        for act in acts:
            if act.id in seen:
                raise SimulationError(f"Duplicate act id {act.id!r} in act sequence")
            seen.add(act.id)
