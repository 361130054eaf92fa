"""Simulation Result — the replayed timeline and the rejection log."""

import hashlib
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict

from story_kernel.models.acts import Act
from story_kernel.models.validation import ValidationResult
from story_kernel.models.world import EntityId, StateChange, WorldState


class ActStatus(str, Enum):
    PENDING = "pending"
    VALIDATING = "validating"
    APPLIED = "applied"
    REJECTED = "rejected"


class RunStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"


class TimelineEntry(BaseModel):
    """An applied act and the snapshot its postconditions produced."""

    model_config = ConfigDict(frozen=True)

    act: Act
    world_state: WorldState
    changes: Tuple[StateChange, ...] = ()


class SimulationResult(BaseModel):
    """
    Output of one replay. ``timeline`` holds applied acts in processing order;
    ``rejected`` maps each rejected act id to the failed precondition check.
    """

    model_config = ConfigDict(frozen=True)

    status: RunStatus
    initial_state: WorldState
    timeline: Tuple[TimelineEntry, ...] = ()
    rejected: Dict[EntityId, ValidationResult] = {}
    act_statuses: Dict[EntityId, ActStatus] = {}

    @property
    def final_state(self) -> WorldState:
        if self.timeline:
            return self.timeline[-1].world_state
        return self.initial_state

    def applied_act_ids(self) -> List[EntityId]:
        return [entry.act.id for entry in self.timeline]

    def state_at(self, timestamp: float) -> WorldState:
        """Latest snapshot taking effect at or before ``timestamp``."""
        state = self.initial_state
        for entry in self.timeline:
            if entry.act.timestamp > timestamp:
                break
            state = entry.world_state
        return state

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form. Identical runs share a fingerprint."""
        return hashlib.sha256(self.model_dump_json().encode()).hexdigest()
