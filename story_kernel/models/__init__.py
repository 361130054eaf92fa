"""Story Kernel data models."""

from story_kernel.models.acts import (
    ACT_VARIANTS,
    Act,
    ActType,
    BaseAct,
    CombineItemsAct,
    GiveItemAct,
    MoveAct,
    PlaceItemAct,
    SpeakAct,
    TakeItemAct,
    UseItemAct,
    parse_act,
    parse_acts,
)
from story_kernel.models.analysis import StoryAnalysis
from story_kernel.models.causality import DependencyEdge, DependencyGraph
from story_kernel.models.config import KernelConfig, LocationValidatorConfig, RunnerConfig
from story_kernel.models.simulation import (
    ActStatus,
    RunStatus,
    SimulationResult,
    TimelineEntry,
)
from story_kernel.models.story import (
    Information,
    InitialState,
    Location,
    Person,
    Prop,
    StoryData,
)
from story_kernel.models.validation import IssueSeverity, ValidationIssue, ValidationResult
from story_kernel.models.world import EntityId, StateChange, WorldState, time_to_minutes

__all__ = [
    "ACT_VARIANTS",
    "Act",
    "ActStatus",
    "ActType",
    "BaseAct",
    "CombineItemsAct",
    "DependencyEdge",
    "DependencyGraph",
    "EntityId",
    "GiveItemAct",
    "Information",
    "InitialState",
    "IssueSeverity",
    "KernelConfig",
    "Location",
    "LocationValidatorConfig",
    "MoveAct",
    "Person",
    "PlaceItemAct",
    "Prop",
    "RunStatus",
    "RunnerConfig",
    "SimulationResult",
    "SpeakAct",
    "StateChange",
    "StoryAnalysis",
    "StoryData",
    "TakeItemAct",
    "TimelineEntry",
    "UseItemAct",
    "ValidationIssue",
    "ValidationResult",
    "WorldState",
    "parse_act",
    "parse_acts",
    "time_to_minutes",
]
