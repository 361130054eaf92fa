"""Story Analysis — every core output for one story, bundled for presentation."""

from pydantic import BaseModel, ConfigDict

from story_kernel.models.causality import DependencyGraph
from story_kernel.models.simulation import SimulationResult
from story_kernel.models.validation import ValidationResult


class StoryAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    simulation: SimulationResult
    dependencies: DependencyGraph
    location_validation: ValidationResult
    reference_validation: ValidationResult
    act_validation: ValidationResult = ValidationResult.ok()    # Redundant acts

    @property
    def valid(self) -> bool:
        return (
            not self.simulation.rejected
            and self.location_validation.valid
            and self.reference_validation.valid
            and self.act_validation.valid
        )
