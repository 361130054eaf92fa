"""
Story Analyzer — runs the full data flow for one story.

  story → StoryReferenceValidator
  story → initial WorldState → SimulationRunner → timeline → CausalityResolver
  story → LocationGraphValidator, ActSequenceValidator

References are validated first. A repeated act id is reported there as
DUPLICATE_ID, and only the first act declared with that id is replayed, so
analysis always completes.
"""

import logging
from typing import List, Optional, Set

from story_kernel.causality.resolver import CausalityResolver
from story_kernel.models.acts import BaseAct
from story_kernel.models.analysis import StoryAnalysis
from story_kernel.models.config import KernelConfig
from story_kernel.models.story import StoryData
from story_kernel.models.world import EntityId
from story_kernel.simulation.runner import SimulationRunner
from story_kernel.validation.acts import ActSequenceValidator
from story_kernel.validation.locations import LocationGraphValidator
from story_kernel.validation.story import StoryReferenceValidator
from story_kernel.world_model.builder import build_initial_state

logger = logging.getLogger(__name__)


def first_declared(acts: List[BaseAct]) -> List[BaseAct]:
    """Acts with a unique id, keeping the first declaration of a repeated id."""
    seen: Set[EntityId] = set()
    kept = []
    for act in acts:
        if act.id in seen:
            logger.warning("Act %s declared more than once; later declaration skipped", act.id)
            continue
        seen.add(act.id)
        kept.append(act)
    return kept


class StoryAnalyzer:
    def __init__(self, config: Optional[KernelConfig] = None):
        self.config = config or KernelConfig()

    def analyze(self, story: StoryData) -> StoryAnalysis:
        reference_validation = StoryReferenceValidator().validate(story)

        acts = first_declared(story.acts)
        initial_state = build_initial_state(story)

        simulation = SimulationRunner(self.config.runner).run(initial_state, acts)
        dependencies = CausalityResolver().resolve(simulation)

        location_validation = LocationGraphValidator(self.config.locations).validate(
            story.locations,
            initial_positions=list(initial_state.person_positions.values()),
        )
        act_validation = ActSequenceValidator().validate(acts)

        analysis = StoryAnalysis(
            simulation=simulation,
            dependencies=dependencies,
            location_validation=location_validation,
            reference_validation=reference_validation,
            act_validation=act_validation,
        )
        logger.info(
            "Story analyzed: %d applied, %d rejected, %d dependency edges, %d structural issues",
            len(simulation.timeline),
            len(simulation.rejected),
            len(dependencies.edges),
            len(location_validation.errors)
            + len(reference_validation.errors)
            + len(act_validation.errors),
        )
        return analysis
