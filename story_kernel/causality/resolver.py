"""
Causality Resolver — derives dependency edges between applied acts.

Act B depends on act A through entity E when E is in both acts' affected
sets, A touched E last before B, and A precedes B in the timeline.

Behavioral Contract:
- Processes the timeline in order, tracking the last toucher of every entity
- Emits one edge per act pair per shared entity
- Rejected acts never become last touchers; they are listed as unsatisfied
- The graph is acyclic: edges always point from earlier to later timeline entries
"""

import logging
from typing import Dict, List

from story_kernel.acts.contract import ordered_affected_entities
from story_kernel.models.acts import BaseAct
from story_kernel.models.causality import DependencyEdge, DependencyGraph
from story_kernel.models.simulation import SimulationResult
from story_kernel.models.world import EntityId

logger = logging.getLogger(__name__)


class CausalityResolver:
    """Stateless between calls; each resolve builds its own last-toucher map."""

    def resolve(self, result: SimulationResult) -> DependencyGraph:
        last_toucher: Dict[EntityId, EntityId] = {}
        edges: List[DependencyEdge] = []

        for entry in result.timeline:
            act = entry.act
            for entity_id in ordered_affected_entities(act):
                previous = last_toucher.get(entity_id)
                if previous is not None and previous != act.id:
                    edges.append(DependencyEdge(
                        from_act_id=previous,
                        to_act_id=act.id,
                        shared_entity_id=entity_id,
                    ))
                last_toucher[entity_id] = act.id

        unsatisfied = tuple(result.rejected.keys())
        graph = DependencyGraph(
            nodes=tuple(result.applied_act_ids()),
            edges=tuple(edges),
            unsatisfied=unsatisfied,
        )
        logger.debug(
            "Resolved %d dependency edges over %d acts (%d unsatisfied)",
            len(edges), len(graph.nodes), len(unsatisfied),
        )
        return graph

    def trace(self, result: SimulationResult, entity_id: EntityId) -> List[BaseAct]:
        """Applied acts that touched ``entity_id``, earliest first."""
        return [
            entry.act
            for entry in result.timeline
            if entity_id in ordered_affected_entities(entry.act)
        ]
