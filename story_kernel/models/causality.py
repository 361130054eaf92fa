"""Dependency Graph — causal links between applied acts."""

from collections import deque
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from story_kernel.models.validation import ValidationIssue, ValidationResult
from story_kernel.models.world import EntityId


class DependencyEdge(BaseModel):
    """``to_act_id`` depends on ``from_act_id`` through ``shared_entity_id``."""

    model_config = ConfigDict(frozen=True)

    from_act_id: EntityId
    to_act_id: EntityId
    shared_entity_id: EntityId


class DependencyGraph(BaseModel):
    """
    Directed graph over applied acts. ``nodes`` are in timeline order,
    ``unsatisfied`` lists rejected acts, which never carry edges.
    """

    model_config = ConfigDict(frozen=True)

    nodes: Tuple[EntityId, ...] = ()
    edges: Tuple[DependencyEdge, ...] = ()
    unsatisfied: Tuple[EntityId, ...] = ()

    def dependencies_of(self, act_id: EntityId) -> List[DependencyEdge]:
        """Edges pointing into ``act_id``."""
        return [e for e in self.edges if e.to_act_id == act_id]

    def dependents_of(self, act_id: EntityId) -> List[DependencyEdge]:
        """Edges leaving ``act_id``."""
        return [e for e in self.edges if e.from_act_id == act_id]

    def edges_for_entity(self, entity_id: EntityId) -> List[DependencyEdge]:
        return [e for e in self.edges if e.shared_entity_id == entity_id]

    def causal_chain(self, act_id: EntityId) -> List[EntityId]:
        """Every act ``act_id`` transitively depends on, nearest first."""
        return self._reach(act_id, upstream=True)

    def effects_of(self, act_id: EntityId) -> List[EntityId]:
        """Every act that transitively depends on ``act_id``, nearest first."""
        return self._reach(act_id, upstream=False)

    def _reach(self, start: EntityId, upstream: bool) -> List[EntityId]:
        neighbors: Dict[EntityId, List[EntityId]] = {}
        for edge in self.edges:
            source, target = (
                (edge.to_act_id, edge.from_act_id) if upstream
                else (edge.from_act_id, edge.to_act_id)
            )
            targets = neighbors.setdefault(source, [])
            if target not in targets:
                targets.append(target)

        visited = {start}
        found: List[EntityId] = []
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in neighbors.get(current, []):
                if neighbor not in visited:
                    visited.add(neighbor)
                    found.append(neighbor)
                    queue.append(neighbor)
        return found

    def topological_order(self) -> Optional[List[EntityId]]:
        """Kahn's algorithm, ties broken by node order. None if a cycle exists."""
        position = {node: i for i, node in enumerate(self.nodes)}
        indegree: Dict[EntityId, int] = {node: 0 for node in self.nodes}
        successors: Dict[EntityId, List[EntityId]] = {node: [] for node in self.nodes}
        for edge in self.edges:
            successors.setdefault(edge.from_act_id, []).append(edge.to_act_id)
            indegree[edge.to_act_id] = indegree.get(edge.to_act_id, 0) + 1
            indegree.setdefault(edge.from_act_id, 0)

        ready = deque(sorted(
            (n for n, d in indegree.items() if d == 0),
            key=lambda n: position.get(n, len(position)),
        ))
        order: List[EntityId] = []
        while ready:
            node = ready.popleft()
            order.append(node)
            for succ in successors.get(node, []):
                indegree[succ] -= 1
                if indegree[succ] == 0:
                    ready.append(succ)

        if len(order) != len(indegree):
            return None
        return order

    def is_acyclic(self) -> bool:
        return self.topological_order() is not None

    def can_remove(self, act_id: EntityId) -> ValidationResult:
        """Whether ``act_id`` can be dropped from the story without orphaning dependents."""
        if act_id not in self.nodes:
            return ValidationResult.from_issues([
                ValidationIssue(
                    code="ACT_NOT_FOUND",
                    message=f"Act {act_id} not found",
                    related_entity_ids=(act_id,),
                )
            ])

        dependents: List[EntityId] = []
        for edge in self.dependents_of(act_id):
            if edge.to_act_id not in dependents:
                dependents.append(edge.to_act_id)
        if dependents:
            return ValidationResult.from_issues([
                ValidationIssue(
                    code="HAS_DEPENDENCIES",
                    message=f"Cannot remove act {act_id} because other acts depend on it",
                    related_entity_ids=(act_id, *dependents),
                )
            ])
        return ValidationResult.ok()
