"""
Location Graph Validator — structural checks over declared location connections.

The connection relation is used exactly as declared. Location A listing B
does not make B list A, and nothing here symmetrizes it.

Issue codes:
- UNKNOWN_LOCATION_REFERENCE (error): a connection names no declared location
- LOCATION_NOT_CONNECTED (warning): empty own list and listed by no other location
- DISCONNECTED_GROUP (info): a multi-location group cut off from the rest
- UNREACHABLE_LOCATION (warning, opt-in): never reached by BFS from any
  initial person position
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from story_kernel.models.config import LocationValidatorConfig
from story_kernel.models.story import Location
from story_kernel.models.validation import IssueSeverity, ValidationIssue, ValidationResult
from story_kernel.models.world import EntityId

logger = logging.getLogger(__name__)


def not_connected_message(location_id: EntityId) -> str:
    return f'Location "{location_id}" is not connected'


class LocationGraphValidator:
    """Never raises on malformed input; every problem comes back as an issue."""

    def __init__(self, config: Optional[LocationValidatorConfig] = None):
        self.config = config or LocationValidatorConfig()

    def validate(
        self,
        locations: List[Location],
        initial_positions: Optional[Iterable[EntityId]] = None,
    ) -> ValidationResult:
        # A location declared more than once contributes every list it was given
        declared: Dict[EntityId, List[EntityId]] = {}
        for location in locations:
            declared.setdefault(location.id, []).extend(location.connections)
        order = list(declared)
        known = set(order)

        issues: List[ValidationIssue] = []
        adjacency: Dict[EntityId, List[EntityId]] = {loc_id: [] for loc_id in order}
        listed_by_others: Set[EntityId] = set()

        for loc_id, connections in declared.items():
            for ref in connections:
                if ref not in known:
                    issues.append(ValidationIssue(
                        code="UNKNOWN_LOCATION_REFERENCE",
                        message=f'Location "{loc_id}" references unknown location "{ref}"',
                        related_entity_ids=(loc_id, ref),
                        suggestion="Remove the connection or declare the missing location",
                    ))
                    continue
                if ref not in adjacency[loc_id]:
                    adjacency[loc_id].append(ref)
                if ref != loc_id:
                    listed_by_others.add(ref)

        issues.extend(self._isolated(declared, listed_by_others))

        if self.config.report_disconnected_groups:
            issues.extend(self._disconnected_groups(order, adjacency))

        if self.config.check_reachability and initial_positions is not None:
            issues.extend(self._unreachable(order, adjacency, initial_positions))

        logger.debug("Location graph validated: %d locations, %d issues", len(order), len(issues))
        return ValidationResult.from_issues(issues)

    def _isolated(
        self,
        declared: Dict[EntityId, List[EntityId]],
        listed_by_others: Set[EntityId],
    ) -> List[ValidationIssue]:
        issues = []
        for loc_id, connections in declared.items():
            if not connections and loc_id not in listed_by_others:
                issues.append(ValidationIssue(
                    code="LOCATION_NOT_CONNECTED",
                    message=not_connected_message(loc_id),
                    related_entity_ids=(loc_id,),
                    severity=IssueSeverity.WARNING,
                    suggestion="Connect this location to others or remove it if unused",
                ))
        return issues

    def _disconnected_groups(
        self,
        order: List[EntityId],
        adjacency: Dict[EntityId, List[EntityId]],
    ) -> List[ValidationIssue]:
        """Weakly connected components; one info issue per multi-location component."""
        undirected: Dict[EntityId, List[EntityId]] = {loc_id: [] for loc_id in order}
        for source, targets in adjacency.items():
            for target in targets:
                undirected[source].append(target)
                undirected[target].append(source)

        visited: Set[EntityId] = set()
        components: List[List[EntityId]] = []
        for start in order:
            if start in visited:
                continue
            component = []
            queue = deque([start])
            visited.add(start)
            while queue:
                current = queue.popleft()
                component.append(current)
                for neighbor in undirected[current]:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        queue.append(neighbor)
            components.append(component)

        if len(components) <= 1:
            return []

        return [
            ValidationIssue(
                code="DISCONNECTED_GROUP",
                message=f"Group of {len(component)} locations is disconnected from others",
                related_entity_ids=tuple(component),
                severity=IssueSeverity.INFO,
                suggestion="Consider connecting these location groups",
            )
            for component in components
            if len(component) > 1
        ]

    def _unreachable(
        self,
        order: List[EntityId],
        adjacency: Dict[EntityId, List[EntityId]],
        initial_positions: Iterable[EntityId],
    ) -> List[ValidationIssue]:
        """Directed BFS from every initial position."""
        starts = [loc_id for loc_id in initial_positions if loc_id in adjacency]
        if not starts:
            return []

        reached: Set[EntityId] = set(starts)
        queue = deque(starts)
        while queue:
            current = queue.popleft()
            for neighbor in adjacency[current]:
                if neighbor not in reached:
                    reached.add(neighbor)
                    queue.append(neighbor)

        return [
            ValidationIssue(
                code="UNREACHABLE_LOCATION",
                message=f'Location "{loc_id}" is not reachable from any initial position',
                related_entity_ids=(loc_id,),
                severity=IssueSeverity.WARNING,
            )
            for loc_id in order
            if loc_id not in reached
        ]
