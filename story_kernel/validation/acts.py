"""
Act Sequence Validator — checks over the authored act list itself.

REDUNDANT_ACT (warning): an act of the same type, touching the same
entities, with the same payload as an earlier act. The earliest act of
each such group is kept; every later one is reported.

Acts are instants: they carry a timestamp and no duration, so two acts by
the same person can never overlap in time. There is no timing-conflict pass.
"""

import logging
from typing import Dict, FrozenSet, List, Tuple

from story_kernel.acts.contract import affected_entities, order_acts
from story_kernel.models.acts import BaseAct
from story_kernel.models.validation import IssueSeverity, ValidationIssue, ValidationResult
from story_kernel.models.world import EntityId

logger = logging.getLogger(__name__)

_NON_EFFECT_FIELDS = {"id", "timestamp", "description"}


def _effect_payload(act: BaseAct) -> str:
    return act.model_dump_json(exclude=_NON_EFFECT_FIELDS)


class ActSequenceValidator:
    """Never raises; redundant acts come back as warnings."""

    def validate(self, acts: List[BaseAct]) -> ValidationResult:
        groups: Dict[Tuple[str, FrozenSet[EntityId]], List[BaseAct]] = {}
        for act in order_acts(acts):
            groups.setdefault((act.type, affected_entities(act)), []).append(act)

        issues: List[ValidationIssue] = []
        for group in groups.values():
            issues.extend(self._redundant_in_group(group))

        logger.debug("Act sequence validated: %d acts, %d issues", len(acts), len(issues))
        return ValidationResult.from_issues(issues)

    def _redundant_in_group(self, group: List[BaseAct]) -> List[ValidationIssue]:
        first_by_payload: Dict[str, BaseAct] = {}
        issues = []
        for act in group:
            payload = _effect_payload(act)
            original = first_by_payload.get(payload)
            if original is None:
                first_by_payload[payload] = act
                continue
            issues.append(ValidationIssue(
                code="REDUNDANT_ACT",
                message=f'Act {act.id} "{act.summary()}" repeats act {original.id}',
                related_entity_ids=(act.id, original.id),
                severity=IssueSeverity.WARNING,
                suggestion="Remove the repeated act or change its effect",
            ))
        return issues
