"""
Story Reference Validator — referential integrity of the author's story.

Every id an initial state, prop, information or act mentions must name a
declared entity of the right kind. Acts share one id space for causality,
so an id reused across kinds is flagged as ambiguous.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from story_kernel.models.acts import (
    BaseAct,
    CombineItemsAct,
    GiveItemAct,
    MoveAct,
    PlaceItemAct,
    SpeakAct,
    TakeItemAct,
    UseItemAct,
)
from story_kernel.models.story import StoryData
from story_kernel.models.validation import IssueSeverity, ValidationIssue, ValidationResult
from story_kernel.models.world import EntityId

logger = logging.getLogger(__name__)

PERSON = "person"
LOCATION = "location"
ITEM = "item"
INFORMATION = "information"

_UNKNOWN_CODES = {
    PERSON: "UNKNOWN_PERSON_REFERENCE",
    LOCATION: "UNKNOWN_LOCATION_REFERENCE",
    ITEM: "UNKNOWN_ITEM_REFERENCE",
    INFORMATION: "UNKNOWN_INFORMATION_REFERENCE",
}


def act_references(act: BaseAct) -> List[Tuple[str, EntityId]]:
    """(kind, id) pairs an act points at, subject first."""
    refs: List[Tuple[str, Optional[EntityId]]] = [(PERSON, act.person_id)]
    if isinstance(act, MoveAct):
        refs += [(LOCATION, act.from_location_id), (LOCATION, act.to_location_id)]
    elif isinstance(act, GiveItemAct):
        refs += [(ITEM, act.item_id), (PERSON, act.to_person_id)]
    elif isinstance(act, TakeItemAct):
        refs += [(ITEM, act.item_id), (LOCATION, act.from_location_id), (PERSON, act.from_person_id)]
    elif isinstance(act, PlaceItemAct):
        refs += [(ITEM, act.item_id), (LOCATION, act.location_id)]
    elif isinstance(act, SpeakAct):
        refs += [(PERSON, p) for p in act.to_person_ids]
        refs.append((INFORMATION, act.information_id))
    elif isinstance(act, UseItemAct):
        refs.append((ITEM, act.item_id))
        if act.target_type is not None:
            refs.append((act.target_type, act.target_id))
    elif isinstance(act, CombineItemsAct):
        refs += [(ITEM, i) for i in act.item_ids]
        refs.append((ITEM, act.result_item_id))
    return [(kind, ref) for kind, ref in refs if ref is not None]


class StoryReferenceValidator:
    """Never raises; unknown and duplicate ids come back as issues."""

    def validate(self, story: StoryData) -> ValidationResult:
        declared: Dict[str, List[EntityId]] = {
            PERSON: [p.id for p in story.persons],
            LOCATION: [loc.id for loc in story.locations],
            ITEM: [p.id for p in story.props],
            INFORMATION: [i.id for i in story.informations],
        }
        known: Dict[str, Set[EntityId]] = {kind: set(ids) for kind, ids in declared.items()}

        issues: List[ValidationIssue] = []
        issues.extend(self._duplicates(declared, [a.id for a in story.acts]))
        issues.extend(self._ambiguous(declared))

        for index, initial in enumerate(story.initial_states):
            where = f"initialStates[{index}]"
            issues.extend(self._check_ref(known, PERSON, initial.person_id, where))
            issues.extend(self._check_ref(known, LOCATION, initial.location_id, where))

        for prop in story.props:
            where = f"Prop {prop.id}"
            if prop.owner_id is not None and not (
                prop.owner_id in known[PERSON] or prop.owner_id in known[LOCATION]
            ):
                issues.append(ValidationIssue(
                    code="UNKNOWN_OWNER_REFERENCE",
                    message=f'{where} is owned by unknown entity "{prop.owner_id}"',
                    related_entity_ids=(prop.id, prop.owner_id),
                ))
            if prop.location_id is not None:
                issues.extend(self._check_ref(known, LOCATION, prop.location_id, where))

        for information in story.informations:
            for person_id in information.known_by:
                issues.extend(self._check_ref(known, PERSON, person_id, f"Information {information.id}"))

        for act in story.acts:
            for kind, ref in act_references(act):
                issues.extend(self._check_ref(known, kind, ref, f"Act {act.id}"))

        logger.debug("Story references validated: %d issues", len(issues))
        return ValidationResult.from_issues(issues)

    def _check_ref(
        self,
        known: Dict[str, Set[EntityId]],
        kind: str,
        ref: EntityId,
        where: str,
    ) -> List[ValidationIssue]:
        if ref in known[kind]:
            return []
        return [ValidationIssue(
            code=_UNKNOWN_CODES[kind],
            message=f'{where} references unknown {kind} "{ref}"',
            related_entity_ids=(ref,),
        )]

    def _duplicates(self, declared: Dict[str, List[EntityId]], act_ids: List[EntityId]) -> List[ValidationIssue]:
        issues = []
        for kind, ids in list(declared.items()) + [("act", act_ids)]:
            seen: Set[EntityId] = set()
            reported: Set[EntityId] = set()
            for entity_id in ids:
                if entity_id in seen and entity_id not in reported:
                    reported.add(entity_id)
                    issues.append(ValidationIssue(
                        code="DUPLICATE_ID",
                        message=f'Duplicate {kind} id "{entity_id}"',
                        related_entity_ids=(entity_id,),
                    ))
                seen.add(entity_id)
        return issues

    def _ambiguous(self, declared: Dict[str, List[EntityId]]) -> List[ValidationIssue]:
        kinds_by_id: Dict[EntityId, List[str]] = {}
        for kind, ids in declared.items():
            for entity_id in ids:
                kinds = kinds_by_id.setdefault(entity_id, [])
                if kind not in kinds:
                    kinds.append(kind)
        return [
            ValidationIssue(
                code="AMBIGUOUS_ENTITY_ID",
                message=f'Id "{entity_id}" is shared by {" and ".join(kinds)}',
                related_entity_ids=(entity_id,),
                severity=IssueSeverity.WARNING,
                suggestion="Give every entity a distinct id so causal links stay unambiguous",
            )
            for entity_id, kinds in kinds_by_id.items()
            if len(kinds) > 1
        ]
