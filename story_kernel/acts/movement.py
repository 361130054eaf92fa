"""MOVE — a person walks from one location to another."""

from typing import List

from story_kernel.acts.conditions import issue, unique
from story_kernel.models.acts import MoveAct
from story_kernel.models.validation import ValidationIssue, ValidationResult
from story_kernel.models.world import WorldState


def check_move(act: MoveAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if not state.has_person(act.person_id):
        errors.append(issue(
            "PERSON_NOT_FOUND",
            f"Person {act.person_id} not found in world state",
            act.person_id,
            suggestion="Ensure the person exists before attempting to move them",
        ))
    else:
        current = state.location_of(act.person_id)
        if current != act.from_location_id:
            errors.append(issue(
                "WRONG_STARTING_LOCATION",
                f"Person {act.person_id} is at location {current}, not {act.from_location_id}",
                act.person_id, current, act.from_location_id,
                suggestion=f"Update the act to move from location {current} instead",
            ))

    return ValidationResult.from_issues(errors)


def apply_move(act: MoveAct, state: WorldState) -> WorldState:
    positions = dict(state.person_positions)
    positions[act.person_id] = act.to_location_id
    return state.evolve(timestamp=act.timestamp, person_positions=positions)


def move_entities(act: MoveAct) -> tuple:
    return unique([act.person_id, act.from_location_id, act.to_location_id])
