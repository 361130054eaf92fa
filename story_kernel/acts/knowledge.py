"""SPEAK — a person shares a fact with everyone listening at the same location."""

from typing import List

from story_kernel.acts.conditions import add_knowledge, issue, unique
from story_kernel.models.acts import SpeakAct
from story_kernel.models.validation import ValidationIssue, ValidationResult
from story_kernel.models.world import WorldState


def check_speak(act: SpeakAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if not state.has_person(act.person_id):
        errors.append(issue(
            "SPEAKER_NOT_FOUND",
            f"Speaker {act.person_id} not found in world state",
            act.person_id,
            suggestion="Ensure the speaker exists before attempting to share information",
        ))
        return ValidationResult.from_issues(errors)

    if not state.knows(act.person_id, act.information_id):
        errors.append(issue(
            "SPEAKER_LACKS_KNOWLEDGE",
            f"Speaker {act.person_id} does not know information {act.information_id}",
            act.person_id, act.information_id,
            suggestion="The speaker must know the information before sharing it",
        ))

    speaker_location = state.location_of(act.person_id)
    for recipient_id in act.to_person_ids:
        if not state.has_person(recipient_id):
            errors.append(issue(
                "RECIPIENT_NOT_FOUND",
                f"Recipient {recipient_id} not found in world state",
                recipient_id,
                suggestion="Ensure all recipients exist",
            ))
            continue

        recipient_location = state.location_of(recipient_id)
        if recipient_location != speaker_location:
            errors.append(issue(
                "RECIPIENT_NOT_PRESENT",
                f"Recipient {recipient_id} is at location {recipient_location}, "
                f"not with speaker at {speaker_location}",
                recipient_id, speaker_location, recipient_location,
                suggestion="All recipients must be at the same location as the speaker",
            ))

        if recipient_id == act.person_id:
            errors.append(issue(
                "SELF_SPEAK",
                "Cannot speak information to oneself",
                act.person_id,
                suggestion="Choose different recipients for the information",
            ))

    return ValidationResult.from_issues(errors)


def apply_speak(act: SpeakAct, state: WorldState) -> WorldState:
    knowledge = dict(state.knowledge)
    for recipient_id in act.to_person_ids:
        add_knowledge(knowledge, recipient_id, act.information_id)
    return state.evolve(timestamp=act.timestamp, knowledge=knowledge)


def speak_entities(act: SpeakAct) -> tuple:
    return unique([act.person_id, *act.to_person_ids, act.information_id])
