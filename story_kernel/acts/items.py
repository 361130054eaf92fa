"""Item acts — giving, taking, placing, using and combining props."""

from typing import List

from story_kernel.acts.conditions import issue, ownership_hint, place_item, transfer_ownership, unique
from story_kernel.models.acts import (
    CombineItemsAct,
    GiveItemAct,
    PlaceItemAct,
    TakeItemAct,
    UseItemAct,
)
from story_kernel.models.validation import ValidationIssue, ValidationResult
from story_kernel.models.world import WorldState


# === GIVE_ITEM ===

def check_give(act: GiveItemAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if state.owner_of(act.item_id) != act.person_id:
        owner = state.owner_of(act.item_id)
        errors.append(issue(
            "ITEM_NOT_OWNED",
            f"Person {act.person_id} does not own item {act.item_id}",
            act.person_id, act.item_id,
            suggestion=(
                f"Item is currently owned by {owner}" if owner is not None
                else "Item is not owned by anyone or is placed at a location"
            ),
        ))

    giver_location = state.location_of(act.person_id)
    receiver_location = state.location_of(act.to_person_id)

    if giver_location is None:
        errors.append(issue(
            "GIVER_LOCATION_UNKNOWN",
            f"Person {act.person_id} location is unknown",
            act.person_id,
            suggestion="Ensure the giver has a valid location",
        ))

    if receiver_location is None:
        errors.append(issue(
            "RECEIVER_LOCATION_UNKNOWN",
            f"Person {act.to_person_id} location is unknown",
            act.to_person_id,
            suggestion="Ensure the receiver has a valid location",
        ))

    if (
        giver_location is not None
        and receiver_location is not None
        and giver_location != receiver_location
    ):
        errors.append(issue(
            "NOT_SAME_LOCATION",
            f"Giver {act.person_id} is at location {giver_location}, "
            f"but receiver {act.to_person_id} is at location {receiver_location}",
            act.person_id, act.to_person_id, giver_location, receiver_location,
            suggestion="Move one person to the same location as the other before giving the item",
        ))

    if act.person_id == act.to_person_id:
        errors.append(issue(
            "SELF_GIVE",
            "Cannot give an item to oneself",
            act.person_id,
            suggestion="Choose a different recipient for the item",
        ))

    return ValidationResult.from_issues(errors)


def apply_give(act: GiveItemAct, state: WorldState) -> WorldState:
    return transfer_ownership(state, act.item_id, act.to_person_id, act.timestamp)


def give_entities(act: GiveItemAct) -> tuple:
    return unique([act.person_id, act.to_person_id, act.item_id])


# === TAKE_ITEM ===

def check_take(act: TakeItemAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if act.from_location_id is not None:
        item_location = state.item_location_of(act.item_id)
        if item_location != act.from_location_id:
            errors.append(issue(
                "ITEM_NOT_AT_LOCATION",
                f"Item {act.item_id} is not at location {act.from_location_id}",
                act.item_id, act.from_location_id,
                suggestion=(
                    f"Item is at location {item_location}" if item_location is not None
                    else "Item is not placed at any location"
                ),
            ))

        person_location = state.location_of(act.person_id)
        if person_location != act.from_location_id:
            errors.append(issue(
                "PERSON_NOT_AT_ITEM_LOCATION",
                f"Person {act.person_id} is at location {person_location}, "
                f"but item is at location {act.from_location_id}",
                act.person_id, act.item_id, person_location, act.from_location_id,
                suggestion="Move to the item location before taking it",
            ))

    elif act.from_person_id is not None:
        owner = state.owner_of(act.item_id)
        if owner != act.from_person_id:
            errors.append(issue(
                "ITEM_NOT_OWNED_BY_PERSON",
                f"Person {act.from_person_id} does not own item {act.item_id}",
                act.from_person_id, act.item_id,
                suggestion=f"Item is owned by {owner}" if owner is not None else "Item is not owned by anyone",
            ))

        taker_location = state.location_of(act.person_id)
        owner_location = state.location_of(act.from_person_id)
        if taker_location != owner_location:
            errors.append(issue(
                "PEOPLE_NOT_SAME_LOCATION",
                f"Taker {act.person_id} is at location {taker_location}, "
                f"but owner {act.from_person_id} is at location {owner_location}",
                act.person_id, act.from_person_id, taker_location, owner_location,
                suggestion="Move to the same location as the item owner",
            ))

        if act.person_id == act.from_person_id:
            errors.append(issue(
                "SELF_TAKE",
                "Cannot take an item from oneself",
                act.person_id,
                suggestion="You already own this item",
            ))

    else:
        errors.append(issue(
            "NO_SOURCE_SPECIFIED",
            "Must specify either fromLocationId or fromPersonId",
            act.item_id,
            suggestion="Specify where to take the item from",
        ))

    return ValidationResult.from_issues(errors)


def apply_take(act: TakeItemAct, state: WorldState) -> WorldState:
    return transfer_ownership(state, act.item_id, act.person_id, act.timestamp)


def take_entities(act: TakeItemAct) -> tuple:
    return unique([act.person_id, act.item_id, act.from_location_id, act.from_person_id])


# === PLACE_ITEM ===

def check_place(act: PlaceItemAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if state.owner_of(act.item_id) != act.person_id:
        owner = state.owner_of(act.item_id)
        placed_at = state.item_location_of(act.item_id)
        if owner is not None:
            errors.append(issue(
                "ITEM_NOT_OWNED",
                f"Person {act.person_id} does not own item {act.item_id}",
                act.person_id, act.item_id,
                suggestion=f"Item is currently owned by {owner}",
            ))
        elif placed_at is not None:
            errors.append(issue(
                "ITEM_ALREADY_PLACED",
                f"Item {act.item_id} is already placed at location {placed_at}",
                act.item_id, placed_at,
                suggestion="Take the item from its current location first",
            ))
        else:
            errors.append(issue(
                "ITEM_STATUS_UNKNOWN",
                f"Item {act.item_id} status is unknown",
                act.item_id,
                suggestion="Ensure the item exists in the world state",
            ))

    person_location = state.location_of(act.person_id)
    if person_location != act.location_id:
        errors.append(issue(
            "PERSON_NOT_AT_TARGET_LOCATION",
            f"Person {act.person_id} is at location {person_location}, "
            f"not at target location {act.location_id}",
            act.person_id, person_location, act.location_id,
            suggestion="Move to the target location before placing the item",
        ))

    return ValidationResult.from_issues(errors)


def apply_place(act: PlaceItemAct, state: WorldState) -> WorldState:
    return place_item(state, act.item_id, act.location_id, act.timestamp)


def place_entities(act: PlaceItemAct) -> tuple:
    return unique([act.person_id, act.item_id, act.location_id])


# === USE_ITEM ===

def check_use(act: UseItemAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if not state.has_person(act.person_id):
        errors.append(issue(
            "USER_NOT_FOUND",
            f"User {act.person_id} not found in world state",
            act.person_id,
            suggestion="Ensure the user exists before attempting to use an item",
        ))
        return ValidationResult.from_issues(errors)

    if state.owner_of(act.item_id) != act.person_id:
        errors.append(issue(
            "ITEM_NOT_OWNED",
            f"Person {act.person_id} does not own item {act.item_id}",
            act.person_id, act.item_id,
            suggestion=ownership_hint(state, act.item_id),
        ))

    if act.target_id is not None and act.target_type is not None:
        errors.extend(_check_use_target(act, state))

    return ValidationResult.from_issues(errors)


def _check_use_target(act: UseItemAct, state: WorldState) -> List[ValidationIssue]:
    user_location = state.location_of(act.person_id)
    target = act.target_id

    if act.target_type == "person":
        if not state.has_person(target):
            return [issue(
                "TARGET_PERSON_NOT_FOUND",
                f"Target person {target} not found",
                target,
                suggestion="Ensure the target person exists",
            )]
        target_location = state.location_of(target)
        if target_location != user_location:
            return [issue(
                "TARGET_NOT_PRESENT",
                f"Target person {target} is at location {target_location}, "
                f"not with user at {user_location}",
                target, user_location, target_location,
                suggestion="The target person must be at the same location",
            )]

    elif act.target_type == "item":
        target_owner = state.owner_of(target)
        target_location = state.item_location_of(target)
        if target_owner is None and target_location is None:
            return [issue(
                "TARGET_ITEM_NOT_FOUND",
                f"Target item {target} not found",
                target,
                suggestion="Ensure the target item exists",
            )]
        if target_owner is not None and target_owner != act.person_id:
            return [issue(
                "TARGET_ITEM_NOT_ACCESSIBLE",
                f"Target item {target} is owned by {target_owner}",
                target, target_owner,
                suggestion="The target item must be accessible (owned by you or at your location)",
            )]
        if target_location is not None and target_location != user_location:
            return [issue(
                "TARGET_ITEM_NOT_HERE",
                f"Target item {target} is at location {target_location}, not at {user_location}",
                target, target_location, user_location,
                suggestion="The target item must be at your location",
            )]

    elif act.target_type == "location":
        if target != user_location:
            return [issue(
                "WRONG_LOCATION",
                f"Cannot use item at location {target} while at {user_location}",
                target, user_location,
                suggestion="You must be at the target location to use the item there",
            )]

    return []


def apply_use(act: UseItemAct, state: WorldState) -> WorldState:
    # Using an item leaves ownership and position untouched.
    return state.evolve(timestamp=act.timestamp)


def use_entities(act: UseItemAct) -> tuple:
    return unique([act.person_id, act.item_id, act.target_id])


# === COMBINE_ITEMS ===

def check_combine(act: CombineItemsAct, state: WorldState) -> ValidationResult:
    errors: List[ValidationIssue] = []

    if not state.has_person(act.person_id):
        errors.append(issue(
            "COMBINER_NOT_FOUND",
            f"Person {act.person_id} not found in world state",
            act.person_id,
            suggestion="Ensure the person exists before attempting to combine items",
        ))
        return ValidationResult.from_issues(errors)

    if len(act.item_ids) < 2:
        errors.append(issue(
            "INSUFFICIENT_ITEMS",
            "At least 2 items are required for combination",
            *act.item_ids,
            suggestion="Provide at least 2 items to combine",
        ))
        return ValidationResult.from_issues(errors)

    if len(set(act.item_ids)) != len(act.item_ids):
        errors.append(issue(
            "DUPLICATE_ITEMS",
            "Cannot combine the same item with itself",
            *act.item_ids,
            suggestion="Each item in the combination must be unique",
        ))

    for item_id in act.item_ids:
        if state.owner_of(item_id) != act.person_id:
            errors.append(issue(
                "ITEM_NOT_OWNED",
                f"Person {act.person_id} does not own item {item_id}",
                act.person_id, item_id,
                suggestion=ownership_hint(state, item_id),
            ))

    return ValidationResult.from_issues(errors)


def apply_combine(act: CombineItemsAct, state: WorldState) -> WorldState:
    """Consume every input item; the result, if declared, goes to the combiner."""
    ownership = dict(state.item_ownership)
    locations = dict(state.item_locations)
    for item_id in act.item_ids:
        ownership.pop(item_id, None)
        locations.pop(item_id, None)
    if act.result_item_id is not None:
        ownership[act.result_item_id] = act.person_id
        locations.pop(act.result_item_id, None)
    return state.evolve(timestamp=act.timestamp, item_ownership=ownership, item_locations=locations)


def combine_entities(act: CombineItemsAct) -> tuple:
    return unique([act.person_id, *act.item_ids, act.result_item_id])
