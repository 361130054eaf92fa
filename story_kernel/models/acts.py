"""
Acts — discrete, timestamped units of world change.

The act set is closed: ``Act`` is a discriminated union over the variants
below, keyed by ``type``. The contract operations (precondition check,
postcondition transform, affected entities) live in ``story_kernel.acts``
and are dispatched exhaustively per variant; the methods here delegate.
"""

from enum import Enum
from typing import Annotated, FrozenSet, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from story_kernel.models.validation import ValidationResult
from story_kernel.models.world import EntityId, WorldState, time_to_minutes


class ActType(str, Enum):
    MOVE = "MOVE"
    GIVE_ITEM = "GIVE_ITEM"
    TAKE_ITEM = "TAKE_ITEM"
    PLACE_ITEM = "PLACE_ITEM"
    SPEAK = "SPEAK"
    USE_ITEM = "USE_ITEM"
    COMBINE_ITEMS = "COMBINE_ITEMS"


class BaseAct(BaseModel):
    """Fields shared by every act variant."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: EntityId
    person_id: EntityId                         # Subject performing the act
    timestamp: float = Field(
        default=0.0,
        validation_alias=AliasChoices("timestamp", "time"),
    )                                           # Instant at which postconditions take effect
    description: str = ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_clock_time(cls, value):
        if isinstance(value, str):
            return time_to_minutes(value)
        return value

    def summary(self) -> str:
        """Authored description, or one generated from the payload."""
        return self.description or self._default_description()

    def _default_description(self) -> str:
        return f"Act {self.id}"

    def check_preconditions(self, state: WorldState) -> ValidationResult:
        from story_kernel.acts.contract import check_preconditions
        return check_preconditions(self, state)

    def apply_postconditions(self, state: WorldState) -> WorldState:
        from story_kernel.acts.contract import apply_postconditions
        return apply_postconditions(self, state)

    def affected_entities(self) -> FrozenSet[EntityId]:
        from story_kernel.acts.contract import affected_entities
        return affected_entities(self)

    def ordered_affected_entities(self) -> Tuple[EntityId, ...]:
        from story_kernel.acts.contract import ordered_affected_entities
        return ordered_affected_entities(self)


class MoveAct(BaseAct):
    type: Literal["MOVE"] = "MOVE"
    from_location_id: EntityId
    to_location_id: EntityId

    def _default_description(self) -> str:
        return f"Move from location {self.from_location_id} to {self.to_location_id}"


class GiveItemAct(BaseAct):
    type: Literal["GIVE_ITEM"] = "GIVE_ITEM"
    item_id: EntityId
    to_person_id: EntityId

    def _default_description(self) -> str:
        return f"Give item {self.item_id} to person {self.to_person_id}"


class TakeItemAct(BaseAct):
    type: Literal["TAKE_ITEM"] = "TAKE_ITEM"
    item_id: EntityId
    from_location_id: Optional[EntityId] = None
    from_person_id: Optional[EntityId] = None

    def _default_description(self) -> str:
        if self.from_location_id is not None:
            source = f"location {self.from_location_id}"
        elif self.from_person_id is not None:
            source = f"person {self.from_person_id}"
        else:
            source = "unknown source"
        return f"Take item {self.item_id} from {source}"


class PlaceItemAct(BaseAct):
    type: Literal["PLACE_ITEM"] = "PLACE_ITEM"
    item_id: EntityId
    location_id: EntityId

    def _default_description(self) -> str:
        return f"Place item {self.item_id} at location {self.location_id}"


class SpeakAct(BaseAct):
    type: Literal["SPEAK"] = "SPEAK"
    to_person_ids: Tuple[EntityId, ...]
    information_id: EntityId

    def _default_description(self) -> str:
        recipients = ", ".join(str(p) for p in self.to_person_ids)
        return f"Share information {self.information_id} with {recipients}"


class UseItemAct(BaseAct):
    type: Literal["USE_ITEM"] = "USE_ITEM"
    item_id: EntityId
    target_id: Optional[EntityId] = None
    target_type: Optional[Literal["person", "item", "location"]] = None

    def _default_description(self) -> str:
        if self.target_id is not None:
            return f"Use item {self.item_id} on {self.target_type} {self.target_id}"
        return f"Use item {self.item_id}"


class CombineItemsAct(BaseAct):
    type: Literal["COMBINE_ITEMS"] = "COMBINE_ITEMS"
    item_ids: Tuple[EntityId, ...]
    result_item_id: Optional[EntityId] = None

    def _default_description(self) -> str:
        return "Combine items: " + " + ".join(str(i) for i in self.item_ids)


Act = Annotated[
    Union[
        MoveAct,
        GiveItemAct,
        TakeItemAct,
        PlaceItemAct,
        SpeakAct,
        UseItemAct,
        CombineItemsAct,
    ],
    Field(discriminator="type"),
]

ACT_VARIANTS = {
    ActType.MOVE: MoveAct,
    ActType.GIVE_ITEM: GiveItemAct,
    ActType.TAKE_ITEM: TakeItemAct,
    ActType.PLACE_ITEM: PlaceItemAct,
    ActType.SPEAK: SpeakAct,
    ActType.USE_ITEM: UseItemAct,
    ActType.COMBINE_ITEMS: CombineItemsAct,
}

_ACT_ADAPTER = TypeAdapter(Act)
_ACT_LIST_ADAPTER = TypeAdapter(List[Act])


def parse_act(data: dict) -> BaseAct:
    """Validate one raw act dict into its variant."""
    return _ACT_ADAPTER.validate_python(data)


def parse_acts(data: list) -> List[BaseAct]:
    return _ACT_LIST_ADAPTER.validate_python(data)
