"""Tests for core data models."""

import copy

import pytest

from story_kernel.models import (
    ActType,
    CombineItemsAct,
    DependencyEdge,
    DependencyGraph,
    IssueSeverity,
    KernelConfig,
    MoveAct,
    SpeakAct,
    StoryData,
    TakeItemAct,
    ValidationIssue,
    ValidationResult,
    WorldState,
    parse_act,
    parse_acts,
    time_to_minutes,
)


class TestTimeParsing:
    def test_hh_mm(self):
        assert time_to_minutes("08:30") == 510

    def test_hh_mm_ss(self):
        assert time_to_minutes("01:00:30") == 60.5

    def test_unparseable_is_zero(self):
        assert time_to_minutes("") == 0
        assert time_to_minutes("noon") == 0

    def test_single_digit_hour_is_unparseable(self):
        assert time_to_minutes("9:30") == 0


class TestWorldState:
    def test_defaults(self):
        state = WorldState()
        assert state.timestamp == 0
        assert state.person_positions == {}
        assert state.knowledge == {}

    def test_frozen(self):
        state = WorldState(timestamp=1)
        with pytest.raises(Exception):
            state.timestamp = 2

    def test_mappings_are_read_only(self):
        state = WorldState(person_positions={1: 101}, knowledge={1: (7,)})
        with pytest.raises(TypeError):
            state.person_positions[1] = 999
        with pytest.raises(TypeError):
            state.knowledge.pop(1)
        with pytest.raises(TypeError):
            WorldState().item_ownership.update({5: 1})
        assert state.person_positions == {1: 101}

    def test_read_only_mappings_copy_and_dump(self):
        state = WorldState(person_positions={1: 101})
        assert copy.deepcopy(state) == state
        assert state.model_dump()["person_positions"] == {1: 101}
        editable = dict(state.person_positions)
        editable[1] = 102
        assert state.evolve(person_positions=editable).location_of(1) == 102

    def test_evolve_copies_mappings(self):
        state = WorldState(person_positions={1: 101}, knowledge={1: (7,)})
        evolved = state.evolve(timestamp=5)

        assert evolved.timestamp == 5
        assert evolved.person_positions == {1: 101}
        assert evolved.person_positions is not state.person_positions
        assert evolved.item_ownership is not state.item_ownership
        assert evolved.knowledge is not state.knowledge
        assert state.timestamp == 0

    def test_helpers(self):
        state = WorldState(
            person_positions={"alice": "hall"},
            item_ownership={"key": "alice"},
            item_locations={"lamp": "hall"},
            knowledge={"alice": ("secret",)},
        )
        assert state.has_person("alice")
        assert not state.has_person("bob")
        assert state.location_of("alice") == "hall"
        assert state.owner_of("key") == "alice"
        assert state.item_location_of("lamp") == "hall"
        assert state.knows("alice", "secret")
        assert not state.knows("bob", "secret")


class TestActs:
    def test_parse_discriminated_union(self):
        act = parse_act({
            "type": "MOVE",
            "id": "a1",
            "personId": "alice",
            "timestamp": 10,
            "fromLocationId": "hall",
            "toLocationId": "garden",
        })
        assert isinstance(act, MoveAct)
        assert act.person_id == "alice"
        assert act.to_location_id == "garden"

    def test_parse_clock_time(self):
        act = parse_act({
            "type": "MOVE",
            "id": 1,
            "personId": 1,
            "time": "09:15",
            "fromLocationId": 101,
            "toLocationId": 102,
        })
        assert act.timestamp == 555

    def test_parse_list(self):
        acts = parse_acts([
            {"type": "SPEAK", "id": 1, "personId": 1, "toPersonIds": [2, 3], "informationId": 9},
            {"type": "TAKE_ITEM", "id": 2, "personId": 1, "itemId": 5, "fromLocationId": 101},
        ])
        assert isinstance(acts[0], SpeakAct)
        assert acts[0].to_person_ids == (2, 3)
        assert isinstance(acts[1], TakeItemAct)

    def test_unknown_type_rejected(self):
        with pytest.raises(Exception):
            parse_act({"type": "TELEPORT", "id": 1, "personId": 1})

    def test_int_and_str_ids_stay_distinct(self):
        act = MoveAct(id=1, person_id="1", from_location_id=101, to_location_id="102")
        assert act.person_id == "1"
        assert act.from_location_id == 101
        assert act.to_location_id == "102"

    def test_generated_description(self):
        act = MoveAct(id=1, person_id=1, from_location_id=101, to_location_id=102)
        assert act.summary() == "Move from location 101 to 102"
        combine = CombineItemsAct(id=2, person_id=1, item_ids=(5, 6))
        assert combine.summary() == "Combine items: 5 + 6"

    def test_authored_description_wins(self):
        act = MoveAct(id=1, person_id=1, from_location_id=101, to_location_id=102,
                      description="Walks to the village")
        assert act.summary() == "Walks to the village"

    def test_act_type_values(self):
        act = MoveAct(id=1, person_id=1, from_location_id=101, to_location_id=102)
        assert ActType(act.type) == ActType.MOVE


class TestStoryData:
    def test_camel_case_input(self):
        story = StoryData.model_validate({
            "persons": [{"id": 1, "name": "Momotaro", "color": "#FF0000"}],
            "locations": [{"id": 101, "name": "House", "connections": [102]}],
            "acts": [],
            "props": [{"id": 5, "name": "Dumpling", "ownerId": 1}],
            "informations": [{"id": 9, "content": "Ogres on the island", "knownBy": [1]}],
            "initialStates": [{"personId": 1, "locationId": 101, "time": "00:00:00"}],
        })
        assert story.persons[0].name == "Momotaro"
        assert story.locations[0].connections == [102]
        assert story.props[0].owner_id == 1
        assert story.informations[0].known_by == [1]
        assert story.initial_states[0].location_id == 101
        assert story.initial_states[0].time == 0

    def test_missing_sections_default_empty(self):
        story = StoryData.model_validate({"persons": [], "locations": []})
        assert story.acts == []
        assert story.initial_states == []


class TestValidationResult:
    def test_ok(self):
        result = ValidationResult.ok()
        assert result.valid is True
        assert result.errors == ()

    def test_from_issues(self):
        result = ValidationResult.from_issues([
            ValidationIssue(code="A", message="first"),
            ValidationIssue(code="B", message="second", severity=IssueSeverity.WARNING),
        ])
        assert result.valid is False
        assert result.codes() == ["A", "B"]
        assert result.messages() == ["first", "second"]
        assert len(result.by_severity(IssueSeverity.WARNING)) == 1

    def test_from_no_issues_is_valid(self):
        assert ValidationResult.from_issues([]).valid is True


class TestDependencyGraph:
    def test_queries(self):
        graph = DependencyGraph(
            nodes=(1, 2, 3),
            edges=(
                DependencyEdge(from_act_id=1, to_act_id=2, shared_entity_id="p"),
                DependencyEdge(from_act_id=2, to_act_id=3, shared_entity_id="p"),
                DependencyEdge(from_act_id=1, to_act_id=3, shared_entity_id="l"),
            ),
        )
        assert len(graph.dependencies_of(3)) == 2
        assert len(graph.dependents_of(1)) == 2
        assert len(graph.edges_for_entity("l")) == 1
        assert graph.topological_order() == [1, 2, 3]
        assert graph.is_acyclic()

    def test_transitive_queries(self):
        graph = DependencyGraph(
            nodes=(1, 2, 3, 4),
            edges=(
                DependencyEdge(from_act_id=1, to_act_id=2, shared_entity_id="p"),
                DependencyEdge(from_act_id=2, to_act_id=3, shared_entity_id="p"),
                DependencyEdge(from_act_id=1, to_act_id=3, shared_entity_id="l"),
                DependencyEdge(from_act_id=3, to_act_id=4, shared_entity_id="q"),
            ),
        )
        assert graph.causal_chain(4) == [3, 2, 1]
        assert graph.causal_chain(1) == []
        assert graph.effects_of(1) == [2, 3, 4]
        assert graph.effects_of(4) == []
        assert graph.effects_of(99) == []

    def test_cycle_detected(self):
        graph = DependencyGraph(
            nodes=(1, 2),
            edges=(
                DependencyEdge(from_act_id=1, to_act_id=2, shared_entity_id="x"),
                DependencyEdge(from_act_id=2, to_act_id=1, shared_entity_id="x"),
            ),
        )
        assert graph.topological_order() is None
        assert not graph.is_acyclic()

    def test_can_remove(self):
        graph = DependencyGraph(
            nodes=(1, 2),
            edges=(DependencyEdge(from_act_id=1, to_act_id=2, shared_entity_id="x"),),
        )
        assert graph.can_remove(2).valid
        blocked = graph.can_remove(1)
        assert blocked.codes() == ["HAS_DEPENDENCIES"]
        assert blocked.errors[0].related_entity_ids == (1, 2)
        assert graph.can_remove(99).codes() == ["ACT_NOT_FOUND"]


class TestKernelConfig:
    def test_defaults(self):
        config = KernelConfig()
        assert config.runner.halt_on_rejection is False
        assert config.locations.check_reachability is False
        assert config.locations.report_disconnected_groups is False
