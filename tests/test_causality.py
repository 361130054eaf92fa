"""Tests for the Causality Resolver."""

from story_kernel.causality.resolver import CausalityResolver
from story_kernel.models.acts import GiveItemAct, MoveAct, SpeakAct, TakeItemAct
from story_kernel.models.world import WorldState
from story_kernel.simulation.runner import SimulationRunner


def _make_state() -> WorldState:
    return WorldState(
        person_positions={"alice": "hall", "bob": "garden"},
        item_locations={"key": "hall"},
        knowledge={"alice": ("plan",)},
    )


def _run(acts):
    return SimulationRunner().run(_make_state(), acts)


class TestCausalityResolver:
    def setup_method(self):
        self.resolver = CausalityResolver()
        self.acts = [
            TakeItemAct(id="take", person_id="alice", timestamp=1, item_id="key", from_location_id="hall"),
            MoveAct(id="walk", person_id="alice", timestamp=2, from_location_id="hall", to_location_id="garden"),
            GiveItemAct(id="give", person_id="alice", timestamp=3, item_id="key", to_person_id="bob"),
            # Rejected: bob is in the garden, not the hall
            MoveAct(id="bad", person_id="bob", timestamp=4, from_location_id="hall", to_location_id="garden"),
            SpeakAct(id="tell", person_id="alice", timestamp=5, to_person_ids=("bob",), information_id="plan"),
        ]
        self.result = _run(self.acts)

    def test_edges_follow_last_toucher(self):
        graph = self.resolver.resolve(self.result)
        triples = [(e.from_act_id, e.to_act_id, e.shared_entity_id) for e in graph.edges]
        assert triples == [
            ("take", "walk", "alice"),
            ("take", "walk", "hall"),
            ("walk", "give", "alice"),
            ("take", "give", "key"),
            ("give", "tell", "alice"),
            ("give", "tell", "bob"),
        ]

    def test_nodes_are_applied_acts_in_order(self):
        graph = self.resolver.resolve(self.result)
        assert graph.nodes == ("take", "walk", "give", "tell")

    def test_rejected_acts_are_unsatisfied(self):
        graph = self.resolver.resolve(self.result)
        assert graph.unsatisfied == ("bad",)
        assert not graph.dependencies_of("bad")
        assert not graph.dependents_of("bad")
        assert graph.can_remove("bad").codes() == ["ACT_NOT_FOUND"]

    def test_edges_point_forward(self):
        graph = self.resolver.resolve(self.result)
        position = {act_id: i for i, act_id in enumerate(graph.nodes)}
        for edge in graph.edges:
            assert position[edge.from_act_id] < position[edge.to_act_id]
        assert graph.is_acyclic()
        assert graph.topological_order() == list(graph.nodes)

    def test_can_remove(self):
        graph = self.resolver.resolve(self.result)
        assert graph.can_remove("tell").valid

        blocked = graph.can_remove("take")
        assert blocked.codes() == ["HAS_DEPENDENCIES"]
        assert blocked.errors[0].related_entity_ids == ("take", "walk", "give")

    def test_trace(self):
        traced = self.resolver.trace(self.result, "key")
        assert [act.id for act in traced] == ["take", "give"]
        assert self.resolver.trace(self.result, "nothing") == []

    def test_deterministic(self):
        assert self.resolver.resolve(self.result) == self.resolver.resolve(_run(self.acts))

    def test_empty_timeline(self):
        graph = self.resolver.resolve(_run([]))
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.is_acyclic()

    def test_independent_acts_have_no_edges(self):
        result = _run([
            MoveAct(id=1, person_id="alice", timestamp=1, from_location_id="hall", to_location_id="cellar"),
            MoveAct(id=2, person_id="bob", timestamp=2, from_location_id="garden", to_location_id="shed"),
        ])
        assert self.resolver.resolve(result).edges == ()
