"""Tests for the FastAPI API endpoints."""

import pytest
from fastapi.testclient import TestClient

from story_kernel.api.app import create_app
from story_kernel.models.config import KernelConfig
from story_kernel.world_model.store import StoryStore


def _make_story() -> dict:
    return {
        "persons": [
            {"id": 1, "name": "Alice"},
            {"id": 2, "name": "Bob"},
        ],
        "locations": [
            {"id": 101, "name": "Hall", "connections": [102]},
            {"id": 102, "name": "Garden", "connections": [101]},
            {"id": 104, "name": "Attic", "connections": []},
        ],
        "props": [{"id": 201, "name": "Key", "locationId": 101}],
        "informations": [],
        "initialStates": [
            {"personId": 1, "locationId": 101, "time": "09:00"},
            {"personId": 2, "locationId": 102, "time": "09:00"},
        ],
        "acts": [
            {"id": 1, "type": "TAKE_ITEM", "personId": 1, "time": "09:05",
             "itemId": 201, "fromLocationId": 101},
            {"id": 2, "type": "MOVE", "personId": 1, "time": "09:10",
             "fromLocationId": 101, "toLocationId": 102},
            {"id": 3, "type": "MOVE", "personId": 2, "time": "09:15",
             "fromLocationId": 101, "toLocationId": 102},
            {"id": 4, "type": "GIVE_ITEM", "personId": 1, "time": "09:20",
             "itemId": 201, "toPersonId": 2},
        ],
    }


@pytest.fixture
def client():
    """Create a test client with a fresh store."""
    app = create_app(store=StoryStore(), config=KernelConfig())
    return TestClient(app)


@pytest.fixture
def loaded_client(client):
    response = client.post("/story", json=_make_story())
    assert response.status_code == 200
    return client


class TestStoryEndpoints:
    def test_load_story(self, client):
        response = client.post("/story", json=_make_story())
        assert response.status_code == 200
        data = response.json()
        assert data["applied_acts"] == 3
        assert data["rejected_acts"] == ["3"]
        assert data["location_issues"] == 1
        assert data["reference_issues"] == 0
        assert data["act_issues"] == 0
        assert data["valid"] is False
        assert len(data["fingerprint"]) == 64

    def test_fingerprint_stable(self, client):
        first = client.post("/story", json=_make_story()).json()["fingerprint"]
        second = client.post("/story", json=_make_story()).json()["fingerprint"]
        assert first == second

    def test_get_story_round_trips_camel_case(self, loaded_client):
        data = loaded_client.get("/story").json()
        assert data["initialStates"][0]["personId"] == 1
        assert data["acts"][0]["fromLocationId"] == 101

    def test_get_story_before_load(self, client):
        assert client.get("/story").status_code == 404

    def test_clear(self, loaded_client):
        assert loaded_client.delete("/story").json() == {"status": "cleared"}
        assert loaded_client.get("/timeline").status_code == 404

    def test_invalid_act_type(self, client):
        story = _make_story()
        story["acts"].append({"id": 9, "type": "TELEPORT", "personId": 1})
        assert client.post("/story", json=story).status_code == 422

    def test_duplicate_act_ids_reported(self, client):
        story = _make_story()
        story["acts"].append(dict(story["acts"][0]))
        response = client.post("/story", json=story)
        assert response.status_code == 200
        data = response.json()
        assert data["applied_acts"] == 3
        assert data["reference_issues"] == 1
        assert data["valid"] is False

        report = client.get("/validation/references").json()
        assert report["errors"][0]["message"] == 'Duplicate act id "1"'

    def test_stateless_analyze(self, client):
        response = client.post("/analyze", json=_make_story())
        assert response.status_code == 200
        data = response.json()
        assert len(data["simulation"]["timeline"]) == 3
        assert client.get("/story").status_code == 404


class TestTimelineEndpoints:
    def test_timeline(self, loaded_client):
        timeline = loaded_client.get("/timeline").json()
        assert [entry["act"]["id"] for entry in timeline] == [1, 2, 4]
        assert timeline[0]["act"]["type"] == "TAKE_ITEM"

    def test_timeline_acts_use_camel_case(self, loaded_client):
        act = loaded_client.get("/timeline").json()[0]["act"]
        assert act["personId"] == 1
        assert act["fromLocationId"] == 101
        assert "person_id" not in act

    def test_state_at(self, loaded_client):
        state = loaded_client.get("/timeline/state", params={"timestamp": 547}).json()
        assert state["timestamp"] == 545
        assert state["item_ownership"] == {"201": 1}

    def test_rejected(self, loaded_client):
        rejected = loaded_client.get("/rejected").json()
        assert list(rejected) == ["3"]
        assert rejected["3"]["errors"][0]["code"] == "WRONG_STARTING_LOCATION"


class TestCausalityEndpoints:
    def test_graph(self, loaded_client):
        graph = loaded_client.get("/causality/graph").json()
        assert graph["nodes"] == [1, 2, 4]
        assert graph["unsatisfied"] == [3]
        assert graph["acyclic"] is True

    def test_dependencies_and_dependents(self, loaded_client):
        deps = loaded_client.get("/causality/acts/4/dependencies").json()
        assert {(e["from_act_id"], e["shared_entity_id"]) for e in deps} == {(2, 1), (1, 201)}

        dependents = loaded_client.get("/causality/acts/1/dependents").json()
        assert {e["to_act_id"] for e in dependents} == {2, 4}

    def test_removable(self, loaded_client):
        assert loaded_client.get("/causality/acts/4/removable").json()["valid"] is True
        blocked = loaded_client.get("/causality/acts/1/removable").json()
        assert blocked["errors"][0]["code"] == "HAS_DEPENDENCIES"

    def test_chain_and_effects(self, loaded_client):
        assert loaded_client.get("/causality/acts/4/chain").json() == [2, 1]
        assert loaded_client.get("/causality/acts/1/effects").json() == [2, 4]
        assert loaded_client.get("/causality/acts/4/effects").json() == []

    def test_unknown_act(self, loaded_client):
        assert loaded_client.get("/causality/acts/99/dependencies").status_code == 404
        assert loaded_client.get("/causality/acts/99/chain").status_code == 404

    def test_trace(self, loaded_client):
        acts = loaded_client.get("/causality/entities/201/trace").json()
        assert [act["id"] for act in acts] == [1, 4]
        assert acts[0]["itemId"] == 201

    def test_trace_with_non_numeric_id(self, loaded_client):
        response = loaded_client.get("/causality/entities/--5/trace")
        assert response.status_code == 200
        assert response.json() == []


class TestValidationEndpoints:
    def test_locations(self, loaded_client):
        data = loaded_client.get("/validation/locations").json()
        assert data["valid"] is False
        assert data["errors"][0]["message"] == 'Location "104" is not connected'
        assert data["errors"][0]["severity"] == "warning"

    def test_references(self, loaded_client):
        assert loaded_client.get("/validation/references").json()["valid"] is True

    def test_acts(self, loaded_client):
        assert loaded_client.get("/validation/acts").json()["valid"] is True

    def test_redundant_act_reported(self, client):
        story = _make_story()
        story["acts"].append({"id": 5, "type": "GIVE_ITEM", "personId": 1, "time": "09:25",
                              "itemId": 201, "toPersonId": 2})
        client.post("/story", json=story)
        data = client.get("/validation/acts").json()
        assert data["errors"][0]["code"] == "REDUNDANT_ACT"
        assert data["errors"][0]["related_entity_ids"] == [5, 4]

    def test_requires_story(self, client):
        assert client.get("/validation/locations").status_code == 404


class TestConfigEndpoints:
    def test_get_config(self, client):
        data = client.get("/config").json()
        assert data["runner"]["halt_on_rejection"] is False

    def test_update_config_reanalyzes(self, loaded_client):
        response = loaded_client.put("/config", json={
            "runner": {"halt_on_rejection": True},
            "locations": {},
        })
        assert response.status_code == 200
        timeline = loaded_client.get("/timeline").json()
        assert [entry["act"]["id"] for entry in timeline] == [1, 2]
