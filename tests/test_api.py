"""End-to-end tests for the HTTP API: phase flow, controls, state and debrief."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from siege.api.app import create_app
from siege.config import SiegeConfig

API = "/api/v1"


def _make_config() -> SiegeConfig:
    return SiegeConfig(turn_interval=0.0, attacker_step_delay=0.0, build_step_delay=0.0)


@pytest.fixture
def client():
    with TestClient(create_app(_make_config())) as c:
        yield c


def _setup_execute(client: TestClient) -> dict:
    assert client.post(f"{API}/draft", json={"commanders": ["larry", "paul", "olivia"]}).status_code == 200
    assert client.post(f"{API}/curate", json={"types": ["wall", "tower", "mine"]}).status_code == 200
    resp = client.post(f"{API}/teach", json={"command": "Defend the base"})
    assert resp.status_code == 200
    return resp.json()


class TestPhaseFlow:

    def test_initial_state(self, client):
        data = client.get(f"{API}/state").json()
        assert data["phase"] == "draft"
        assert data["turn"] == 0
        assert data["wood"] == 40
        assert data["base_health"] == 3
        assert data["base"] == [12, 12]
        assert data["paused"]

    def test_config_lists_roster(self, client):
        data = client.get(f"{API}/config").json()
        assert data["grid_size"] == 26
        assert data["intermission_turns"] == [8, 16]
        assert [c["id"] for c in data["roster"]] == ["larry", "paul", "olivia", "ruth", "tom"]

    def test_config_lists_structures(self, client):
        structures = {s["structure_type"]: s for s in client.get(f"{API}/config").json()["structures"]}
        assert set(structures) == {"wall", "tower", "decoy", "mine", "farm"}
        assert structures["wall"]["width"] == 3
        assert structures["farm"]["cost"] == 10
        assert not structures["decoy"]["blocks_movement"]
        assert structures["mine"]["description"] == "A buried surprise. Explodes on contact."

    def test_out_of_order_phase_is_conflict(self, client):
        assert client.post(f"{API}/curate", json={"types": ["wall", "tower", "mine"]}).status_code == 409
        assert client.post(f"{API}/teach", json={"command": "Go"}).status_code == 409

    def test_invalid_draft(self, client):
        assert client.post(f"{API}/draft", json={"commanders": ["larry", "larry"]}).status_code == 422
        assert client.post(f"{API}/draft", json={"commanders": ["bob"]}).status_code == 422
        assert client.post(f"{API}/draft", json={"commanders": []}).status_code == 422
        assert client.get(f"{API}/state").json()["phase"] == "draft"

    def test_invalid_curation(self, client):
        client.post(f"{API}/draft", json={"commanders": ["tom"]})
        assert client.post(f"{API}/curate", json={"types": ["wall", "tower"]}).status_code == 422
        assert client.post(f"{API}/curate", json={"types": ["wall", "wall", "tower"]}).status_code == 422
        assert client.post(f"{API}/curate", json={"types": ["wall", "castle", "tower"]}).status_code == 422
        assert client.get(f"{API}/state").json()["phase"] == "curate"

    def test_teach_without_key_uses_fallbacks(self, client):
        data = _setup_execute(client)
        assert data["phase"] == "execute"
        assert data["interpretations"] == {
            "larry": "Processing command literally.",
            "paul": "Possible deception detected.",
            "olivia": "This sounds wonderful!",
        }
        state = client.get(f"{API}/state").json()
        assert [c["id"] for c in state["commanders"]] == ["larry", "paul", "olivia"]
        assert all(c["queued"]["1"] > 0 for c in state["commanders"])
        assert state["enabled_types"] == ["wall", "tower", "mine"]


class TestControls:

    def test_controls_before_execute_are_noops(self, client):
        for action in ("start", "step", "fast_forward", "pause"):
            data = client.post(f"{API}/control/{action}").json()
            assert data["status"] == "noop"

    def test_unknown_action(self, client):
        assert client.post(f"{API}/control/explode").status_code == 422

    def test_step(self, client):
        _setup_execute(client)
        data = client.post(f"{API}/control/step").json()
        assert data["status"] == "ok"
        assert data["turn"] == 1
        state = client.get(f"{API}/state").json()
        assert state["turn"] == 1
        assert len(state["attackers"]) == 2

    def test_events_feed(self, client):
        _setup_execute(client)
        client.post(f"{API}/control/step")
        client.post(f"{API}/control/step")
        events = client.get(f"{API}/events", params={"since_turn": 2}).json()
        assert events
        assert all(e["turn"] >= 2 for e in events)
        assert events[0]["category"] == "turn_start"
        limited = client.get(f"{API}/events", params={"limit": 3}).json()
        assert len(limited) == 3

    def test_reset(self, client):
        _setup_execute(client)
        client.post(f"{API}/control/step")
        data = client.post(f"{API}/control/reset").json()
        assert data["status"] == "ok"
        state = client.get(f"{API}/state").json()
        assert state["phase"] == "draft"
        assert state["turn"] == 0
        assert state["commanders"] == []


class TestFullSiege:

    def test_play_through_to_debrief(self, client):
        _setup_execute(client)
        assert client.get(f"{API}/debrief").status_code == 409

        data = client.post(f"{API}/control/fast_forward").json()
        assert data["status"] == "ok"
        state = client.get(f"{API}/state").json()
        if not state["game_over"]:
            assert state["turn"] == 8
            assert state["intermission"]

        for _ in range(5):
            state = client.get(f"{API}/state").json()
            if state["game_over"]:
                break
            if state["intermission"]:
                resp = client.post(f"{API}/intermission", json={"command": "More towers!", "resume": False})
                body = resp.json()
                assert body["status"] == "ok"
                assert body["phase"] == "execute"
                assert set(body["interpretations"]) == {"larry", "paul", "olivia"}
            client.post(f"{API}/control/fast_forward")

        state = client.get(f"{API}/state").json()
        assert state["game_over"]
        assert state["phase"] == "debrief"

        debrief = client.get(f"{API}/debrief").json()
        assert debrief["turns_played"] == state["turn"]
        assert debrief["victory"] == state["victory"]
        assert len(debrief["commanders"]) == 3
        assert len(debrief["top_moments"]) <= 3
        assert {h["category"] for h in debrief["highlights"]} <= {
            "Most Absurd Build",
            "Most Paranoid Moment",
            "Most Literal Interpretation",
            "Most Optimistic Delusion",
            "Quote of the Day",
        }

    def test_intermission_without_orders(self, client):
        _setup_execute(client)
        client.post(f"{API}/control/fast_forward")
        state = client.get(f"{API}/state").json()
        if state["game_over"]:
            pytest.skip("base fell during act 1")

        body = client.post(f"{API}/intermission", json={"resume": False}).json()
        assert body["status"] == "ok"
        assert body["act"] == 2
        assert body["interpretations"]["paul"] == "No orders? That's EXACTLY what they want. Fortifying."

        again = client.post(f"{API}/intermission", json={"resume": False}).json()
        assert again["status"] == "noop"
