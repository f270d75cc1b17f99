from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from arboretum.config import Settings
from arboretum.llm.mock_provider import MockConfig, MockLLMProvider
from arboretum.parser import SyntaxParser
from arboretum.session import ParseSession
from arboretum.visualizer import server

from .helpers import FARMER_SENTENCE, farmer_json


def _session(api_key: str | None = "test-key", response: str | None = None):
    provider = MockLLMProvider(
        MockConfig(default_response=farmer_json() if response is None else response)
    )
    settings = Settings(_env_file=None, api_key=api_key)
    return ParseSession(SyntaxParser(settings, provider=provider))


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setattr(server, "session", _session())
    with TestClient(server.app) as test_client:
        yield test_client


@pytest.fixture()
def keyless_client(monkeypatch):
    monkeypatch.setattr(server, "session", _session(api_key=None))
    with TestClient(server.app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["has_tree"] is False
    assert data["has_credentials"] is True


def test_parse_then_fetch(client):
    response = client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert response.status_code == 200
    data = response.json()
    assert data["result"]["tree"]["label"] == "CP"
    assert data["stats"]["layers"] == 4
    assert data["error"] is None

    assert client.get("/health").json()["has_tree"] is True
    assert client.get("/api/tree").json()["sentence"] == FARMER_SENTENCE
    assert client.get("/api/tree/stats").json()["node_count"] == 7


def test_blank_sentence_rejected(client):
    response = client.post("/api/parse", json={"sentence": "  "})
    assert response.status_code == 422


def test_missing_key_then_renew(keyless_client):
    response = keyless_client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert response.status_code == 401
    data = response.json()
    assert data["needs_credentials"] is True
    assert data["error"]["kind"] == "CredentialMissing"
    assert data["result"] is None

    page = keyless_client.get("/").text
    assert "Renew credentials" in page

    response = keyless_client.post("/api/credentials", json={"api_key": "fresh"})
    assert response.json() == {"status": "updated", "has_credentials": True}
    assert keyless_client.get("/api/tree").json()["error"] is None

    response = keyless_client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert response.status_code == 200


def test_blank_credentials_rejected(client):
    response = client.post("/api/credentials", json={"api_key": " "})
    assert response.status_code == 422


def test_model_failure_status(monkeypatch):
    monkeypatch.setattr(server, "session", _session(response="not json"))
    with TestClient(server.app) as client:
        response = client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert response.status_code == 502
    assert response.json()["error"]["kind"] == "InvalidJSON"


@pytest.mark.parametrize("path", ["/api/tree/stats", "/api/tree/scene", "/api/tree/svg"])
def test_no_tree_is_404(client, path):
    assert client.get(path).status_code == 404


def test_scene_and_svg(client):
    client.post("/api/parse", json={"sentence": FARMER_SENTENCE})

    scene = client.get("/api/tree/scene?animated=true&width=2000&height=1000").json()
    assert scene["width"] == 2000
    assert scene["schedule"]["animated"] is True
    assert len(scene["branches"]) == 6

    response = client.get("/api/tree/svg")
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.startswith("<svg")
    assert "animation:" not in response.text


def test_scene_rejects_bad_viewport(client):
    client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert client.get("/api/tree/scene?width=0").status_code == 422


def test_clear_tree(client):
    client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    assert client.delete("/api/tree").json() == {"status": "cleared"}
    assert client.get("/api/tree").json()["result"] is None


def test_index_views(client):
    assert "Arboretum Visualizer" in client.get("/").text

    client.post("/api/parse", json={"sentence": FARMER_SENTENCE})
    page = client.get("/").text
    assert "[CP [C ∅]" in page
    assert "animation: arb-draw" not in page

    growth = client.get("/?view=growth").text
    assert "animation: arb-draw" in growth
