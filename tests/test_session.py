from __future__ import annotations

import asyncio

import pytest

from arboretum.config import Settings
from arboretum.errors import (
    CredentialMissingError,
    RequestInFlightError,
)
from arboretum.llm.mock_provider import MockConfig, MockLLMProvider
from arboretum.parser import SyntaxParser
from arboretum.session import ParseSession, SessionState

from .helpers import FARMER_SENTENCE, farmer_json


def _session(api_key: str | None = "test-key", **config) -> ParseSession:
    config.setdefault("default_response", farmer_json())
    provider = MockLLMProvider(MockConfig(**config))
    settings = Settings(_env_file=None, api_key=api_key)
    return ParseSession(SyntaxParser(settings, provider=provider))


def test_initial_state():
    state = ParseSession(SyntaxParser(Settings(_env_file=None))).state
    assert state == SessionState()
    assert state.to_dict()["result"] is None
    assert state.needs_credentials is False


@pytest.mark.asyncio
async def test_success_replaces_result():
    session = _session()
    state = await session.submit(FARMER_SENTENCE)

    assert state.loading is False
    assert state.error is None
    assert state.result.tree.label == "CP"
    data = state.to_dict()
    assert data["sentence"] == FARMER_SENTENCE
    assert data["stats"]["node_count"] == 7
    assert data["result"]["partsOfSpeech"][1] == {"word": "farmer", "pos": "NOUN"}


@pytest.mark.asyncio
async def test_failure_clears_previous_tree():
    session = _session()
    await session.submit(FARMER_SENTENCE)

    session.parser.update_credentials(None)
    state = await session.submit("The pig sleeps")

    assert state.result is None
    assert isinstance(state.error, CredentialMissingError)
    assert state.needs_credentials is True
    assert state.to_dict()["error"]["kind"] == "CredentialMissing"


@pytest.mark.asyncio
async def test_bad_answer_after_good_one_leaves_no_stale_tree():
    session = _session(script=[farmer_json(), "I cannot parse that."])

    first = await session.submit(FARMER_SENTENCE)
    second = await session.submit("Colorless green ideas sleep furiously")

    assert first.result is not None
    assert second.result is None
    assert second.error.kind == "InvalidJSON"
    assert second.sentence == "Colorless green ideas sleep furiously"


@pytest.mark.asyncio
async def test_malformed_output_sets_error_state():
    session = _session(default_response='{"tree": {"label": "CP"}, "explanation": "x"}')
    state = await session.submit(FARMER_SENTENCE)
    assert state.result is None
    assert state.error.kind == "MalformedResponse"
    assert state.needs_credentials is False


@pytest.mark.asyncio
async def test_loading_while_pending():
    session = _session(simulate_delay_ms=50)

    task = asyncio.create_task(session.submit(FARMER_SENTENCE))
    await asyncio.sleep(0)
    assert session.state.loading is True
    assert session.state.result is None

    with pytest.raises(RequestInFlightError):
        await session.submit(FARMER_SENTENCE)

    state = await task
    assert state.loading is False
    assert state.result is not None


@pytest.mark.asyncio
async def test_blank_input_leaves_state_alone():
    session = _session()
    await session.submit(FARMER_SENTENCE)
    before = session.state

    with pytest.raises(ValueError):
        await session.submit("")
    assert session.state is before


@pytest.mark.asyncio
async def test_clear():
    session = _session()
    await session.submit(FARMER_SENTENCE)
    assert session.clear() == SessionState()


@pytest.mark.asyncio
async def test_deeply_nested_answer_is_recorded_as_invalid_json():
    session = _session(default_response="[" * 200000 + "]" * 200000)
    state = await session.submit(FARMER_SENTENCE)
    assert state.loading is False
    assert state.error.kind == "InvalidJSON"


@pytest.mark.asyncio
async def test_unexpected_error_does_not_leave_session_loading(monkeypatch):
    session = _session()

    async def broken_parse(sentence):
        raise RuntimeError("layout exploded")

    monkeypatch.setattr(session.parser, "parse", broken_parse)
    state = await session.submit(FARMER_SENTENCE)

    assert state.loading is False
    assert state.result is None
    assert state.error.kind == "TransportOrUnknown"
    assert "layout exploded" in state.error.message

    # The slot is usable again once the failure is recorded.
    monkeypatch.undo()
    state = await session.submit(FARMER_SENTENCE)
    assert state.result is not None
