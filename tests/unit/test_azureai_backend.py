# tests/unit/test_azureai_backend.py

from __future__ import annotations
import sys
import json
from pathlib import Path
from typing import List
import httpx
import pytest

# Make "src" importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chatwire.backends.azureai import AzureAIBackend
from chatwire.config import BackendSettings
from chatwire.core.errors import DecodeError, DeliveryError, TransportError
from chatwire.core.events import EventChannel
from chatwire.core.models import BackendName, BackendPrompt
from chatwire.transport.http import HttpTransport

SETTINGS = BackendSettings(
    model="gpt-35-turbo",
    url="https://example.openai.azure.com",
    api_key="abc",
    api_version="2023-05-15",
    deployment_id="chat",
)

SCENARIO_LINES = [
    'data: {"choices":[{"delta":{"content":"Hello "}}]}',
    'data: {"choices":[{"delta":{"content":"World"}}]}',
    "data: [DONE]",
]


class Recorder:
    """MockTransport handler that returns a canned body and keeps every request."""

    def __init__(self, body=b"", status: int = 200):
        self.body = body
        self.status = status
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.body() if callable(self.body) else self.body
        return httpx.Response(self.status, content=body)

    def sent_json(self, i: int = -1):
        return json.loads(self.requests[i].content)


def _backend(recorder: Recorder, settings: BackendSettings = SETTINGS) -> AzureAIBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    return AzureAIBackend(settings, transport=HttpTransport(client=client))


def _body(lines) -> bytes:
    return "\n".join(lines).encode("utf-8")


@pytest.mark.asyncio
async def test_scenario_hello_world():
    rec = Recorder(_body(SCENARIO_LINES))
    backend = _backend(rec)
    channel = EventChannel()

    await backend.get_completion(BackendPrompt(text="Hi", backend_context=""), channel)

    events = channel.drain()
    assert [(e.text, e.done) for e in events[:-1]] == [("Hello ", False), ("World", False)]
    final = events[-1]
    assert final.done and final.text == ""
    assert json.loads(final.context) == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello World"},
    ]


@pytest.mark.asyncio
async def test_request_shape_url_and_auth_header():
    rec = Recorder(_body(SCENARIO_LINES))
    await _backend(rec).get_completion(BackendPrompt(text="Hi"), EventChannel())

    req = rec.requests[0]
    assert req.method == "POST"
    assert str(req.url) == (
        "https://example.openai.azure.com/openai/deployments/chat/chat/completions"
        "?api-version=2023-05-15"
    )
    assert req.headers["api-key"] == "abc"
    assert "authorization" not in req.headers
    assert rec.sent_json() == {
        "model": "gpt-35-turbo",
        "messages": [{"role": "user", "content": "Hi"}],
        "stream": True,
    }


@pytest.mark.asyncio
async def test_context_round_trips_into_next_request():
    rec = Recorder(_body(SCENARIO_LINES))
    backend = _backend(rec)
    prior = json.dumps([{"role": "assistant", "content": "How may I help you?"}])

    first = EventChannel()
    await backend.get_completion(BackendPrompt(text="Say hi", backend_context=prior), first)
    ctx = first.drain()[-1].context

    await backend.get_completion(BackendPrompt(text="Again", backend_context=ctx), EventChannel())

    assert rec.sent_json(-1)["messages"] == [
        {"role": "assistant", "content": "How may I help you?"},
        {"role": "user", "content": "Say hi"},
        {"role": "assistant", "content": "Hello World"},
        {"role": "user", "content": "Again"},
    ]


@pytest.mark.asyncio
async def test_stream_close_without_sentinel_still_terminates():
    rec = Recorder(_body(SCENARIO_LINES[:2]))
    channel = EventChannel()
    await _backend(rec).get_completion(BackendPrompt(text="Hi"), channel)
    events = channel.drain()
    assert sum(e.done for e in events) == 1
    assert json.loads(events[-1].context)[-1]["content"] == "Hello World"


@pytest.mark.asyncio
async def test_sentinel_stops_reading_remaining_bytes():
    pulled = []

    def body():
        async def gen():
            for part in (_body(SCENARIO_LINES) + b"\n", b"data: {garbage\n", b"data: more garbage\n"):
                pulled.append(part)
                yield part
        return gen()

    rec = Recorder(body)
    channel = EventChannel()
    await _backend(rec).get_completion(BackendPrompt(text="Hi"), channel)
    assert channel.drain()[-1].done
    assert len(pulled) == 1


@pytest.mark.asyncio
async def test_azure_filter_chunk_and_keepalives_are_ignored():
    lines = [
        'data: {"choices":[],"prompt_filter_results":[{"prompt_index":0}]}',
        "",
        'data: {"choices":[{"delta":{"role":"assistant"}}]}',
        'data: {"choices":[{"delta":{"content":"ok"}}]}',
        "",
        "data: [DONE]",
    ]
    channel = EventChannel()
    await _backend(Recorder(_body(lines))).get_completion(BackendPrompt(text="Hi"), channel)
    events = channel.drain()
    assert [e.text for e in events if not e.done] == ["ok"]


@pytest.mark.asyncio
async def test_http_500_fails_with_zero_events():
    channel = EventChannel()
    with pytest.raises(TransportError) as ei:
        await _backend(Recorder(b"oops", status=500)).get_completion(BackendPrompt(text="Hi"), channel)
    assert ei.value.status_code == 500
    assert channel.drain() == []


@pytest.mark.asyncio
async def test_malformed_line_is_fatal_and_keeps_partial_fragments():
    lines = [SCENARIO_LINES[0], "data: {broken", SCENARIO_LINES[1], "data: [DONE]"]
    channel = EventChannel()
    with pytest.raises(DecodeError):
        await _backend(Recorder(_body(lines))).get_completion(BackendPrompt(text="Hi"), channel)
    events = channel.drain()
    assert [e.text for e in events] == ["Hello "]
    assert not any(e.done for e in events)


@pytest.mark.asyncio
async def test_malformed_line_skip_policy_continues():
    lines = [SCENARIO_LINES[0], "data: {broken", SCENARIO_LINES[1], "data: [DONE]"]
    backend = _backend(Recorder(_body(lines)), SETTINGS.with_overrides(on_malformed="skip"))
    channel = EventChannel()
    await backend.get_completion(BackendPrompt(text="Hi"), channel)
    assert json.loads(channel.drain()[-1].context)[-1]["content"] == "Hello World"


@pytest.mark.asyncio
async def test_closed_receiver_raises_delivery_error():
    channel = EventChannel()
    channel.close()
    with pytest.raises(DeliveryError):
        await _backend(Recorder(_body(SCENARIO_LINES))).get_completion(BackendPrompt(text="Hi"), channel)


@pytest.mark.asyncio
async def test_bad_prior_context_fails_before_network():
    rec = Recorder(_body(SCENARIO_LINES))
    with pytest.raises(DecodeError):
        await _backend(rec).get_completion(BackendPrompt(text="Hi", backend_context="{nope"), EventChannel())
    assert rec.requests == []


@pytest.mark.asyncio
async def test_name_and_models():
    backend = _backend(Recorder())
    assert backend.name() is BackendName.AZUREAI
    assert await backend.list_models() == ["gpt-35-turbo"]
    assert await _backend(Recorder(), SETTINGS.with_overrides(model="")).list_models() == ["gpt-35-turbo"]
