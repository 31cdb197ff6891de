from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from lead_finder.analysis import llm_client
from lead_finder.analysis.llm_client import LLMError, llm_complete


def _patch(monkeypatch, anthropic=None, openai=None):
    calls = []

    async def fake_anthropic(prompt, api_key, model, max_tokens):
        calls.append("anthropic")
        if isinstance(anthropic, Exception):
            raise anthropic
        return anthropic

    async def fake_openai(prompt, api_key, model, max_tokens):
        calls.append("openai")
        return openai

    monkeypatch.setattr(llm_client, "_call_anthropic", fake_anthropic)
    monkeypatch.setattr(llm_client, "_call_openai", fake_openai)
    return calls


def test_anthropic_is_primary(monkeypatch):
    calls = _patch(monkeypatch, anthropic="from claude", openai="from gpt")
    assert asyncio.run(llm_complete("p", "ant-key", "oai-key")) == "from claude"
    assert calls == ["anthropic"]


def test_falls_back_to_openai(monkeypatch):
    calls = _patch(monkeypatch, anthropic=RuntimeError("overloaded"), openai="from gpt")
    assert asyncio.run(llm_complete("p", "ant-key", "oai-key")) == "from gpt"
    assert calls == ["anthropic", "openai"]


def test_openai_only(monkeypatch):
    calls = _patch(monkeypatch, openai="from gpt")
    assert asyncio.run(llm_complete("p", "", "oai-key")) == "from gpt"
    assert calls == ["openai"]


def test_anthropic_error_without_fallback_propagates(monkeypatch):
    _patch(monkeypatch, anthropic=RuntimeError("overloaded"))
    with pytest.raises(RuntimeError, match="overloaded"):
        asyncio.run(llm_complete("p", "ant-key", ""))


def test_no_keys(monkeypatch):
    _patch(monkeypatch)
    with pytest.raises(LLMError):
        asyncio.run(llm_complete("p", "", ""))


class _FakeSDKClient:
    """Stands in for AsyncAnthropic / AsyncOpenAI and records its lifecycle."""

    instances: list[_FakeSDKClient] = []

    def __init__(self, api_key, reply):
        self.api_key = api_key
        self.closed = False
        self._reply = reply
        self.messages = self
        self.chat = self
        self.completions = self
        _FakeSDKClient.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    async def create(self, **kwargs):
        return self._reply


@pytest.fixture
def sdk_clients():
    _FakeSDKClient.instances = []
    return _FakeSDKClient.instances


def test_anthropic_client_is_closed(monkeypatch, sdk_clients):
    import anthropic

    reply = SimpleNamespace(content=[
        SimpleNamespace(type="thinking", text="ignored"),
        SimpleNamespace(type="text", text='{"leads": []}'),
    ])
    monkeypatch.setattr(anthropic, "AsyncAnthropic", lambda api_key: _FakeSDKClient(api_key, reply))

    text = asyncio.run(llm_client._call_anthropic("p", "ant-key", "claude", 100))

    assert text == '{"leads": []}'
    assert [c.closed for c in sdk_clients] == [True]


def test_openai_client_is_closed(monkeypatch, sdk_clients):
    import openai

    reply = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="hello"))])
    monkeypatch.setattr(openai, "AsyncOpenAI", lambda api_key: _FakeSDKClient(api_key, reply))

    assert asyncio.run(llm_client._call_openai("p", "oai-key", "gpt", 100)) == "hello"
    assert [c.closed for c in sdk_clients] == [True]


def test_empty_openai_reply_raises_and_closes(monkeypatch, sdk_clients):
    import openai

    reply = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=""))])
    monkeypatch.setattr(openai, "AsyncOpenAI", lambda api_key: _FakeSDKClient(api_key, reply))

    with pytest.raises(LLMError):
        asyncio.run(llm_client._call_openai("p", "oai-key", "gpt", 100))
    assert sdk_clients[0].closed
