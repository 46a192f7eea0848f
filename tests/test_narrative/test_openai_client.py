"""
Tests for sales_oracle/narrative/openai_client.py.

All HTTP traffic goes through ``httpx.MockTransport``; nothing leaves the
process.

What we test
------------
  - Request shape: URL, bearer header, model, messages, sampling params.
  - Structured calls add ``response_format`` and the schema to the system
    message, and parse the JSON content.
  - Non-2xx responses raise ``httpx.HTTPStatusError``.
  - Empty or malformed replies and non-object JSON raise ``ValueError``.
  - ``from_config`` refuses when disabled or when the key is missing.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from sales_oracle.config import NarrativeConfig
from sales_oracle.narrative.base import NarrativeUnavailableError
from sales_oracle.narrative.openai_client import OpenAINarrativeGenerator
from sales_oracle.narrative.prompts import DEFAULT_SYSTEM


# ── Helpers ────────────────────────────────────────────────────────────────────

def _completion(content: Any) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _generator(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs: Any,
) -> OpenAINarrativeGenerator:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAINarrativeGenerator(api_key="sk-test", client=client, **kwargs)


class _Recorder:
    """MockTransport handler that records requests and replies with ``content``."""

    def __init__(self, content: Any = "ok", status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=_completion(self.content))

    @property
    def body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


# ── Tests ──────────────────────────────────────────────────────────────────────

class TestSummarize:
    def test_request_shape(self):
        recorder = _Recorder("Leitura executiva")
        gen = _generator(recorder, base_url="https://llm.local/v1/", model="m-1", temperature=0.2)
        assert gen.summarize("prompt") == "Leitura executiva"

        request = recorder.requests[0]
        assert str(request.url) == "https://llm.local/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = recorder.body
        assert body["model"] == "m-1"
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 1200
        assert body["messages"] == [
            {"role": "system", "content": DEFAULT_SYSTEM},
            {"role": "user", "content": "prompt"},
        ]
        assert "response_format" not in body

    def test_custom_system(self):
        recorder = _Recorder()
        _generator(recorder).summarize("prompt", system="Sistema X")
        assert recorder.body["messages"][0]["content"] == "Sistema X"

    def test_http_error(self):
        gen = _generator(_Recorder(status_code=500))
        with pytest.raises(httpx.HTTPStatusError):
            gen.summarize("prompt")

    def test_empty_content(self):
        gen = _generator(_Recorder(content=None))
        with pytest.raises(ValueError, match="no message content"):
            gen.summarize("prompt")

    def test_no_choices(self):
        gen = _generator(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(ValueError):
            gen.summarize("prompt")

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": ["texto solto"]},
            {"choices": [{"message": "texto solto"}]},
            {"choices": "texto solto"},
            ["texto solto"],
        ],
    )
    def test_malformed_reply(self, body):
        gen = _generator(lambda request: httpx.Response(200, json=body))
        with pytest.raises(ValueError, match="no message content"):
            gen.summarize("prompt")

    def test_non_text_content(self):
        gen = _generator(_Recorder(content=[{"type": "text", "text": "oi"}]))
        with pytest.raises(ValueError, match="no message content"):
            gen.summarize("prompt")


class TestSummarizeStructured:
    def test_json_mode_and_schema(self):
        recorder = _Recorder(json.dumps({"score_atual": 91.0}))
        schema = {"type": "object", "properties": {"score_atual": {"type": "number"}}}
        result = _generator(recorder).summarize_structured("prompt", schema, system="Base")

        assert result == {"score_atual": 91.0}
        body = recorder.body
        assert body["response_format"] == {"type": "json_object"}
        system = body["messages"][0]["content"]
        assert system.startswith("Base\n\n")
        assert '"score_atual"' in system

    def test_non_object_json(self):
        gen = _generator(_Recorder(json.dumps([1, 2, 3])))
        with pytest.raises(ValueError, match="not a JSON object"):
            gen.summarize_structured("prompt", {})

    def test_invalid_json(self):
        gen = _generator(_Recorder("isto não é json"))
        with pytest.raises(ValueError):
            gen.summarize_structured("prompt", {})


class TestConstruction:
    def test_empty_key_refused(self):
        with pytest.raises(NarrativeUnavailableError):
            OpenAINarrativeGenerator(api_key="")

    def test_from_config(self, monkeypatch):
        monkeypatch.setenv("ORACLE_TEST_KEY", "sk-env")
        config = NarrativeConfig(api_key_env="ORACLE_TEST_KEY", model="m-2", max_tokens=50)
        gen = OpenAINarrativeGenerator.from_config(config)
        assert gen.api_key == "sk-env"
        assert gen.model == "m-2"
        assert gen.max_tokens == 50

    def test_from_config_missing_key(self, monkeypatch):
        monkeypatch.delenv("ORACLE_TEST_KEY", raising=False)
        with pytest.raises(NarrativeUnavailableError, match="ORACLE_TEST_KEY"):
            OpenAINarrativeGenerator.from_config(NarrativeConfig(api_key_env="ORACLE_TEST_KEY"))

    def test_from_config_disabled(self, monkeypatch):
        monkeypatch.setenv("ORACLE_TEST_KEY", "sk-env")
        config = NarrativeConfig(enabled=False, api_key_env="ORACLE_TEST_KEY")
        with pytest.raises(NarrativeUnavailableError, match="disabled"):
            OpenAINarrativeGenerator.from_config(config)
