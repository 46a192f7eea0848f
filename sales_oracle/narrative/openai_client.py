"""
Chat-completions client for OpenAI-compatible endpoints.

Endpoint::

    POST {base_url}/chat/completions
      → Auth:  Bearer <api key>
      → Body:  {"model", "messages": [system, user], "temperature", "max_tokens"}
      → Structured calls add ``response_format = {"type": "json_object"}`` and
        append the JSON schema to the system message.

Credential setup (.env, gitignored)::

    OPENAI_API_KEY=sk-...

The variable name is configurable through ``narrative.api_key_env``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from sales_oracle.config import NarrativeConfig
from sales_oracle.narrative.base import NarrativeUnavailableError
from sales_oracle.narrative.prompts import DEFAULT_SYSTEM

logger = logging.getLogger(__name__)


class OpenAINarrativeGenerator:
    """``NarrativeGenerator`` backed by a chat-completions API.

    Usage::

        generator = OpenAINarrativeGenerator.from_config(config.narrative)
        text = generator.summarize(build_executive_prompt(result))

    Pass ``client`` to reuse a connection pool or, in tests, an
    ``httpx.Client`` mounted on ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.6,
        max_tokens: int = 1200,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key:
            raise NarrativeUnavailableError("An API key is required for narrative generation.")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        self._client = client

    @classmethod
    def from_config(
        cls,
        config: NarrativeConfig,
        client: Optional[httpx.Client] = None,
    ) -> "OpenAINarrativeGenerator":
        """Build a generator from config, reading the key from the environment.

        Raises:
            NarrativeUnavailableError: If narrative generation is disabled or
                the API key variable is unset.
        """
        if not config.enabled:
            raise NarrativeUnavailableError("Narrative generation is disabled in config.")
        api_key = config.api_key()
        if api_key is None:
            raise NarrativeUnavailableError(
                f"{config.api_key_env} must be set in the environment or .env."
            )
        return cls(
            api_key=api_key,
            base_url=config.base_url,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout_seconds=config.timeout_seconds,
            client=client,
        )

    # ── NarrativeGenerator ─────────────────────────────────────────────────────

    def summarize(self, prompt: str, system: Optional[str] = None) -> str:
        """Return the model's text answer for ``prompt``.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
            ValueError: If the response carries no message content.
        """
        return self._complete(prompt, system or DEFAULT_SYSTEM)

    def summarize_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        system: Optional[str] = None,
    ) -> dict[str, Any]:
        """Return the model's JSON answer for ``prompt`` as a dict.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
            ValueError: If the content is missing or is not a JSON object.
        """
        instructions = (
            f"{system or DEFAULT_SYSTEM}\n\n"
            "Responda somente com um objeto JSON que siga este esquema:\n"
            f"{json.dumps(schema, ensure_ascii=False)}"
        )
        content = self._complete(prompt, instructions, json_mode=True)
        parsed = json.loads(content)
        if not isinstance(parsed, dict):
            raise ValueError("Structured narrative response is not a JSON object.")
        return parsed

    # ── HTTP ───────────────────────────────────────────────────────────────────

    def _complete(self, prompt: str, system: str, json_mode: bool = False) -> str:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        resp = self._post(f"{self.base_url}/chat/completions", payload)
        resp.raise_for_status()
        return self._parse_content(resp.json())

    def _post(self, url: str, payload: dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        logger.debug("POST %s (model=%s)", url, self.model)
        if self._client is not None:
            return self._client.post(
                url, json=payload, headers=headers, timeout=self.timeout_seconds
            )
        with httpx.Client(timeout=self.timeout_seconds) as client:
            return client.post(url, json=payload, headers=headers)

    @staticmethod
    def _parse_content(data: Any) -> str:
        choices = data.get("choices") if isinstance(data, dict) else None
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content or not isinstance(content, str):
            raise ValueError("Narrative response carried no message content.")
        return content
