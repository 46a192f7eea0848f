"""
Boundary between the deterministic engine and hosted text generation.

Anything that turns a prompt into prose can back the narrative service, as
long as it follows ``NarrativeGenerator``. Tests use in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class NarrativeUnavailableError(RuntimeError):
    """Raised when a generator cannot run (no API key, disabled in config)."""


class NarrativeGenerator(Protocol):
    def summarize(self, prompt: str, system: Optional[str] = None) -> str:
        """Return free text for ``prompt``."""
        ...

    def summarize_structured(
        self,
        prompt: str,
        schema: dict[str, Any],
        system: Optional[str] = None,
    ) -> dict[str, Any]:
        """Return a JSON object shaped like ``schema``."""
        ...
