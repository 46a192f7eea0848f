"""
Narrative service: prompt building plus generator call, failure-tolerant.

Generation is optional decoration on top of computed results. The service
never raises to its caller: any transport, credential or parsing failure is
logged and replaced by a fixed placeholder text (or ``None`` for the
structured history analysis).
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from sales_oracle.models.comparison import ComparisonResult, HistoryTrendReport
from sales_oracle.models.narrative import HistoryNarrative
from sales_oracle.models.oracle import OracleData
from sales_oracle.narrative.base import NarrativeGenerator, NarrativeUnavailableError
from sales_oracle.narrative.prompts import (
    DIAGNOSIS_SYSTEM,
    HISTORY_ANALYSIS_SCHEMA,
    HISTORY_SYSTEM,
    build_comparison_prompt,
    build_executive_prompt,
    build_history_prompt,
)

logger = logging.getLogger(__name__)

EXECUTIVE_FALLBACK = "Erro ao processar análise estratégica."
DIAGNOSIS_FALLBACK = (
    "Erro ao processar o diagnóstico estratégico. Verifique sua conexão ou "
    "tente novamente mais tarde."
)
UNAVAILABLE_TEXT = "Análise estratégica indisponível: geração de narrativa não configurada."

_GENERATION_ERRORS = (
    httpx.HTTPError,
    NarrativeUnavailableError,
    ValueError,
    KeyError,
    TypeError,
)


class NarrativeService:
    """Turns computed results into narrative text through a generator.

    Args:
        generator: Any ``NarrativeGenerator``; ``None`` means narration is
            not configured and every call returns its placeholder.
    """

    def __init__(self, generator: Optional[NarrativeGenerator]) -> None:
        self.generator = generator

    def executive_analysis(self, result: OracleData) -> str:
        """Markdown executive reading of one processed period."""
        if self.generator is None:
            return UNAVAILABLE_TEXT
        if not result.ok:
            return EXECUTIVE_FALLBACK
        try:
            return self.generator.summarize(build_executive_prompt(result))
        except _GENERATION_ERRORS as exc:
            logger.warning("Executive analysis failed: %s", exc)
            return EXECUTIVE_FALLBACK

    def strategic_diagnosis(self, comparison: ComparisonResult) -> str:
        """Six-block diagnosis of a base-vs-current comparison."""
        if self.generator is None:
            return UNAVAILABLE_TEXT
        if comparison.error is not None:
            return DIAGNOSIS_FALLBACK
        try:
            return self.generator.summarize(
                build_comparison_prompt(comparison), system=DIAGNOSIS_SYSTEM
            )
        except _GENERATION_ERRORS as exc:
            logger.warning("Strategic diagnosis failed: %s", exc)
            return DIAGNOSIS_FALLBACK

    def history_analysis(self, report: HistoryTrendReport) -> Optional[HistoryNarrative]:
        """Structured internal + executive history reading, or ``None`` on failure."""
        if self.generator is None or report.error is not None or not report.points:
            return None
        try:
            raw = self.generator.summarize_structured(
                build_history_prompt(report),
                HISTORY_ANALYSIS_SCHEMA,
                system=HISTORY_SYSTEM,
            )
            return HistoryNarrative.model_validate(raw)
        except ValidationError as exc:
            logger.warning(
                "History analysis response failed validation (%d error(s))", exc.error_count()
            )
            return None
        except _GENERATION_ERRORS as exc:
            logger.warning("History analysis failed: %s", exc)
            return None
