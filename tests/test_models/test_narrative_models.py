"""Tests for the structured history narrative models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from sales_oracle.models.narrative import HistoryNarrative
from sales_oracle.taxonomy.classification import AlertLevel


def _payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "classificacao_ciclo": "Sustentável",
        "nivel_alerta": "saudavel",
        "score_atual": 91.5,
        "dependencia_atual": 48.0,
        "indice_risco_estrutural": 12.0,
        "indice_consistencia": 88.0,
        "projecao_proximo_ciclo": 93.0,
        "interno": {
            "status_ciclo": "a",
            "tendencia_score": "b",
            "raio_x_pilares": "c",
            "evolucao_dependencia": "d",
            "maturidade_operacional": "e",
            "conclusao_estrategica": "f",
            "frase_final": "g",
        },
        "executivo": {
            "situacao": "a",
            "causa_principal": "b",
            "risco": "c",
            "acao_imediata": "d",
            "frase_final": "e",
        },
    }
    payload.update(overrides)
    return payload


class TestHistoryNarrative:
    def test_valid(self):
        narrative = HistoryNarrative.model_validate(_payload())
        assert narrative.nivel_alerta == AlertLevel.SAUDAVEL
        assert narrative.executivo.acao_imediata == "d"

    def test_unknown_alert_level(self):
        with pytest.raises(ValidationError):
            HistoryNarrative.model_validate(_payload(nivel_alerta="vermelho"))

    @pytest.mark.parametrize("field", ["indice_risco_estrutural", "indice_consistencia"])
    def test_index_out_of_range(self, field):
        with pytest.raises(ValidationError, match=r"\[0, 100\]"):
            HistoryNarrative.model_validate(_payload(**{field: 120}))

    def test_missing_section(self):
        payload = _payload()
        del payload["interno"]
        with pytest.raises(ValidationError):
            HistoryNarrative.model_validate(payload)

    def test_serialises_camel_case(self):
        dumped = HistoryNarrative.model_validate(_payload()).to_json_dict()
        assert dumped["nivelAlerta"] == "saudavel"
        assert "conclusaoEstrategica" in dumped["interno"]
