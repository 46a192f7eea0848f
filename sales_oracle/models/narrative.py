"""
Structured response of the consolidated history analysis.

The hosted model returns snake_case Portuguese keys; they are accepted as-is
and re-serialised in camelCase like every other engine model. Free-text
fields are display content only and never feed any calculation.
"""

from __future__ import annotations

from pydantic import field_validator

from sales_oracle.models.base import Number, OracleModel
from sales_oracle.taxonomy.classification import AlertLevel


class InternalReport(OracleModel):
    """Technical reading for the store's own management."""

    status_ciclo: str
    tendencia_score: str
    raio_x_pilares: str
    evolucao_dependencia: str
    maturidade_operacional: str
    conclusao_estrategica: str
    frase_final: str


class ExecutiveReport(OracleModel):
    """Short decision-oriented reading for regional leadership."""

    situacao: str
    causa_principal: str
    risco: str
    acao_imediata: str
    frase_final: str


class HistoryNarrative(OracleModel):
    classificacao_ciclo: str
    nivel_alerta: AlertLevel
    score_atual: Number
    dependencia_atual: Number
    indice_risco_estrutural: Number
    indice_consistencia: Number
    projecao_proximo_ciclo: Number
    interno: InternalReport
    executivo: ExecutiveReport

    @field_validator("indice_risco_estrutural", "indice_consistencia")
    @classmethod
    def validate_index_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"index must be in [0, 100], got {v}.")
        return v
