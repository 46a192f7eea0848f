"""
Classification vocabularies used across the scoring engine and reports.

Every label the engine emits is a ``StrEnum`` member so that:
  - tier boundaries are defined once, next to the label they produce;
  - JSON output carries the plain Portuguese label (``StrEnum`` serialises as
    its value);
  - tests can compare against enum members instead of retyping accented text.

Tier families:
  - ``HealthTier``      — store health index (5 tiers, top-down ≥90/80/70/60).
  - ``SellerTier``      — seller score (same thresholds, seller-specific labels).
  - ``DependencyLevel`` — top-1 score share of the team.
  - ``MaturityLevel``   — share of sellers at/above 100.
  - ``ProjectionProbability`` — chance of closing the period on target.
  - ``EvolutionStatus`` — period-over-period store score movement.
  - ``RunTrend`` / ``HistoryTrend`` — the two (intentionally separate) trend
    vocabularies of the per-period intelligence block and the long-horizon
    history chart.
  - ``CycleClassification`` / ``AlertLevel`` — consolidated history reading.
  - ``FeedbackType``    — seller feedback template families.

This module has NO imports from any other ``sales_oracle`` package.
"""

from enum import StrEnum


class PeriodType(StrEnum):
    """Granularity of a reporting window."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"
    """Free date range; can be processed and compared but never saved to history."""


class PillarName(StrEnum):
    """Display names of the three weighted pillars."""

    MERCANTIL = "Mercantil"
    CDC = "CDC"
    SERVICES = "Services"


class HealthTier(StrEnum):
    """Store health classification."""

    ALTA_PERFORMANCE = "Alta Performance Sustentável"
    """Index ≥ 90."""

    PERFORMANCE_COMPETITIVA = "Performance Competitiva"
    """Index ≥ 80."""

    ZONA_DE_ATENCAO = "Zona de Atenção"
    """Index ≥ 70."""

    PRESSAO_ESTRUTURAL = "Pressão Estrutural"
    """Index ≥ 60."""

    RISCO_CRITICO = "Risco Crítico"
    """Everything below 60, including negative/degenerate inputs."""


class SellerTier(StrEnum):
    """Seller score classification."""

    ELITE = "Elite"
    ALTO_CONTRIBUIDOR = "Alto Contribuidor"
    PARCIAL = "Parcial"
    OSCILANTE = "Oscilante"
    RISCO = "Risco"


class DependencyLevel(StrEnum):
    """How much of the team's total score the top seller holds."""

    CRITICA = "Crítica"
    """Top-1 share > 40%."""

    ALTA = "Alta"
    """Top-1 share > 30%."""

    MODERADA = "Moderada"
    """Top-1 share > 20%."""

    SAUDAVEL = "Saudável"


class MaturityLevel(StrEnum):
    """Team maturity by share of sellers scoring at/above 100."""

    ALTA = "Alta Maturidade"
    MODERADA = "Maturidade Moderada"
    BAIXA = "Baixa Maturidade"


class ProjectionProbability(StrEnum):
    """Likelihood of closing the period on target, from the projected composite ICM."""

    ALTA = "Alta"
    MEDIA = "Média"
    BAIXA = "Baixa"
    PLANEJAMENTO = "Planejamento"
    """Period configured but no business day elapsed yet."""

    DADOS_INSUFICIENTES = "Dados insuficientes"
    """Period has no business days configured."""


class EvolutionStatus(StrEnum):
    """Store score movement between a base and a current period."""

    EVOLUCAO = "Evolução"
    ESTAVEL = "Estável"
    REGRESSAO = "Regressão"


class RunTrend(StrEnum):
    """Trend over a short window of prior periods plus the current one."""

    ALTA = "Tendência de alta consistente."
    RETRACAO = "Tendência de retração recorrente."
    VOLATIL = "Volatilidade no desempenho."
    INSUFICIENTE = "Dados insuficientes"


class HistoryTrend(StrEnum):
    """Trend over the last three points of a long-horizon series."""

    ALTA = "Tendência de Alta"
    QUEDA = "Tendência de Queda"
    VOLATIL = "Volátil/Estável"


class CycleClassification(StrEnum):
    """Consolidated reading of the latest cycle score."""

    INSTAVEL = "Instável"
    EM_RECUPERACAO = "Em Recuperação"
    SUSTENTAVEL = "Sustentável"
    EM_EXPANSAO = "Em Expansão"


class AlertLevel(StrEnum):
    """Alert colour attached to the consolidated history reading."""

    CRITICO = "critico"
    ATENCAO = "atencao"
    SAUDAVEL = "saudavel"


class AlertType(StrEnum):
    """Store-level comparison alert families."""

    PILLAR_REGRESSION = "A"
    """A pillar's realized value fell 5% or more."""

    CONCENTRATION = "C"
    """Top-2 sellers hold more than 30% of the mercantil result."""


class FeedbackType(StrEnum):
    """Seller feedback template families."""

    AUTOMATICO = "Automatico"
    """Block set chosen from the seller's pillar ICM pattern."""

    RECONHECIMENTO = "Reconhecimento"
    CORRETIVO = "Corretivo"
    AJUSTE_DE_ROTA = "Ajuste de Rota"
    """Names the seller's weakest pillar."""

    DESENVOLVIMENTO = "Desenvolvimento"
