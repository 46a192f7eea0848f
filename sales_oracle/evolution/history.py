"""
Long-horizon history: chart series plus consolidated indices.

Series
------
Saved records are sorted chronologically (week start, else day, else first of
the month). The in-progress snapshot is appended as ``"current"`` unless a
saved record already covers the same window (same type and same date /
start+end / month+year).

Each point carries the penalised store score, the pillar reals/metas/ICMs and
the dependency: top-2 sellers' mercantil over the store's (as %).

Three-point trend rule
----------------------
    fewer than 3 points                          → "Volátil/Estável"
    s1 < s2 < s3 and s3 - s1 >= min_swing        → "Tendência de Alta"
    s1 > s2 > s3 and s1 - s3 >= min_swing        → "Tendência de Queda"
    otherwise                                    → "Volátil/Estável"

This is intentionally a different rule from the per-period run trend in
``sales_oracle.processing.intelligence``.

Consolidated indices (0–100)
----------------------------
consistency:
    100 - 2 * mean(|score_i - score_{i-1}|); 100 with a single cycle.
structural_risk:
    min(40, max(0, dependency - 40))            # concentration above 40%
    + min(30, 10 * pillars_with_icm_below_85)   # weak pillars
    + min(30, (100 - consistency) * 0.3)        # volatility
next_cycle_projection:
    last + (last - previous), never beyond the 0–100 score range.
cycle / alert:
    < 75 Instável / critico,  <= 85 Em Recuperação / atencao,
    <= 95 Sustentável / saudavel,  > 95 Em Expansão / saudavel.
"""

from __future__ import annotations

import logging
from statistics import fmean
from typing import Optional, Sequence

from sales_oracle.models.comparison import HistoryPoint, HistoryTrendReport
from sales_oracle.models.history import HistoryRecord
from sales_oracle.models.oracle import OracleData
from sales_oracle.processing.labels import generate_period_label
from sales_oracle.scoring.engine import store_score, top2_mercantil_share
from sales_oracle.scoring.formulas import clamp, icm
from sales_oracle.taxonomy.classification import (
    AlertLevel,
    CycleClassification,
    HistoryTrend,
    PillarName,
)

logger = logging.getLogger(__name__)

CURRENT_ID = "current"
HISTORY_ERROR = "Não foi possível consolidar o histórico da unidade."
DEFAULT_MIN_SWING = 5.0

DEPENDENCY_RISK_FLOOR = 40.0
PILLAR_RISK_FLOOR = 85.0


# ── Series ────────────────────────────────────────────────────────────────────


def build_history_point(period_id: str, data: OracleData) -> HistoryPoint:
    """Chart point for one snapshot, re-scored from its raw numbers."""
    store = data.store
    pillars = store.pillars
    return HistoryPoint(
        period_id=period_id,
        label=generate_period_label(store.period),
        score=store_score(store, data.sellers),
        mercantil_real=pillars.mercantil.realized,
        mercantil_meta=pillars.mercantil.meta,
        cdc_real=pillars.cdc.realized,
        cdc_meta=pillars.cdc.meta,
        services_real=pillars.services.realized,
        services_meta=pillars.services.meta,
        dependency=top2_mercantil_share(store, data.sellers) * 100.0,
        mercantil_icm=icm(pillars.mercantil.realized, pillars.mercantil.meta),
        cdc_icm=icm(pillars.cdc.realized, pillars.cdc.meta),
        services_icm=icm(pillars.services.realized, pillars.services.meta),
    )


def sort_records(records: Sequence[HistoryRecord]) -> list[HistoryRecord]:
    """Records oldest first; ties keep their given order."""
    return sorted(records, key=lambda r: r.dados.store.period.sort_key())


def is_redundant(records: Sequence[HistoryRecord], current: OracleData) -> bool:
    """True when a saved record already covers ``current``'s window."""
    period = current.store.period
    return any(r.dados.store.period.same_window_as(period) for r in records)


def build_history_points(
    records: Sequence[HistoryRecord],
    current: Optional[OracleData] = None,
) -> list[HistoryPoint]:
    """Chronological chart series, with the unsaved current data appended."""
    ordered = sort_records(records)
    points = [build_history_point(r.id, r.dados) for r in ordered]
    if current is not None and not is_redundant(ordered, current):
        points.append(build_history_point(CURRENT_ID, current))
    return points


# ── Trend and indices ─────────────────────────────────────────────────────────


def classify_history_trend(
    values: Sequence[float],
    min_swing: float = DEFAULT_MIN_SWING,
) -> HistoryTrend:
    """Three-point trend over the last three values of ``values``."""
    if len(values) < 3:
        return HistoryTrend.VOLATIL
    s1, s2, s3 = values[-3:]
    if s1 < s2 < s3 and s3 - s1 >= min_swing:
        return HistoryTrend.ALTA
    if s1 > s2 > s3 and s1 - s3 >= min_swing:
        return HistoryTrend.QUEDA
    return HistoryTrend.VOLATIL


def consistency_index(scores: Sequence[float]) -> float:
    if len(scores) < 2:
        return 100.0
    mean_change = fmean(abs(b - a) for a, b in zip(scores, scores[1:]))
    return clamp(100.0 - 2.0 * mean_change, 0.0, 100.0)


def structural_risk_index(
    dependency: float,
    pillar_icms: Sequence[float],
    consistency: float,
) -> float:
    """Fragility of the operation from concentration, weak pillars and volatility.

    Args:
        dependency:  Latest top-2 mercantil share (%).
        pillar_icms: Latest ICM of each pillar.
        consistency: ``consistency_index`` of the score series.
    """
    concentration = min(40.0, max(0.0, dependency - DEPENDENCY_RISK_FLOOR))
    weak_pillars = min(30.0, 10.0 * sum(1 for v in pillar_icms if v < PILLAR_RISK_FLOOR))
    volatility = min(30.0, (100.0 - consistency) * 0.3)
    return clamp(concentration + weak_pillars + volatility, 0.0, 100.0)


def project_next_cycle(scores: Sequence[float]) -> float:
    if not scores:
        return 0.0
    if len(scores) == 1:
        return scores[-1]
    return clamp(scores[-1] + (scores[-1] - scores[-2]), 0.0, 100.0)


def classify_cycle(score: float) -> CycleClassification:
    if score < 75:
        return CycleClassification.INSTAVEL
    if score <= 85:
        return CycleClassification.EM_RECUPERACAO
    if score <= 95:
        return CycleClassification.SUSTENTAVEL
    return CycleClassification.EM_EXPANSAO


def classify_alert(score: float) -> AlertLevel:
    if score < 75:
        return AlertLevel.CRITICO
    if score <= 85:
        return AlertLevel.ATENCAO
    return AlertLevel.SAUDAVEL


# ── Entry point ───────────────────────────────────────────────────────────────


def analyze_history(
    records: Sequence[HistoryRecord],
    current: Optional[OracleData] = None,
    *,
    min_swing: float = DEFAULT_MIN_SWING,
) -> HistoryTrendReport:
    """Build the long-horizon report for one store and granularity.

    Args:
        records:   Saved records (any order).
        current:   Unsaved in-progress snapshot, appended when not redundant.
        min_swing: Minimum first-to-last change for the three-point trend.

    Returns:
        ``HistoryTrendReport``; ``error`` is set instead of raising when the
        report cannot be computed.
    """
    try:
        points = build_history_points(records, current)
        if not points:
            return HistoryTrendReport(
                score_trend=HistoryTrend.VOLATIL.value,
                dependency_trend=HistoryTrend.VOLATIL.value,
            )

        scores = [p.score for p in points]
        dependencies = [p.dependency for p in points]
        series = {
            PillarName.MERCANTIL.value: [p.mercantil_icm for p in points],
            PillarName.CDC.value: [p.cdc_icm for p in points],
            PillarName.SERVICES.value: [p.services_icm for p in points],
        }
        latest = points[-1]
        consistency = consistency_index(scores)

        report = HistoryTrendReport(
            points=tuple(points),
            score_trend=classify_history_trend(scores, min_swing).value,
            dependency_trend=classify_history_trend(dependencies, min_swing).value,
            pillar_trends={
                name: classify_history_trend(values, min_swing).value
                for name, values in series.items()
            },
            average_score=fmean(scores),
            average_dependency=fmean(dependencies),
            average_icm={name: fmean(values) for name, values in series.items()},
            current_score=latest.score,
            current_dependency=latest.dependency,
            consistency_index=consistency,
            structural_risk_index=structural_risk_index(
                latest.dependency,
                (latest.mercantil_icm, latest.cdc_icm, latest.services_icm),
                consistency,
            ),
            next_cycle_projection=project_next_cycle(scores),
            cycle_classification=classify_cycle(latest.score).value,
            alert_level=classify_alert(latest.score).value,
        )
    except Exception:
        logger.exception("Failed to analyze history (%d record(s))", len(records))
        return HistoryTrendReport(error=HISTORY_ERROR)

    logger.info(
        "History report: %d point(s), score trend '%s', cycle '%s'",
        len(report.points), report.score_trend, report.cycle_classification,
    )
    return report
