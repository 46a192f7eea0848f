"""
Report models for period-over-period comparison and long-horizon history.

Neither report is persisted: both are recomputed on demand from snapshots.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from sales_oracle.models.base import Number, OracleModel


class PillarComparison(OracleModel):
    """Base (A) vs current (B) numbers for one pillar."""

    name: str
    base_real: Number = 0.0
    current_real: Number = 0.0
    delta_value: Number = 0.0
    delta_percent: Number = 0.0
    base_icm: Number = Field(default=0.0, alias="baseICM")
    current_icm: Number = Field(default=0.0, alias="currentICM")


class SellerPillarDelta(OracleModel):
    name: str
    base: Number = 0.0
    current: Number = 0.0
    delta: Number = 0.0
    base_icm: Number = Field(default=0.0, alias="baseICM")
    current_icm: Number = Field(default=0.0, alias="currentICM")


class SellerComparison(OracleModel):
    """One current-period seller against its same-name base-period self.

    Attributes:
        base_rank: 1-based mercantil rank in A, 0 when the seller was absent.
        current_rank: 1-based mercantil rank in B.
        delta_rank: ``base_rank - current_rank`` (positive = climbed);
            0 when absent from A.
    """

    id: str = ""
    name: str
    base_score: Number = 0.0
    current_score: Number = 0.0
    delta_score: Number = 0.0
    base_rank: int = 0
    current_rank: int = 0
    delta_rank: int = 0
    pillars: tuple[SellerPillarDelta, ...] = ()
    alerts: tuple[str, ...] = ()


class EvolutionAlert(OracleModel):
    type: str
    title: str
    reason: str
    action: str


class StoreComparison(OracleModel):
    pillars: tuple[PillarComparison, ...] = ()
    base_score: Number = 0.0
    current_score: Number = 0.0
    delta_score: Number = 0.0
    classification: str = ""
    top2_share: Number = 0.0
    """Top-2 sellers' mercantil realized / B's store mercantil realized (ratio, not %)."""


class ComparisonResult(OracleModel):
    """Output of ``compare_periods``.

    ``period_a``/``period_b`` carry the record ids (or ``"current"``) of the
    compared snapshots. ``error`` is set when the comparison could not be
    computed; the other fields then keep their defaults.
    """

    period_a: str = ""
    period_b: str = ""
    store: StoreComparison = StoreComparison()
    sellers: tuple[SellerComparison, ...] = ()
    alerts: tuple[EvolutionAlert, ...] = ()
    executive_summary: str = ""
    error: Optional[str] = None


class HistoryPoint(OracleModel):
    """One plotted cycle of the long-horizon history chart."""

    period_id: str
    label: str
    score: Number = 0.0
    mercantil_real: Number = 0.0
    mercantil_meta: Number = 0.0
    cdc_real: Number = 0.0
    cdc_meta: Number = 0.0
    services_real: Number = 0.0
    services_meta: Number = 0.0
    dependency: Number = 0.0
    mercantil_icm: Number = Field(default=0.0, alias="mercantilICM")
    cdc_icm: Number = Field(default=0.0, alias="cdcICM")
    services_icm: Number = Field(default=0.0, alias="servicesICM")


class HistoryTrendReport(OracleModel):
    """Long-horizon reading of a store's saved cycles.

    Attributes:
        points: Chronological series (oldest first), current snapshot last
            unless it duplicates a saved cycle.
        score_trend: ``HistoryTrend`` label over the last three scores.
        dependency_trend: Same rule applied to the dependency series.
        pillar_trends: Same rule per pillar ICM series, keyed by pillar name.
        consistency_index: 0–100; high oscillation between cycles lowers it.
        structural_risk_index: 0–100; dependency above 40%, pillars below
            85% and volatility raise it.
        next_cycle_projection: Last score continued by the last step, 0–100.
        cycle_classification: ``CycleClassification`` of the latest score.
        alert_level: ``AlertLevel`` of the latest score.
    """

    points: tuple[HistoryPoint, ...] = ()
    score_trend: str = ""
    dependency_trend: str = ""
    pillar_trends: dict[str, str] = {}
    average_score: Number = 0.0
    average_dependency: Number = 0.0
    average_icm: dict[str, float] = {}
    current_score: Number = 0.0
    current_dependency: Number = 0.0
    consistency_index: Number = 0.0
    structural_risk_index: Number = 0.0
    next_cycle_projection: Number = 0.0
    cycle_classification: str = ""
    alert_level: str = ""
    error: Optional[str] = None
