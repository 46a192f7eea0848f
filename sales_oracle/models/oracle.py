"""
Aggregate root for one period: ``OracleData`` (raw input) / ``OracleResult``
(after ``process_period``).

The two names denote the same shape; the distinction is only whether the
derived fields have been filled in. ``error`` is set (and the derived blocks
left at their defaults) when processing failed unexpectedly.
"""

from __future__ import annotations

from typing import Optional

from sales_oracle.models.base import Number, OracleModel
from sales_oracle.models.entities import Seller, Store, TrendAnalysis


class Distribution(OracleModel):
    """Score concentration across the seller team.

    Attributes:
        top1_contribution: Top scorer's share of the summed seller scores (%).
        top2_contribution: Top-2 combined share (%); equals top-1 with one seller.
        dependency_level: ``DependencyLevel`` label derived from the top-1 share.
    """

    top1_contribution: Number = 0.0
    top2_contribution: Number = 0.0
    dependency_level: str = ""


class MaturityIndex(OracleModel):
    above100_percent: Number = 0.0
    below80_percent: Number = 0.0
    classification: str = ""


class Projection(OracleModel):
    """Linear end-of-period extrapolation of the three pillars.

    Attributes:
        factor: ``business_days_total / business_days_elapsed`` (0 while planning).
        is_available: ``False`` when the period has no business days configured.
    """

    mercantil_projected: Number = 0.0
    cdc_projected: Number = 0.0
    services_projected: Number = 0.0
    mercantil_gap: Number = 0.0
    cdc_gap: Number = 0.0
    services_gap: Number = 0.0
    factor: Number = 0.0
    probability: str = ""
    is_available: bool = False


class IntelligenceRadar(OracleModel):
    strongest_pillar: str = ""
    vulnerable_pillar: str = ""
    rising_seller: str = ""
    risky_seller: str = ""
    general_trend: str = ""
    dispersion_level: str = ""


class StoreIntelligence(OracleModel):
    """Store-level intelligence block.

    Attributes:
        radar: Snapshot of strongest/weakest pillar, rising/risky seller,
            general trend and team dispersion.
        store_trend: Per-pillar ICM trend across prior periods plus this one.
        concentration_risk: Text reading of the top-2 score share.
        health_score: Penalised store score (dependency, spread, team zeros).
        health_reading: ``HealthTier`` label of ``health_score``.
    """

    radar: IntelligenceRadar = IntelligenceRadar()
    store_trend: TrendAnalysis = TrendAnalysis()
    concentration_risk: str = ""
    health_score: Number = 0.0
    health_reading: str = ""


class OracleData(OracleModel):
    """One store, its sellers and everything derived from them for one period."""

    store: Store = Store()
    sellers: tuple[Seller, ...] = ()
    distribution: Distribution = Distribution()
    maturity_index: MaturityIndex = MaturityIndex()
    projection: Projection = Projection()
    generated_at: str = ""
    mvp_id: Optional[str] = None
    mvp_justification: Optional[str] = None
    intelligence: Optional[StoreIntelligence] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


OracleResult = OracleData
