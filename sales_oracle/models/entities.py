"""
Store and seller models — the raw numbers plus the fields the processor derives.

Input JSON usually carries only ``meta``/``realized`` pairs; every derived
field (``icm``, ``gap``, ``achievement``, ``score``, ``classification`` ...)
defaults to zero/empty and is overwritten by ``process_period``.

Pillars:
  - ``mercantil`` — merchandise revenue (weight 0.4)
  - ``cdc``       — consumer-credit revenue (weight 0.3), with a
    ``participation`` sub-metric
  - ``services``  — attached services revenue (weight 0.3), with an
    ``efficiency`` sub-metric

Operational indicators (``cards``, ``combos``) are unit counts and do not
enter the composite score.
"""

from __future__ import annotations

from typing import Optional

from sales_oracle.models.base import Number, OracleModel
from sales_oracle.models.period import Period
from sales_oracle.taxonomy.classification import RunTrend


class Pillar(OracleModel):
    """A weighted performance dimension (currency)."""

    meta: Number = 0.0
    realized: Number = 0.0
    icm: Number = 0.0
    gap: Number = 0.0


class OperationalIndicator(OracleModel):
    """A meta/realized pair measured in units, with its achievement %."""

    meta: Number = 0.0
    realized: Number = 0.0
    achievement: Number = 0.0


class CDCPillar(Pillar):
    participation: OperationalIndicator = OperationalIndicator()


class ServicesPillar(Pillar):
    efficiency: OperationalIndicator = OperationalIndicator()


class OperationalIndicators(OracleModel):
    cards: OperationalIndicator = OperationalIndicator()
    combos: OperationalIndicator = OperationalIndicator()


class StorePillars(OracleModel):
    mercantil: Pillar = Pillar()
    cdc: CDCPillar = CDCPillar()
    services: ServicesPillar = ServicesPillar()
    operational: OperationalIndicators = OperationalIndicators()


class TripleCrownStatus(OracleModel):
    """Per-pillar ``icm >= 100`` flags."""

    mercantil: bool = False
    cdc: bool = False
    services: bool = False

    @property
    def complete(self) -> bool:
        return self.mercantil and self.cdc and self.services


class Store(OracleModel):
    """The unit under analysis for one period.

    Attributes:
        name: Store display name; also the root of history record ids.
        period: Reporting window.
        pillars: Store-level pillars and operational indicators.
        health_index: Derived composite of the raw pillar ICMs (can exceed 100).
        classification: Derived ``HealthTier`` label.
        triple_crown_status: Derived per-pillar target flags.
    """

    name: str = ""
    period: Period = Period()
    pillars: StorePillars = StorePillars()
    health_index: Number = 0.0
    classification: str = ""
    triple_crown_status: TripleCrownStatus = TripleCrownStatus()


class SellerPillars(OracleModel):
    mercantil: Pillar = Pillar()
    cdc: Pillar = Pillar()
    services: Pillar = Pillar()


class TrendAnalysis(OracleModel):
    """Trend label per pillar (``RunTrend`` values)."""

    mercantil: str = RunTrend.INSUFICIENTE.value
    cdc: str = RunTrend.INSUFICIENTE.value
    services: str = RunTrend.INSUFICIENTE.value


class SellerIntelligence(OracleModel):
    """Historical reading of one seller, present only when history matched.

    Attributes:
        trend: Per-pillar ICM trend across the window plus the current period.
        consistency: % of windowed + current scores that reached 100.
        consistency_reading: Text tier for ``consistency``.
        risk_alert: Set when the last two scores show a sharp drop or both
            sit below 80; ``None`` otherwise.
    """

    trend: TrendAnalysis = TrendAnalysis()
    consistency: Number = 0.0
    consistency_reading: str = ""
    risk_alert: Optional[str] = None


class Seller(OracleModel):
    """One salesperson within the store for the same period.

    ``id`` is opaque. Cross-period matching uses ``name``.
    """

    id: str = ""
    name: str = ""
    pillars: SellerPillars = SellerPillars()
    operational: OperationalIndicators = OperationalIndicators()
    score: Number = 0.0
    classification: str = ""
    is_triple_crown: bool = False
    intelligence: Optional[SellerIntelligence] = None
