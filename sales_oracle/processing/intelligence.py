"""
Per-period intelligence block: trends over a short window of prior periods,
seller consistency and risk, the store radar and concentration reading.

Run trend rule (window of prior periods + current, oldest first)
----------------------------------------------------------------
    < 2 points                      → "Dados insuficientes"
    every step strictly increasing  → "Tendência de alta consistente."
    every step strictly decreasing  → "Tendência de retração recorrente."
    otherwise                       → "Volatilidade no desempenho."

This rule has no magnitude threshold and looks at the whole window. The
long-horizon history chart uses a different three-point rule with a minimum
swing (``sales_oracle.evolution.history.classify_history_trend``); the two
are kept apart on purpose.

Prior snapshots are re-scored from their raw numbers, so snapshots saved by
older versions (or with stale derived fields) read the same as fresh ones.
Sellers are matched across periods by ``name``; a seller absent from every
prior snapshot gets no intelligence block.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sales_oracle.models.entities import Seller, SellerIntelligence, Store, TrendAnalysis
from sales_oracle.models.oracle import IntelligenceRadar, OracleData, StoreIntelligence
from sales_oracle.scoring.engine import seller_score, store_health_index, store_score
from sales_oracle.scoring.formulas import classify_health, icm
from sales_oracle.taxonomy.classification import PillarName, RunTrend

logger = logging.getLogger(__name__)

NONE_LABEL = "Nenhum"
RISK_DROP_POINTS = 10.0
RISK_SCORE_FLOOR = 80.0
STABLE_BAND_POINTS = 2.0
DISPERSION_SHARE = 0.30

_PILLARS: tuple[tuple[str, PillarName], ...] = (
    ("mercantil", PillarName.MERCANTIL),
    ("cdc", PillarName.CDC),
    ("services", PillarName.SERVICES),
)


# ── Trend rule ────────────────────────────────────────────────────────────────


def classify_run_trend(values: Sequence[float]) -> RunTrend:
    """Classify a chronological series with the strict monotonic-run rule."""
    if len(values) < 2:
        return RunTrend.INSUFICIENTE
    steps = list(zip(values, values[1:]))
    if all(b > a for a, b in steps):
        return RunTrend.ALTA
    if all(b < a for a, b in steps):
        return RunTrend.RETRACAO
    return RunTrend.VOLATIL


def _pillar_icms(entity: Store | Seller) -> dict[str, float]:
    pillars = entity.pillars
    return {
        key: icm(getattr(pillars, key).realized, getattr(pillars, key).meta)
        for key, _ in _PILLARS
    }


def trend_analysis(series: Sequence[Store | Seller]) -> TrendAnalysis:
    """Per-pillar ICM trend across ``series`` (oldest first)."""
    icms = [_pillar_icms(entity) for entity in series]
    return TrendAnalysis(**{
        key: classify_run_trend([row[key] for row in icms]).value
        for key, _ in _PILLARS
    })


# ── Sellers ───────────────────────────────────────────────────────────────────


def find_seller(sellers: Sequence[Seller], name: str) -> Optional[Seller]:
    """First seller called ``name``; exact string match."""
    return next((s for s in sellers if s.name == name), None)


def consistency_reading(consistency: float) -> str:
    if consistency >= 70:
        return "Alta consistência"
    if consistency >= 40:
        return "Consistência moderada"
    return "Baixa consistência"


def seller_risk_alert(scores: Sequence[float]) -> Optional[str]:
    """Risk text from the two most recent scores, or ``None``.

    Raised when the latest score dropped more than 10 points, or when both
    of the last two scores sit below 80.
    """
    if len(scores) < 2:
        return None
    previous, latest = scores[-2], scores[-1]
    drop = previous - latest
    if drop > RISK_DROP_POINTS:
        return f"Queda de {drop:.1f} pts no score em relação ao período anterior."
    if previous < RISK_SCORE_FLOOR and latest < RISK_SCORE_FLOOR:
        return "Score abaixo de 80 nos dois últimos períodos."
    return None


def build_seller_intelligence(
    seller: Seller,
    prior: Sequence[OracleData],
) -> Optional[SellerIntelligence]:
    """Intelligence for one seller, or ``None`` when no prior period has them.

    Args:
        seller: The current-period seller (already scored).
        prior:  Prior snapshots, oldest first.
    """
    matches = [
        match
        for match in (find_seller(snapshot.sellers, seller.name) for snapshot in prior)
        if match is not None
    ]
    if not matches:
        return None

    series = [*matches, seller]
    scores = [seller_score(s) for s in matches] + [seller.score]
    consistency = sum(1 for s in scores if s >= 100) / len(scores) * 100.0
    return SellerIntelligence(
        trend=trend_analysis(series),
        consistency=consistency,
        consistency_reading=consistency_reading(consistency),
        risk_alert=seller_risk_alert(scores),
    )


# ── Store ─────────────────────────────────────────────────────────────────────


def general_trend(current_index: float, previous_index: Optional[float]) -> str:
    if previous_index is None:
        return RunTrend.INSUFICIENTE.value
    delta = current_index - previous_index
    if abs(delta) < STABLE_BAND_POINTS:
        return "Estabilidade operacional."
    if delta > 0:
        return f"Tendência de alta (+{delta:.1f} pts)."
    return f"Tendência de retração ({delta:.1f} pts)."


def dispersion_level(sellers: Sequence[Seller]) -> str:
    """``"Alta"`` when more than 30% of the team scores below 80."""
    if not sellers:
        return "Baixa"
    below = sum(1 for s in sellers if s.score < RISK_SCORE_FLOOR)
    return "Alta" if below / len(sellers) > DISPERSION_SHARE else "Baixa"


def concentration_risk(sellers: Sequence[Seller]) -> str:
    """Text reading of the top-2 sellers' share of the summed team score."""
    total = sum(s.score for s in sellers)
    if total <= 0:
        return "Saudável"
    ranked = sorted((s.score for s in sellers), reverse=True)
    share = sum(ranked[:2]) / total * 100.0
    if share > 60:
        return (
            f"Risco elevado: os 2 principais vendedores concentram {share:.1f}% "
            "do score da equipe."
        )
    if share > 50:
        return (
            f"Alta dependência: os 2 principais vendedores concentram {share:.1f}% "
            "do score da equipe."
        )
    return "Saudável"


def build_radar(
    store: Store,
    sellers: Sequence[Seller],
    previous_index: Optional[float],
) -> IntelligenceRadar:
    """Snapshot of strongest/weakest pillar, standout sellers and team spread."""
    icms = _pillar_icms(store)
    names = dict(_PILLARS)
    strongest = max(icms, key=lambda k: icms[k])
    weakest = min(icms, key=lambda k: icms[k])

    rising = max(sellers, key=lambda s: s.score).name if sellers else NONE_LABEL
    risky = next(
        (s.name for s in sellers if s.intelligence is not None and s.intelligence.risk_alert),
        NONE_LABEL,
    )
    return IntelligenceRadar(
        strongest_pillar=names[strongest].value,
        vulnerable_pillar=names[weakest].value,
        rising_seller=rising,
        risky_seller=risky,
        general_trend=general_trend(store.health_index, previous_index),
        dispersion_level=dispersion_level(sellers),
    )


def build_store_intelligence(
    store: Store,
    sellers: Sequence[Seller],
    prior: Sequence[OracleData],
) -> StoreIntelligence:
    """Assemble the store intelligence block.

    Args:
        store:   Current store with derived pillar fields and health index.
        sellers: Current sellers with scores and (optional) intelligence.
        prior:   Prior snapshots, oldest first; may be empty.
    """
    previous_index = (
        float(store_health_index(prior[-1].store)) if prior else None
    )
    health = store_score(store, sellers)
    intelligence = StoreIntelligence(
        radar=build_radar(store, sellers, previous_index),
        store_trend=trend_analysis([*(p.store for p in prior), store]),
        concentration_risk=concentration_risk(sellers),
        health_score=health,
        health_reading=classify_health(health).value,
    )
    logger.debug(
        "Intelligence for '%s': %d prior period(s), health_score=%.1f",
        store.name, len(prior), health,
    )
    return intelligence
