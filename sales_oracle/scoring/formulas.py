"""
Formula primitives: achievement ratio, gap, weighted composite and tiers.

Composite weights (shared by store health and seller score)
-----------------------------------------------------------
    composite = round(
        mercantil * 0.4
        + cdc     * 0.3
        + services* 0.3
    )

The weights are module constants rather than configuration: a store's health
and its sellers' scores are only comparable while both use the same weights.

Tier thresholds (checked top-down, lower bound inclusive)
----------------------------------------------------------
    >= 90  Alta Performance Sustentável  /  Elite
    >= 80  Performance Competitiva       /  Alto Contribuidor
    >= 70  Zona de Atenção               /  Parcial
    >= 60  Pressão Estrutural            /  Oscilante
    else   Risco Crítico                 /  Risco
"""

from __future__ import annotations

import math

from sales_oracle.taxonomy.classification import HealthTier, SellerTier

WEIGHTS: dict[str, float] = {
    "mercantil": 0.4,
    "cdc":       0.3,
    "services":  0.3,
}

_HEALTH_TIERS: tuple[tuple[float, HealthTier], ...] = (
    (90.0, HealthTier.ALTA_PERFORMANCE),
    (80.0, HealthTier.PERFORMANCE_COMPETITIVA),
    (70.0, HealthTier.ZONA_DE_ATENCAO),
    (60.0, HealthTier.PRESSAO_ESTRUTURAL),
)

_SELLER_TIERS: tuple[tuple[float, SellerTier], ...] = (
    (90.0, SellerTier.ELITE),
    (80.0, SellerTier.ALTO_CONTRIBUIDOR),
    (70.0, SellerTier.PARCIAL),
    (60.0, SellerTier.OSCILANTE),
)


def icm(realized: float, meta: float) -> float:
    """Target-achievement percentage; 0 when there is no positive target.

    Args:
        realized: Actual result.
        meta:     Target. ``meta <= 0`` yields 0 regardless of ``realized``.

    Returns:
        ``realized / meta * 100`` (unrounded), or 0.0.
    """
    if meta <= 0:
        return 0.0
    return realized / meta * 100.0


def gap(meta: float, realized: float) -> float:
    """Signed distance to target; negative means the target was exceeded."""
    return meta - realized


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (``round`` is banker's)."""
    return int(math.floor(value + 0.5))


def weighted_sum(mercantil: float, cdc: float, services: float) -> float:
    """Unrounded 40/30/30 weighted sum."""
    return (
        mercantil  * WEIGHTS["mercantil"]
        + cdc      * WEIGHTS["cdc"]
        + services * WEIGHTS["services"]
    )


def composite_index(mercantil_icm: float, cdc_icm: float, services_icm: float) -> int:
    """Rounded 40/30/30 composite of three achievement percentages."""
    return round_half_up(weighted_sum(mercantil_icm, cdc_icm, services_icm))


def classify_health(index: float) -> HealthTier:
    """Map a store health index to its tier."""
    for threshold, tier in _HEALTH_TIERS:
        if index >= threshold:
            return tier
    return HealthTier.RISCO_CRITICO


def classify_seller(score: float) -> SellerTier:
    """Map a seller score to its tier."""
    for threshold, tier in _SELLER_TIERS:
        if score >= threshold:
            return tier
    return SellerTier.RISCO


def safe_ratio(numerator: float, denominator: float) -> float:
    """``numerator / max(denominator, 1)`` — the minimum-1 guard used for shares."""
    return numerator / max(denominator, 1.0)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
