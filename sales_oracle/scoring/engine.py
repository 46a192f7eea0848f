"""
Scoring engine: one entity's penalised 0–100 score.

Score formula
-------------
    note(p)   = min(100, clamp(icm(p), 0, 200))      # per pillar
    base      = 0.4*note(M) + 0.3*note(C) + 0.3*note(S)

    store     = clamp(base - spread - dependency - team_zero, 0, 100)
    seller    = clamp(base - spread - zeros,              0, 100)

Penalty explanations
--------------------
spread (0–15):
    Imbalance between the best and worst pillar note.
    Formula: min(15, (max_note - min_note) * 0.25).

dependency (0–20, store only):
    Share of the store's mercantil result held by the top-2 sellers
    (ranked by mercantil realized).
        share <= 0.50  → 0
        share <= 0.60  → (share - 0.50) * 100
        otherwise      → 10 + (share - 0.60) * 200

team_zero (0/10/18, store only):
    Worst per-pillar fraction of sellers with zero realized.
    > 50% → 18,  > 30% → 10,  else 0.

zeros (0/8/18/30, seller only):
    Number of the seller's pillars with zero realized: 0/1/2/3.

Over-achievement beyond 100% ICM never raises the score; it stays visible
through the pillar ICM itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from sales_oracle.models.entities import Pillar, Seller, Store
from sales_oracle.scoring.formulas import (
    clamp,
    composite_index,
    icm,
    safe_ratio,
    weighted_sum,
)

logger = logging.getLogger(__name__)

_ZEROS_PENALTY: tuple[float, ...] = (0.0, 8.0, 18.0, 30.0)


@dataclass(frozen=True)
class ScoreComponents:
    """All components of a penalised score.

    Attributes:
        note_mercantil:     0–100 capped mercantil note.
        note_cdc:           0–100 capped CDC note.
        note_services:      0–100 capped services note.
        spread_penalty:     0–15.
        dependency_penalty: 0–20 (always 0 for sellers).
        team_zero_penalty:  0/10/18 (always 0 for sellers).
        zeros_penalty:      0/8/18/30 (always 0 for stores).
    """

    note_mercantil:     float
    note_cdc:           float
    note_services:      float
    spread_penalty:     float = 0.0
    dependency_penalty: float = 0.0
    team_zero_penalty:  float = 0.0
    zeros_penalty:      float = 0.0

    @property
    def base(self) -> float:
        """Weighted notes before penalties (0–100)."""
        return score_base(self.note_mercantil, self.note_cdc, self.note_services)

    @property
    def penalties(self) -> float:
        return (
            self.spread_penalty
            + self.dependency_penalty
            + self.team_zero_penalty
            + self.zeros_penalty
        )

    @property
    def total(self) -> float:
        """Final score, clamped to 0–100."""
        return clamp(self.base - self.penalties, 0.0, 100.0)


# ── Primitives ────────────────────────────────────────────────────────────────


def pillar_note(realized: float, meta: float) -> float:
    """Achievement capped to 0–100 for use in the weighted base."""
    return min(100.0, clamp(icm(realized, meta), 0.0, 200.0))


def score_base(note_m: float, note_c: float, note_s: float) -> float:
    return weighted_sum(note_m, note_c, note_s)


def spread_penalty(note_m: float, note_c: float, note_s: float) -> float:
    notes = (note_m, note_c, note_s)
    return min(15.0, (max(notes) - min(notes)) * 0.25)


def dependency_penalty(top1_real: float, top2_real: float, total_real: float) -> float:
    """Penalty for mercantil concentration in the top-2 sellers.

    Args:
        top1_real:  Mercantil realized of the best seller.
        top2_real:  Mercantil realized of the second best seller.
        total_real: Store mercantil realized (guarded with ``max(total, 1)``).

    Returns:
        Penalty in [0, 20], non-decreasing in the top-2 share.
    """
    share = safe_ratio(top1_real + top2_real, total_real)
    if share <= 0.50:
        penalty = 0.0
    elif share <= 0.60:
        penalty = (share - 0.50) * 100.0
    else:
        penalty = 10.0 + (share - 0.60) * 200.0
    return clamp(penalty, 0.0, 20.0)


def zeros_penalty_seller(mercantil: float, cdc: float, services: float) -> float:
    """Escalating penalty for each pillar a seller left at zero realized."""
    zeros = sum(1 for v in (mercantil, cdc, services) if v == 0)
    return _ZEROS_PENALTY[zeros]


def team_zero_penalty(sellers: Sequence[Seller]) -> float:
    """Penalty for the pillar most sellers left at zero; 0 with no sellers."""
    if not sellers:
        return 0.0
    total = len(sellers)
    worst = max(
        sum(1 for s in sellers if getattr(s.pillars, name).realized == 0) / total
        for name in ("mercantil", "cdc", "services")
    )
    if worst > 0.50:
        return 18.0
    if worst > 0.30:
        return 10.0
    return 0.0


# ── Rankings ──────────────────────────────────────────────────────────────────


def rank_by_mercantil(sellers: Iterable[Seller]) -> list[Seller]:
    """Sellers ordered by descending mercantil realized (stable for ties)."""
    return sorted(sellers, key=lambda s: s.pillars.mercantil.realized, reverse=True)


def top2_mercantil(sellers: Iterable[Seller]) -> tuple[float, float]:
    """Mercantil realized of the two best sellers; missing positions count as 0."""
    ranked = rank_by_mercantil(sellers)
    top1 = ranked[0].pillars.mercantil.realized if ranked else 0.0
    top2 = ranked[1].pillars.mercantil.realized if len(ranked) > 1 else 0.0
    return top1, top2


def top2_mercantil_share(store: Store, sellers: Iterable[Seller]) -> float:
    """Top-2 sellers' mercantil realized over the store's, as a ratio."""
    top1, top2 = top2_mercantil(sellers)
    return safe_ratio(top1 + top2, store.pillars.mercantil.realized)


# ── Entity scores ─────────────────────────────────────────────────────────────


def _notes(mercantil: Pillar, cdc: Pillar, services: Pillar) -> tuple[float, float, float]:
    return (
        pillar_note(mercantil.realized, mercantil.meta),
        pillar_note(cdc.realized, cdc.meta),
        pillar_note(services.realized, services.meta),
    )


def store_health_index(store: Store) -> int:
    """Unpenalised store health: rounded composite of the raw pillar ICMs.

    Over-achievement counts here, so the index can pass 100. The penalised
    ``store_score`` uses the capped notes instead.
    """
    pillars = store.pillars
    return composite_index(
        icm(pillars.mercantil.realized, pillars.mercantil.meta),
        icm(pillars.cdc.realized, pillars.cdc.meta),
        icm(pillars.services.realized, pillars.services.meta),
    )


def store_components(store: Store, sellers: Sequence[Seller]) -> ScoreComponents:
    """Break down the store score: notes plus spread, dependency and team-zero."""
    pillars = store.pillars
    note_m, note_c, note_s = _notes(pillars.mercantil, pillars.cdc, pillars.services)
    top1, top2 = top2_mercantil(sellers)
    components = ScoreComponents(
        note_mercantil=note_m,
        note_cdc=note_c,
        note_services=note_s,
        spread_penalty=spread_penalty(note_m, note_c, note_s),
        dependency_penalty=dependency_penalty(top1, top2, pillars.mercantil.realized),
        team_zero_penalty=team_zero_penalty(sellers),
    )
    logger.debug(
        "Store '%s' score: base=%.2f spread=%.2f dep=%.2f team_zero=%.1f total=%.2f",
        store.name, components.base, components.spread_penalty,
        components.dependency_penalty, components.team_zero_penalty, components.total,
    )
    return components


def seller_components(seller: Seller) -> ScoreComponents:
    """Break down a seller score: notes plus spread and zero-pillar penalties."""
    pillars = seller.pillars
    note_m, note_c, note_s = _notes(pillars.mercantil, pillars.cdc, pillars.services)
    return ScoreComponents(
        note_mercantil=note_m,
        note_cdc=note_c,
        note_services=note_s,
        spread_penalty=spread_penalty(note_m, note_c, note_s),
        zeros_penalty=zeros_penalty_seller(
            pillars.mercantil.realized, pillars.cdc.realized, pillars.services.realized
        ),
    )


def store_score(store: Store, sellers: Sequence[Seller]) -> float:
    """Penalised store score in [0, 100]."""
    return store_components(store, sellers).total


def seller_score(seller: Seller) -> float:
    """Penalised seller score in [0, 100]."""
    return seller_components(seller).total
