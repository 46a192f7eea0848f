"""
Period processor: raw store + seller numbers → fully annotated ``OracleResult``.

Steps (order matters; later steps read fields derived by earlier ones):

   1. Period label.
   2. Pillar ICM/gap, CDC participation, Services efficiency and operational
      (cards/combos) achievement.
   3. Store health index + classification.
   4. Triple-crown flags (store per pillar, seller all-three).
   5. Seller ICM/gap, penalised score, classification.
   6. Distribution: top-1/top-2 share of the summed seller scores.
   7. MVP (top scorer) + templated justification.
   8. Maturity index.
   9. Closing projection.
  10. Intelligence: trends over prior periods, radar, concentration reading.

The input is never mutated; every step builds new frozen models. Malformed
input *structures* fail in ``OracleData.model_validate`` with a pydantic
``ValidationError``. Anything unexpected after that point is logged and
returned as a result carrying ``error`` instead of propagating to the host.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from sales_oracle.models.entities import (
    CDCPillar,
    OperationalIndicator,
    OperationalIndicators,
    Pillar,
    Seller,
    SellerPillars,
    ServicesPillar,
    Store,
    StorePillars,
    TripleCrownStatus,
)
from sales_oracle.models.history import HistoryRecord
from sales_oracle.models.oracle import (
    Distribution,
    MaturityIndex,
    OracleData,
    OracleResult,
    Projection,
)
from sales_oracle.processing.intelligence import (
    build_seller_intelligence,
    build_store_intelligence,
)
from sales_oracle.processing.labels import generate_period_label
from sales_oracle.scoring.engine import seller_score, store_health_index
from sales_oracle.scoring.formulas import (
    classify_health,
    classify_seller,
    gap,
    icm,
    weighted_sum,
)
from sales_oracle.taxonomy.classification import (
    DependencyLevel,
    MaturityLevel,
    ProjectionProbability,
)
from sales_oracle.utils.time_utils import to_iso_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 3
COMPUTE_ERROR = "Não foi possível calcular os indicadores do período."


# ── Step 2: pillars ───────────────────────────────────────────────────────────


def _derive_pillar(pillar: Pillar) -> dict[str, float]:
    return {
        "icm": icm(pillar.realized, pillar.meta),
        "gap": gap(pillar.meta, pillar.realized),
    }


def _derive_indicator(indicator: OperationalIndicator) -> OperationalIndicator:
    return indicator.model_copy(
        update={"achievement": icm(indicator.realized, indicator.meta)}
    )


def _derive_operational(operational: OperationalIndicators) -> OperationalIndicators:
    return OperationalIndicators(
        cards=_derive_indicator(operational.cards),
        combos=_derive_indicator(operational.combos),
    )


def derive_store_pillars(pillars: StorePillars) -> StorePillars:
    """Fill ICM/gap/achievement for every store pillar and indicator."""
    cdc: CDCPillar = pillars.cdc.model_copy(update={
        **_derive_pillar(pillars.cdc),
        "participation": _derive_indicator(pillars.cdc.participation),
    })
    services: ServicesPillar = pillars.services.model_copy(update={
        **_derive_pillar(pillars.services),
        "efficiency": _derive_indicator(pillars.services.efficiency),
    })
    return StorePillars(
        mercantil=pillars.mercantil.model_copy(update=_derive_pillar(pillars.mercantil)),
        cdc=cdc,
        services=services,
        operational=_derive_operational(pillars.operational),
    )


# ── Steps 1, 3, 4: store ──────────────────────────────────────────────────────


def derive_store(store: Store, now: datetime) -> Store:
    period = store.period.model_copy(
        update={"label": generate_period_label(store.period, today=now.date())}
    )
    pillars = derive_store_pillars(store.pillars)
    store = store.model_copy(update={"period": period, "pillars": pillars})

    health = store_health_index(store)
    return store.model_copy(update={
        "health_index": float(health),
        "classification": classify_health(health).value,
        "triple_crown_status": TripleCrownStatus(
            mercantil=pillars.mercantil.icm >= 100,
            cdc=pillars.cdc.icm >= 100,
            services=pillars.services.icm >= 100,
        ),
    })


# ── Steps 4, 5: sellers ───────────────────────────────────────────────────────


def derive_seller(seller: Seller) -> Seller:
    """Fill pillar ICM/gap, score, classification and triple crown for one seller."""
    src = seller.pillars
    pillars = SellerPillars(
        mercantil=src.mercantil.model_copy(update=_derive_pillar(src.mercantil)),
        cdc=src.cdc.model_copy(update=_derive_pillar(src.cdc)),
        services=src.services.model_copy(update=_derive_pillar(src.services)),
    )
    seller = seller.model_copy(update={
        "pillars": pillars,
        "operational": _derive_operational(seller.operational),
    })
    score = seller_score(seller)
    return seller.model_copy(update={
        "score": score,
        "classification": classify_seller(score).value,
        "is_triple_crown": (
            pillars.mercantil.icm >= 100
            and pillars.cdc.icm >= 100
            and pillars.services.icm >= 100
        ),
    })


# ── Steps 6–9: team aggregates ────────────────────────────────────────────────


def rank_by_score(sellers: Sequence[Seller]) -> list[Seller]:
    """Sellers by descending score; ties keep input order."""
    return sorted(sellers, key=lambda s: s.score, reverse=True)


def build_distribution(sellers: Sequence[Seller]) -> Distribution:
    top1 = top2 = 0.0
    total = sum(s.score for s in sellers)
    if sellers and total > 0:
        ranked = rank_by_score(sellers)
        top1 = ranked[0].score / total * 100.0
        top2 = sum(s.score for s in ranked[:2]) / total * 100.0 if len(ranked) > 1 else top1

    if top1 > 40:
        level = DependencyLevel.CRITICA
    elif top1 > 30:
        level = DependencyLevel.ALTA
    elif top1 > 20:
        level = DependencyLevel.MODERADA
    else:
        level = DependencyLevel.SAUDAVEL
    return Distribution(
        top1_contribution=top1,
        top2_contribution=top2,
        dependency_level=level.value,
    )


def select_mvp(sellers: Sequence[Seller]) -> tuple[Optional[str], Optional[str]]:
    """Return ``(mvp_id, justification)`` for the top scorer, or ``(None, None)``."""
    if not sellers:
        return None, None
    mvp = rank_by_score(sellers)[0]
    justification = (
        f"{mvp.name} atingiu o Score mais alto da operação ({mvp.score:.1f}%), "
        "demonstrando o melhor equilíbrio entre os pilares estratégicos e maior "
        "impacto no resultado global."
    )
    return mvp.id, justification


def build_maturity(sellers: Sequence[Seller]) -> MaturityIndex:
    above = below = 0.0
    if sellers:
        above = sum(1 for s in sellers if s.score >= 100) / len(sellers) * 100.0
        below = sum(1 for s in sellers if s.score < 80) / len(sellers) * 100.0

    if above >= 70:
        level = MaturityLevel.ALTA
    elif above >= 40:
        level = MaturityLevel.MODERADA
    else:
        level = MaturityLevel.BAIXA
    return MaturityIndex(
        above100_percent=above,
        below80_percent=below,
        classification=level.value,
    )


def build_projection(store: Store) -> Projection:
    """Linear end-of-period projection from the elapsed/total business-day ratio.

    ``business_days_total <= 0`` → unavailable ("Dados insuficientes").
    ``business_days_elapsed <= 0`` → factor 0, "Planejamento".
    Otherwise the probability comes from the 40/30/30 composite of
    projected/meta (a zero meta counts as 1).
    """
    period, pillars = store.period, store.pillars
    total, elapsed = period.business_days_total, period.business_days_elapsed
    if total <= 0:
        return Projection(
            is_available=False,
            probability=ProjectionProbability.DADOS_INSUFICIENTES.value,
        )

    factor = total / elapsed if elapsed > 0 else 0.0
    merc = pillars.mercantil.realized * factor
    cdc = pillars.cdc.realized * factor
    serv = pillars.services.realized * factor

    if elapsed <= 0:
        probability = ProjectionProbability.PLANEJAMENTO
    else:
        composite = weighted_sum(
            merc / (pillars.mercantil.meta or 1) * 100.0,
            cdc / (pillars.cdc.meta or 1) * 100.0,
            serv / (pillars.services.meta or 1) * 100.0,
        )
        if composite >= 100:
            probability = ProjectionProbability.ALTA
        elif composite >= 90:
            probability = ProjectionProbability.MEDIA
        else:
            probability = ProjectionProbability.BAIXA

    return Projection(
        mercantil_projected=merc,
        cdc_projected=cdc,
        services_projected=serv,
        mercantil_gap=pillars.mercantil.meta - merc,
        cdc_gap=pillars.cdc.meta - cdc,
        services_gap=pillars.services.meta - serv,
        factor=factor,
        probability=probability.value,
        is_available=True,
    )


# ── Prior context ─────────────────────────────────────────────────────────────


def select_prior(
    history: Sequence[HistoryRecord | OracleData],
    current: Store,
    window: int = DEFAULT_WINDOW,
) -> list[OracleData]:
    """Most recent ``window`` snapshots dated before ``current``, oldest first.

    Accepts records in either order. Snapshots that start on or after the
    current period, including a saved copy of the very period being
    processed, are skipped so a re-processed period only looks backwards.
    """
    cutoff = current.period.sort_key()
    snapshots = [h.dados if isinstance(h, HistoryRecord) else h for h in history]
    snapshots = [s for s in snapshots if s.store.period.sort_key() < cutoff]
    snapshots.sort(key=lambda s: s.store.period.sort_key())
    return snapshots[-window:] if window > 0 else []


# ── Entry point ───────────────────────────────────────────────────────────────


def process_period(
    data: OracleData | dict[str, Any],
    history: Sequence[HistoryRecord | OracleData] = (),
    *,
    window: int = DEFAULT_WINDOW,
    now: Optional[datetime] = None,
) -> OracleResult:
    """Compute every derived field for one period.

    Args:
        data:    Raw period input (model or host JSON dict).
        history: Prior snapshots of the same store and granularity, in
            either chronological order.
        window:  How many prior snapshots feed the trend block.
        now:     Clock override for ``generated_at`` and label defaults.

    Returns:
        A new ``OracleResult``. On an unexpected internal failure the result
        carries ``error`` and the input numbers unchanged.

    Raises:
        pydantic.ValidationError: If ``data`` is a dict that does not match
            the ``OracleData`` structure.
    """
    if not isinstance(data, OracleData):
        data = OracleData.model_validate(data)
    now = now or utc_now()

    try:
        store = derive_store(data.store, now)
        sellers = [derive_seller(s) for s in data.sellers]

        prior = select_prior(history, store, window)
        sellers = [
            s.model_copy(update={"intelligence": build_seller_intelligence(s, prior)})
            for s in sellers
        ]
        mvp_id, mvp_justification = select_mvp(sellers)

        result = data.model_copy(update={
            "store": store,
            "sellers": tuple(sellers),
            "distribution": build_distribution(sellers),
            "maturity_index": build_maturity(sellers),
            "projection": build_projection(store),
            "generated_at": to_iso_utc(now),
            "mvp_id": mvp_id,
            "mvp_justification": mvp_justification,
            "intelligence": build_store_intelligence(store, sellers, prior),
            "error": None,
        })
    except Exception:
        logger.exception("Failed to process period for store '%s'", data.store.name)
        return data.model_copy(update={"generated_at": to_iso_utc(now), "error": COMPUTE_ERROR})

    logger.info(
        "Processed '%s' (%s): health=%.0f, %d seller(s), %d prior period(s)",
        store.name, store.period.label, store.health_index, len(sellers), len(prior),
    )
    return result
