"""
Base-vs-current period comparison.

Rules
-----
Pillars:
    delta_value   = real_B - real_A
    delta_percent = delta_value / max(real_A, 1) * 100
    ICM recomputed independently for A and B from their own meta/realized.

Store:
    delta_score = store_score(B) - store_score(A)   (full store penalties)
    >= +3 → Evolução,  <= -3 → Regressão,  else Estável.

Sellers (every seller of B, matched to A by name):
    score delta, mercantil-rank delta (ranks by raw mercantil realized, not
    by composite score), per-pillar real/ICM deltas and alerts:
      - "Regressão > 5% no Mercantil"     mercantil fell >= 5% from A
      - "Queda de ranking >= 2 posições"   rank worsened by >= 2
    Alerts are only evaluated for sellers present in both periods.

Store alerts:
    A  any pillar with delta_percent <= -5, with a pillar-specific action.
    C  top-2 mercantil share of B > 30%, escalated past 50%.

The executive summary is template text, never a narrative-service call.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sales_oracle.models.comparison import (
    ComparisonResult,
    EvolutionAlert,
    PillarComparison,
    SellerComparison,
    SellerPillarDelta,
    StoreComparison,
)
from sales_oracle.models.entities import Pillar, Seller
from sales_oracle.models.history import HistoryRecord
from sales_oracle.models.oracle import OracleData
from sales_oracle.processing.intelligence import find_seller
from sales_oracle.scoring.engine import (
    rank_by_mercantil,
    seller_score,
    store_score,
    top2_mercantil_share,
)
from sales_oracle.scoring.formulas import icm, safe_ratio
from sales_oracle.taxonomy.classification import AlertType, EvolutionStatus, PillarName
from sales_oracle.utils.locale_br import format_percent_br

logger = logging.getLogger(__name__)

CURRENT_ID = "current"
COMPARE_ERROR = "Não foi possível comparar os períodos selecionados."

EVOLUTION_THRESHOLD = 3.0
PILLAR_REGRESSION_PCT = -5.0
SELLER_REGRESSION_RATIO = -0.05
RANK_DROP_POSITIONS = 2
CONCENTRATION_WATCH = 0.30
CONCENTRATION_HIGH = 0.50

SELLER_MERCANTIL_ALERT = "Regressão > 5% no Mercantil"
SELLER_RANK_ALERT = "Queda de ranking >= 2 posições"

_PILLARS: tuple[tuple[str, PillarName], ...] = (
    ("mercantil", PillarName.MERCANTIL),
    ("cdc", PillarName.CDC),
    ("services", PillarName.SERVICES),
)

_REGRESSION_ACTIONS: dict[PillarName, str] = {
    PillarName.MERCANTIL: (
        "Ação: atacar conversão e mix, com plano de recuperação de perdas "
        "e foco em giro por 7 dias."
    ),
    PillarName.CDC: (
        "Ação: reforçar CDC na apresentação, com meta diária de ativação "
        "por 7 dias e checagem no fechamento."
    ),
    PillarName.SERVICES: (
        "Ação: padronizar anexação de serviços no fechamento e rodar "
        "rotina diária por 7 dias."
    ),
}


# ── Pillars and store ─────────────────────────────────────────────────────────


def compare_pillar(name: PillarName, base: Pillar, current: Pillar) -> PillarComparison:
    delta = current.realized - base.realized
    return PillarComparison(
        name=name.value,
        base_real=base.realized,
        current_real=current.realized,
        delta_value=delta,
        delta_percent=safe_ratio(delta, base.realized) * 100.0,
        base_icm=icm(base.realized, base.meta),
        current_icm=icm(current.realized, current.meta),
    )


def classify_evolution(delta_score: float) -> EvolutionStatus:
    if delta_score >= EVOLUTION_THRESHOLD:
        return EvolutionStatus.EVOLUCAO
    if delta_score <= -EVOLUTION_THRESHOLD:
        return EvolutionStatus.REGRESSAO
    return EvolutionStatus.ESTAVEL


# ── Sellers ───────────────────────────────────────────────────────────────────


def mercantil_rank(sellers: Sequence[Seller], name: str) -> int:
    """1-based rank of ``name`` by mercantil realized; 0 when absent."""
    for position, seller in enumerate(rank_by_mercantil(sellers), start=1):
        if seller.name == name:
            return position
    return 0


def compare_seller(
    current: Seller,
    base_sellers: Sequence[Seller],
    current_sellers: Sequence[Seller],
) -> SellerComparison:
    base = find_seller(base_sellers, current.name)
    base_score = seller_score(base) if base is not None else 0.0
    current_score = seller_score(current)
    base_rank = mercantil_rank(base_sellers, current.name)
    current_rank = mercantil_rank(current_sellers, current.name)

    alerts: list[str] = []
    if base is not None:
        variation = safe_ratio(
            current.pillars.mercantil.realized - base.pillars.mercantil.realized,
            base.pillars.mercantil.realized,
        )
        if variation <= SELLER_REGRESSION_RATIO:
            alerts.append(SELLER_MERCANTIL_ALERT)
        if current_rank - base_rank >= RANK_DROP_POSITIONS:
            alerts.append(SELLER_RANK_ALERT)

    pillars = []
    for key, name in _PILLARS:
        now = getattr(current.pillars, key)
        before = getattr(base.pillars, key) if base is not None else Pillar()
        pillars.append(SellerPillarDelta(
            name=name.value,
            base=before.realized,
            current=now.realized,
            delta=now.realized - before.realized,
            base_icm=icm(before.realized, before.meta),
            current_icm=icm(now.realized, now.meta),
        ))

    return SellerComparison(
        id=current.id,
        name=current.name,
        base_score=base_score,
        current_score=current_score,
        delta_score=current_score - base_score,
        base_rank=base_rank,
        current_rank=current_rank,
        delta_rank=base_rank - current_rank if base_rank else 0,
        pillars=tuple(pillars),
        alerts=tuple(alerts),
    )


# ── Alerts and summary ────────────────────────────────────────────────────────


def pillar_alerts(pillars: Sequence[PillarComparison]) -> list[EvolutionAlert]:
    alerts = []
    for pillar in pillars:
        if pillar.delta_percent <= PILLAR_REGRESSION_PCT:
            name = PillarName(pillar.name)
            alerts.append(EvolutionAlert(
                type=AlertType.PILLAR_REGRESSION.value,
                title=f"Regressão no pilar {name.value}",
                reason=(
                    f"O pilar {name.value} apresentou queda de "
                    f"{format_percent_br(abs(pillar.delta_percent))} em relação "
                    "ao período anterior."
                ),
                action=_REGRESSION_ACTIONS[name],
            ))
    return alerts


def concentration_alert(share: float) -> Optional[EvolutionAlert]:
    if share <= CONCENTRATION_WATCH:
        return None
    high = share > CONCENTRATION_HIGH
    return EvolutionAlert(
        type=AlertType.CONCENTRATION.value,
        title="Risco Alto de Dependência" if high else "Atenção: Concentração de Resultado",
        reason=(
            f"Os 2 maiores vendedores concentram {format_percent_br(share * 100)} "
            "do faturamento mercantil."
        ),
        action=(
            "Ação: plano de redistribuição imediato: foco no terço médio + rotina "
            "diária de metas por pilar para reduzir dependência."
            if high else
            "Ação: elevar 2 vendedores intermediários ao nível de sustentação em "
            "7 dias (meta +10 pts de ICM), com roteiro e acompanhamento."
        ),
    )


def executive_summary(
    status: EvolutionStatus,
    base_score: float,
    current_score: float,
) -> str:
    direction = (
        "Houve um ganho de eficiência operacional"
        if current_score - base_score >= 0
        else "Houve uma perda de tração nos pilares"
    )
    return (
        f"A unidade apresenta um quadro de {status.value.lower()} estratégica. "
        f"O Score Final saiu de {base_score:.1f} para {current_score:.1f}. "
        f"{direction} que impactou o resultado global. É necessário focar nas "
        "ações corretivas listadas abaixo para estabilizar a operação."
    )


# ── Entry point ───────────────────────────────────────────────────────────────


def _snapshot(item: OracleData | HistoryRecord) -> OracleData:
    return item.dados if isinstance(item, HistoryRecord) else item


def compare_periods(
    base: OracleData | HistoryRecord,
    current: OracleData | HistoryRecord,
    *,
    base_id: Optional[str] = None,
    current_id: Optional[str] = None,
) -> ComparisonResult:
    """Compare a base period (A) with a current one (B).

    Args:
        base:       Saved snapshot A.
        current:    Snapshot B; may be the unsaved in-progress data.
        base_id:    Id reported as ``period_a`` (defaults to the record id).
        current_id: Id reported as ``period_b`` (defaults to the record id,
            or ``"current"`` for unsaved data).

    Returns:
        A ``ComparisonResult``; ``error`` is set instead of raising when the
        comparison fails unexpectedly.
    """
    if base_id is None:
        base_id = base.id if isinstance(base, HistoryRecord) else ""
    if current_id is None:
        current_id = current.id if isinstance(current, HistoryRecord) else CURRENT_ID

    try:
        a, b = _snapshot(base), _snapshot(current)
        pillars = tuple(
            compare_pillar(name, getattr(a.store.pillars, key), getattr(b.store.pillars, key))
            for key, name in _PILLARS
        )
        base_score = store_score(a.store, a.sellers)
        current_score = store_score(b.store, b.sellers)
        delta = current_score - base_score
        status = classify_evolution(delta)
        share = top2_mercantil_share(b.store, b.sellers)

        alerts = pillar_alerts(pillars)
        concentration = concentration_alert(share)
        if concentration is not None:
            alerts.append(concentration)

        result = ComparisonResult(
            period_a=base_id,
            period_b=current_id,
            store=StoreComparison(
                pillars=pillars,
                base_score=base_score,
                current_score=current_score,
                delta_score=delta,
                classification=status.value,
                top2_share=share,
            ),
            sellers=tuple(compare_seller(s, a.sellers, b.sellers) for s in b.sellers),
            alerts=tuple(alerts),
            executive_summary=executive_summary(status, base_score, current_score),
        )
    except Exception:
        logger.exception("Failed to compare '%s' with '%s'", base_id, current_id)
        return ComparisonResult(period_a=base_id, period_b=current_id, error=COMPARE_ERROR)

    logger.info(
        "Compared %s → %s: %s (%+.1f pts), %d alert(s)",
        base_id or "?", current_id, status.value, delta, len(alerts),
    )
    return result
