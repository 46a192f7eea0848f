"""
ASCII terminal formatters for CLI commands.

Every formatter takes an already computed model and returns a plain
multi-line string for ``typer.echo()``. Amounts use pt-BR formatting
(``R$ 1.234``, ``12,3%``) so the output matches what store managers read in
the host application.

Results that carry ``error`` render as a single ``[ERROR]`` block instead of
a half-filled report.
"""

from __future__ import annotations

from typing import Optional, Sequence

from sales_oracle.models.comparison import ComparisonResult, HistoryTrendReport
from sales_oracle.models.history import HistoryRecord
from sales_oracle.models.narrative import HistoryNarrative
from sales_oracle.models.oracle import OracleData
from sales_oracle.processing.labels import generate_period_label
from sales_oracle.utils.locale_br import (
    format_currency_br,
    format_number_br,
    format_percent_br,
)


def _error_block(title: str, error: str) -> str:
    return "\n".join(["", f"=== {title} ===", f"  [ERROR] {error}"])


# ── Period summary ────────────────────────────────────────────────────────────


def format_period_summary(result: OracleData) -> str:
    """Store header, pillar table, team aggregates and seller ranking.

    Sellers are listed by descending score; ties keep input order.
    """
    store = result.store
    if not result.ok:
        return _error_block(f"Oráculo Comercial: {store.name}", result.error or "")

    lines: list[str] = [
        "",
        f"=== Oráculo Comercial: {store.name} ===",
        f"  Período:       {store.period.label}",
        f"  Saúde:         {format_number_br(store.health_index)} ({store.classification})",
    ]
    if result.intelligence is not None:
        lines.append(
            f"  Score da loja: {format_number_br(result.intelligence.health_score, 1)} "
            f"({result.intelligence.health_reading})"
        )
    crown = "CONSOLIDADA" if store.triple_crown_status.complete else "EM BUSCA"
    lines.append(f"  Tríplice Coroa: {crown}")

    lines.append("")
    header = f"    {'Pilar':<10}  {'Meta':>14}  {'Realizado':>14}  {'ICM':>8}  {'Gap':>14}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    pillars = store.pillars
    for name, pillar in (
        ("Mercantil", pillars.mercantil),
        ("CDC", pillars.cdc),
        ("Serviços", pillars.services),
    ):
        lines.append(
            f"    {name:<10}  {format_currency_br(pillar.meta):>14}  "
            f"{format_currency_br(pillar.realized):>14}  "
            f"{format_percent_br(pillar.icm):>8}  {format_currency_br(pillar.gap):>14}"
        )

    dist, maturity, projection = result.distribution, result.maturity_index, result.projection
    lines.append("")
    lines.append(
        f"  Dependência:   {dist.dependency_level} "
        f"(top 1 {format_percent_br(dist.top1_contribution)}, "
        f"top 2 {format_percent_br(dist.top2_contribution)})"
    )
    lines.append(
        f"  Maturidade:    {maturity.classification} "
        f"({format_percent_br(maturity.above100_percent)} >= 100, "
        f"{format_percent_br(maturity.below80_percent)} < 80)"
    )
    if projection.is_available:
        lines.append(
            f"  Projeção:      {projection.probability} "
            f"(Mercantil {format_currency_br(projection.mercantil_projected)}, "
            f"CDC {format_currency_br(projection.cdc_projected)}, "
            f"Serviços {format_currency_br(projection.services_projected)})"
        )
    else:
        lines.append(f"  Projeção:      indisponível ({projection.probability})")

    lines.append("")
    if not result.sellers:
        lines.append("  (nenhum vendedor informado)")
        return "\n".join(lines)

    header = (
        f"    {'#':>3}  {'Vendedor':<24}  {'Merc.':>8}  {'CDC':>8}  "
        f"{'Serv.':>8}  {'Score':>6}  Status"
    )
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    ranked = sorted(result.sellers, key=lambda s: s.score, reverse=True)
    for pos, seller in enumerate(ranked, start=1):
        marks = ""
        if seller.id == result.mvp_id:
            marks += " [MVP]"
        if seller.is_triple_crown:
            marks += " [3C]"
        if seller.intelligence is not None and seller.intelligence.risk_alert:
            marks += " [RISCO]"
        p = seller.pillars
        lines.append(
            f"    {pos:>3}  {seller.name[:24]:<24}  {format_percent_br(p.mercantil.icm):>8}  "
            f"{format_percent_br(p.cdc.icm):>8}  {format_percent_br(p.services.icm):>8}  "
            f"{format_number_br(seller.score, 1):>6}  {seller.classification}{marks}"
        )

    if result.mvp_justification:
        lines.append("")
        lines.append(f"  MVP: {result.mvp_justification}")
    if result.intelligence is not None:
        radar = result.intelligence.radar
        lines.append(f"  Tendência geral: {radar.general_trend}")
        lines.append(f"  Concentração:    {result.intelligence.concentration_risk}")
    return "\n".join(lines)


# ── Comparison ────────────────────────────────────────────────────────────────


def format_comparison(result: ComparisonResult) -> str:
    """Pillar deltas, store score movement, seller moves and alerts."""
    title = f"Comparativo {result.period_a} -> {result.period_b}"
    if result.error is not None:
        return _error_block(title, result.error)

    store = result.store
    lines: list[str] = [
        "",
        f"=== {title} ===",
        f"  Score:         {format_number_br(store.base_score, 1)} -> "
        f"{format_number_br(store.current_score, 1)} "
        f"({store.delta_score:+.1f} pts, {store.classification})",
        f"  Top 2 share:   {format_percent_br(store.top2_share * 100)}",
        "",
    ]
    header = f"    {'Pilar':<10}  {'Base':>14}  {'Atual':>14}  {'Var.':>8}  {'ICM A':>8}  {'ICM B':>8}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for p in store.pillars:
        lines.append(
            f"    {p.name:<10}  {format_currency_br(p.base_real):>14}  "
            f"{format_currency_br(p.current_real):>14}  {format_percent_br(p.delta_percent):>8}  "
            f"{format_percent_br(p.base_icm):>8}  {format_percent_br(p.current_icm):>8}"
        )

    if result.sellers:
        lines.append("")
        header = f"    {'Vendedor':<24}  {'Score A':>7}  {'Score B':>7}  {'Delta':>6}  {'Rank':>9}  Alertas"
        lines.append(header)
        lines.append("    " + "-" * (len(header) - 4))
        for s in result.sellers:
            rank = f"{s.base_rank or '-'}->{s.current_rank}"
            lines.append(
                f"    {s.name[:24]:<24}  {s.base_score:>7.1f}  {s.current_score:>7.1f}  "
                f"{s.delta_score:>+6.1f}  {rank:>9}  {'; '.join(s.alerts)}"
            )

    lines.append("")
    if result.alerts:
        for alert in result.alerts:
            lines.append(f"  [{alert.type}] {alert.title}")
            lines.append(f"      {alert.reason}")
            lines.append(f"      {alert.action}")
    else:
        lines.append("  (nenhum alerta)")
    lines.append("")
    lines.append(f"  {result.executive_summary}")
    return "\n".join(lines)


# ── History ───────────────────────────────────────────────────────────────────


def format_history_report(
    report: HistoryTrendReport,
    narrative: Optional[HistoryNarrative] = None,
) -> str:
    """Cycle series, trends and consolidated indices (plus narrative, if any)."""
    if report.error is not None:
        return _error_block("Histórico Global", report.error)

    lines: list[str] = ["", "=== Histórico Global ==="]
    if not report.points:
        lines.append("  (nenhum ciclo salvo)")
        return "\n".join(lines)

    header = f"    {'Ciclo':<36}  {'Score':>6}  {'Dep.':>7}  {'Merc.':>8}  {'CDC':>8}  {'Serv.':>8}"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for p in report.points:
        lines.append(
            f"    {p.label[:36]:<36}  {p.score:>6.1f}  {format_percent_br(p.dependency):>7}  "
            f"{format_percent_br(p.mercantil_icm):>8}  {format_percent_br(p.cdc_icm):>8}  "
            f"{format_percent_br(p.services_icm):>8}"
        )

    lines.append("")
    lines.append(f"  Tendência de score:        {report.score_trend}")
    lines.append(f"  Tendência de dependência:  {report.dependency_trend}")
    for name, trend in report.pillar_trends.items():
        lines.append(f"  Tendência {name + ':':<16} {trend}")
    lines.append(f"  Score médio:               {format_number_br(report.average_score, 1)}")
    lines.append(f"  Dependência média:         {format_percent_br(report.average_dependency)}")
    lines.append(f"  Consistência:              {format_number_br(report.consistency_index, 1)}")
    lines.append(f"  Risco estrutural:          {format_number_br(report.structural_risk_index, 1)}")
    lines.append(f"  Projeção próximo ciclo:    {format_number_br(report.next_cycle_projection, 1)}")
    lines.append(
        f"  Ciclo:                     {report.cycle_classification} [{report.alert_level}]"
    )

    if narrative is not None:
        lines.append("")
        lines.append("  -- Leitura executiva --")
        lines.append(f"  Situação:        {narrative.executivo.situacao}")
        lines.append(f"  Causa principal: {narrative.executivo.causa_principal}")
        lines.append(f"  Risco:           {narrative.executivo.risco}")
        lines.append(f"  Ação imediata:   {narrative.executivo.acao_imediata}")
        lines.append(f"  {narrative.executivo.frase_final}")
    return "\n".join(lines)


def format_history_list(records: Sequence[HistoryRecord]) -> str:
    """One line per saved record: id, label and store score reading."""
    lines: list[str] = ["", "=== Histórico Salvo ==="]
    if not records:
        lines.append("  (nenhum registro salvo)")
        return "\n".join(lines)

    header = f"    {'Id':<36}  {'Tipo':<8}  {'Referência':<10}  Período"
    lines.append(header)
    lines.append("    " + "-" * (len(header) - 4))
    for record in records:
        period = record.dados.store.period
        lines.append(
            f"    {record.id:<36}  {record.tipo.value:<8}  {record.data_referencia:<10}  "
            f"{period.label or generate_period_label(period)}"
        )
    return "\n".join(lines)
