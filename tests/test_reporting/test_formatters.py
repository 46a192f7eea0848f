"""Tests for sales_oracle.reporting.formatters."""

from __future__ import annotations

import pytest

from sales_oracle.evolution.comparison import compare_periods
from sales_oracle.evolution.history import analyze_history
from sales_oracle.models.comparison import ComparisonResult, HistoryTrendReport
from sales_oracle.models.history import make_history_record
from sales_oracle.models.narrative import HistoryNarrative
from sales_oracle.processing.processor import process_period
from sales_oracle.reporting.formatters import (
    format_comparison,
    format_history_list,
    format_history_report,
    format_period_summary,
)


@pytest.fixture
def processed(period_input, fixed_now):
    return process_period(period_input, now=fixed_now)


# ── format_period_summary ─────────────────────────────────────────────────────


def test_period_summary_header(processed) -> None:
    """Header shows store, label and health reading."""
    text = format_period_summary(processed)
    assert "=== Oráculo Comercial: Loja Centro ===" in text
    assert "Fevereiro/2025" in text
    assert "99 (Alta Performance Sustentável)" in text
    assert "Tríplice Coroa: EM BUSCA" in text


def test_period_summary_pillars_in_br_format(processed) -> None:
    """Pillar amounts use R$ with dot thousands; ICM uses comma decimals."""
    text = format_period_summary(processed)
    assert "R$ 100.000" in text
    assert "90,0%" in text
    assert "R$ -1.000" in text


def test_period_summary_seller_marks(processed) -> None:
    """MVP and triple-crown marks sit on the top seller's line."""
    lines = format_period_summary(processed).splitlines()
    ana = next(line for line in lines if "Ana" in line and "Elite" in line)
    assert "[MVP]" in ana
    assert "[3C]" in ana
    carla = next(line for line in lines if "Carla" in line)
    assert "[MVP]" not in carla


def test_period_summary_ranked_by_score(processed) -> None:
    """Sellers are listed by descending score."""
    text = format_period_summary(processed)
    assert text.index("Ana") < text.index("Bruno") < text.index("Carla")


def test_period_summary_no_sellers(period_input, fixed_now) -> None:
    period_input["sellers"] = []
    text = format_period_summary(process_period(period_input, now=fixed_now))
    assert "(nenhum vendedor informado)" in text


def test_period_summary_projection_unavailable(period_input, fixed_now) -> None:
    period_input["store"]["period"]["businessDaysTotal"] = 0
    text = format_period_summary(process_period(period_input, now=fixed_now))
    assert "indisponível (Dados insuficientes)" in text


def test_period_summary_error(processed) -> None:
    """A failed result renders only the [ERROR] block."""
    text = format_period_summary(processed.model_copy(update={"error": "falhou"}))
    assert "[ERROR] falhou" in text
    assert "Pilar" not in text


# ── format_comparison ─────────────────────────────────────────────────────────


def test_comparison_render(make_snapshot) -> None:
    result = compare_periods(
        make_history_record(make_snapshot(100, month=1, sellers=10)),
        make_snapshot(90, month=2, sellers=10),
    )
    text = format_comparison(result)
    assert "=== Comparativo LOJACENTRO-2025-MONTHLY-01 -> current ===" in text
    assert "(-6.5 pts, Regressão)" in text
    assert "[A] Regressão no pilar Mercantil" in text
    assert text.rstrip().endswith("listadas abaixo para estabilizar a operação.")


def test_comparison_no_alerts(make_snapshot) -> None:
    result = compare_periods(
        make_snapshot(90, month=1, sellers=10),
        make_snapshot(90, month=2, sellers=10),
    )
    assert "(nenhum alerta)" in format_comparison(result)


def test_comparison_new_seller_rank(make_snapshot) -> None:
    """Sellers absent from the base show '-' as their base rank."""
    base = make_snapshot(month=1, seller_mercs={"Ana": 10000})
    current = make_snapshot(month=2, seller_mercs={"Ana": 10000, "Davi": 9000})
    assert "-->2" in format_comparison(compare_periods(base, current))


def test_comparison_error() -> None:
    text = format_comparison(ComparisonResult(period_a="A", period_b="B", error="falhou"))
    assert "=== Comparativo A -> B ===" in text
    assert "[ERROR] falhou" in text


# ── format_history_report / format_history_list ───────────────────────────────


def _records(make_snapshot):
    return [make_history_record(make_snapshot(icm, month=m)) for m, icm in ((1, 80), (2, 90), (3, 100))]


def test_history_report_render(make_snapshot) -> None:
    text = format_history_report(analyze_history(_records(make_snapshot)))
    assert "=== Histórico Global ===" in text
    assert "Março/2025" in text
    assert "Tendência de Alta" in text
    assert "Em Expansão [saudavel]" in text
    assert "Leitura executiva" not in text


def test_history_report_with_narrative(make_snapshot) -> None:
    narrative = HistoryNarrative.model_validate({
        "classificacao_ciclo": "Em Expansão",
        "nivel_alerta": "saudavel",
        "score_atual": 100,
        "dependencia_atual": 50,
        "indice_risco_estrutural": 13.9,
        "indice_consistencia": 87,
        "projecao_proximo_ciclo": 100,
        "interno": {
            "status_ciclo": "s", "tendencia_score": "t", "raio_x_pilares": "r",
            "evolucao_dependencia": "e", "maturidade_operacional": "m",
            "conclusao_estrategica": "c", "frase_final": "f",
        },
        "executivo": {
            "situacao": "Unidade em expansão", "causa_principal": "c", "risco": "r",
            "acao_imediata": "Distribuir volume", "frase_final": "f",
        },
    })
    text = format_history_report(analyze_history(_records(make_snapshot)), narrative)
    assert "Situação:        Unidade em expansão" in text
    assert "Ação imediata:   Distribuir volume" in text


def test_history_report_empty() -> None:
    assert "(nenhum ciclo salvo)" in format_history_report(HistoryTrendReport())


def test_history_report_error() -> None:
    assert "[ERROR] falhou" in format_history_report(HistoryTrendReport(error="falhou"))


def test_history_list(make_snapshot) -> None:
    text = format_history_list(_records(make_snapshot))
    assert "LOJACENTRO-2025-MONTHLY-02" in text
    assert "2025-02-01" in text
    assert "Fevereiro/2025" in text


def test_history_list_empty() -> None:
    assert "(nenhum registro salvo)" in format_history_list([])
