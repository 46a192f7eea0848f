"""
Prompt builders for the hosted narrative generator.

Every number embedded in a prompt comes from an already computed result
(``OracleResult``, ``ComparisonResult`` or ``HistoryTrendReport``); the
builders never recompute or invent figures. System instructions fix the tone
and the mandatory output blocks.
"""

from __future__ import annotations

from typing import Any

from sales_oracle.models.comparison import ComparisonResult, HistoryTrendReport
from sales_oracle.models.oracle import OracleData
from sales_oracle.processing.labels import generate_period_label
from sales_oracle.taxonomy.classification import AlertLevel, PillarName
from sales_oracle.utils.locale_br import format_percent_br

DEFAULT_SYSTEM = (
    "Você é um analista comercial estratégico especializado em varejo de alta performance."
)

DIAGNOSIS_SYSTEM = """\
Você é o motor de Diagnóstico Estratégico do Oráculo Comercial.
Sua função é analisar dois períodos (Base A vs Atual B) e gerar um diagnóstico técnico + provocativo, com foco em execução comercial.

Você deve gerar o diagnóstico em 6 blocos obrigatórios:
1) STATUS DO CICLO
2) LEITURA ESTRATÉGICA DA UNIDADE
3) ESTRUTURA DO TIME
4) PONTO DE PRESSÃO
5) AÇÃO IMEDIATA
6) FRASE FINAL

Tom: técnico, estratégico e provocativo. Sem emojis. Sem floreios. Sem narrativa motivacional vazia.
Fundamente sempre nos números recebidos."""

HISTORY_SYSTEM = """\
Você é o Motor Avançado de Inteligência do Histórico Global do Oráculo Comercial.
Sua função é interpretar TODOS os ciclos lançados no sistema e gerar um diagnóstico estratégico completo.

Você deve retornar um objeto JSON seguindo rigorosamente o esquema definido.

REGRAS DE CLASSIFICAÇÃO DO CICLO:
Se score_atual < 75 → classificacao_ciclo = "Instável"
Se score_atual entre 75 e 85 → "Em Recuperação"
Se score_atual entre 85 e 95 → "Sustentável"
Se score_atual > 95 → "Em Expansão"

REGRAS DE NÍVEL DE ALERTA:
Se score_atual < 75 → nivel_alerta = "critico"
Se score_atual entre 75 e 85 → "atencao"
Se score_atual > 85 → "saudavel"

Os índices consolidados (risco estrutural, consistência e projeção) já foram calculados e constam nos dados; repita-os sem alterar.

REGRAS DA ANÁLISE INTERNA:
- Linguagem técnica e analítica. Identificar causa estrutural. Relacionar dependência com risco. Comparar ciclos. Sem emojis.

REGRAS DA ANÁLISE EXECUTIVA:
- Linguagem direta e estratégica. Frases curtas. Foco em decisão. 1 causa principal clara. 1 ação imediata clara.

Regras Gerais:
- Basear-se apenas nos dados enviados. Não inventar números.
- Não repetir texto entre interno e executivo."""

METRIC_DEFINITIONS: dict[str, str] = {
    "risco_estrutural": (
        "Mede a fragilidade operacional da unidade considerando o desempenho dos "
        "pilares, o nível de dependência de vendedores específicos e a volatilidade "
        "histórica dos resultados."
    ),
    "consistencia": (
        "Avalia a estabilidade da performance entre os ciclos operacionais e a "
        "capacidade da unidade em reter ganhos e manter padrões de entrega ao longo "
        "do tempo."
    ),
    "projecao_proximo_ciclo": (
        "Estimativa estatística da tendência futura baseada no comportamento dos "
        "ciclos mais recentes. Não representa uma meta, mas sim um indicativo de "
        "direção provável."
    ),
}

_TEXT = {"type": "string"}
_NUMBER = {"type": "number"}

_INTERNAL_KEYS = (
    "status_ciclo", "tendencia_score", "raio_x_pilares", "evolucao_dependencia",
    "maturidade_operacional", "conclusao_estrategica", "frase_final",
)
_EXECUTIVE_KEYS = ("situacao", "causa_principal", "risco", "acao_imediata", "frase_final")

HISTORY_ANALYSIS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "classificacao_ciclo": _TEXT,
        "nivel_alerta": {"type": "string", "enum": [level.value for level in AlertLevel]},
        "score_atual": _NUMBER,
        "dependencia_atual": _NUMBER,
        "indice_risco_estrutural": _NUMBER,
        "indice_consistencia": _NUMBER,
        "projecao_proximo_ciclo": _NUMBER,
        "interno": {
            "type": "object",
            "properties": {key: _TEXT for key in _INTERNAL_KEYS},
            "required": list(_INTERNAL_KEYS),
        },
        "executivo": {
            "type": "object",
            "properties": {key: _TEXT for key in _EXECUTIVE_KEYS},
            "required": list(_EXECUTIVE_KEYS),
        },
    },
    "required": [
        "classificacao_ciclo", "nivel_alerta", "score_atual", "dependencia_atual",
        "indice_risco_estrutural", "indice_consistencia", "projecao_proximo_ciclo",
        "interno", "executivo",
    ],
}


# ── Builders ──────────────────────────────────────────────────────────────────


def build_executive_prompt(result: OracleData) -> str:
    """Executive reading of one processed period."""
    store = result.store
    pillars = store.pillars
    operational = (
        pillars.operational.cards.achievement + pillars.operational.combos.achievement
    ) / 2
    projection = result.projection
    crown = "Consolidada" if store.triple_crown_status.complete else "Pendente"
    label = store.period.label or generate_period_label(store.period)

    return f"""\
Você é o Oráculo Comercial, um sistema de inteligência estratégica de alta performance.
Analise os seguintes dados da loja {store.name} para o período de {label} e gere uma leitura executiva fria, técnica e direta.

DADOS DA LOJA:
- Saúde da Loja: {store.health_index:.2f}% ({store.classification})
- Tríplice Coroa: {crown}
- Execução Operacional (Cartões/Combos): {operational:.1f}%
- Projeção de Fechamento: Mercantil {projection.mercantil_projected:.1f}, CDC {projection.cdc_projected:.1f}, Serviços {projection.services_projected:.1f} ({projection.probability})
- Dependência: {result.distribution.dependency_level} (Concentração Top 1: {result.distribution.top1_contribution:.1f}%)
- Maturidade do Time: {result.maturity_index.classification} ({result.maturity_index.above100_percent:.1f}% acima de 100%)

REGRAS DE ANÁLISE:
1. Identifique se o cenário é de "Crescimento Saudável", "Risco de Concentração" ou "Erosão de Margem".
2. Avalie o equilíbrio entre os pilares (Mercantil, CDC, Serviços).
3. Analise se a execução operacional (Cartões/Combos) está acompanhando a saúde financeira.
4. Projete o fechamento com base na tendência atual.

REGRAS DE SAÍDA:
1. Resumo Executivo (máximo 3 parágrafos).
2. Regional Preview (foco em resultados e tendências).
3. Blindagem Estratégica (ações preventivas imediatas).
4. Ajuste Estrutural Recomendado (foco em pessoas e processos).
5. Use tom profissional, técnico e direto. Sem motivação genérica.
6. Formate em Markdown.
"""


def build_comparison_prompt(comparison: ComparisonResult) -> str:
    """Strategic diagnosis of a base-vs-current comparison."""
    lines = ["Analise os seguintes dados da unidade:"]
    pillars = comparison.store.pillars
    for pillar in pillars:
        lines.append(f"- Crescimento {pillar.name}: {format_percent_br(pillar.delta_percent)}")
    for pillar in pillars:
        lines.append(
            f"- ICM {pillar.name}: Base {pillar.base_icm:.1f}% / Atual {pillar.current_icm:.1f}%"
        )
    lines.append(
        "- Índice de Dependência (Top 2 Share): "
        f"{format_percent_br(comparison.store.top2_share * 100)}"
    )
    lines.append(f"- Variação Score Global: {comparison.store.delta_score:.1f} pts")
    moves = ", ".join(f"{s.name}: {s.delta_rank:+d}" for s in comparison.sellers)
    lines.append(f"- Movimentação de Ranking: {moves or 'sem vendedores'}")
    lines.append("")
    lines.append("Gere o diagnóstico estratégico conforme as regras de 6 blocos obrigatórios.")
    return "\n".join(lines)


def build_history_prompt(report: HistoryTrendReport) -> str:
    """Consolidated history analysis; asks for JSON matching the schema."""
    icms = report.average_icm
    cycles = "\n".join(
        f"- {p.label}: Score {p.score:.1f} / Dep {p.dependency:.1f}%" for p in report.points
    )
    return f"""\
Analise o histórico global da unidade ({len(report.points)} ciclos):
- Tendência de Score: {report.score_trend}
- Tendência de Dependência: {report.dependency_trend}
- Médias Históricas (ICM): Mercantil {icms.get(PillarName.MERCANTIL.value, 0.0):.1f}%, CDC {icms.get(PillarName.CDC.value, 0.0):.1f}%, Services {icms.get(PillarName.SERVICES.value, 0.0):.1f}%
- Score Atual: {report.current_score:.1f} / Dependência Atual: {report.current_dependency:.1f}%
- Índice de Consistência: {report.consistency_index:.1f}
- Índice de Risco Estrutural: {report.structural_risk_index:.1f}
- Projeção Próximo Ciclo: {report.next_cycle_projection:.1f}
- Lista de Ciclos (Score / Dependência):
{cycles}

Gere as análises Interna e Executiva conforme as regras de blocos obrigatórios. Retorne apenas o JSON.
"""
