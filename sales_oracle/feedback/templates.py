"""
Five-block seller feedback built from fixed pt-BR templates.

Layout (blocks separated by a blank line)::

    NOME – Feedback <period label>

    leitura técnica
    diagnóstico operacional
    impacto
    direcionamento
    encerramento

``Automatico`` chooses the block set from the seller's pillar ICMs, checked
in order:

    all three >= 100                            → equilíbrio
    mercantil >= 100 and (cdc < 90 or serv < 90) → volume sem ativação
    cdc >= 100 and serv < 90                     → CDC sem serviços
    serv >= 100 and mercantil < 90               → margem sem volume
    all three < 80                               → desbalanceamento crítico
    otherwise                                    → oscilante

The other types use a single block set; ``Ajuste de Rota`` names the weakest
pillar (ties resolve Mercantil, then CDC, then Serviços).
"""

from __future__ import annotations

import logging

from sales_oracle.models.entities import Seller
from sales_oracle.scoring.formulas import icm
from sales_oracle.taxonomy.classification import FeedbackType

logger = logging.getLogger(__name__)

Blocks = tuple[str, str, str, str, str]

# ── Automatico block sets ─────────────────────────────────────────────────────

_AUTO_BALANCED: Blocks = (
    "Entrega de alta performance com equilíbrio total entre volume e rentabilidade financeira.",
    "Execução impecável da proposta completa em todos os atendimentos realizados.",
    "Sua operação sustenta o crescimento da unidade com margem saudável e segura.",
    "Mantenha o rigor na execução para consolidar esse patamar de entrega estratégica.",
    "Equilíbrio entre pilares é o que sustenta performance.",
)

_AUTO_VOLUME_ONLY: Blocks = (
    "O volume de Mercantil está batendo a meta, mas a ativação de CDC e Serviços está "
    "descolada. Isso indica venda focada em produto sem ativação financeira completa.",
    "Existe abordagem de produto, mas falta estrutura na proposta de valor agregado e financiamento.",
    "Sem ativar CDC e Serviços, o ticket médio e a margem da sua operação ficam comprometidos.",
    "Inicie a oferta pelo financiamento e inclua serviços como parte natural da proposta de fechamento.",
    "Volume sem margem não sustenta o negócio.",
)

_AUTO_CDC_WITHOUT_SERVICES: Blocks = (
    "A performance em CDC é positiva, porém a conversão de Serviços não acompanha o ritmo da operação.",
    "Foco excessivo no fechamento financeiro, esquecendo de agregar proteção e valor através dos serviços.",
    "A eficiência da venda fica incompleta e a rentabilidade individual abaixo do potencial real.",
    "Trabalhe o serviço como um benefício de segurança atrelado diretamente à parcela do financiamento.",
    "A venda completa é o único caminho para a excelência.",
)

_AUTO_MARGIN_WITHOUT_VOLUME: Blocks = (
    "A rentabilidade de Serviços está alta, mas o volume de Mercantil está abaixo do esperado para o período.",
    "Foco em valor agregado, mas com baixa conversão de fluxo ou falta de agressividade no produto principal.",
    "A margem é positiva, mas o faturamento total da unidade fica prejudicado pela falta de volume.",
    "Aumente a agressividade no fechamento do produto principal para ganhar escala e aproveitar a boa margem.",
    "Volume e margem precisam caminhar juntos.",
)

_AUTO_CRITICAL: Blocks = (
    "Desbalanceamento crítico com todos os pilares operando abaixo do mínimo aceitável para a operação.",
    "Falha grave na execução básica e falta de atitude comercial ativa no salão de vendas.",
    "A operação perde competitividade e o resultado global da unidade é severamente comprometido.",
    "Reação imediata com foco em abordagem ativa e oferta obrigatória de 100% do mix de produtos.",
    "Execução é o que separa o plano do resultado.",
)

_AUTO_OSCILLATING: Blocks = (
    "Performance oscilante com falta de equilíbrio técnico entre os indicadores de volume e rentabilidade.",
    "Abordagem inconsistente que gera resultados irregulares e dependência de um único pilar.",
    "A instabilidade dificulta a previsibilidade de entrega e a saúde financeira da sua carteira.",
    "Padronize seu atendimento e garanta a oferta estruturada em cada oportunidade de venda.",
    "Consistência gera resultados sustentáveis.",
)

# ── Fixed block sets ──────────────────────────────────────────────────────────

_FIXED: dict[FeedbackType, Blocks] = {
    FeedbackType.RECONHECIMENTO: (
        "Entrega equilibrada e acima da média em todos os pilares estratégicos da unidade.",
        "Execução de proposta completa em cada atendimento, garantindo volume e rentabilidade.",
        "Isso garante a saúde financeira da operação e eleva o nível técnico de toda a equipe.",
        "Mantenha o rigor na oferta e lidere pelo exemplo de consistência no time.",
        "Consistência gera liderança.",
    ),
    FeedbackType.CORRETIVO: (
        "Os pilares de volume e rentabilidade estão operando abaixo do mínimo aceitável.",
        "Falta de atitude comercial e falha na estrutura básica de abordagem ao cliente.",
        "O resultado da unidade fica comprometido e a operação perde tração no mercado.",
        "Retome o básico: abordagem ativa e oferta obrigatória de todos os itens do mix.",
        "Execução não é opcional.",
    ),
    FeedbackType.DESENVOLVIMENTO: (
        "Existe volume de atendimento, mas a conversão em rentabilidade financeira é insuficiente.",
        "Falta técnica de contorno de objeções e estruturação de fechamento de venda.",
        "Muito esforço operacional para pouco resultado financeiro real no final do período.",
        "Trabalhe a estrutura da sua venda para ganhar escala e consistência diária.",
        "Conhecimento técnico vira venda.",
    ),
}


def seller_icms(seller: Seller) -> tuple[float, float, float]:
    """(mercantil, cdc, services) ICMs recomputed from meta/realized."""
    p = seller.pillars
    return (
        icm(p.mercantil.realized, p.mercantil.meta),
        icm(p.cdc.realized, p.cdc.meta),
        icm(p.services.realized, p.services.meta),
    )


def automatic_blocks(mercantil: float, cdc: float, services: float) -> Blocks:
    if mercantil >= 100 and cdc >= 100 and services >= 100:
        return _AUTO_BALANCED
    if mercantil >= 100 and (cdc < 90 or services < 90):
        return _AUTO_VOLUME_ONLY
    if cdc >= 100 and services < 90:
        return _AUTO_CDC_WITHOUT_SERVICES
    if services >= 100 and mercantil < 90:
        return _AUTO_MARGIN_WITHOUT_VOLUME
    if mercantil < 80 and cdc < 80 and services < 80:
        return _AUTO_CRITICAL
    return _AUTO_OSCILLATING


def weakest_pillar(mercantil: float, cdc: float, services: float) -> str:
    lowest = min(mercantil, cdc, services)
    if lowest == mercantil:
        return "Mercantil"
    if lowest == cdc:
        return "CDC"
    return "Serviços"


def route_adjustment_blocks(mercantil: float, cdc: float, services: float) -> Blocks:
    pillar = weakest_pillar(mercantil, cdc, services)
    return (
        f"Seu resultado em {pillar} está travando sua evolução e desequilibrando os demais pilares.",
        "A venda está sendo concluída, mas sem a ativação correta deste indicador específico.",
        "Isso derruba sua eficiência individual e a rentabilidade média da unidade.",
        f"Foque especificamente na conversão de {pillar} para equilibrar sua entrega técnica.",
        "O detalhe define o resultado.",
    )


def generate_feedback(
    seller: Seller,
    period_label: str,
    feedback_type: FeedbackType | str = FeedbackType.AUTOMATICO,
) -> str:
    """Render the feedback text for one seller.

    Args:
        seller:        Seller with raw pillar numbers (derived ICMs not required).
        period_label:  Label shown in the title, e.g. ``"Fevereiro/2025"``.
        feedback_type: A ``FeedbackType`` or its value.

    Returns:
        Title and five blocks separated by blank lines.

    Raises:
        ValueError: If ``feedback_type`` is not a known template family.
    """
    feedback_type = FeedbackType(feedback_type)
    icms = seller_icms(seller)

    if feedback_type == FeedbackType.AUTOMATICO:
        blocks = automatic_blocks(*icms)
    elif feedback_type == FeedbackType.AJUSTE_DE_ROTA:
        blocks = route_adjustment_blocks(*icms)
    else:
        blocks = _FIXED[feedback_type]

    logger.debug("Feedback '%s' for seller '%s'", feedback_type.value, seller.name)
    title = f"{seller.name.upper()} – Feedback {period_label}"
    return "\n\n".join((title, *blocks))
