"""Sales insight rules.

An ordered list of (factor, bundle) rules. The first factor whose natural
score reaches the threshold selects its bundle, so D wins over I, I over
S and S over C when several clear it.
"""

from typing import NamedTuple

from discform.config import ScoringPolicy
from discform.core.models import DiscFactor
from discform.core.scores import DiscScores, SalesInsights


class SalesRule(NamedTuple):
    factor: DiscFactor
    bundle: SalesInsights

    def matches(self, natural: DiscScores, threshold: int) -> bool:
        return natural.get(self.factor) >= threshold


SALES_RULES: tuple[SalesRule, ...] = (
    SalesRule(
        DiscFactor.D,
        SalesInsights(
            strengths=("Fechamento direto e rápido", "Foco em resultados"),
            weaknesses=("Pode ser muito agressivo",),
            ideal_customer="Decisores de alto nível que valorizam eficiência",
            sales_approach="Abordagem direta, focada em ROI e resultados tangíveis",
        ),
    ),
    SalesRule(
        DiscFactor.I,
        SalesInsights(
            strengths=("Construção de relacionamentos", "Entusiasmo contagiante"),
            weaknesses=("Pode perder foco em detalhes",),
            ideal_customer="Clientes que valorizam networking e experiências",
            sales_approach="Abordagem social, storytelling e demonstrações empolgantes",
        ),
    ),
    SalesRule(
        DiscFactor.S,
        SalesInsights(
            strengths=("Paciência no ciclo de vendas", "Fidelização de clientes"),
            weaknesses=("Dificuldade com pressão e urgência",),
            ideal_customer="Clientes que precisam de suporte contínuo",
            sales_approach="Abordagem consultiva, construindo confiança ao longo do tempo",
        ),
    ),
    SalesRule(
        DiscFactor.C,
        SalesInsights(
            strengths=("Apresentações detalhadas", "Precisão técnica"),
            weaknesses=("Lentidão no fechamento",),
            ideal_customer="Clientes técnicos que exigem dados e provas",
            sales_approach="Abordagem analítica com documentação completa e casos de estudo",
        ),
    ),
)

VERSATILE_INSIGHTS = SalesInsights(
    strengths=("Versatilidade", "Adaptabilidade"),
    weaknesses=("Falta de especialização",),
    ideal_customer="Diversos tipos de clientes",
    sales_approach="Abordagem flexível adaptada ao perfil do cliente",
)


def sales_insights(natural: DiscScores, policy: ScoringPolicy | None = None) -> SalesInsights:
    """Select the sales insight bundle for a natural DISC vector."""
    policy = policy or ScoringPolicy()
    for rule in SALES_RULES:
        if rule.matches(natural, policy.sales_threshold):
            return rule.bundle
    return VERSATILE_INSIGHTS
