"""Rule-based insights derived from a metrics snapshot."""

from decimal import Decimal
from typing import Optional

from ledgerlens.domain.entities import Insight, InsightCategory, MetricsSnapshot, Severity

# (threshold, severity, text) tiers per rule, checked top-down with a strict
# "greater than" comparison. A threshold of None is the fallback tier.
PROFITABILITY_TIERS = (
    (Decimal("0.8"), Severity.SUCCESS, "Strong profitability with 80%+ profitable months"),
    (Decimal("0.6"), Severity.INFO, "Good profitability with 60%+ profitable months"),
    (None, Severity.ERROR, "Profitability needs improvement"),
)

MARGIN_TIERS = (
    (Decimal("20"), Severity.SUCCESS, "Excellent profit margins above 20%"),
    (Decimal("10"), Severity.INFO, "Healthy profit margins above 10%"),
    (Decimal("0"), Severity.WARNING, "Profit margins could be improved"),
)

REVENUE_GROWTH_TIERS = (
    (Decimal("10"), Severity.SUCCESS, "Strong revenue growth trend"),
    (Decimal("0"), Severity.INFO, "Positive revenue growth"),
    (None, Severity.ERROR, "Revenue growth needs attention"),
)

PROFIT_GROWTH_TIERS = (
    (Decimal("15"), Severity.SUCCESS, "Excellent profit growth trajectory"),
    (Decimal("0"), Severity.INFO, "Positive profit growth"),
    (None, Severity.ERROR, "Profit growth requires focus"),
)


def _evaluate(category: InsightCategory, value: Decimal, tiers) -> Optional[Insight]:
    for threshold, severity, text in tiers:
        if threshold is None or value > threshold:
            return Insight(category=category, severity=severity, text=text)
    return None


def generate_insights(metrics: MetricsSnapshot) -> list[Insight]:
    """Evaluate the insight rules against a metrics snapshot.

    Rules run in a fixed order (profitability, margin, revenue growth, profit
    growth). The margin rule emits nothing when the average margin is not
    positive, so the result has three or four insights.

    Args:
        metrics: Metrics snapshot

    Returns:
        Ordered list of insights
    """
    rules = (
        (InsightCategory.PROFITABILITY, metrics.profitability_ratio, PROFITABILITY_TIERS),
        (InsightCategory.MARGIN, metrics.average_margin, MARGIN_TIERS),
        (InsightCategory.REVENUE_GROWTH, metrics.revenue_growth, REVENUE_GROWTH_TIERS),
        (InsightCategory.PROFIT_GROWTH, metrics.profit_growth, PROFIT_GROWTH_TIERS),
    )
    insights = []
    for category, value, tiers in rules:
        insight = _evaluate(category, value, tiers)
        if insight is not None:
            insights.append(insight)
    return insights
