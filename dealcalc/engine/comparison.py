"""Display metadata and number formatting for comparison views.

Read-only over engine results. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from dealcalc.models.deal import DealType
from dealcalc.models.results import ComparisonData, ComparisonSet, DealResults

LABELS: dict[DealType, str] = {
    DealType.ALL_CASH: "All-Cash Offer",
    DealType.EARN_OUT: "Earn-Out Structure",
    DealType.SELLER_FINANCING: "Seller Financing",
    DealType.SBA_LOAN: "SBA 7(a) Loan",
    DealType.CUSTOM: "Custom Structure",
}

COLORS: dict[DealType, str] = {
    DealType.ALL_CASH: "#3B82F6",
    DealType.EARN_OUT: "#10B981",
    DealType.SELLER_FINANCING: "#F59E0B",
    DealType.SBA_LOAN: "#8B5CF6",
    DealType.CUSTOM: "#EF4444",
}

RISK_LEVELS: dict[DealType, str] = {
    DealType.ALL_CASH: "Low",
    DealType.EARN_OUT: "Medium",
    DealType.SELLER_FINANCING: "Medium",
    DealType.SBA_LOAN: "Low",
    DealType.CUSTOM: "Variable",
}

RANKABLE_METRICS = ("roi", "irr", "npv", "net_proceeds")


def format_currency(value: Decimal) -> str:
    """Whole dollars, sign dropped: Decimal("-1234.56") -> "$1,235"."""
    dollars = abs(value).quantize(Decimal("1"), ROUND_HALF_UP)
    return f"${dollars:,}"


def format_percent(value: Decimal) -> str:
    """One decimal place; ``value`` is already a percentage."""
    return f"{value.quantize(Decimal('0.1'), ROUND_HALF_UP)}%"


def comparison_entry(results: DealResults) -> ComparisonData:
    deal_type = results.deal_type
    return ComparisonData(
        deal_type=deal_type,
        label=LABELS[deal_type],
        color=COLORS[deal_type],
        risk_level=RISK_LEVELS[deal_type],
        results=results,
    )


def build_comparisons(comparison: ComparisonSet) -> list[ComparisonData]:
    """Entries for the structures that completed, in DealType order."""
    return [
        comparison_entry(comparison.results[deal_type])
        for deal_type in DealType
        if deal_type in comparison.results
    ]


def _rankable(results: DealResults, metric: str) -> bool:
    if metric == "irr":
        return results.irr_converged
    if metric == "roi":
        return results.total_investment > 0
    return True


def best_by(comparison: ComparisonSet, metric: str) -> DealType | None:
    """Structure with the highest ``metric``; first in DealType order wins ties.

    Results whose metric is undefined (unconverged IRR, ROI with no capital
    at closing) are skipped. Returns None when nothing qualifies.
    """
    if metric not in RANKABLE_METRICS:
        raise ValueError(f"Cannot rank by {metric!r}; expected one of {RANKABLE_METRICS}")

    best: DealType | None = None
    best_value: Decimal | None = None
    for entry in build_comparisons(comparison):
        if not _rankable(entry.results, metric):
            continue
        value = getattr(entry.results, metric)
        if best_value is None or value > best_value:
            best, best_value = entry.deal_type, value
    return best


def missing_structure_messages(comparison: ComparisonSet) -> list[str]:
    """One explanatory line per structure that failed to calculate."""
    return [
        f"{LABELS[deal_type]} could not be calculated ({reason}). Check the deal inputs."
        for deal_type, reason in comparison.failures.items()
    ]
