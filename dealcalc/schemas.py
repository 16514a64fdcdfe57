"""Pydantic schemas for serialized engine output."""

from decimal import Decimal

from pydantic import BaseModel, Field

from dealcalc.engine.comparison import build_comparisons
from dealcalc.models.results import ComparisonData, ComparisonSet, DealResults


class CashFlowRowResponse(BaseModel):
    year: int
    principal: Decimal
    interest: Decimal
    equity_returns: Decimal
    pre_tax_total: Decimal
    tax_impact: Decimal
    net_cash_flow: Decimal
    cumulative: Decimal
    ending_balance: Decimal


class DealResultsResponse(BaseModel):
    deal_type: str
    total_investment: Decimal
    net_proceeds: Decimal
    roi: Decimal
    irr: Decimal
    npv: Decimal
    irr_converged: bool = True
    degenerate_reason: str | None = None
    cash_flow: list[CashFlowRowResponse] = Field(default_factory=list)


class ComparisonEntryResponse(BaseModel):
    deal_type: str
    label: str
    color: str
    risk_level: str
    results: DealResultsResponse


class ComparisonResponse(BaseModel):
    comparisons: list[ComparisonEntryResponse] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)


def results_to_response(result: DealResults) -> DealResultsResponse:
    """Convert engine DealResults to its serializable form."""
    return DealResultsResponse(
        deal_type=result.deal_type.value,
        total_investment=result.total_investment,
        net_proceeds=result.net_proceeds,
        roi=result.roi,
        irr=result.irr,
        npv=result.npv,
        irr_converged=result.irr_converged,
        degenerate_reason=result.degenerate_reason,
        cash_flow=[
            CashFlowRowResponse(
                year=row.year,
                principal=row.principal,
                interest=row.interest,
                equity_returns=row.equity_returns,
                pre_tax_total=row.pre_tax_total,
                tax_impact=row.tax_impact,
                net_cash_flow=row.net_cash_flow,
                cumulative=row.cumulative,
                ending_balance=row.ending_balance,
            )
            for row in result.cash_flow
        ],
    )


def _entry_to_response(entry: ComparisonData) -> ComparisonEntryResponse:
    return ComparisonEntryResponse(
        deal_type=entry.deal_type.value,
        label=entry.label,
        color=entry.color,
        risk_level=entry.risk_level,
        results=results_to_response(entry.results),
    )


def comparison_to_response(comparison: ComparisonSet) -> ComparisonResponse:
    return ComparisonResponse(
        comparisons=[_entry_to_response(e) for e in build_comparisons(comparison)],
        failures={deal_type.value: reason for deal_type, reason in comparison.failures.items()},
    )
