from dataclasses import dataclass, field
from decimal import Decimal

from dealcalc.models.deal import DealInputs, DealType


@dataclass(frozen=True)
class CashFlowRow:
    year: int
    principal: Decimal = Decimal("0")  # May include down payment or balloon
    interest: Decimal = Decimal("0")
    equity_returns: Decimal = Decimal("0")  # After-tax equity credit (SBA only)
    pre_tax_total: Decimal = Decimal("0")
    tax_impact: Decimal = Decimal("0")  # Always <= 0
    net_cash_flow: Decimal = Decimal("0")
    cumulative: Decimal = Decimal("0")
    ending_balance: Decimal = Decimal("0")  # Amortizing balance after this year


@dataclass
class DealResults:
    deal_type: DealType
    total_investment: Decimal = Decimal("0")
    net_proceeds: Decimal = Decimal("0")
    roi: Decimal = Decimal("0")  # %
    irr: Decimal = Decimal("0")  # %
    npv: Decimal = Decimal("0")
    cash_flow: list[CashFlowRow] = field(default_factory=list)

    # Signed sequence the IRR was solved on
    irr_cash_flows: list[Decimal] = field(default_factory=list)
    irr_converged: bool = True
    irr_iterations: int = 0

    # Set when an input made a metric undefined (zero denominator, non-finite IRR)
    degenerate_reason: str | None = None

    @property
    def is_degenerate(self) -> bool:
        return self.degenerate_reason is not None

    @property
    def effective_term(self) -> int:
        return len(self.cash_flow)


@dataclass(frozen=True)
class ComparisonData:
    deal_type: DealType
    label: str
    color: str
    risk_level: str
    results: DealResults


@dataclass
class ComparisonSet:
    """Results of running every structure against one set of inputs.

    Structures that raised are absent from ``results`` and listed in
    ``failures`` with the reason.
    """

    inputs: DealInputs
    results: dict[DealType, DealResults] = field(default_factory=dict)
    failures: dict[DealType, str] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failures
