"""Deal structure calculators: all-cash, earn-out, seller financing, SBA, custom.

Every structure runs through one schedule builder, parameterized by a
StructurePolicy. Pure computation. No I/O.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from dealcalc.config import settings
from dealcalc.engine.debt import annual_schedule
from dealcalc.engine.irr import compute_irr, npv
from dealcalc.models.deal import DealInputs, DealType
from dealcalc.models.results import CashFlowRow, DealResults

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")


class IRRSeed(Enum):
    NONE = "none"  # No time-varying return, IRR fixed at 0
    OUTLAY_THEN_LATER = "outlay_then_later"  # [-initial, net_2..N]
    OUTLAY_RECOVERED_AT_EXIT = "outlay_recovered_at_exit"  # [-initial, net_1..N-1, net_N - initial]
    SCHEDULE = "schedule"  # net_1..N


@dataclass(frozen=True)
class StructurePolicy:
    deal_type: DealType
    split_ratio: Decimal  # Share of price paid at closing
    irr_seed: IRRSeed
    financed: bool = False  # Remainder amortized as a loan
    equity_credit_rate: Decimal = ZERO  # Annual credit as a share of price
    has_balloon: bool = False
    spread_earn_out: bool = False  # Remainder paid evenly over years 2..N


POLICIES: dict[DealType, StructurePolicy] = {
    DealType.ALL_CASH: StructurePolicy(
        deal_type=DealType.ALL_CASH,
        split_ratio=Decimal("1"),
        irr_seed=IRRSeed.NONE,
    ),
    DealType.EARN_OUT: StructurePolicy(
        deal_type=DealType.EARN_OUT,
        split_ratio=Decimal("0.6"),
        irr_seed=IRRSeed.OUTLAY_THEN_LATER,
        spread_earn_out=True,
    ),
    DealType.SELLER_FINANCING: StructurePolicy(
        deal_type=DealType.SELLER_FINANCING,
        split_ratio=Decimal("0.2"),
        irr_seed=IRRSeed.OUTLAY_RECOVERED_AT_EXIT,
        financed=True,
    ),
    # SBA 7(a): 10% down enforced, buyer credited 10% of price per year
    DealType.SBA_LOAN: StructurePolicy(
        deal_type=DealType.SBA_LOAN,
        split_ratio=Decimal("0.1"),
        irr_seed=IRRSeed.SCHEDULE,
        financed=True,
        equity_credit_rate=Decimal("0.1"),
    ),
    DealType.CUSTOM: StructurePolicy(
        deal_type=DealType.CUSTOM,
        split_ratio=Decimal("0.25"),
        irr_seed=IRRSeed.OUTLAY_THEN_LATER,
        financed=True,
        has_balloon=True,
    ),
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def initial_payment(policy: StructurePolicy, inputs: DealInputs) -> Decimal:
    """Capital paid at closing. A positive custom down payment overrides the default split."""
    if policy.has_balloon and inputs.down_payment:
        return _money(inputs.down_payment)
    return _money(inputs.purchase_price * policy.split_ratio)


def _taxed_row(year: int, inflow: Decimal, principal: Decimal, interest: Decimal,
               tax_fraction: Decimal, cumulative: Decimal, balance: Decimal) -> CashFlowRow:
    tax = _money(inflow * tax_fraction)
    net = inflow - tax
    return CashFlowRow(
        year=year,
        principal=principal,
        interest=interest,
        pre_tax_total=inflow,
        tax_impact=-tax,
        net_cash_flow=net,
        cumulative=cumulative + net,
        ending_balance=balance,
    )


def _installment_schedule(
    policy: StructurePolicy, inputs: DealInputs, initial: Decimal, reasons: list[str]
) -> list[CashFlowRow]:
    """Unfinanced structures: closing payment, then any earn-out spread evenly."""
    term = inputs.term_length
    remainder = inputs.purchase_price - initial if policy.spread_earn_out else ZERO

    if remainder > 0 and term < 2:
        reasons.append(
            f"earn-out of {_money(remainder)} needs at least two years to spread over"
        )
        annual = ZERO
    else:
        annual = _money(remainder / (term - 1)) if remainder > 0 else ZERO

    rows: list[CashFlowRow] = []
    cumulative = ZERO
    for year in range(1, term + 1):
        inflow = initial if year == 1 else annual
        row = _taxed_row(year, inflow, inflow, ZERO, inputs.tax_fraction, cumulative, ZERO)
        cumulative = row.cumulative
        rows.append(row)
    return rows


def _financed_schedule(policy: StructurePolicy, inputs: DealInputs, initial: Decimal) -> list[CashFlowRow]:
    """Financed structures: closing payment plus an amortizing note.

    The schedule ends early once the note is retired, unless a balloon is
    still owed; the balloon is paid with the final year's principal.
    """
    term = inputs.term_length
    t = inputs.tax_fraction
    financed = inputs.purchase_price - initial
    balloon = _money(inputs.balloon_payment or ZERO) if policy.has_balloon else ZERO
    regular = max(financed - balloon, ZERO)
    if policy.has_balloon and balloon > 0 and financed - balloon <= 0:
        logger.debug("Balloon %s covers the financed %s; nothing amortizes", balloon, financed)

    loan = annual_schedule(regular, inputs.interest_rate, inputs.loan_years, horizon_years=term)
    equity_credit = _money(inputs.purchase_price * policy.equity_credit_rate)

    rows: list[CashFlowRow] = []
    cumulative = ZERO
    balance = _money(regular)
    for year in range(1, term + 1):
        if year <= len(loan):
            paid = loan[year - 1]
            principal, interest, balance = paid.principal, paid.interest, paid.balance
        else:
            principal, interest = ZERO, ZERO
        balloon_due = balloon if year == term else ZERO
        pending = balloon if year < term else ZERO

        if policy.equity_credit_rate > 0:
            row = _equity_credit_row(
                year, initial, principal, interest, equity_credit, t, cumulative, balance
            )
        else:
            inflow = principal + interest + balloon_due + (initial if year == 1 else ZERO)
            shown = principal + balloon_due + (initial if year == 1 else ZERO)
            row = _taxed_row(year, inflow, shown, interest, t, cumulative, balance + pending)

        cumulative = row.cumulative
        rows.append(row)
        if balance <= 0 and pending <= 0:
            break

    if balance > 0 and len(rows) == term:
        logger.debug("%s note has %s outstanding after %s years", policy.deal_type.value, balance, term)
    return rows


def _equity_credit_row(year: int, initial: Decimal, principal: Decimal, interest: Decimal,
                       equity_credit: Decimal, t: Decimal, cumulative: Decimal,
                       balance: Decimal) -> CashFlowRow:
    """Buyer-side row: after-tax equity credit less after-tax debt service.

    Year 1 also absorbs the down payment and reports it as principal.
    """
    equity_tax = _money(equity_credit * t)
    net_equity = equity_credit - equity_tax
    payment_after_tax = _money((principal + interest) * (1 - t))
    net = net_equity - payment_after_tax

    if year == 1:
        net -= initial
        shown_principal = initial
        pre_tax = initial + equity_credit
        tax = _money(initial * t) + equity_tax
    else:
        shown_principal = principal
        pre_tax = principal + interest + equity_credit
        tax = equity_tax

    return CashFlowRow(
        year=year,
        principal=shown_principal,
        interest=interest,
        equity_returns=net_equity,
        pre_tax_total=pre_tax,
        tax_impact=-tax,
        net_cash_flow=net,
        cumulative=cumulative + net,
        ending_balance=balance,
    )


def _irr_seed(seed: IRRSeed, nets: list[Decimal], initial: Decimal) -> list[Decimal]:
    if seed is IRRSeed.NONE:
        return []
    if seed is IRRSeed.OUTLAY_THEN_LATER:
        return [-initial, *nets[1:]]
    if seed is IRRSeed.OUTLAY_RECOVERED_AT_EXIT:
        return [-initial, *nets[:-1], nets[-1] - initial]
    return list(nets)


def run_structure(policy: StructurePolicy, inputs: DealInputs) -> DealResults:
    """Build the schedule for one structure and derive its summary metrics."""
    reasons: list[str] = []
    initial = initial_payment(policy, inputs)

    if policy.financed:
        rows = _financed_schedule(policy, inputs, initial)
    else:
        rows = _installment_schedule(policy, inputs, initial, reasons)

    nets = [row.net_cash_flow for row in rows]
    net_proceeds = rows[-1].cumulative if rows else ZERO

    if initial > 0:
        roi = ((net_proceeds - initial) / initial * 100).quantize(FOUR_PLACES, ROUND_HALF_UP)
    else:
        roi = ZERO
        reasons.append("no capital at closing, ROI is undefined")

    seed = _irr_seed(policy.irr_seed, nets, initial)
    if seed:
        irr = compute_irr(seed)
        if not irr.defined:
            reasons.append("IRR is undefined for this cash-flow sequence")
        irr_rate, converged, iterations = irr.rate, irr.converged, irr.iterations
    else:
        irr_rate, converged, iterations = ZERO, True, 0

    result = DealResults(
        deal_type=policy.deal_type,
        total_investment=initial,
        net_proceeds=net_proceeds,
        roi=roi,
        irr=irr_rate,
        npv=npv(nets, Decimal(str(settings.discount_rate))),
        cash_flow=rows,
        irr_cash_flows=seed,
        irr_converged=converged,
        irr_iterations=iterations,
        degenerate_reason="; ".join(reasons) or None,
    )

    if result.is_degenerate:
        logger.warning("%s result is degenerate: %s", policy.deal_type.value, result.degenerate_reason)
    logger.debug(
        "%s: %s-year schedule, net proceeds %s, IRR %s%%",
        policy.deal_type.value, len(rows), net_proceeds, irr_rate,
    )
    return result


def calculate_all_cash(inputs: DealInputs) -> DealResults:
    """Full price at closing; the seller's only tax event is year 1."""
    return run_structure(POLICIES[DealType.ALL_CASH], inputs)


def calculate_earn_out(inputs: DealInputs) -> DealResults:
    """60% at closing, remaining 40% paid evenly over years 2..N."""
    return run_structure(POLICIES[DealType.EARN_OUT], inputs)


def calculate_seller_financing(inputs: DealInputs) -> DealResults:
    """20% down, 80% carried by the seller as an amortizing note."""
    return run_structure(POLICIES[DealType.SELLER_FINANCING], inputs)


def calculate_sba_loan(inputs: DealInputs) -> DealResults:
    """10% down, 90% bank financed, from the buyer's side with a 10%/yr equity credit."""
    return run_structure(POLICIES[DealType.SBA_LOAN], inputs)


def calculate_custom(inputs: DealInputs) -> DealResults:
    """User-set down payment (default 25%) with an optional balloon carved out of the note."""
    return run_structure(POLICIES[DealType.CUSTOM], inputs)
