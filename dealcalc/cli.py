"""CLI for comparing acquisition deal structures.

Usage:
    python -m dealcalc.cli --price 500000 --term 5 --rate 5.5 --tax 25
    python -m dealcalc.cli --deal-type custom --down-payment 150000 --balloon 100000
    python -m dealcalc.cli --json
"""

import argparse
import logging
import sys
from decimal import Decimal

from dealcalc.config import settings
from dealcalc.engine.comparison import (
    LABELS,
    best_by,
    build_comparisons,
    format_currency,
    format_percent,
    missing_structure_messages,
)
from dealcalc.engine.dispatch import calculate_deal_structure, compare_structures
from dealcalc.models.deal import DealInputs, DealType
from dealcalc.models.results import ComparisonSet, DealResults
from dealcalc.schemas import comparison_to_response, results_to_response


# ── Helpers ──────────────────────────────────────────────────────────────────

def _signed(v: Decimal) -> str:
    return f"-{format_currency(v)}" if v < 0 else format_currency(v)


def _header(title: str) -> None:
    print(f"\n{'=' * 72}")
    print(f"  {title}")
    print(f"{'=' * 72}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_inputs(inputs: DealInputs) -> None:
    _header("Deal Inputs")
    print(f"  Purchase Price:   {format_currency(inputs.purchase_price)}")
    print(f"  Term:             {inputs.term_length} years")
    print(f"  Interest Rate:    {format_percent(inputs.interest_rate)}")
    print(f"  Tax Rate:         {format_percent(inputs.tax_rate)}")
    if inputs.down_payment:
        print(f"  Down Payment:     {format_currency(inputs.down_payment)}")
    if inputs.balloon_payment:
        print(f"  Balloon Payment:  {format_currency(inputs.balloon_payment)}")
    if inputs.amortization_years:
        print(f"  Amortization:     {inputs.amortization_years} years")


def print_comparison(comparison: ComparisonSet) -> None:
    _header("Deal Structure Comparison")
    print(f"  {'Structure':<20}  {'Investment':>11}  {'Net Proceeds':>13}  "
          f"{'ROI':>8}  {'IRR':>8}  {'NPV':>11}  {'Risk':<8}")
    print(f"  {'-' * 20}  {'-' * 11}  {'-' * 13}  {'-' * 8}  {'-' * 8}  {'-' * 11}  {'-' * 8}")
    for entry in build_comparisons(comparison):
        r = entry.results
        irr = format_percent(r.irr) + ("" if r.irr_converged else "*")
        print(
            f"  {entry.label:<20}  {format_currency(r.total_investment):>11}  "
            f"{format_currency(r.net_proceeds):>13}  {format_percent(r.roi):>8}  "
            f"{irr:>8}  {_signed(r.npv):>11}  {entry.risk_level:<8}"
        )

    for line in missing_structure_messages(comparison):
        print(f"  ! {line}")

    best = best_by(comparison, "npv")
    if best is not None:
        print(f"\n  Highest NPV:      {LABELS[best]}")
    if any(not r.irr_converged for r in comparison.results.values()):
        print("  * IRR estimate did not converge")


def print_schedule(result: DealResults) -> None:
    _header(f"{LABELS[result.deal_type]}: Cash Flow Schedule")
    print(f"  {'Yr':>3}  {'Principal':>11}  {'Interest':>10}  {'Equity':>10}  "
          f"{'Pre-Tax':>11}  {'Tax':>10}  {'Net':>11}  {'Cumulative':>11}")
    for row in result.cash_flow:
        print(
            f"  {row.year:>3}  {_signed(row.principal):>11}  {_signed(row.interest):>10}  "
            f"{_signed(row.equity_returns):>10}  {_signed(row.pre_tax_total):>11}  "
            f"{_signed(row.tax_impact):>10}  {_signed(row.net_cash_flow):>11}  "
            f"{_signed(row.cumulative):>11}"
        )
    print()
    print(f"  Total Investment: {format_currency(result.total_investment)}")
    print(f"  Net Proceeds:     {_signed(result.net_proceeds)}")
    print(f"  ROI:              {format_percent(result.roi)}")
    print(f"  IRR:              {format_percent(result.irr)}"
          f"{'' if result.irr_converged else ' (did not converge)'}")
    print(f"  NPV @ {format_percent(Decimal(str(settings.discount_rate)))}:      {_signed(result.npv)}")
    if result.is_degenerate:
        print(f"  Note:             {result.degenerate_reason}")


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compare small-business acquisition deal structures")
    parser.add_argument("--price", type=Decimal, default=Decimal("500000"), help="Purchase price (default: 500000)")
    parser.add_argument("--term", type=int, default=5, help="Analysis horizon in years, 1-30 (default: 5)")
    parser.add_argument("--rate", type=Decimal, default=Decimal("5.5"), help="Annual interest rate %% (default: 5.5)")
    parser.add_argument("--tax", type=Decimal, default=Decimal("25"), help="Flat tax rate %% (default: 25)")
    parser.add_argument("--equity-retained", type=Decimal, default=Decimal("0"), help="Equity retained %%")
    parser.add_argument("--down-payment", type=Decimal, help="Custom structure down payment")
    parser.add_argument("--balloon", type=Decimal, help="Custom structure balloon payment")
    parser.add_argument("--amortization-years", type=int, help="Loan amortization period (default: term)")
    parser.add_argument(
        "--deal-type",
        choices=[t.value for t in DealType],
        help="Show one structure's schedule instead of the comparison",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of a table")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    if not 1 <= args.term <= 30:
        print("Error: --term must be between 1 and 30", file=sys.stderr)
        return 2
    if args.price <= 0:
        print("Error: --price must be positive", file=sys.stderr)
        return 2

    inputs = DealInputs(
        purchase_price=args.price,
        term_length=args.term,
        interest_rate=args.rate,
        tax_rate=args.tax,
        equity_retained=args.equity_retained,
        down_payment=args.down_payment,
        balloon_payment=args.balloon,
        amortization_years=args.amortization_years,
    )

    if args.deal_type:
        result = calculate_deal_structure(args.deal_type, inputs)
        if args.json:
            print(results_to_response(result).model_dump_json(indent=2))
        else:
            print_inputs(inputs)
            print_schedule(result)
            print()
        return 0

    comparison = compare_structures(inputs)
    if args.json:
        print(comparison_to_response(comparison).model_dump_json(indent=2))
    else:
        print_inputs(inputs)
        print_comparison(comparison)
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
