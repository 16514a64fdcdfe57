"""Loan payment sizing and annual amortization.

Pure functions: Decimal in, dataclass out. No I/O.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class LoanYear:
    year: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


def monthly_payment(principal: Decimal, annual_rate: Decimal, term_years: int) -> Decimal:
    """Level monthly payment that retires ``principal`` in ``term_years * 12`` payments.

    ``annual_rate`` is a nominal percentage (5.5 means 5.5%), compounded monthly.
    The result is not rounded.
    """
    if principal <= 0:
        return Decimal("0")
    n = term_years * 12
    if annual_rate == 0:
        return principal / n

    r = annual_rate / 1200
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    return principal * (r * factor) / (factor - 1)


def annual_schedule(
    principal: Decimal,
    annual_rate: Decimal,
    term_years: int,
    horizon_years: int | None = None,
) -> list[LoanYear]:
    """Year-by-year paydown of a level-payment loan.

    Each year pays twelve monthly payments. Interest is charged on the
    balance outstanding at the start of the year at the full annual rate,
    and principal is the rest of the payment capped at the balance.
    The schedule stops as soon as the balance is retired, so it can be
    shorter than the horizon.

    Args:
        principal: Amount financed
        annual_rate: Nominal annual percentage
        term_years: Years used to size the payment
        horizon_years: Years to project; defaults to ``term_years``
    """
    payment = monthly_payment(principal, annual_rate, term_years) * 12
    rate = annual_rate / 100
    balance = max(principal, Decimal("0")).quantize(TWO_PLACES, ROUND_HALF_UP)

    years: list[LoanYear] = []
    for year in range(1, (horizon_years or term_years) + 1):
        if balance <= 0:
            break
        interest = (balance * rate).quantize(TWO_PLACES, ROUND_HALF_UP)
        principal_paid = min(payment - interest, balance).quantize(TWO_PLACES, ROUND_HALF_UP)
        balance -= principal_paid

        years.append(LoanYear(
            year=year,
            payment=principal_paid + interest,
            principal=principal_paid,
            interest=interest,
            balance=balance,
        ))

    return years
