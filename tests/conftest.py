"""Canonical test fixtures used across all engine tests.

Fixture: $500K business, 5-year horizon, 5.5% interest, 25% flat tax.
"""

import pytest
from decimal import Decimal

from dealcalc.models.deal import DealInputs


@pytest.fixture
def canonical_inputs() -> DealInputs:
    """$500K acquisition with the calculator's default assumptions."""
    return DealInputs(
        purchase_price=Decimal("500000"),
        term_length=5,
        interest_rate=Decimal("5.5"),
        tax_rate=Decimal("25"),
        equity_retained=Decimal("0"),
    )


@pytest.fixture
def zero_rate_inputs() -> DealInputs:
    """Same deal with interest-free financing (straight-line amortization)."""
    return DealInputs(
        purchase_price=Decimal("500000"),
        term_length=5,
        interest_rate=Decimal("0"),
        tax_rate=Decimal("25"),
    )


@pytest.fixture
def single_year_inputs() -> DealInputs:
    """One-year horizon: no years left to spread an earn-out over."""
    return DealInputs(
        purchase_price=Decimal("500000"),
        term_length=1,
        interest_rate=Decimal("5.5"),
        tax_rate=Decimal("25"),
    )


@pytest.fixture
def long_term_inputs() -> DealInputs:
    """30-year horizon, where SBA equity credits outpace debt service."""
    return DealInputs(
        purchase_price=Decimal("500000"),
        term_length=30,
        interest_rate=Decimal("5.5"),
        tax_rate=Decimal("25"),
    )
