from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class DealType(Enum):
    ALL_CASH = "all-cash"
    EARN_OUT = "earn-out"
    SELLER_FINANCING = "seller-financing"
    SBA_LOAN = "sba-loan"
    CUSTOM = "custom"


@dataclass(frozen=True)
class DealInputs:
    purchase_price: Decimal
    term_length: int = 5  # Analysis horizon, years
    interest_rate: Decimal = Decimal("0")  # Annual %, e.g. Decimal("5.5")
    tax_rate: Decimal = Decimal("0")  # Flat %, applied to gross inflows
    equity_retained: Decimal = Decimal("0")  # Informational only

    # Custom structure
    down_payment: Decimal | None = None
    balloon_payment: Decimal | None = None

    # Financed structures: years used to size the level payment
    amortization_years: int | None = None

    @property
    def tax_fraction(self) -> Decimal:
        return self.tax_rate / 100

    @property
    def rate_fraction(self) -> Decimal:
        return self.interest_rate / 100

    @property
    def loan_years(self) -> int:
        """Amortization period; falls back to the analysis horizon."""
        return self.amortization_years or self.term_length
