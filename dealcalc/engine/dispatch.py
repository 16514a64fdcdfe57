"""Routes a deal type to its calculator and runs the side-by-side comparison."""

import logging
from typing import Callable

from dealcalc.config import settings
from dealcalc.engine.structures import (
    calculate_all_cash,
    calculate_custom,
    calculate_earn_out,
    calculate_sba_loan,
    calculate_seller_financing,
)
from dealcalc.models.deal import DealInputs, DealType
from dealcalc.models.results import ComparisonSet, DealResults

logger = logging.getLogger(__name__)

CALCULATORS: dict[DealType, Callable[[DealInputs], DealResults]] = {
    DealType.ALL_CASH: calculate_all_cash,
    DealType.EARN_OUT: calculate_earn_out,
    DealType.SELLER_FINANCING: calculate_seller_financing,
    DealType.SBA_LOAN: calculate_sba_loan,
    DealType.CUSTOM: calculate_custom,
}


class UnknownDealTypeError(ValueError):
    pass


def resolve_deal_type(deal_type: DealType | str) -> DealType:
    """Map a tag to a DealType.

    Unknown tags resolve to all-cash, or raise UnknownDealTypeError when
    ``settings.strict_deal_types`` is on.
    """
    if isinstance(deal_type, DealType):
        return deal_type
    try:
        return DealType(deal_type)
    except ValueError:
        if settings.strict_deal_types:
            raise UnknownDealTypeError(f"Unknown deal type: {deal_type!r}") from None
        logger.warning("Unknown deal type %r, falling back to all-cash", deal_type)
        return DealType.ALL_CASH


def calculate_deal_structure(deal_type: DealType | str, inputs: DealInputs) -> DealResults:
    return CALCULATORS[resolve_deal_type(deal_type)](inputs)


def compare_structures(
    inputs: DealInputs,
    deal_types: list[DealType] | None = None,
) -> ComparisonSet:
    """Run each structure independently against the same inputs.

    A structure that raises is logged, recorded in ``failures`` and left
    out of ``results``; the rest still complete.
    """
    comparison = ComparisonSet(inputs=inputs)
    for deal_type in deal_types or list(DealType):
        try:
            comparison.results[deal_type] = CALCULATORS[deal_type](inputs)
        except Exception as e:
            logger.warning("Calculation failed for %s: %s", deal_type.value, e)
            comparison.failures[deal_type] = f"{type(e).__name__}: {e}"
    return comparison
