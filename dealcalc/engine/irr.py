"""NPV and IRR computation using scipy.

Pure functions. No I/O.
"""

import logging
import math
import warnings
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

import numpy as np
from scipy.optimize import brentq, newton

from dealcalc.config import settings

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")

# Newton iterates past this (as a fraction) count as divergence
DIVERGENCE_LIMIT = 1e6
# Bracket for the fallback search: -99% to 1000%
BRACKET = (-0.99, 10.0)


@dataclass(frozen=True)
class IRRResult:
    rate: Decimal  # %, e.g. Decimal("12.3456")
    converged: bool
    iterations: int
    method: str = "newton"  # "newton", "brentq" or "none"
    defined: bool = True  # False when no real rate above -100% exists or was found


def npv(cash_flows: list[Decimal], discount_rate: Decimal) -> Decimal:
    """Net present value with the first flow discounted one full year.

    NPV = sum(CF_t / (1 + r)^t) for t = 1..N, ``discount_rate`` in percent.
    """
    factor = 1 + discount_rate / 100
    total = sum(
        (cf / factor ** t for t, cf in enumerate(cash_flows, start=1)),
        Decimal("0"),
    )
    return total.quantize(TWO_PLACES, ROUND_HALF_UP)


def _undefined(iterations: int = 0) -> IRRResult:
    return IRRResult(rate=Decimal("0"), converged=False, iterations=iterations, method="none", defined=False)


def _as_percent(rate: float) -> Decimal:
    return (Decimal(str(rate)) * 100).quantize(FOUR_PLACES, ROUND_HALF_UP)


def compute_irr(cash_flows: list[Decimal]) -> IRRResult:
    """Compute IRR from a vector of annual cash flows.

    cash_flows[0] is normally the (negative) initial outlay. Every flow is
    discounted from period 1, matching ``npv``, so NPV at the returned rate
    is zero.

    Newton's method runs from ``settings.irr_initial_guess`` and stops once
    |NPV| < ``settings.irr_tolerance`` or after ``settings.irr_max_iterations``.
    If Newton does not land on a rate above -100%, Brent's method searches
    -99%..1000% instead. When neither finds a root the last Newton iterate
    comes back with ``converged=False``; a divergent or sub -100% iterate
    comes back as rate 0 with ``defined=False``.
    """
    if len(cash_flows) < 2:
        return _undefined()
    if all(cf >= 0 for cf in cash_flows) or all(cf <= 0 for cf in cash_flows):
        # NPV never changes sign, so there is no rate to find
        logger.debug("IRR undefined: cash flows never change sign")
        return _undefined()

    cf = np.array([float(c) for c in cash_flows])
    periods = np.arange(1, len(cf) + 1)
    tolerance = settings.irr_tolerance

    def npv_at(rate: float) -> float:
        return float(np.sum(cf / (1 + rate) ** periods))

    def residual(rate: float) -> float:
        # Newton stops on an exact zero, so snap anything inside tolerance
        value = npv_at(rate)
        return 0.0 if abs(value) < tolerance else value

    def derivative(rate: float) -> float:
        return float(np.sum(-periods * cf / ((1 + rate) ** periods * (1 + rate))))

    with np.errstate(all="ignore"), warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        root, info = newton(
            residual,
            settings.irr_initial_guess,
            fprime=derivative,
            tol=1e-12,
            maxiter=settings.irr_max_iterations,
            full_output=True,
            disp=False,
        )

    root = float(root)
    valid = math.isfinite(root) and -1.0 < root <= DIVERGENCE_LIMIT
    if info.converged and valid:
        return IRRResult(rate=_as_percent(root), converged=True, iterations=info.iterations)

    logger.debug("Newton IRR failed after %s iterations (last iterate %s), bracketing", info.iterations, root)
    try:
        with np.errstate(all="ignore"):
            bracketed = brentq(npv_at, *BRACKET, xtol=1e-10, maxiter=1000)
        return IRRResult(rate=_as_percent(bracketed), converged=True, iterations=info.iterations, method="brentq")
    except (ValueError, RuntimeError):
        # No sign change inside the bracket, or no convergence
        pass

    if not valid:
        logger.warning("IRR diverged after %s iterations (last iterate %s)", info.iterations, root)
        return _undefined(info.iterations)

    logger.warning("IRR did not converge after %s iterations, returning last iterate", info.iterations)
    return IRRResult(rate=_as_percent(root), converged=False, iterations=info.iterations)
