"""
CAT Engine Configuration - Central Constants Registry.

All numerical constants used by the estimation and selection algorithms MUST be
defined here with proper provenance. No magic numbers in algorithm modules.

Each constant includes:
- value: The actual constant value
- source: Citation (paper, library docs, reference implementation, etc.)
- notes: Rationale and context
- validated: Whether the value has been validated against source
"""

from dataclasses import dataclass
from typing import Any
import math


@dataclass(frozen=True)
class SourcedValue:
    """
    A constant value with documented provenance.

    All algorithm constants must use this type to enforce documentation.
    """

    value: Any
    source: str
    notes: str = ""
    validated: bool = False

    def __post_init__(self):
        if not self.source or self.source.strip() == "":
            raise ValueError(f"SourcedValue must have non-empty source. Got: {self.source}")


# =============================================================================
# Probability Clamps
# =============================================================================

# Cube root of double machine epsilon
# Source: catSurv Estimator::prob_ltm / prob_grm (eps = (2^-52)^(1/3))
PROB_EPS = SourcedValue(
    value=math.pow(math.pow(2.0, -52.0), 1.0 / 3.0),
    source="catSurv Estimator (eps = (2^-52)^(1/3)), GSL numerical differentiation convention",
    notes="Binary and graded cumulative probabilities are clamped to [eps, 1 - eps]. "
    "Log-likelihood and derivative formulas assume this floor; do not relax it.",
    validated=True,
)

# =============================================================================
# Root Finding (MLE / MAP)
# =============================================================================

ROOT_BRACKET_LOWER = SourcedValue(
    value=-5.0,
    source="catSurv Estimator::brentMethod (x_lo = -5.0)",
    notes="Lower end of the fixed search bracket for d1LL(theta) = 0.",
    validated=True,
)

ROOT_BRACKET_UPPER = SourcedValue(
    value=5.0,
    source="catSurv Estimator::brentMethod (x_hi = 5.0)",
    notes="Upper end of the fixed search bracket for d1LL(theta) = 0.",
    validated=True,
)

ROOT_RELATIVE_TOLERANCE = SourcedValue(
    value=1e-7,
    source="catSurv Estimator::brentMethod (gsl_root_test_interval epsrel = 1e-7)",
    notes="Relative interval width at which Brent iteration stops.",
    validated=True,
)

ROOT_ABSOLUTE_TOLERANCE = SourcedValue(
    value=1e-12,
    source="scipy.optimize.brentq requires xtol > 0; reference implementation uses epsabs = 0",
    notes="Effectively zero so that the relative tolerance governs convergence.",
    validated=False,
)

ROOT_MAX_ITERATIONS = SourcedValue(
    value=100,
    source="catSurv Estimator::brentMethod (max_iter = 100)",
    notes="Iteration budget. Exhausting it is reported as non-convergence.",
    validated=True,
)

# =============================================================================
# Integration
# =============================================================================

THETA_LOWER_BOUND = SourcedValue(
    value=-5.0,
    source="catSurv Cat class default lowerBound",
    notes="Lower limit of theta integration for EAP, PWI, LWI, LKL and PKL.",
    validated=False,
)

THETA_UPPER_BOUND = SourcedValue(
    value=5.0,
    source="catSurv Cat class default upperBound",
    notes="Upper limit of theta integration for EAP, PWI, LWI, LKL and PKL.",
    validated=False,
)

INTEGRATION_SUBINTERVALS = SourcedValue(
    value=50,
    source="QUADPACK QAGS default subinterval limit (scipy.integrate.quad limit=50)",
    notes="Maximum number of adaptive subintervals for every quadrature call.",
    validated=True,
)

Z_CRITICAL_VALUE = SourcedValue(
    value=0.9,
    source="catSurv Cat class default z",
    notes="Multiplier on sqrt(1 / test information) that sizes the MFII and KL windows.",
    validated=False,
)

# =============================================================================
# Prior Defaults
# =============================================================================

PRIOR_LOCATION = SourcedValue(
    value=0.0,
    source="Standard IRT convention: theta ~ N(0, 1)",
    notes="Default prior location (mean for the normal family).",
    validated=True,
)

PRIOR_SCALE = SourcedValue(
    value=1.0,
    source="Standard IRT convention: theta ~ N(0, 1)",
    notes="Default prior scale (sd for normal, scale for Cauchy, df for Student-t).",
    validated=True,
)

# =============================================================================
# Validation Functions
# =============================================================================


def validate_all_constants():
    """
    Validate all constants at import time.

    Raises:
        ValueError: If any constant fails validation
    """
    errors = []

    if not (0 < PROB_EPS.value < 0.5):
        errors.append(f"PROB_EPS must be in (0, 0.5), got {PROB_EPS.value}")

    if ROOT_BRACKET_LOWER.value >= ROOT_BRACKET_UPPER.value:
        errors.append("ROOT_BRACKET_LOWER must be < ROOT_BRACKET_UPPER")

    if THETA_LOWER_BOUND.value >= THETA_UPPER_BOUND.value:
        errors.append("THETA_LOWER_BOUND must be < THETA_UPPER_BOUND")

    if ROOT_MAX_ITERATIONS.value <= 0:
        errors.append("ROOT_MAX_ITERATIONS must be positive")
    if INTEGRATION_SUBINTERVALS.value <= 0:
        errors.append("INTEGRATION_SUBINTERVALS must be positive")

    if PRIOR_SCALE.value <= 0:
        errors.append("PRIOR_SCALE must be positive")

    if errors:
        raise ValueError(f"Constant validation failed:\n" + "\n".join(f"  - {e}" for e in errors))


# Validate on import
validate_all_constants()


# =============================================================================
# Convenience Accessors
# =============================================================================


def get_root_finder_defaults() -> dict:
    """Get Brent root finder defaults as a dict."""
    return {
        "lower": ROOT_BRACKET_LOWER.value,
        "upper": ROOT_BRACKET_UPPER.value,
        "rtol": ROOT_RELATIVE_TOLERANCE.value,
        "xtol": ROOT_ABSOLUTE_TOLERANCE.value,
        "max_iterations": ROOT_MAX_ITERATIONS.value,
    }
