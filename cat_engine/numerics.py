"""
Numerical substrate - quadrature and bracketing root finding.

Both wrappers hold configuration only and are safe to share across calls.
Exceptions raised by the integrand or the target function propagate unchanged.
"""

import math
from dataclasses import dataclass
from typing import Callable

from scipy import integrate, optimize

from cat_engine.config import (
    INTEGRATION_SUBINTERVALS,
    ROOT_ABSOLUTE_TOLERANCE,
    ROOT_BRACKET_LOWER,
    ROOT_BRACKET_UPPER,
    ROOT_MAX_ITERATIONS,
    ROOT_RELATIVE_TOLERANCE,
)
from cat_engine.core.errors import EstimationError, NonConvergenceError

ScalarFunction = Callable[[float], float]


@dataclass(frozen=True)
class Integrator:
    """Adaptive Gauss-Kronrod quadrature (QUADPACK QAGS) over a bounded interval."""

    default_subintervals: int = INTEGRATION_SUBINTERVALS.value

    def integrate(
        self,
        function: ScalarFunction,
        lower: float,
        upper: float,
        subintervals: int | None = None,
    ) -> float:
        """
        Integrate function over [lower, upper].

        Args:
            function: Scalar integrand
            lower: Lower limit
            upper: Upper limit
            subintervals: Maximum number of adaptive subintervals

        Returns:
            Approximate value of the definite integral
        """
        if lower == upper:
            return 0.0
        limit = subintervals or self.default_subintervals
        value, _abserr = integrate.quad(function, lower, upper, limit=limit)
        return float(value)


@dataclass(frozen=True)
class RootFinder:
    """Brent's method on a fixed bracket with a bounded iteration count."""

    lower: float = ROOT_BRACKET_LOWER.value
    upper: float = ROOT_BRACKET_UPPER.value
    rtol: float = ROOT_RELATIVE_TOLERANCE.value
    xtol: float = ROOT_ABSOLUTE_TOLERANCE.value
    max_iterations: int = ROOT_MAX_ITERATIONS.value

    def find_root(self, function: ScalarFunction) -> float:
        """
        Find a root of function inside [lower, upper].

        Raises:
            EstimationError: If the bracket does not contain a sign change
            NonConvergenceError: If the iteration budget is exhausted
        """
        f_lower = function(self.lower)
        f_upper = function(self.upper)
        if not (math.isfinite(f_lower) and math.isfinite(f_upper)):
            raise EstimationError(
                "Target function is not finite at the bracket ends",
                details={"lower": self.lower, "upper": self.upper, "f_lower": f_lower, "f_upper": f_upper},
            )
        if f_lower == 0.0:
            return self.lower
        if f_upper == 0.0:
            return self.upper
        if (f_lower > 0) == (f_upper > 0):
            raise EstimationError(
                "Root bracket does not contain a sign change",
                details={"lower": self.lower, "upper": self.upper, "f_lower": f_lower, "f_upper": f_upper},
            )

        root, result = optimize.brentq(
            function,
            self.lower,
            self.upper,
            xtol=self.xtol,
            rtol=self.rtol,
            maxiter=self.max_iterations,
            full_output=True,
            disp=False,
        )
        if not result.converged:
            raise NonConvergenceError(
                f"Brent iteration did not converge in {self.max_iterations} iterations",
                details={"iterations": result.iterations, "root": root, "flag": result.flag},
            )
        return float(root)
