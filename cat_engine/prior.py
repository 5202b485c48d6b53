"""Prior distributions over theta."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from scipy import stats

from cat_engine.config import PRIOR_LOCATION, PRIOR_SCALE
from cat_engine.constants import PriorFamily


@dataclass(frozen=True)
class Prior:
    """
    Location/scale prior over theta.

    - NORMAL: param0 = mean, param1 = standard deviation
    - CAUCHY: param0 = location, param1 = scale
    - STUDENT_T: param0 = location, param1 = degrees of freedom

    The derivative corrections in d1LL/d2LL use (theta - param0) / param1**2
    and 1 / param1**2 for every family.
    """

    name: PriorFamily = PriorFamily.NORMAL
    param0: float = PRIOR_LOCATION.value
    param1: float = PRIOR_SCALE.value
    _dist: Any = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        name = PriorFamily(self.name)
        object.__setattr__(self, "name", name)
        if not self.param1 > 0:
            raise ValueError(f"Prior param1 must be positive, got {self.param1}")

        if name is PriorFamily.NORMAL:
            dist = stats.norm(loc=self.param0, scale=self.param1)
        elif name is PriorFamily.CAUCHY:
            dist = stats.cauchy(loc=self.param0, scale=self.param1)
        else:
            dist = stats.t(df=self.param1, loc=self.param0)
        object.__setattr__(self, "_dist", dist)

    def density(self, theta: float) -> float:
        """Prior density at theta."""
        return float(self._dist.pdf(theta))
