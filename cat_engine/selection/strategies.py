"""
Selection criteria.

Each class scores one unanswered item under one criterion; the shared
Selector.select picks the best candidate. EPV is minimized, everything else
is maximized.
"""

from __future__ import annotations

import numpy as np

from cat_engine.core.config import settings
from cat_engine.estimation import Estimator
from cat_engine.prior import Prior
from cat_engine.selection.base import Selector
from cat_engine.selection.registry import register_selector


@register_selector
class MFISelector(Selector):
    """Maximum Fisher information at the current estimate."""

    name = "MFI"

    def score(self, estimator: Estimator, prior: Prior, candidates: list[int]) -> list[float]:
        theta = estimator.estimate_theta(prior)
        return [estimator.fisher_inf(theta, item) for item in candidates]


@register_selector
class MEISelector(Selector):
    """Maximum expected observed information."""

    name = "MEI"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.expected_obs_inf(item, prior)


@register_selector
class MPWISelector(Selector):
    """Maximum posterior-weighted information."""

    name = "MPWI"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.pwi(item, prior)


@register_selector
class MLWISelector(Selector):
    """Maximum likelihood-weighted information."""

    name = "MLWI"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.lwi(item)


@register_selector
class MFIISelector(Selector):
    """Maximum Fisher interval information."""

    name = "MFII"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.fii(item, prior)


@register_selector
class KLSelector(Selector):
    """KL divergence integrated over the interval around the estimate."""

    name = "KL"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.expected_kl(item, prior)


@register_selector
class LKLSelector(Selector):
    name = "LKL"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.likelihood_kl(item, prior)


@register_selector
class PKLSelector(Selector):
    name = "PKL"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.posterior_kl(item, prior)


@register_selector
class EPVSelector(Selector):
    """Minimum expected posterior variance."""

    name = "EPV"
    maximize = False

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.expected_pv(item, prior)


@register_selector
class RandomSelector(Selector):
    """
    Uniform random scores.

    Only the seed is stored; each call draws from a fresh generator, so a
    seeded selector returns the same scores every time it is asked.
    """

    name = "RANDOM"

    def __init__(self, seed: int | None = None):
        self.seed = seed if seed is not None else settings.RANDOM_SEED

    def score(self, estimator: Estimator, prior: Prior, candidates: list[int]) -> list[float]:
        rng = np.random.default_rng(self.seed)
        return rng.random(len(candidates)).tolist()


@register_selector
class PriorSelector(Selector):
    """Fisher information averaged over the prior, ignoring recorded answers."""

    name = "PRIOR"

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        return estimator.prior_weighted_info(item, prior)
