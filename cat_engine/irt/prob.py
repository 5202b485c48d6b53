"""
IRT probability functions for the binary 3PL, graded response and
generalized partial credit models, plus closed-form GPCM derivatives.

Response representations:
- Binary (ltm/tpm): scalar P(answer = 1), clamped to [eps, 1 - eps].
- Graded (grm): cumulative vector [0, P*_1, ..., P*_{k-1}, 1]; the probability
  of category c is cdf[c] - cdf[c - 1].
- Partial credit (gpcm): category probabilities [p_1, ..., p_k], summing to 1.
"""

from __future__ import annotations

import math

import numpy as np

from cat_engine.config import PROB_EPS
from cat_engine.constants import ModelFamily
from cat_engine.core.errors import NumericalDomainError
from cat_engine.question_set import Item

EPS = PROB_EPS.value


def sigmoid(x: float) -> float:
    """Logistic sigmoid 1 / (1 + exp(-x))."""
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    ex = math.exp(x)
    return ex / (1.0 + ex)


def clamp_probability(p: float) -> float:
    """Clamp a probability to [eps, 1 - eps]."""
    return max(EPS, min(1.0 - EPS, p))


def prob_ltm(theta: float, item: Item) -> float:
    """
    3PL: P = c + (1 - c) * sigmoid(d + a * theta).

    The curve saturates to 1 - eps when the exponential overflows.
    """
    s = sigmoid(item.difficulty[0] + item.discrimination * theta)
    return clamp_probability(item.guessing + (1.0 - item.guessing) * s)


def prob_grm(theta: float, item: Item) -> np.ndarray:
    """
    Graded response cumulative probabilities, bracketed by 0 and 1.

    Raises:
        NumericalDomainError: If two adjacent values are identical (the logistic
            link has saturated for this theta)
    """
    a = item.discrimination
    cumulative = [0.0]
    cumulative.extend(clamp_probability(sigmoid(d - a * theta)) for d in item.difficulty)
    cumulative.append(1.0)
    cdf = np.asarray(cumulative, dtype=np.float64)

    if np.any(cdf[1:] == cdf[:-1]):
        raise NumericalDomainError(
            "Theta value too extreme for numerical routines.",
            details={"theta": theta, "model": "grm"},
        )
    return cdf


def prob_gpcm(theta: float, item: Item) -> np.ndarray:
    """
    Generalized partial credit category probabilities.

    Category j (0-based) has un-normalized weight
    exp((j + 1) * a * theta - a * sum(d[:j])).

    Raises:
        NumericalDomainError: If the normalizer is zero or infinite
    """
    a = item.discrimination
    thresholds = np.asarray(item.difficulty, dtype=np.float64)
    steps = np.arange(1, thresholds.size + 2, dtype=np.float64)
    offsets = np.concatenate(([0.0], np.cumsum(thresholds)))
    with np.errstate(over="ignore", under="ignore"):
        numerators = np.exp(a * theta * steps - a * offsets)
    denominator = numerators.sum()

    if denominator == 0.0 or not np.isfinite(denominator):
        raise NumericalDomainError(
            "Theta value too extreme for numerical routines.",
            details={"theta": theta, "model": "gpcm"},
        )
    return numerators / denominator


def gpcm_first_derivative(theta: float, item: Item) -> np.ndarray:
    """d p_j / d theta for every GPCM category."""
    p = prob_gpcm(theta, item)
    x = item.discrimination * np.arange(1, p.size + 1, dtype=np.float64)
    return p * (x - np.dot(p, x))


def gpcm_derivatives(theta: float, item: Item) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    GPCM probabilities with their first and second theta derivatives.

    With weights f_j = exp(s_j), s_j' = x_j = (j + 1) * a, the quotient rule on
    p_j = f_j / sum(f) reduces to
        p_j'  = p_j * (x_j - m1)
        p_j'' = p_j * ((x_j - m1)**2 - (m2 - m1**2))
    where m1, m2 are the first two moments of x under p.

    Returns:
        Tuple of (probabilities, first derivatives, second derivatives)
    """
    p = prob_gpcm(theta, item)
    x = item.discrimination * np.arange(1, p.size + 1, dtype=np.float64)
    m1 = np.dot(p, x)
    m2 = np.dot(p, x * x)
    centered = x - m1
    first = p * centered
    second = p * (centered * centered - (m2 - m1 * m1))
    return p, first, second


def probability(family: ModelFamily, theta: float, item: Item) -> float | np.ndarray:
    """Model-specific response probability representation for one item."""
    if family is ModelFamily.BINARY:
        return prob_ltm(theta, item)
    if family is ModelFamily.GRADED:
        return prob_grm(theta, item)
    return prob_gpcm(theta, item)


def category_probabilities(family: ModelFamily, theta: float, item: Item) -> np.ndarray:
    """
    Probability of each answer category, in category order.

    Binary: [P(0), P(1)]. Graded: cdf differences. Partial credit: as is.
    """
    if family is ModelFamily.BINARY:
        p = prob_ltm(theta, item)
        return np.array([1.0 - p, p])
    if family is ModelFamily.GRADED:
        return np.diff(prob_grm(theta, item))
    return prob_gpcm(theta, item)
