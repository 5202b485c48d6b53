"""Tests for IRT probability functions."""

from __future__ import annotations

import math

import numpy as np
import pytest

from cat_engine.constants import ModelFamily
from cat_engine.core.errors import NumericalDomainError
from cat_engine.irt.prob import (
    EPS,
    category_probabilities,
    gpcm_derivatives,
    gpcm_first_derivative,
    prob_gpcm,
    prob_grm,
    prob_ltm,
    sigmoid,
)
from cat_engine.question_set import Item


def test_eps_is_cube_root_of_machine_epsilon():
    assert EPS == pytest.approx(2.0 ** (-52.0 / 3.0), rel=1e-12)


def test_sigmoid_is_stable_at_extremes():
    assert sigmoid(0.0) == 0.5
    assert sigmoid(800.0) == 1.0
    assert sigmoid(-800.0) == 0.0


def test_prob_ltm_matches_3pl_formula():
    """3PL: P = c + (1 - c) / (1 + exp(-(d + a * theta)))."""
    item = Item(discrimination=1.3, difficulty=(0.4,), guessing=0.2)
    theta = 0.7
    expected = 0.2 + 0.8 / (1.0 + math.exp(-(0.4 + 1.3 * theta)))
    assert prob_ltm(theta, item) == pytest.approx(expected, rel=1e-12)


def test_prob_ltm_clamped_to_eps():
    """Binary probabilities lie in [eps, 1 - eps] even when the logistic saturates."""
    item = Item(discrimination=2.0, difficulty=(0.0,))
    assert prob_ltm(1000.0, item) == 1.0 - EPS
    assert prob_ltm(-1000.0, item) == EPS


def test_prob_ltm_guessing_floor():
    item = Item(discrimination=1.0, difficulty=(0.0,), guessing=0.25)
    for theta in (-5.0, -1.0, 0.0, 3.0):
        p = prob_ltm(theta, item)
        assert p >= 0.25, f"P must respect guessing floor, got {p}"


def test_prob_grm_cumulative_shape():
    item = Item(discrimination=1.2, difficulty=(-1.0, 1.0))
    cdf = prob_grm(0.3, item)
    assert cdf.shape == (4,)
    assert cdf[0] == 0.0
    assert cdf[-1] == 1.0
    assert np.all(np.diff(cdf) > 0)
    assert cdf[1] == pytest.approx(1.0 / (1.0 + math.exp(-(-1.0 - 1.2 * 0.3))))


def test_prob_grm_extreme_theta_raises():
    """Both thresholds clamp to eps at theta=100, producing identical neighbours."""
    item = Item(discrimination=1.0, difficulty=(-1.0, 1.0))
    with pytest.raises(NumericalDomainError) as exc_info:
        prob_grm(100.0, item)
    assert exc_info.value.code == "NUMERICAL_DOMAIN"
    assert isinstance(exc_info.value, ArithmeticError)


def test_prob_gpcm_sums_to_one():
    item = Item(discrimination=0.9, difficulty=(-0.5, 0.2, 1.1))
    for theta in (-3.0, 0.0, 2.5):
        probs = prob_gpcm(theta, item)
        assert probs.shape == (4,)
        assert probs.sum() == pytest.approx(1.0, abs=1e-12)
        assert np.all(probs > 0)


def test_prob_gpcm_two_category_is_logistic():
    """With one threshold at 0 the upper category is sigmoid(a * theta)."""
    item = Item(discrimination=1.0, difficulty=(0.0,))
    theta = 0.8
    probs = prob_gpcm(theta, item)
    assert probs[1] == pytest.approx(math.exp(theta) / (1.0 + math.exp(theta)), rel=1e-12)


@pytest.mark.parametrize("theta", [1000.0, -1000.0])
def test_prob_gpcm_overflow_raises(theta):
    item = Item(discrimination=1.0, difficulty=(0.0,))
    with pytest.raises(NumericalDomainError):
        prob_gpcm(theta, item)


def test_gpcm_derivatives_match_finite_differences():
    item = Item(discrimination=1.1, difficulty=(-0.4, 0.6))
    theta, h = 0.35, 1e-5
    probs, first, second = gpcm_derivatives(theta, item)

    numeric_first = (prob_gpcm(theta + h, item) - prob_gpcm(theta - h, item)) / (2 * h)
    numeric_second = (prob_gpcm(theta + h, item) - 2 * probs + prob_gpcm(theta - h, item)) / h**2

    np.testing.assert_allclose(first, numeric_first, atol=1e-7)
    np.testing.assert_allclose(second, numeric_second, atol=1e-4)
    np.testing.assert_allclose(gpcm_first_derivative(theta, item), first)
    assert first.sum() == pytest.approx(0.0, abs=1e-12)


def test_category_probabilities_per_family():
    binary = Item(discrimination=1.0, difficulty=(0.0,))
    graded = Item(discrimination=1.2, difficulty=(-1.0, 1.0))
    partial = Item(discrimination=1.0, difficulty=(-0.5, 0.5))

    probs = category_probabilities(ModelFamily.BINARY, 0.0, binary)
    np.testing.assert_allclose(probs, [0.5, 0.5])

    probs = category_probabilities(ModelFamily.GRADED, 0.0, graded)
    assert probs.shape == (3,)
    assert probs.sum() == pytest.approx(1.0)

    probs = category_probabilities(ModelFamily.PARTIAL_CREDIT, 0.0, partial)
    assert probs.shape == (3,)
    assert probs.sum() == pytest.approx(1.0)
