"""Property-based tests for probability and look-ahead invariants."""

import math

import numpy as np
from hypothesis import given, settings, strategies as st

from cat_engine.constants import IRTModel, ModelFamily
from cat_engine.estimation import EAPEstimator, MAPEstimator
from cat_engine.irt.prob import EPS, category_probabilities, prob_grm, prob_ltm
from cat_engine.prior import Prior
from cat_engine.question_set import Item, QuestionSet

thetas = st.floats(min_value=-3.0, max_value=3.0, allow_nan=False, allow_infinity=False)
discriminations = st.floats(min_value=0.2, max_value=2.0, allow_nan=False, allow_infinity=False)
guessings = st.floats(min_value=0.0, max_value=0.35, allow_nan=False, allow_infinity=False)


@st.composite
def thresholds(draw, min_size=1, max_size=4):
    """Strictly increasing thresholds starting at -2."""
    steps = draw(
        st.lists(
            st.floats(min_value=0.1, max_value=1.0, allow_nan=False, allow_infinity=False),
            min_size=min_size - 1,
            max_size=max_size - 1,
        )
    )
    return tuple(float(v) for v in np.cumsum([-2.0] + steps))


@settings(max_examples=100, deadline=None)
@given(theta=thetas, a=discriminations, d=st.floats(min_value=-2.0, max_value=2.0), c=guessings)
def test_binary_probability_bounded(theta: float, a: float, d: float, c: float) -> None:
    """
    Property: binary probabilities stay inside [eps, 1 - eps].

    Invariants:
    - No NaN/Inf
    - Result at least the guessing floor
    """
    p = prob_ltm(theta, Item(discrimination=a, difficulty=(d,), guessing=c))
    assert math.isfinite(p)
    assert EPS <= p <= 1.0 - EPS, f"P must be in [eps, 1 - eps], got {p}"
    assert p >= min(c, 1.0 - EPS)


@settings(max_examples=100, deadline=None)
@given(theta=thetas, delta=st.floats(min_value=1e-3, max_value=2.0), a=discriminations, c=guessings)
def test_binary_probability_monotone(theta: float, delta: float, a: float, c: float) -> None:
    """Property: for a > 0 the binary probability is non-decreasing in theta."""
    item = Item(discrimination=a, difficulty=(0.3,), guessing=c)
    assert prob_ltm(theta, item) <= prob_ltm(theta + delta, item)


@settings(max_examples=100, deadline=None)
@given(theta=thetas, a=discriminations, d=thresholds())
def test_graded_cumulative_monotone(theta: float, a: float, d: tuple) -> None:
    """Property: graded cumulative probabilities are non-decreasing in category."""
    cdf = prob_grm(theta, Item(discrimination=a, difficulty=d))
    assert cdf[0] == 0.0 and cdf[-1] == 1.0
    assert np.all(np.diff(cdf) >= 0.0)


@settings(max_examples=100, deadline=None)
@given(
    theta=thetas,
    a=discriminations,
    d=thresholds(),
    family=st.sampled_from([ModelFamily.GRADED, ModelFamily.PARTIAL_CREDIT]),
)
def test_polytomous_probabilities_sum_to_one(theta: float, a: float, d: tuple, family: ModelFamily) -> None:
    """Property: category probabilities of a polytomous item sum to 1."""
    probs = category_probabilities(family, theta, Item(discrimination=a, difficulty=d))
    assert probs.size == len(d) + 1
    assert np.all(probs >= 0.0)
    assert abs(probs.sum() - 1.0) < 1e-12, f"Probabilities must sum to 1, got {probs.sum()}"


@settings(max_examples=25, deadline=None)
@given(
    model=st.sampled_from([IRTModel.TPM, IRTModel.GRM, IRTModel.GPCM]),
    a=st.lists(st.floats(min_value=0.2, max_value=1.5), min_size=3, max_size=3),
    d=st.lists(thresholds(min_size=2, max_size=2), min_size=3, max_size=3),
    answer=st.integers(min_value=0, max_value=1),
    use_map=st.booleans(),
)
def test_lookahead_never_mutates(model: IRTModel, a: list, d: list, answer: int, use_map: bool) -> None:
    """
    Property: expected posterior variance and expected observed information
    leave answers and both partitions exactly as they were.
    """
    if model is IRTModel.TPM:
        difficulty = [(t[0],) for t in d]
    else:
        difficulty = d
    items = [Item(discrimination=ai, difficulty=di) for ai, di in zip(a, difficulty)]
    questions = QuestionSet(items=items, model=model)
    questions.record_answer(0, answer if model is IRTModel.TPM else answer + 1)

    answers = list(questions.answers)
    applicable = list(questions.applicable_rows)
    nonapplicable = list(questions.nonapplicable_rows)

    estimator = MAPEstimator(questions) if use_map else EAPEstimator(questions)
    prior = Prior()
    for item in nonapplicable:
        pv = estimator.expected_pv(item, prior)
        oi = estimator.expected_obs_inf(item, prior)
        assert math.isfinite(pv) and pv > 0.0
        assert math.isfinite(oi)

    assert questions.answers == answers
    assert questions.applicable_rows == applicable
    assert questions.nonapplicable_rows == nonapplicable
