"""
Likelihood and analytic log-likelihood derivatives with respect to theta.

Every function works on the effective answer set of a question set: the
recorded answers plus an optional hypothetical Response. Nothing is mutated.
"""

from __future__ import annotations

import math

from cat_engine.constants import ModelFamily
from cat_engine.irt.prob import gpcm_derivatives, gpcm_first_derivative, prob_gpcm, prob_grm, prob_ltm
from cat_engine.prior import Prior
from cat_engine.question_set import Item, QuestionSet, Response


# ==================== Per-item terms ====================


def response_log_prob(family: ModelFamily, theta: float, item: Item, answer: int) -> float:
    """
    Log probability of one observed answer.

    Binary uses the Bernoulli log-likelihood, graded a cdf difference, and
    partial credit indexes the category directly.
    """
    if family is ModelFamily.BINARY:
        p = prob_ltm(theta, item)
        return answer * math.log(p) + (1 - answer) * math.log(1.0 - p)
    if family is ModelFamily.GRADED:
        cdf = prob_grm(theta, item)
        return math.log(cdf[answer] - cdf[answer - 1])
    probs = prob_gpcm(theta, item)
    return math.log(probs[answer - 1])


def partial_d1(family: ModelFamily, theta: float, item: Item, answer: int) -> float:
    """First derivative of one item's log-likelihood."""
    a = item.discrimination

    if family is ModelFamily.BINARY:
        p = prob_ltm(theta, item)
        g = item.guessing
        return a * ((p - g) / (p * (1.0 - g))) * (answer - p)

    if family is ModelFamily.GRADED:
        cdf = prob_grm(theta, item)
        p_star1 = cdf[answer]
        p_star2 = cdf[answer - 1]
        w1 = p_star1 * (1.0 - p_star1)
        w2 = p_star2 * (1.0 - p_star2)
        return -a * (w1 - w2) / (p_star1 - p_star2)

    probs = prob_gpcm(theta, item)
    first = gpcm_first_derivative(theta, item)
    return float(first[answer - 1] / probs[answer - 1])


def partial_d2(family: ModelFamily, theta: float, item: Item, answer: int) -> float:
    """
    Second derivative of one item's log-likelihood.

    The binary form is the expected (answer-free) curvature of the 3PL.
    """
    a = item.discrimination

    if family is ModelFamily.BINARY:
        p = prob_ltm(theta, item)
        g = item.guessing
        lam = (p - g) / (1.0 - g)
        return -(a * lam) ** 2 * ((1.0 - p) / p)

    if family is ModelFamily.GRADED:
        cdf = prob_grm(theta, item)
        p_star1 = cdf[answer]
        p_star2 = cdf[answer - 1]
        q_star1 = 1.0 - p_star1
        q_star2 = 1.0 - p_star2
        p = p_star1 - p_star2
        w1 = p_star1 * q_star1
        w2 = p_star2 * q_star2
        first_term = (-w2 * (q_star2 - p_star2) + w1 * (q_star1 - p_star1)) / p
        second_term = (w1 - w2) ** 2 / p**2
        return a**2 * (first_term - second_term)

    probs, first, second = gpcm_derivatives(theta, item)
    p = probs[answer - 1]
    p_prime = first[answer - 1]
    p_primeprime = second[answer - 1]
    return float(-((p_prime**2) / (p**2) - p_primeprime / p))


# ==================== Sums over the answer set ====================


def log_likelihood(questions: QuestionSet, theta: float, hypothetical: Response | None = None) -> float:
    """Sum of per-item log probabilities over the effective answer set."""
    family = questions.family
    return math.fsum(
        response_log_prob(family, theta, questions.items[r.item], r.answer)
        for r in questions.responses(hypothetical)
    )


def likelihood(questions: QuestionSet, theta: float, hypothetical: Response | None = None) -> float:
    """Product of per-item response probabilities, computed in log space."""
    return math.exp(log_likelihood(questions, theta, hypothetical))


def d1_log_likelihood(
    questions: QuestionSet,
    theta: float,
    use_prior: bool,
    prior: Prior,
    hypothetical: Response | None = None,
) -> float:
    """
    First derivative of the log-likelihood (or log-posterior with use_prior).

    With no answers at all the derivative is the prior term alone.
    """
    prior_shift = (theta - prior.param0) / prior.param1**2
    responses = questions.responses(hypothetical)
    if not responses:
        return -prior_shift

    family = questions.family
    l_theta = math.fsum(partial_d1(family, theta, questions.items[r.item], r.answer) for r in responses)
    return l_theta - prior_shift if use_prior else l_theta


def d2_log_likelihood(
    questions: QuestionSet,
    theta: float,
    use_prior: bool,
    prior: Prior,
    hypothetical: Response | None = None,
) -> float:
    """
    Second derivative of the log-likelihood (or log-posterior with use_prior).

    With no answers at all the derivative is the prior term alone.
    """
    prior_shift = 1.0 / prior.param1**2
    responses = questions.responses(hypothetical)
    if not responses:
        return -prior_shift

    family = questions.family
    lambda_theta = math.fsum(partial_d2(family, theta, questions.items[r.item], r.answer) for r in responses)
    return lambda_theta - prior_shift if use_prior else lambda_theta
