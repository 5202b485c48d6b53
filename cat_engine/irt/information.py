"""Observed and Fisher information, test information and KL divergence."""

from __future__ import annotations

import math

import numpy as np

from cat_engine.constants import ModelFamily
from cat_engine.irt.likelihood import partial_d2
from cat_engine.irt.prob import gpcm_derivatives, prob_gpcm, prob_grm, prob_ltm
from cat_engine.question_set import Item, QuestionSet, Response


def observed_information(family: ModelFamily, theta: float, item: Item, answer: int) -> float:
    """Negative second derivative of one item's log-likelihood."""
    return -partial_d2(family, theta, item, answer)


def fisher_information(family: ModelFamily, theta: float, item: Item) -> float:
    """
    Expected information of one item at theta.

    Binary: equal to observed information. Graded and partial credit: the
    expectation of the squared score over the item's categories.
    """
    if family is ModelFamily.BINARY:
        # answer does not enter the binary curvature
        return observed_information(family, theta, item, 1)

    if family is ModelFamily.GRADED:
        cdf = prob_grm(theta, item)
        w = cdf * (1.0 - cdf)
        terms = (w[1:] - w[:-1]) ** 2 / (cdf[1:] - cdf[:-1])
        return float(item.discrimination**2 * terms.sum())

    probs, first, second = gpcm_derivatives(theta, item)
    return float(np.sum(first**2 / probs - second))


def fisher_test_information(questions: QuestionSet, theta: float, hypothetical: Response | None = None) -> float:
    """Sum of Fisher information over the effective answer set."""
    family = questions.family
    return math.fsum(
        fisher_information(family, theta, questions.items[r.item]) for r in questions.responses(hypothetical)
    )


def kl_divergence(family: ModelFamily, theta_not: float, theta_hat: float, item: Item) -> float:
    """KL divergence of the response distribution at theta_not from that at theta_hat."""
    if family is ModelFamily.BINARY:
        p_not = prob_ltm(theta_not, item)
        p_hat = prob_ltm(theta_hat, item)
        first_term = p_not * (math.log(p_not) - math.log(p_hat))
        second_term = (1.0 - p_not) * (math.log(1.0 - p_not) - math.log(1.0 - p_hat))
        return first_term + second_term

    if family is ModelFamily.GRADED:
        p_not = np.diff(prob_grm(theta_not, item))
        p_hat = np.diff(prob_grm(theta_hat, item))
    else:
        p_not = prob_gpcm(theta_not, item)
        p_hat = prob_gpcm(theta_hat, item)
    return float(np.sum(p_not * (np.log(p_not) - np.log(p_hat))))
