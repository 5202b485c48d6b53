"""
Entry points for an adaptive test driver.

The driver owns the loop: it asks for the next item, administers it, records
the answer and decides when to stop. Everything here is a thin composition of
the question set, an estimator and a selector; defaults come from settings.
"""

from __future__ import annotations

import logging

from cat_engine.constants import EstimationMethod
from cat_engine.core.config import settings
from cat_engine.estimation import Estimator, make_estimator
from cat_engine.numerics import Integrator, RootFinder
from cat_engine.prior import Prior
from cat_engine.question_set import QuestionSet, Response
from cat_engine.selection import Selection, Selector, get_selector

logger = logging.getLogger(__name__)


def _estimator(
    questions: QuestionSet,
    method: EstimationMethod | str | None,
    integrator: Integrator | None = None,
    root_finder: RootFinder | None = None,
) -> Estimator:
    return make_estimator(
        questions,
        method or settings.ESTIMATION_METHOD,
        integrator=integrator,
        root_finder=root_finder,
    )


def select_next_item(
    questions: QuestionSet,
    prior: Prior,
    strategy: Selector | str | None = None,
    method: EstimationMethod | str | None = None,
) -> Selection:
    """
    Score every unanswered item and return the best one.

    Args:
        questions: Current session state
        prior: Prior over theta
        strategy: Selector instance or criterion name (default: settings.SELECTION_CRITERION)
        method: Estimation method name (default: settings.ESTIMATION_METHOD)

    Returns:
        Selection with the chosen item and per-candidate scores

    Raises:
        NoItemsRemainingError: If every item has been answered
        UnknownCriterionError: If strategy or method is not registered
    """
    if strategy is None:
        strategy = settings.SELECTION_CRITERION
    selector = get_selector(strategy) if isinstance(strategy, str) else strategy
    estimator = _estimator(questions, method)

    selection = selector.select(estimator, prior)
    logger.debug(
        "Next item selected",
        extra={"criterion": selection.name, "item": selection.item, "method": estimator.method.value},
    )
    return selection


def estimate_theta(
    questions: QuestionSet,
    prior: Prior,
    hypothetical: Response | None = None,
    method: EstimationMethod | str | None = None,
) -> float:
    """
    Point estimate of theta from the recorded answers.

    A hypothetical Response is folded in for look-ahead without touching the
    question set.
    """
    estimator = _estimator(questions, method)
    theta = estimator.estimate_theta(prior, hypothetical)
    logger.debug("Estimated theta", extra={"method": estimator.method.value, "theta": theta})
    return theta


def estimate_standard_error(
    questions: QuestionSet,
    prior: Prior,
    hypothetical: Response | None = None,
    method: EstimationMethod | str | None = None,
) -> float:
    """Standard error matching estimate_theta."""
    estimator = _estimator(questions, method)
    se = estimator.estimate_se(prior, hypothetical)
    logger.debug("Estimated standard error", extra={"method": estimator.method.value, "se": se})
    return se


def record_answer(questions: QuestionSet, item: int, answer: int) -> None:
    questions.record_answer(item, answer)


def clear_answer(questions: QuestionSet, item: int) -> None:
    questions.clear_answer(item)
