"""
Theta estimation and the expectation / integrated information criteria.

Estimators hold a question set plus numerical configuration. They never
write to the question set: look-ahead computations thread a Response overlay
through the likelihood and information functions instead.

Estimator families:
- EAPEstimator: posterior mean by quadrature, SE = posterior standard deviation
- MAPEstimator: root of d1LL with the prior term, SE from -1 / d2LL
- MLEEstimator: root of d1LL without the prior term, SE from -1 / d2LL
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from cat_engine.constants import EstimationMethod, ModelFamily
from cat_engine.core.errors import EstimationError, InvalidAnswerError, UnknownCriterionError
from cat_engine.irt import information
from cat_engine.irt import likelihood as lik
from cat_engine.irt.prob import category_probabilities, probability
from cat_engine.numerics import Integrator, RootFinder
from cat_engine.prior import Prior
from cat_engine.question_set import QuestionSet, Response

logger = logging.getLogger(__name__)


class Estimator(ABC):
    """Probability, likelihood and information engine over one question set."""

    method: EstimationMethod

    def __init__(
        self,
        questions: QuestionSet,
        integrator: Integrator | None = None,
        root_finder: RootFinder | None = None,
    ):
        self.questions = questions
        self.integrator = integrator or Integrator()
        self.root_finder = root_finder or RootFinder()

    # ==================== Probability & Likelihood ====================

    def probability(self, theta: float, item: int) -> float | np.ndarray:
        return probability(self.questions.family, theta, self.questions.item(item))

    def likelihood(self, theta: float, hypothetical: Response | None = None) -> float:
        return lik.likelihood(self.questions, theta, hypothetical)

    def log_likelihood(self, theta: float, hypothetical: Response | None = None) -> float:
        return lik.log_likelihood(self.questions, theta, hypothetical)

    def d1_log_likelihood(self, theta: float, use_prior: bool, prior: Prior, hypothetical: Response | None = None) -> float:
        return lik.d1_log_likelihood(self.questions, theta, use_prior, prior, hypothetical)

    def d2_log_likelihood(self, theta: float, use_prior: bool, prior: Prior, hypothetical: Response | None = None) -> float:
        return lik.d2_log_likelihood(self.questions, theta, use_prior, prior, hypothetical)

    # ==================== Information ====================

    def obs_inf(self, theta: float, item: int, answer: int | None = None) -> float:
        """
        Observed information of one item.

        Uses the recorded answer when none is given. The binary curvature does
        not depend on the answer, so unanswered binary items are accepted.
        """
        questions = self.questions
        questions.check_index(item)
        if answer is None:
            answer = questions.answers[item]
        if answer is None:
            if questions.family is not ModelFamily.BINARY:
                raise InvalidAnswerError(
                    f"Item {item} has no recorded answer",
                    details={"index": item, "model": questions.model.value},
                )
            answer = 1
        else:
            questions.check_answer(item, answer)
        return information.observed_information(questions.family, theta, questions.items[item], answer)

    def fisher_inf(self, theta: float, item: int) -> float:
        return information.fisher_information(self.questions.family, theta, self.questions.item(item))

    def fisher_test_info(self, prior: Prior, hypothetical: Response | None = None) -> float:
        """Test information over the answer set, at the current point estimate."""
        theta = self.estimate_theta(prior, hypothetical)
        return information.fisher_test_information(self.questions, theta, hypothetical)

    def kl(self, theta_not: float, item: int, theta: float) -> float:
        return information.kl_divergence(self.questions.family, theta_not, theta, self.questions.item(item))

    # ==================== Theta Estimation ====================

    @abstractmethod
    def estimate_theta(self, prior: Prior, hypothetical: Response | None = None) -> float:
        """Point estimate of theta."""

    @abstractmethod
    def estimate_se(self, prior: Prior, hypothetical: Response | None = None) -> float:
        """Standard error of the point estimate."""

    # ==================== Expectations over Hypothetical Answers ====================

    def expected_pv(self, item: int, prior: Prior) -> float:
        """
        Expected posterior variance after administering item.

        Each category's variance is computed with the category folded in as a
        hypothetical answer and weighted by its probability at the current
        estimate.
        """
        questions = self.questions
        theta = self.estimate_theta(prior)
        weights = category_probabilities(questions.family, theta, questions.item(item))

        total = 0.0
        for weight, answer in zip(weights, questions.categories(item)):
            se = self.estimate_se(prior, Response(item, answer))
            total += se**2 * weight
        return float(total)

    def expected_obs_inf(self, item: int, prior: Prior) -> float:
        """Expected observed information of item, re-estimating theta per category."""
        questions = self.questions
        theta = self.estimate_theta(prior)
        weights = category_probabilities(questions.family, theta, questions.item(item))

        total = 0.0
        for weight, answer in zip(weights, questions.categories(item)):
            theta_answer = self.estimate_theta(prior, Response(item, answer))
            total += self.obs_inf(theta_answer, item, answer) * weight
        return float(total)

    # ==================== Integrated Criteria ====================

    def integrate(self, function: Callable[[float], float], lower: float, upper: float) -> float:
        return self.integrator.integrate(function, lower, upper, self.questions.integration_subintervals)

    def information_window(self, prior: Prior, theta: float | None = None) -> tuple[float, float]:
        """
        [theta_hat - z * sqrt(1 / I), theta_hat + z * sqrt(1 / I)], clipped to the
        theta bounds. With no test information the window is the full bounds.
        """
        questions = self.questions
        if theta is None:
            theta = self.estimate_theta(prior)
        test_info = information.fisher_test_information(questions, theta)
        if test_info <= 0.0:
            return questions.lower_bound, questions.upper_bound

        delta = questions.z[0] * math.sqrt(1.0 / test_info)
        return max(theta - delta, questions.lower_bound), min(theta + delta, questions.upper_bound)

    def pwi(self, item: int, prior: Prior) -> float:
        """Posterior-weighted Fisher information."""
        self.questions.check_index(item)

        def pwi_j(theta: float) -> float:
            return self.likelihood(theta) * prior.density(theta) * self.fisher_inf(theta, item)

        return self.integrate(pwi_j, self.questions.lower_bound, self.questions.upper_bound)

    def lwi(self, item: int) -> float:
        """Likelihood-weighted Fisher information."""
        self.questions.check_index(item)

        def lwi_j(theta: float) -> float:
            return self.likelihood(theta) * self.fisher_inf(theta, item)

        return self.integrate(lwi_j, self.questions.lower_bound, self.questions.upper_bound)

    def prior_weighted_info(self, item: int, prior: Prior) -> float:
        """Fisher information averaged over the prior alone, ignoring answers."""
        self.questions.check_index(item)

        def prior_j(theta: float) -> float:
            return prior.density(theta) * self.fisher_inf(theta, item)

        return self.integrate(prior_j, self.questions.lower_bound, self.questions.upper_bound)

    def fii(self, item: int, prior: Prior) -> float:
        """Fisher information integrated over the z interval around the estimate."""
        self.questions.check_index(item)
        lower, upper = self.information_window(prior)

        def fii_j(theta_not: float) -> float:
            return self.fisher_inf(theta_not, item)

        return self.integrate(fii_j, lower, upper)

    def expected_kl(self, item: int, prior: Prior) -> float:
        """KL divergence integrated over the z interval around the estimate."""
        self.questions.check_index(item)
        theta = self.estimate_theta(prior)
        lower, upper = self.information_window(prior, theta)

        def kl_fctn(theta_not: float) -> float:
            return self.kl(theta_not, item, theta)

        return self.integrate(kl_fctn, lower, upper)

    def likelihood_kl(self, item: int, prior: Prior) -> float:
        """Likelihood-weighted KL divergence over the theta bounds."""
        self.questions.check_index(item)
        theta = self.estimate_theta(prior)

        def kl_fctn(theta_not: float) -> float:
            return self.likelihood(theta_not) * self.kl(theta_not, item, theta)

        return self.integrate(kl_fctn, self.questions.lower_bound, self.questions.upper_bound)

    def posterior_kl(self, item: int, prior: Prior) -> float:
        """Posterior-weighted KL divergence over the theta bounds."""
        self.questions.check_index(item)
        theta = self.estimate_theta(prior)

        def kl_fctn(theta_not: float) -> float:
            return prior.density(theta_not) * self.likelihood(theta_not) * self.kl(theta_not, item, theta)

        return self.integrate(kl_fctn, self.questions.lower_bound, self.questions.upper_bound)


class EAPEstimator(Estimator):
    """Expected a posteriori estimation by quadrature over the theta bounds."""

    method = EstimationMethod.EAP

    def _posterior_mass(self, prior: Prior, hypothetical: Response | None) -> tuple[Callable[[float], float], float]:
        def posterior(theta: float) -> float:
            return self.likelihood(theta, hypothetical) * prior.density(theta)

        mass = self.integrate(posterior, self.questions.lower_bound, self.questions.upper_bound)
        if not (mass > 0.0 and math.isfinite(mass)):
            logger.warning("EAP posterior has no mass on the theta bounds", extra={"mass": mass})
            raise EstimationError(
                "Posterior integrates to zero over the theta bounds",
                details={"lower": self.questions.lower_bound, "upper": self.questions.upper_bound, "mass": mass},
            )
        return posterior, mass

    def estimate_theta(self, prior: Prior, hypothetical: Response | None = None) -> float:
        posterior, mass = self._posterior_mass(prior, hypothetical)
        numerator = self.integrate(
            lambda theta: theta * posterior(theta), self.questions.lower_bound, self.questions.upper_bound
        )
        return numerator / mass

    def estimate_se(self, prior: Prior, hypothetical: Response | None = None) -> float:
        posterior, mass = self._posterior_mass(prior, hypothetical)
        lower, upper = self.questions.lower_bound, self.questions.upper_bound
        theta_hat = self.integrate(lambda theta: theta * posterior(theta), lower, upper) / mass
        variance = self.integrate(lambda theta: (theta - theta_hat) ** 2 * posterior(theta), lower, upper) / mass
        return math.sqrt(variance)


class _ModeEstimator(Estimator):
    """Root of the first log-likelihood derivative on the root finder's bracket."""

    use_prior: bool

    def estimate_theta(self, prior: Prior, hypothetical: Response | None = None) -> float:
        try:
            return self.root_finder.find_root(lambda theta: self.d1_log_likelihood(theta, self.use_prior, prior, hypothetical))
        except EstimationError as e:
            logger.warning(
                "Theta estimation failed",
                extra={"method": self.method.value, "code": e.code, "details": e.details},
            )
            raise

    def estimate_se(self, prior: Prior, hypothetical: Response | None = None) -> float:
        theta = self.estimate_theta(prior, hypothetical)
        curvature = self.d2_log_likelihood(theta, self.use_prior, prior, hypothetical)
        if not curvature < 0.0:
            raise EstimationError(
                "Information at the estimate is not positive",
                details={"theta": theta, "d2LL": curvature, "method": self.method.value},
            )
        return math.sqrt(-1.0 / curvature)


class MAPEstimator(_ModeEstimator):
    """Maximum a posteriori estimation."""

    method = EstimationMethod.MAP
    use_prior = True


class MLEEstimator(_ModeEstimator):
    """Maximum likelihood estimation."""

    method = EstimationMethod.MLE
    use_prior = False


ESTIMATORS: dict[EstimationMethod, type[Estimator]] = {
    EstimationMethod.EAP: EAPEstimator,
    EstimationMethod.MAP: MAPEstimator,
    EstimationMethod.MLE: MLEEstimator,
}


def make_estimator(
    questions: QuestionSet,
    method: EstimationMethod | str = EstimationMethod.EAP,
    integrator: Integrator | None = None,
    root_finder: RootFinder | None = None,
) -> Estimator:
    """
    Build the estimator registered for method.

    Raises:
        UnknownCriterionError: If method is not a registered estimation method
    """
    try:
        key = EstimationMethod(method)
    except ValueError:
        raise UnknownCriterionError(
            f"Unknown estimation method: {method}",
            details={"available": [m.value for m in ESTIMATORS]},
        ) from None
    return ESTIMATORS[key](questions, integrator=integrator, root_finder=root_finder)
