"""Computerized adaptive testing engine - IRT theta estimation and item selection."""

from cat_engine.constants import EstimationMethod, IRTModel, ModelFamily, PriorFamily
from cat_engine.core.errors import (
    CatEngineError,
    EstimationError,
    InvalidAnswerError,
    InvalidIndexError,
    NoItemsRemainingError,
    NonConvergenceError,
    NumericalDomainError,
    UnknownCriterionError,
)
from cat_engine.estimation import EAPEstimator, Estimator, MAPEstimator, MLEEstimator, make_estimator
from cat_engine.numerics import Integrator, RootFinder
from cat_engine.prior import Prior
from cat_engine.question_set import Item, QuestionSet, Response
from cat_engine.selection import Selection, Selector, available_criteria, get_selector, register_selector
from cat_engine.session import (
    clear_answer,
    estimate_standard_error,
    estimate_theta,
    record_answer,
    select_next_item,
)

__version__ = "0.1.0"

__all__ = [
    "EstimationMethod",
    "IRTModel",
    "ModelFamily",
    "PriorFamily",
    "CatEngineError",
    "EstimationError",
    "InvalidAnswerError",
    "InvalidIndexError",
    "NoItemsRemainingError",
    "NonConvergenceError",
    "NumericalDomainError",
    "UnknownCriterionError",
    "Estimator",
    "EAPEstimator",
    "MAPEstimator",
    "MLEEstimator",
    "make_estimator",
    "Integrator",
    "RootFinder",
    "Prior",
    "Item",
    "QuestionSet",
    "Response",
    "Selection",
    "Selector",
    "available_criteria",
    "get_selector",
    "register_selector",
    "select_next_item",
    "estimate_theta",
    "estimate_standard_error",
    "record_answer",
    "clear_answer",
]
