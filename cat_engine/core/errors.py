"""Engine-specific exceptions for consistent error handling."""

from typing import Any


class CatEngineError(Exception):
    """Engine error with standardized error code."""

    code = "CAT_ENGINE_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        """Initialize engine error."""
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NumericalDomainError(CatEngineError, ArithmeticError):
    """Theta is too extreme for the active model's numerical routines."""

    code = "NUMERICAL_DOMAIN"


class InvalidIndexError(CatEngineError, IndexError):
    """Item index outside the calibrated item range."""

    code = "INVALID_INDEX"


class InvalidAnswerError(CatEngineError, ValueError):
    """Answer category outside an item's valid range."""

    code = "INVALID_ANSWER"


class EstimationError(CatEngineError):
    """Theta or standard error could not be estimated."""

    code = "ESTIMATION_FAILED"


class NonConvergenceError(EstimationError):
    """Root finder exhausted its iteration budget."""

    code = "NON_CONVERGENCE"


class NoItemsRemainingError(CatEngineError):
    """Selection requested when every item has been answered."""

    code = "NO_ITEMS_REMAINING"


class UnknownCriterionError(CatEngineError, KeyError):
    """Selection criterion or estimation method is not registered."""

    code = "UNKNOWN_CRITERION"

    def __str__(self) -> str:
        return self.message
