"""Shared contract for item selection strategies."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar

from cat_engine.core.errors import EstimationError, NoItemsRemainingError
from cat_engine.estimation import Estimator
from cat_engine.prior import Prior

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """Selected item plus per-candidate diagnostics."""

    name: str
    item: int
    questions: list[int] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    question_names: list[str] = field(default_factory=list)

    @property
    def value(self) -> float:
        """Score of the selected item."""
        return self.values[self.questions.index(self.item)]

    @property
    def scores(self) -> dict[int, float]:
        """Scores keyed by candidate item index."""
        return dict(zip(self.questions, self.values))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "name": self.name,
            "item": self.item,
            "questions": list(self.questions),
            "values": [round(v, 6) for v in self.values],
            "question_names": list(self.question_names),
        }


class Selector:
    """
    Scores every unanswered item under one criterion and picks the best.

    Subclasses set `name` and implement `score_item`, or override `score` when
    the criterion shares work across candidates. Ties resolve to the first
    candidate in index order.
    """

    name: ClassVar[str]
    maximize: ClassVar[bool] = True

    def score_item(self, estimator: Estimator, prior: Prior, item: int) -> float:
        """Score one candidate. Subclasses override this or `score`."""
        raise NotImplementedError(f"{type(self).__name__} must override score_item or score")

    def score(self, estimator: Estimator, prior: Prior, candidates: list[int]) -> list[float]:
        """Score every candidate, in candidate order."""
        return [self.score_item(estimator, prior, item) for item in candidates]

    def select(self, estimator: Estimator, prior: Prior) -> Selection:
        """
        Select the next item from the question set's unanswered items.

        Raises:
            NoItemsRemainingError: If every item has been answered
            EstimationError: If the criterion scores any candidate as NaN
        """
        questions = estimator.questions
        candidates = list(questions.nonapplicable_rows)
        if not candidates:
            raise NoItemsRemainingError(
                "No items left to select",
                details={"n_items": len(questions), "criterion": self.name},
            )

        values = [float(v) for v in self.score(estimator, prior, candidates)]
        best = self._best_position(candidates, values)
        names = questions.names

        selection = Selection(
            name=self.name,
            item=candidates[best],
            questions=candidates,
            values=values,
            question_names=[names[i] for i in candidates],
        )
        logger.debug(
            "Selected next item",
            extra={"criterion": self.name, "item": selection.item, "value": selection.value},
        )
        return selection

    def _best_position(self, candidates: list[int], values: list[float]) -> int:
        sign = 1.0 if self.maximize else -1.0
        best = 0
        for pos, value in enumerate(values):
            if math.isnan(value):
                raise EstimationError(
                    f"Criterion {self.name} produced NaN for item {candidates[pos]}",
                    details={"criterion": self.name, "item": candidates[pos]},
                )
            if sign * value > sign * values[best]:
                best = pos
        return best
