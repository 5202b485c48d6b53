"""
Question set - calibrated items, the model tag and the session's answers.

The question set is the only mutable state in the engine. It changes through
record_answer / clear_answer and nothing else; look-ahead scoring passes a
Response overlay instead of writing hypothetical answers into it.
"""

import bisect
import logging
from dataclasses import dataclass, field, replace
from numbers import Integral, Real
from typing import NamedTuple, Sequence

from cat_engine.constants import IRTModel, ModelFamily
from cat_engine.contracts import ItemParamsIn
from cat_engine.core.config import settings
from cat_engine.core.errors import InvalidAnswerError, InvalidIndexError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Item:
    """Calibrated item parameters. Immutable once loaded."""

    discrimination: float
    difficulty: tuple[float, ...]
    guessing: float = 0.0
    name: str | None = None


class Response(NamedTuple):
    """A hypothetical (item, answer) pair folded into look-ahead computations."""

    item: int
    answer: int


@dataclass
class QuestionSet:
    """
    Items, model and answers for one test session.

    Invariant: applicable_rows (answered) and nonapplicable_rows (unanswered)
    are disjoint and together cover every item index. nonapplicable_rows is
    kept in ascending index order so selection ties resolve to the lowest index.
    """

    items: list[Item]
    model: IRTModel
    answers: list[int | None] = field(default_factory=list)
    lower_bound: float = field(default_factory=lambda: settings.THETA_LOWER_BOUND)
    upper_bound: float = field(default_factory=lambda: settings.THETA_UPPER_BOUND)
    z: tuple[float, ...] = field(default_factory=lambda: tuple(settings.Z_CRITICAL_VALUES))
    integration_subintervals: int = field(default_factory=lambda: settings.INTEGRATION_SUBINTERVALS)
    applicable_rows: list[int] = field(init=False, default_factory=list)
    nonapplicable_rows: list[int] = field(init=False, default_factory=list)

    def __post_init__(self):
        self.model = IRTModel(self.model)
        self.z = tuple(self.z)

        if self.lower_bound >= self.upper_bound:
            raise ValueError(
                f"lower_bound must be < upper_bound, got [{self.lower_bound}, {self.upper_bound}]"
            )
        if not self.z:
            raise ValueError("z must contain at least one critical value")

        if self.model is IRTModel.LTM:
            self.items = [replace(item, guessing=0.0) for item in self.items]
        else:
            self.items = list(self.items)

        if self.family is ModelFamily.BINARY:
            for i, item in enumerate(self.items):
                if len(item.difficulty) != 1:
                    raise ValueError(
                        f"Binary item {i} must have exactly one difficulty value, "
                        f"got {len(item.difficulty)}"
                    )
        elif self.family is ModelFamily.GRADED:
            for i, item in enumerate(self.items):
                if any(lo >= hi for lo, hi in zip(item.difficulty, item.difficulty[1:])):
                    raise ValueError(
                        f"Graded item {i} thresholds must be strictly increasing, "
                        f"got {list(item.difficulty)}"
                    )

        recorded = list(self.answers) if self.answers else [None] * len(self.items)
        if len(recorded) != len(self.items):
            raise ValueError(f"Expected {len(self.items)} answers, got {len(recorded)}")

        self.answers = [None] * len(self.items)
        self.applicable_rows = []
        self.nonapplicable_rows = list(range(len(self.items)))
        for i, answer in enumerate(recorded):
            if answer is not None:
                self.record_answer(i, answer)

    @classmethod
    def from_params(
        cls,
        model: IRTModel | str,
        discrimination: Sequence[float],
        difficulty: Sequence[float | Sequence[float]],
        guessing: Sequence[float] | None = None,
        names: Sequence[str] | None = None,
        answers: Sequence[int | None] | None = None,
        **kwargs,
    ) -> "QuestionSet":
        """
        Build a question set from parallel parameter sequences.

        Args:
            model: Model tag ("ltm", "tpm", "grm", "gpcm")
            discrimination: One discrimination per item
            difficulty: Per item, a single value or a sequence of thresholds
            guessing: Per-item guessing (binary models only), defaults to 0
            names: Optional item names
            answers: Optional pre-recorded answers (None = unanswered)
            **kwargs: lower_bound, upper_bound, z, integration_subintervals

        Returns:
            QuestionSet with every item validated through ItemParamsIn
        """
        n = len(discrimination)
        if len(difficulty) != n:
            raise ValueError(f"Expected {n} difficulty entries, got {len(difficulty)}")
        guessing = list(guessing) if guessing is not None else [0.0] * n
        names = list(names) if names is not None else [None] * n
        if len(guessing) != n or len(names) != n:
            raise ValueError("guessing and names must have one entry per item")

        items = []
        for a, d, g, name in zip(discrimination, difficulty, guessing, names):
            thresholds = [d] if isinstance(d, Real) else list(d)
            params = ItemParamsIn(discrimination=a, difficulty=thresholds, guessing=g, name=name)
            items.append(
                Item(
                    discrimination=params.discrimination,
                    difficulty=tuple(params.difficulty),
                    guessing=params.guessing,
                    name=params.name,
                )
            )

        return cls(items=items, model=IRTModel(model), answers=list(answers or []), **kwargs)

    # ==================== Accessors ====================

    def __len__(self) -> int:
        return len(self.items)

    @property
    def family(self) -> ModelFamily:
        return self.model.family

    @property
    def names(self) -> list[str]:
        """Item names, falling back to the index for unnamed items."""
        return [item.name if item.name is not None else str(i) for i, item in enumerate(self.items)]

    def item(self, index: int) -> Item:
        self.check_index(index)
        return self.items[index]

    def categories(self, index: int) -> range:
        """Valid answer categories: {0, 1} for binary, {1..k} for polytomous."""
        item = self.item(index)
        if self.family is ModelFamily.BINARY:
            return range(0, 2)
        return range(1, len(item.difficulty) + 2)

    def is_answered(self, index: int) -> bool:
        self.check_index(index)
        return self.answers[index] is not None

    # ==================== Validation ====================

    def check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, Integral) or not 0 <= index < len(self.items):
            raise InvalidIndexError(
                f"Item index {index!r} is outside the question set",
                details={"index": index, "n_items": len(self.items)},
            )

    def check_answer(self, index: int, answer: int) -> None:
        valid = self.categories(index)
        if isinstance(answer, bool) or not isinstance(answer, Integral) or answer not in valid:
            raise InvalidAnswerError(
                f"Answer {answer!r} is outside categories [{valid.start}, {valid.stop - 1}] "
                f"for item {index}",
                details={"index": index, "answer": answer, "model": self.model.value},
            )

    # ==================== Mutation ====================

    def record_answer(self, index: int, answer: int) -> None:
        """Record an answer and move the item into the answered partition."""
        self.check_answer(index, answer)
        index, answer = int(index), int(answer)
        if self.answers[index] is None:
            self.nonapplicable_rows.remove(index)
            self.applicable_rows.append(index)
        self.answers[index] = answer
        logger.debug("Recorded answer", extra={"item": index, "answer": answer})

    def clear_answer(self, index: int) -> None:
        """Clear an answer and move the item back into the unanswered partition."""
        self.check_index(index)
        index = int(index)
        if self.answers[index] is None:
            return
        self.answers[index] = None
        self.applicable_rows.remove(index)
        bisect.insort(self.nonapplicable_rows, index)

    # ==================== Overlay ====================

    def responses(self, hypothetical: Response | None = None) -> list[Response]:
        """
        Effective answer set: recorded answers plus an optional hypothetical one.

        A hypothetical answer for an already-answered item replaces the recorded
        one. Nothing is written to the question set.
        """
        if hypothetical is None:
            return [Response(i, self.answers[i]) for i in self.applicable_rows]

        item, answer = hypothetical
        self.check_answer(item, answer)
        hypothetical = Response(int(item), int(answer))
        base = [Response(i, self.answers[i]) for i in self.applicable_rows if i != hypothetical.item]
        base.append(hypothetical)
        return base

