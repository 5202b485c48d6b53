"""Pytest configuration and shared fixtures."""

import logging

import pytest

from cat_engine.constants import IRTModel, PriorFamily
from cat_engine.prior import Prior
from cat_engine.question_set import Item, QuestionSet


@pytest.fixture
def normal_prior() -> Prior:
    """Standard normal prior over theta."""
    return Prior(PriorFamily.NORMAL, 0.0, 1.0)


@pytest.fixture
def flat_binary_bank() -> QuestionSet:
    """Three identical binary items (a=1, d=0, c=0), nothing answered."""
    items = [Item(discrimination=1.0, difficulty=(0.0,), guessing=0.0) for _ in range(3)]
    return QuestionSet(items=items, model=IRTModel.TPM)


@pytest.fixture
def tpm_bank() -> QuestionSet:
    """Heterogeneous 3PL bank with one recorded answer."""
    questions = QuestionSet.from_params(
        IRTModel.TPM,
        discrimination=[1.0, 1.5, 0.7, 2.0, 1.2],
        difficulty=[0.5, -0.3, 1.0, 0.0, -1.2],
        guessing=[0.2, 0.1, 0.0, 0.25, 0.15],
        names=["q1", "q2", "q3", "q4", "q5"],
    )
    questions.record_answer(0, 1)
    return questions


@pytest.fixture
def grm_bank() -> QuestionSet:
    """Graded response bank (3 categories per item) with one recorded answer."""
    questions = QuestionSet.from_params(
        IRTModel.GRM,
        discrimination=[1.2, 0.8, 1.5, 1.0],
        difficulty=[(-1.0, 1.0), (-0.5, 0.5), (-1.5, 0.0), (0.0, 1.5)],
    )
    questions.record_answer(1, 2)
    return questions


@pytest.fixture
def gpcm_bank() -> QuestionSet:
    """Partial credit bank (3 categories per item) with one recorded answer."""
    questions = QuestionSet.from_params(
        IRTModel.GPCM,
        discrimination=[1.0, 0.6, 1.4, 0.9],
        difficulty=[(-0.5, 0.5), (0.0, 1.0), (-1.0, 0.2), (0.3, -0.3)],
    )
    questions.record_answer(2, 3)
    return questions


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.captureWarnings(False)
