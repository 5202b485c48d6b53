"""Tests for the question set data model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cat_engine.constants import IRTModel, ModelFamily
from cat_engine.core.errors import InvalidAnswerError, InvalidIndexError
from cat_engine.question_set import Item, QuestionSet, Response


def _assert_partition(questions: QuestionSet) -> None:
    answered = set(questions.applicable_rows)
    unanswered = set(questions.nonapplicable_rows)
    assert answered.isdisjoint(unanswered)
    assert answered | unanswered == set(range(len(questions)))
    assert questions.nonapplicable_rows == sorted(questions.nonapplicable_rows)
    for i in range(len(questions)):
        assert (questions.answers[i] is not None) == (i in answered)


def test_new_question_set_has_nothing_answered(flat_binary_bank):
    assert flat_binary_bank.applicable_rows == []
    assert flat_binary_bank.nonapplicable_rows == [0, 1, 2]
    assert flat_binary_bank.family is ModelFamily.BINARY
    _assert_partition(flat_binary_bank)


def test_record_and_clear_keep_partition(flat_binary_bank):
    flat_binary_bank.record_answer(1, 1)
    flat_binary_bank.record_answer(0, 0)
    _assert_partition(flat_binary_bank)
    assert flat_binary_bank.applicable_rows == [1, 0]

    flat_binary_bank.record_answer(1, 0)
    assert flat_binary_bank.answers[1] == 0
    assert flat_binary_bank.applicable_rows == [1, 0]

    flat_binary_bank.clear_answer(1)
    _assert_partition(flat_binary_bank)
    assert flat_binary_bank.nonapplicable_rows == [1, 2]

    # clearing an unanswered item is a no-op
    flat_binary_bank.clear_answer(2)
    _assert_partition(flat_binary_bank)


@pytest.mark.parametrize("index", [-1, 3, 1.5, True, "0"])
def test_invalid_index(flat_binary_bank, index):
    with pytest.raises(InvalidIndexError) as exc_info:
        flat_binary_bank.record_answer(index, 1)
    assert isinstance(exc_info.value, IndexError)
    _assert_partition(flat_binary_bank)


@pytest.mark.parametrize("answer", [2, -1, 0.5, True])
def test_invalid_binary_answer(flat_binary_bank, answer):
    with pytest.raises(InvalidAnswerError):
        flat_binary_bank.record_answer(0, answer)
    assert flat_binary_bank.answers[0] is None


def test_polytomous_categories_start_at_one(grm_bank):
    assert list(grm_bank.categories(0)) == [1, 2, 3]
    with pytest.raises(InvalidAnswerError):
        grm_bank.record_answer(0, 0)
    grm_bank.record_answer(0, 3)
    assert grm_bank.is_answered(0)


def test_ltm_forces_guessing_to_zero():
    questions = QuestionSet(
        items=[Item(discrimination=1.0, difficulty=(0.0,), guessing=0.3)],
        model="ltm",
    )
    assert questions.model is IRTModel.LTM
    assert questions.items[0].guessing == 0.0


def test_binary_items_need_single_difficulty():
    with pytest.raises(ValueError):
        QuestionSet(items=[Item(discrimination=1.0, difficulty=(0.0, 1.0))], model=IRTModel.TPM)


def test_bounds_must_be_ordered():
    with pytest.raises(ValueError):
        QuestionSet(items=[], model=IRTModel.TPM, lower_bound=2.0, upper_bound=-2.0)


def test_from_params_validates_items():
    with pytest.raises(ValidationError):
        QuestionSet.from_params(IRTModel.TPM, discrimination=[1.0], difficulty=[0.0], guessing=[1.0])
    with pytest.raises(ValidationError):
        QuestionSet.from_params(IRTModel.GRM, discrimination=[1.0], difficulty=[[]])
    with pytest.raises(ValueError):
        QuestionSet.from_params(IRTModel.TPM, discrimination=[1.0, 1.0], difficulty=[0.0])


def test_from_params_records_answers():
    questions = QuestionSet.from_params(
        IRTModel.GPCM,
        discrimination=[1.0, 1.0, 1.0],
        difficulty=[(0.0,), (0.5, 1.0), (-1.0,)],
        answers=[None, 3, 1],
    )
    assert questions.applicable_rows == [1, 2]
    assert questions.nonapplicable_rows == [0]
    assert list(questions.categories(1)) == [1, 2, 3]


def test_names_fall_back_to_index():
    questions = QuestionSet.from_params(
        IRTModel.TPM,
        discrimination=[1.0, 1.0],
        difficulty=[0.0, 0.0],
        names=["first", None],
    )
    assert questions.names == ["first", "1"]


def test_responses_overlay(tpm_bank):
    assert tpm_bank.responses() == [Response(0, 1)]
    assert tpm_bank.responses(Response(2, 0)) == [Response(0, 1), Response(2, 0)]
    assert tpm_bank.responses(Response(0, 0)) == [Response(0, 0)]
    assert tpm_bank.answers[0] == 1

    with pytest.raises(InvalidAnswerError):
        tpm_bank.responses(Response(2, 5))


@pytest.mark.parametrize("thresholds", [(1.0, -1.0), (0.5, 0.5), (-1.0, 0.0, -0.5)])
def test_graded_thresholds_must_increase(thresholds):
    with pytest.raises(ValueError, match="strictly increasing"):
        QuestionSet.from_params(IRTModel.GRM, discrimination=[1.0], difficulty=[thresholds])


def test_partial_credit_thresholds_may_be_unordered():
    questions = QuestionSet.from_params(IRTModel.GPCM, discrimination=[1.0], difficulty=[(1.0, -1.0)])
    assert questions.items[0].difficulty == (1.0, -1.0)
