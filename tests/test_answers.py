import math

import pytest

from scoring.answers import Answers, normalize_answer, normalize_responses


@pytest.mark.parametrize("raw", [True, 1, 1.0, "1", "true", "TRUE", "Yes", " yes "])
def test_checked_sentinels(raw):
    assert normalize_answer(raw).checked is True


@pytest.mark.parametrize("raw", [False, 0, "0", "false", "No"])
def test_unchecked_sentinels(raw):
    assert normalize_answer(raw).checked is False


@pytest.mark.parametrize("raw", [None, "", "   ", math.nan, math.inf, [1], {"a": 1}])
def test_unanswered_values(raw):
    assert normalize_answer(raw) is None


def test_numbers_and_strings():
    a = normalize_answer("3")
    assert a.number == 3 and a.checked is None and a.text == "3"

    a = normalize_answer(2.5)
    assert a.number == 2.5

    a = normalize_answer("abc")
    assert a.number is None and a.checked is None and a.text == "abc"

    # booleans are flags, not numbers
    assert normalize_answer(True).number is None


def test_answered_zero_is_not_unanswered():
    a = normalize_answer(0)
    assert a is not None and a.number == 0


def test_lookup_prefers_qualified_key():
    answers = normalize_responses({"sleep.q1": "2", "q1": "4", "q2": "1"})
    assert answers.number("sleep", "q1") == 2
    assert answers.number("sleep", "q2") == 1
    assert answers.number("sleep", "q3") is None
    assert answers.checked("sleep", "q3") is None
    assert answers.text("sleep", "q3") == ""


def test_snapshot_is_read_only_and_input_untouched():
    raw = {"a.x": "1", "a.y": None}
    answers = normalize_responses(raw)
    assert raw == {"a.x": "1", "a.y": None}
    assert set(answers) == {"a.x"}
    assert len(answers) == 1
    with pytest.raises(TypeError):
        answers._data["a.z"] = None


def test_normalize_is_idempotent_on_snapshots():
    answers = normalize_responses({"a": 1})
    assert normalize_responses(answers) is answers
    assert isinstance(answers, Answers)
