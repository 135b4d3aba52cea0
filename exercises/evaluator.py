"""Free-text answer checking.

Answers are compared after normalization (trim, uppercase, strip all
whitespace). Matrix results accept either the bracketed JSON form
"[[1,2],[3,4]]" or the flattened row-major form "1,2,3,4".
"""

import json
import re
from typing import Sequence

from models import AnswerResult, Exercise

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_answer(text: str) -> str:
    return _WHITESPACE_RE.sub("", text.strip().upper())


def _is_matrix(value) -> bool:
    return isinstance(value, (list, tuple)) and all(
        isinstance(row, (list, tuple)) for row in value
    )


def expected_answer_text(expected) -> str:
    """Canonical display string for an expected result."""
    if _is_matrix(expected):
        return json.dumps(expected, separators=(",", ":"))
    return str(expected)


def flatten_matrix(matrix: Sequence[Sequence[int]]) -> str:
    return ",".join(str(value) for row in matrix for value in row)


def check_answer(exercise: Exercise, answer: str | None) -> AnswerResult:
    """Judge a raw answer against the exercise's expected result.

    Never raises: empty or unparseable input is simply incorrect.
    """
    expected = exercise.expected_result
    correct_answer = expected_answer_text(expected)
    user = normalize_answer("" if answer is None else str(answer))

    if _is_matrix(expected):
        correct = user == normalize_answer(correct_answer) or user == flatten_matrix(
            expected
        )
        return AnswerResult(correct=correct, correct_answer=correct_answer)

    return AnswerResult(
        correct=user == normalize_answer(correct_answer),
        correct_answer=correct_answer,
    )
