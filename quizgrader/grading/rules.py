"""
Correctness rules for structured question types.

Rating, multiple choice and checkbox answers are compared exactly; there
is no partial credit. Grid answers are never graded automatically.
"""

from quizgrader.models import GradingResult
from quizgrader.questions.answers import parse_rating, split_checkbox_answer


def _exact_result(is_correct: bool, rule: str) -> GradingResult:
    return GradingResult(is_correct=is_correct, similarity=1.0 if is_correct else 0.0, matched_by=rule)


def grade_rating(submitted_answer: str, correct_answer: str) -> GradingResult:
    """Correct only when both values parse to the same integer."""
    submitted = parse_rating(submitted_answer)
    correct = parse_rating(correct_answer)
    return _exact_result(submitted is not None and submitted == correct, "rating")


def grade_multiple_choice(submitted_answer: str, correct_answer: str) -> GradingResult:
    """Both values come from the same option list, so compare case-sensitively."""
    return _exact_result(submitted_answer == correct_answer, "multiple_choice")


def grade_checkbox(submitted_answer: str, correct_answer: str) -> GradingResult:
    """
    Correct when the selected options equal the correct options.

    Membership and count must both match, so a submission that repeats an
    option cannot pass as the full set.
    """
    submitted = split_checkbox_answer(submitted_answer)
    correct = split_checkbox_answer(correct_answer)
    is_correct = (
        bool(correct)
        and len(submitted) == len(correct)
        and set(submitted) == set(correct)
    )
    return _exact_result(is_correct, "checkbox")


def grade_grid(submitted_answer: str, correct_answer: str) -> GradingResult:
    """Grid answers are left for the teacher to review."""
    return GradingResult(is_correct=False, similarity=0.0, matched_by="grid")
