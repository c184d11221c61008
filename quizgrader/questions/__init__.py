"""
Question Module.

Answer encoding for structured question types and answer key validation.
"""

from quizgrader.questions.answers import (
    grid_selections_to_string,
    join_checkbox_answer,
    parse_grid_answer,
    parse_rating,
    split_checkbox_answer,
)
from quizgrader.questions.validator import QuestionValidationError, QuestionValidator

__all__ = [
    "QuestionValidationError",
    "QuestionValidator",
    "grid_selections_to_string",
    "join_checkbox_answer",
    "parse_grid_answer",
    "parse_rating",
    "split_checkbox_answer",
]
