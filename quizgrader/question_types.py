"""
Question type definitions and normalization of stored type values.

Question types are read back from storage that has been written by several
generations of the authoring UI, so the stored value is untrusted. Anything
that cannot be recognized grades as a free text question.
"""

import logging
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class QuestionType(str, Enum):
    """Supported question types."""

    TEXT = "text"
    MULTIPLE_CHOICE = "multipleChoice"
    CHECKBOX = "checkbox"
    RATING = "rating"
    GRID = "grid"


# Lookup keyed on the type name with separators removed and lowercased,
# so "multiple-choice", "multiple_choice" and "MultipleChoice" all resolve.
_TYPE_LOOKUP: dict[str, QuestionType] = {
    "text": QuestionType.TEXT,
    "multiplechoice": QuestionType.MULTIPLE_CHOICE,
    "checkbox": QuestionType.CHECKBOX,
    "rating": QuestionType.RATING,
    "grid": QuestionType.GRID,
}


def _lookup(name: str) -> QuestionType | None:
    key = name.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
    return _TYPE_LOOKUP.get(key)


def normalize_question_type(value: Any) -> QuestionType:
    """
    Normalize a stored question type value.

    Accepts a QuestionType, a type name in any common spelling, or a
    form-library object/dict carrying the name under ``value`` or ``type``.

    Args:
        value: The raw stored value.

    Returns:
        The matching QuestionType, or QuestionType.TEXT when unrecognized.
    """
    if isinstance(value, QuestionType):
        return value

    if value is None:
        logger.debug("Question type is missing, defaulting to 'text'")
        return QuestionType.TEXT

    if isinstance(value, str):
        resolved = _lookup(value)
        if resolved is not None:
            return resolved

    elif isinstance(value, dict):
        for key in ("value", "type"):
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate != "undefined":
                resolved = _lookup(candidate)
                if resolved is not None:
                    return resolved

    logger.debug("Couldn't normalize question type %r, defaulting to 'text'", value)
    return QuestionType.TEXT


def get_valid_question_types() -> list[str]:
    """Return the canonical names of all supported question types."""
    return [t.value for t in QuestionType]
