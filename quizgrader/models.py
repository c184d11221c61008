"""
Pydantic models for the Quiz Grader system.

These models define the schemas for:
- Questions and their answer keys
- Grading results for a single submitted answer
- Stored student answers and dashboard summaries

Field names are snake_case; the camelCase names used by the surrounding
application are accepted as aliases on input.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from quizgrader.question_types import QuestionType, normalize_question_type

DEFAULT_SIMILARITY_THRESHOLD = 0.7


# ==============================================================================
# Question Models
# ==============================================================================


class Question(BaseModel):
    """
    A question together with its answer key.

    Questions are immutable input to grading. Structural invariants are
    enforced here; authoring-level checks (answer is one of the options,
    rating answer in range) live in QuestionValidator.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier of the question",
    )

    text: str = Field(
        default="",
        description="Question text shown to the student",
    )

    correct_answer: str = Field(
        ...,
        description="The teacher-supplied correct answer, encoded per question type",
    )

    question_type: QuestionType = Field(
        default=QuestionType.TEXT,
        description="Type of question, normalized from legacy stored values",
    )

    similarity_threshold: float = Field(
        default=DEFAULT_SIMILARITY_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Minimum similarity for a text answer to count as correct",
    )

    semantic_matching_enabled: bool = Field(
        default=True,
        description="Use the tiered matcher for text answers instead of lexical similarity only",
    )

    options: tuple[str, ...] | None = Field(
        default=None,
        description="Ordered options for multiple choice and checkbox questions",
    )

    rating_min: int | None = Field(default=None, description="Lowest rating value")
    rating_max: int | None = Field(default=None, description="Highest rating value")

    grid_rows: tuple[str, ...] | None = Field(default=None, description="Grid row labels")
    grid_columns: tuple[str, ...] | None = Field(default=None, description="Grid column labels")

    @field_validator("question_type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> QuestionType:
        """Resolve legacy type spellings and shapes."""
        return normalize_question_type(v)

    @field_validator("similarity_threshold", mode="before")
    @classmethod
    def default_missing_threshold(cls, v: Any) -> Any:
        """Stored rows may carry a null threshold."""
        return DEFAULT_SIMILARITY_THRESHOLD if v is None else v

    @field_validator("semantic_matching_enabled", mode="before")
    @classmethod
    def default_missing_semantic_flag(cls, v: Any) -> Any:
        """Only an explicit false disables semantic matching."""
        return True if v is None else v

    @field_validator("options")
    @classmethod
    def validate_options(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        """Options need at least two non-empty entries."""
        if v is None:
            return v
        if len([o for o in v if o.strip()]) < 2:
            raise ValueError("options must contain at least 2 non-empty entries")
        return v

    @field_validator("grid_rows", "grid_columns")
    @classmethod
    def validate_grid_axis(cls, v: tuple[str, ...] | None) -> tuple[str, ...] | None:
        """Each grid axis needs at least two labels."""
        if v is not None and len(v) < 2:
            raise ValueError("grid rows and columns must each have at least 2 entries")
        return v

    @model_validator(mode="after")
    def validate_type_fields(self) -> "Question":
        """Check the fields that depend on each other or on the question type."""
        if (
            self.rating_min is not None
            and self.rating_max is not None
            and self.rating_min >= self.rating_max
        ):
            raise ValueError(
                f"rating_min ({self.rating_min}) must be less than rating_max ({self.rating_max})"
            )
        if self.question_type == QuestionType.GRID and (
            self.grid_rows is None or self.grid_columns is None
        ):
            raise ValueError("grid questions require grid_rows and grid_columns")
        return self


# ==============================================================================
# Grading Result Models
# ==============================================================================


class GradingResult(BaseModel):
    """
    Outcome of grading one submitted answer.

    ``similarity`` is meaningful for text questions; other types report
    1.0 when correct and 0.0 otherwise.
    """

    model_config = ConfigDict(frozen=True)

    is_correct: bool = Field(
        ...,
        description="Whether the answer is accepted as correct",
    )

    similarity: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Similarity between submitted and correct answer",
    )

    matched_by: str | None = Field(
        default=None,
        description="Name of the rule that produced the score",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percentage(self) -> int:
        """Similarity as a whole percent for display."""
        return int(self.similarity * 100 + 0.5)


# ==============================================================================
# Stored Answer and Dashboard Models
# ==============================================================================


class StudentAnswerRecord(BaseModel):
    """A stored student answer as read back from persistence."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str = Field(..., description="Identifier of the stored answer")
    question_id: str = Field(..., description="Question this answer belongs to")
    student_name: str = Field(..., description="Name the student entered")
    answer: str = Field(..., description="Raw submitted answer")
    submitted_at: datetime = Field(
        default_factory=datetime.now,
        description="When the answer was submitted",
    )
    test_id: str | None = Field(default=None, description="Test the answer was given in")


class GradedAnswer(BaseModel):
    """A stored answer paired with its grading result."""

    model_config = ConfigDict(frozen=True)

    record: StudentAnswerRecord
    result: GradingResult

    @property
    def is_correct(self) -> bool:
        return self.result.is_correct


def percent_of(correct: int, total: int) -> int:
    """Whole percent rounded half up, 0 when there is nothing to count."""
    if total == 0:
        return 0
    return (correct * 200 + total) // (total * 2)


class StudentSummary(BaseModel):
    """Per-student totals for the test dashboard."""

    model_config = ConfigDict(frozen=True)

    name: str
    answers: tuple[GradedAnswer, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_answers(self) -> int:
        return len(self.answers)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def correct_answers(self) -> int:
        return sum(1 for a in self.answers if a.is_correct)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percent_correct(self) -> int:
        return percent_of(self.correct_answers, self.total_answers)


class QuestionSummary(BaseModel):
    """Per-question totals for the test dashboard."""

    model_config = ConfigDict(frozen=True)

    question: Question
    total_answers: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def percent_correct(self) -> int:
        return percent_of(self.correct_answers, self.total_answers)
