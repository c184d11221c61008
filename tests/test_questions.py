"""
Unit tests for question models, type normalization, answer encoding
and answer key validation.
"""

import pytest
from pydantic import ValidationError

from quizgrader.models import GradingResult, Question
from quizgrader.question_types import (
    QuestionType,
    get_valid_question_types,
    normalize_question_type,
)
from quizgrader.questions import (
    QuestionValidationError,
    QuestionValidator,
    grid_selections_to_string,
    join_checkbox_answer,
    parse_grid_answer,
    parse_rating,
    split_checkbox_answer,
)


class TestNormalizeQuestionType:
    """Tests for normalize_question_type."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("text", QuestionType.TEXT),
            ("multiple-choice", QuestionType.MULTIPLE_CHOICE),
            ("multiple_choice", QuestionType.MULTIPLE_CHOICE),
            ("multipleChoice", QuestionType.MULTIPLE_CHOICE),
            ("  Checkbox ", QuestionType.CHECKBOX),
            ("RATING", QuestionType.RATING),
            ("grid", QuestionType.GRID),
            (QuestionType.GRID, QuestionType.GRID),
        ],
    )
    def test_known_spellings(self, raw: object, expected: QuestionType) -> None:
        assert normalize_question_type(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ({"value": "rating"}, QuestionType.RATING),
            ({"type": "checkbox"}, QuestionType.CHECKBOX),
            ({"value": "undefined", "type": "grid"}, QuestionType.GRID),
        ],
    )
    def test_form_library_shapes(self, raw: dict, expected: QuestionType) -> None:
        assert normalize_question_type(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "essay", 3, ["rating"], {"value": None}])
    def test_unrecognized_defaults_to_text(self, raw: object) -> None:
        assert normalize_question_type(raw) == QuestionType.TEXT

    def test_valid_types(self) -> None:
        assert get_valid_question_types() == ["text", "multipleChoice", "checkbox", "rating", "grid"]


class TestQuestionModel:
    """Tests for Question invariants."""

    def test_defaults(self) -> None:
        question = Question(id="q", correct_answer="Oslo")

        assert question.question_type == QuestionType.TEXT
        assert question.similarity_threshold == 0.7
        assert question.semantic_matching_enabled

    def test_camel_case_aliases(self) -> None:
        question = Question.model_validate(
            {
                "id": "q",
                "correctAnswer": "3",
                "questionType": "rating",
                "ratingMin": 1,
                "ratingMax": 5,
                "similarityThreshold": None,
                "semanticMatchingEnabled": None,
            }
        )

        assert question.question_type == QuestionType.RATING
        assert question.rating_max == 5
        assert question.similarity_threshold == 0.7
        assert question.semantic_matching_enabled

    def test_legacy_type_normalized(self) -> None:
        question = Question(id="q", correct_answer="x", question_type={"value": "multiple-choice"},
                            options=("x", "y"))

        assert question.question_type == QuestionType.MULTIPLE_CHOICE

    def test_threshold_range(self) -> None:
        with pytest.raises(ValidationError):
            Question(id="q", correct_answer="x", similarity_threshold=1.2)

    def test_rating_bounds_order(self) -> None:
        with pytest.raises(ValidationError, match="rating_min"):
            Question(id="q", correct_answer="3", rating_min=5, rating_max=5)

    def test_options_need_two_entries(self) -> None:
        with pytest.raises(ValidationError, match="at least 2"):
            Question(id="q", correct_answer="A", options=("A", "  "))

    def test_grid_axes_need_two_entries(self) -> None:
        with pytest.raises(ValidationError, match="at least 2"):
            Question(
                id="q",
                correct_answer="",
                question_type="grid",
                grid_rows=("Sweden",),
                grid_columns=("Stockholm", "Oslo"),
            )

    def test_grid_requires_axes(self) -> None:
        with pytest.raises(ValidationError, match="grid_rows and grid_columns"):
            Question(id="q", correct_answer="", question_type="grid")

    def test_frozen(self) -> None:
        question = Question(id="q", correct_answer="Oslo")

        with pytest.raises(ValidationError):
            question.correct_answer = "Bergen"  # type: ignore[misc]


class TestGradingResultModel:
    """Tests for GradingResult."""

    def test_percentage_rounds(self) -> None:
        assert GradingResult(is_correct=False, similarity=0.346).percentage == 35
        assert GradingResult(is_correct=True, similarity=1.0).percentage == 100

    def test_similarity_range(self) -> None:
        with pytest.raises(ValidationError):
            GradingResult(is_correct=True, similarity=1.1)


class TestAnswerEncoding:
    """Tests for checkbox and grid answer helpers."""

    def test_checkbox_round_trip(self) -> None:
        assert split_checkbox_answer(join_checkbox_answer(["A", " B", "C "])) == ["A", "B", "C"]

    def test_checkbox_split_drops_empty_tokens(self) -> None:
        assert split_checkbox_answer("A,,B, ") == ["A", "B"]

    def test_checkbox_split_keeps_duplicates(self) -> None:
        assert split_checkbox_answer("A,B,A") == ["A", "B", "A"]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(" 4 ", 4), ("-2", -2), ("+3", 3), ("1_0", None), ("3.5", None), ("", None)],
    )
    def test_parse_rating(self, raw: str, expected: int | None) -> None:
        assert parse_rating(raw) == expected

    def test_grid_to_string(self) -> None:
        assert grid_selections_to_string({"Sweden": "Stockholm", "Norway": "Oslo"}) == (
            "Sweden:Stockholm,Norway:Oslo"
        )

    def test_parse_grid_answer(self) -> None:
        assert parse_grid_answer("Sweden:Stockholm, Norway : Oslo") == {
            "Sweden": "Stockholm",
            "Norway": "Oslo",
        }

    def test_parse_grid_answer_skips_malformed_pairs(self) -> None:
        assert parse_grid_answer("Sweden:Stockholm,garbage,:Oslo,") == {"Sweden": "Stockholm"}


class TestQuestionValidator:
    """Tests for QuestionValidator."""

    def test_valid_questions(self, all_questions: list[Question]) -> None:
        validator = QuestionValidator()

        for question in all_questions:
            is_valid, issues = validator.validate(question)
            assert is_valid, issues

    def test_empty_correct_answer(self) -> None:
        is_valid, issues = QuestionValidator().validate(Question(id="q", correct_answer="  "))

        assert not is_valid
        assert issues == ["Correct answer is empty"]

    def test_multiple_choice_answer_not_an_option(self) -> None:
        question = Question(
            id="q",
            correct_answer="Saturn",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=("Mars", "Jupiter"),
        )

        is_valid, issues = QuestionValidator().validate(question)

        assert not is_valid
        assert "not one of the options" in issues[0]

    def test_multiple_choice_without_options(self) -> None:
        question = Question(id="q", correct_answer="Mars", question_type="multipleChoice")

        _, issues = QuestionValidator().validate(question)

        assert issues == ["Multiple choice questions require options"]

    def test_checkbox_issues(self) -> None:
        question = Question(
            id="q",
            correct_answer="A,A,E",
            question_type=QuestionType.CHECKBOX,
            options=("A", "B", "C,D"),
        )

        _, issues = QuestionValidator().validate(question)

        assert any("unknown options" in i for i in issues)
        assert any("more than once" in i for i in issues)
        assert any("must not contain commas" in i for i in issues)

    def test_duplicate_options(self) -> None:
        question = Question(
            id="q",
            correct_answer="A",
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=("A", "B", "A"),
        )

        _, issues = QuestionValidator().validate(question)

        assert any("Duplicate option" in i for i in issues)

    def test_rating_out_of_range(self, rating_question: Question) -> None:
        question = rating_question.model_copy(update={"correct_answer": "9"})

        _, issues = QuestionValidator().validate(question)

        assert issues == ["Rating answer 9 is above the maximum (5)"]

    def test_rating_not_integer(self, rating_question: Question) -> None:
        question = rating_question.model_copy(update={"correct_answer": "four"})

        _, issues = QuestionValidator().validate(question)

        assert "not an integer" in issues[0]

    def test_rating_with_digit_separator(self, rating_question: Question) -> None:
        question = rating_question.model_copy(update={"correct_answer": "4_0"})

        _, issues = QuestionValidator().validate(question)

        assert "not an integer" in issues[0]

    def test_grid_unknown_cells(self, grid_question: Question) -> None:
        question = grid_question.model_copy(update={"correct_answer": "Denmark:Oslo,Sweden:Rome"})

        _, issues = QuestionValidator().validate(question)

        assert "Grid answer refers to unknown row 'Denmark'" in issues
        assert "Grid answer refers to unknown column 'Rome'" in issues

    def test_low_text_threshold(self) -> None:
        question = Question(id="q", correct_answer="Oslo", similarity_threshold=0.1)

        _, issues = QuestionValidator().validate(question)

        assert "almost any answer" in issues[0]

    def test_validate_or_raise(self) -> None:
        question = Question(id="q", correct_answer="")

        with pytest.raises(QuestionValidationError, match="Correct answer is empty") as exc_info:
            QuestionValidator().validate_or_raise(question)

        assert exc_info.value.errors == ["Correct answer is empty"]
