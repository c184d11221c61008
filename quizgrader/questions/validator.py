"""
Answer key validation module.

Checks that a question's answer key can actually be matched by a student
before the question is published. Structural problems are already rejected
by the Question model; this catches answer keys that are well-formed but
unreachable or suspicious.
"""

from quizgrader.models import Question
from quizgrader.question_types import QuestionType
from quizgrader.questions.answers import parse_grid_answer, parse_rating, split_checkbox_answer


class QuestionValidationError(Exception):
    """Raised when question validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Question validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


class QuestionValidator:
    """
    Validates questions for a reachable, unambiguous answer key.

    Checks:
    1. The correct answer is not empty
    2. Choice answers are drawn from the question's options
    3. Rating answers are integers inside the rating range
    4. Text thresholds are not so low that almost anything passes
    """

    # Below this a text question accepts nearly any answer
    MIN_TEXT_THRESHOLD = 0.3

    def validate(self, question: Question) -> tuple[bool, list[str]]:
        """
        Validate a question and return any issues found.

        Args:
            question: The question to validate.

        Returns:
            Tuple of (is_valid, list of issues).
        """
        issues: list[str] = []

        if not question.correct_answer.strip():
            issues.append("Correct answer is empty")
            return False, issues

        if question.options is not None:
            issues.extend(self._check_duplicate_options(question.options))

        if question.question_type == QuestionType.MULTIPLE_CHOICE:
            issues.extend(self._validate_multiple_choice(question))
        elif question.question_type == QuestionType.CHECKBOX:
            issues.extend(self._validate_checkbox(question))
        elif question.question_type == QuestionType.RATING:
            issues.extend(self._validate_rating(question))
        elif question.question_type == QuestionType.GRID:
            issues.extend(self._validate_grid(question))
        else:
            issues.extend(self._validate_text(question))

        return len(issues) == 0, issues

    def validate_or_raise(self, question: Question) -> None:
        """
        Validate a question and raise if invalid.

        Args:
            question: The question to validate.

        Raises:
            QuestionValidationError: If validation fails.
        """
        is_valid, issues = self.validate(question)
        if not is_valid:
            raise QuestionValidationError(issues)

    def _check_duplicate_options(self, options: tuple[str, ...]) -> list[str]:
        """Check for duplicate option labels."""
        issues: list[str] = []
        seen: dict[str, int] = {}

        for i, option in enumerate(options, start=1):
            key = option.strip()
            if key in seen:
                issues.append(
                    f"Duplicate option: '{option}' (appears at positions {seen[key]} and {i})"
                )
            else:
                seen[key] = i

        return issues

    def _validate_multiple_choice(self, question: Question) -> list[str]:
        if not question.options:
            return ["Multiple choice questions require options"]
        if question.correct_answer not in question.options:
            return [f"Correct answer '{question.correct_answer}' is not one of the options"]
        return []

    def _validate_checkbox(self, question: Question) -> list[str]:
        if not question.options:
            return ["Checkbox questions require options"]

        issues: list[str] = []
        selected = split_checkbox_answer(question.correct_answer)
        options = {o.strip() for o in question.options}

        unknown = [s for s in selected if s not in options]
        if unknown:
            issues.append(f"Correct answer contains unknown options: {unknown}")

        if len(selected) != len(set(selected)):
            issues.append("Correct answer lists the same option more than once")

        # Options containing the separator can't be encoded unambiguously
        ambiguous = [o for o in question.options if "," in o]
        if ambiguous:
            issues.append(f"Options must not contain commas: {ambiguous}")

        return issues

    def _validate_rating(self, question: Question) -> list[str]:
        value = parse_rating(question.correct_answer)
        if value is None:
            return [f"Rating answer '{question.correct_answer}' is not an integer"]

        low, high = question.rating_min, question.rating_max
        if low is not None and value < low:
            return [f"Rating answer {value} is below the minimum ({low})"]
        if high is not None and value > high:
            return [f"Rating answer {value} is above the maximum ({high})"]
        return []

    def _validate_grid(self, question: Question) -> list[str]:
        """Grid keys are informational, but they should name real rows and columns."""
        rows = set(question.grid_rows or ())
        columns = set(question.grid_columns or ())
        issues: list[str] = []

        for row, column in parse_grid_answer(question.correct_answer).items():
            if row not in rows:
                issues.append(f"Grid answer refers to unknown row '{row}'")
            if column not in columns:
                issues.append(f"Grid answer refers to unknown column '{column}'")

        return issues

    def _validate_text(self, question: Question) -> list[str]:
        if question.similarity_threshold < self.MIN_TEXT_THRESHOLD:
            return [
                f"Similarity threshold {question.similarity_threshold} is below "
                f"{self.MIN_TEXT_THRESHOLD}; almost any answer would be accepted"
            ]
        return []
