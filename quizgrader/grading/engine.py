"""
Grading engine - the core orchestrator.

Dispatches a submitted answer to the rule for its question type. Free text
answers optionally go to a remote similarity service first; any failure
there falls back to the local matcher so grading always completes.
"""

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from quizgrader.config import Settings, get_settings
from quizgrader.grading.llm_client import SimilarityClient
from quizgrader.grading.rules import grade_checkbox, grade_grid, grade_multiple_choice, grade_rating
from quizgrader.grading.similarity import TextSimilarity
from quizgrader.grading.translations import TranslationTable
from quizgrader.models import GradingResult, Question
from quizgrader.question_types import QuestionType, normalize_question_type

logger = logging.getLogger(__name__)

# (text1, text2, strictness) -> similarity
SimilarityDelegate = Callable[[str, str, float], float]

TypeRule = Callable[[str, str], GradingResult]

TYPE_RULES: dict[QuestionType, TypeRule] = {
    QuestionType.RATING: grade_rating,
    QuestionType.MULTIPLE_CHOICE: grade_multiple_choice,
    QuestionType.CHECKBOX: grade_checkbox,
    QuestionType.GRID: grade_grid,
}


class GradingEngine:
    """
    Grades submitted answers against a question's answer key.

    The engine holds no per-call state; the same instance can grade
    concurrently from several threads.
    """

    def __init__(
        self,
        matcher: TextSimilarity | None = None,
        delegate: SimilarityDelegate | None = None,
        max_workers: int = 4,
    ):
        """
        Initialize the grading engine.

        Args:
            matcher: Local text matcher. Uses the default translation table if not provided.
            delegate: Optional remote similarity check consulted before the matcher.
            max_workers: Thread count for batch grading.
        """
        self._matcher = matcher or TextSimilarity()
        self._delegate = delegate
        self._max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GradingEngine":
        """Build an engine from configuration."""
        settings = settings or get_settings()

        if settings.translations_file is not None:
            translations = TranslationTable.from_file(settings.translations_file)
        else:
            translations = TranslationTable()

        delegate: SimilarityDelegate | None = None
        if settings.delegate_configured:
            delegate = SimilarityClient(settings)
        elif settings.semantic_delegate_enabled:
            logger.warning("Similarity delegate enabled but no API key set; using local matching")

        return cls(
            matcher=TextSimilarity(translations),
            delegate=delegate,
            max_workers=settings.batch_max_workers,
        )

    @property
    def matcher(self) -> TextSimilarity:
        return self._matcher

    @property
    def delegate(self) -> SimilarityDelegate | None:
        return self._delegate

    def evaluate(self, question_type: Any, submitted_answer: str, question: Question) -> GradingResult:
        """
        Grade one submitted answer.

        Args:
            question_type: Stored question type; unknown values grade as text.
            submitted_answer: The raw submitted answer.
            question: The question holding the answer key.

        Returns:
            GradingResult for the answer.
        """
        if not submitted_answer or not submitted_answer.strip():
            return GradingResult(is_correct=False, similarity=0.0, matched_by="empty")

        rule = TYPE_RULES.get(normalize_question_type(question_type))
        if rule is not None:
            return rule(submitted_answer, question.correct_answer)

        return self._grade_text(submitted_answer, question)

    def grade(self, question: Question, submitted_answer: str) -> GradingResult:
        """Grade using the question's own type."""
        return self.evaluate(question.question_type, submitted_answer, question)

    def evaluate_many(
        self,
        items: Iterable[tuple[Question, str]],
        max_workers: int | None = None,
    ) -> list[GradingResult]:
        """
        Grade a batch of (question, submitted answer) pairs.

        Results are returned in input order.
        """
        pairs = list(items)
        workers = max_workers or self._max_workers

        if workers <= 1 or len(pairs) <= 1:
            return [self.grade(question, answer) for question, answer in pairs]

        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda pair: self.grade(*pair), pairs))

    def _grade_text(self, submitted_answer: str, question: Question) -> GradingResult:
        threshold = question.similarity_threshold

        if not question.semantic_matching_enabled:
            match = self._matcher.lexical_match(submitted_answer, question.correct_answer)
            return GradingResult(
                is_correct=match.score >= threshold, similarity=match.score, matched_by=match.rule
            )

        if self._delegate is not None:
            similarity = self._consult_delegate(self._delegate, submitted_answer, question)
            if similarity is not None:
                return GradingResult(
                    is_correct=similarity >= threshold, similarity=similarity, matched_by="delegate"
                )

        match = self._matcher.match(submitted_answer, question.correct_answer)
        return GradingResult(
            is_correct=match.score >= threshold, similarity=match.score, matched_by=match.rule
        )

    def _consult_delegate(
        self, delegate: SimilarityDelegate, submitted_answer: str, question: Question
    ) -> float | None:
        """Return the remote similarity, or None when the local matcher should decide."""
        try:
            similarity = float(
                delegate(
                    question.correct_answer.strip(),
                    submitted_answer.strip(),
                    question.similarity_threshold,
                )
            )
        except Exception as e:
            logger.warning(
                "Similarity delegate failed for question %s, using local matching: %s",
                question.id,
                e,
            )
            return None

        if not 0.0 <= similarity <= 1.0:
            logger.warning(
                "Similarity delegate returned %r for question %s, using local matching",
                similarity,
                question.id,
            )
            return None

        return similarity
