"""
Grading Engine Module.

Per-type correctness rules, the tiered free text matcher and the optional
remote similarity check.
"""

from quizgrader.grading.engine import GradingEngine, SimilarityDelegate
from quizgrader.grading.lexical import levenshtein_distance, lexical_similarity
from quizgrader.grading.llm_client import DelegateError, SimilarityClient
from quizgrader.grading.prompt_builder import PromptBuilder
from quizgrader.grading.scorer import DelegateResponseParser, ScoringError
from quizgrader.grading.similarity import (
    SimilarityMatch,
    TextSimilarity,
    is_answer_correct,
    text_similarity,
)
from quizgrader.grading.translations import (
    DEFAULT_TRANSLATIONS,
    TranslationTable,
    TranslationTableError,
)

__all__ = [
    "DEFAULT_TRANSLATIONS",
    "DelegateError",
    "DelegateResponseParser",
    "GradingEngine",
    "PromptBuilder",
    "ScoringError",
    "SimilarityClient",
    "SimilarityDelegate",
    "SimilarityMatch",
    "TextSimilarity",
    "TranslationTable",
    "TranslationTableError",
    "is_answer_correct",
    "levenshtein_distance",
    "lexical_similarity",
    "text_similarity",
]
