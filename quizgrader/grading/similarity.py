"""
Free text answer matching.

The matcher runs an ordered list of rules over the normalized answers and
returns the score of the first rule that applies. Earlier rules take
precedence even when a later rule would also match, so a short answer
contained in a long expected answer scores as containment before the
complexity penalty is considered.
"""

import re
import string
from collections.abc import Callable
from typing import NamedTuple

from quizgrader.grading.lexical import levenshtein_distance, lexical_similarity
from quizgrader.grading.translations import TranslationTable

STOPWORDS = frozenset(
    [
        "the",
        "a",
        "an",
        "is",
        "are",
        "was",
        "were",
        "be",
        "been",
        "being",
        "i",
        "you",
        "he",
        "she",
        "it",
        "we",
        "they",
        "and",
        "or",
        "for",
        "in",
        "on",
        "at",
        "by",
        "to",
        "of",
        "with",
        "about",
    ]
)

CONTAINMENT_SCORE = 0.9
SINGLE_WORD_SCORE = 0.85
TRANSLATION_SCORE = 0.9
CANONICAL_TRANSLATION_SCORE = 1.0
TYPO_SCORE = 0.85
COMPLEXITY_CAP = 0.5

MIN_CONTAINMENT_LENGTH = 3
MIN_TRANSLATION_WORD_LENGTH = 4
MAX_TYPO_DISTANCE = 2
COMPLEX_ANSWER_WORDS = 5
SHORT_ANSWER_WORDS = 3


class SimilarityMatch(NamedTuple):
    """Score produced by a matching rule."""

    score: float
    rule: str


Rule = Callable[[str, str, TranslationTable], SimilarityMatch | None]


def normalize_answer(answer: str) -> str:
    """Trim and lowercase an answer for comparison."""
    return answer.strip().lower()


def _contains_word(text: str, term: str) -> bool:
    return re.search(rf"\b{re.escape(term)}\b", text, re.IGNORECASE) is not None


def _strip_punctuation(word: str) -> str:
    return word.strip(string.punctuation)


# ==============================================================================
# Rules, in precedence order
# ==============================================================================


def match_exact(student: str, correct: str, translations: TranslationTable) -> SimilarityMatch | None:
    if student == correct:
        return SimilarityMatch(1.0, "exact")
    return None


def match_containment(
    student: str, correct: str, translations: TranslationTable
) -> SimilarityMatch | None:
    """Student answer appears as a whole word or phrase in the correct answer."""
    if len(student) < MIN_CONTAINMENT_LENGTH or student in STOPWORDS:
        return None
    if _contains_word(correct, student):
        return SimilarityMatch(CONTAINMENT_SCORE, "containment")
    return None


def match_single_word(
    student: str, correct: str, translations: TranslationTable
) -> SimilarityMatch | None:
    words = student.split()
    if len(words) == 1 and len(words[0]) > 3 and words[0] in correct.split():
        return SimilarityMatch(SINGLE_WORD_SCORE, "single_word")
    return None


def _translation_score(word: str, correct: str, translations: TranslationTable) -> float | None:
    for canonical, variants in translations.items():
        correct_has_canonical = _contains_word(correct, canonical)
        correct_has_variant = any(_contains_word(correct, v) for v in variants)

        if word.startswith(canonical) and (correct_has_canonical or correct_has_variant):
            return CANONICAL_TRANSLATION_SCORE if correct_has_canonical else TRANSLATION_SCORE

        if any(word.startswith(v) for v in variants) and (
            correct_has_canonical or correct_has_variant
        ):
            return TRANSLATION_SCORE

    return None


def _phrase_translation_score(
    student: str, correct: str, translations: TranslationTable
) -> float | None:
    """Score table terms, including multi-word variants, found whole in the student answer."""
    for canonical, variants in translations.items():
        correct_has_canonical = _contains_word(correct, canonical)
        if not correct_has_canonical and not any(_contains_word(correct, v) for v in variants):
            continue

        if _contains_word(student, canonical):
            return CANONICAL_TRANSLATION_SCORE if correct_has_canonical else TRANSLATION_SCORE
        if any(_contains_word(student, v) for v in variants):
            return TRANSLATION_SCORE

    return None


def match_translation_or_typo(
    student: str, correct: str, translations: TranslationTable
) -> SimilarityMatch | None:
    """
    Accept known translations and small misspellings.

    Whole table terms in the student answer are checked first, so
    multi-word variants match. Then the student's words are scanned in
    order, stopping at the first word that either maps through the
    translation table or is within a small edit distance of a word in the
    correct answer.
    """
    phrase_score = _phrase_translation_score(student, correct, translations)
    if phrase_score is not None:
        return SimilarityMatch(phrase_score, "translation")

    correct_words = [_strip_punctuation(w) for w in correct.split()]
    long_correct_words = [w for w in correct_words if len(w) > MIN_TRANSLATION_WORD_LENGTH]

    for raw_word in student.split():
        word = _strip_punctuation(raw_word)
        if len(word) < MIN_TRANSLATION_WORD_LENGTH:
            continue

        score = _translation_score(word, correct, translations)
        if score is not None:
            return SimilarityMatch(score, "translation")

        # Short words produce too many false positives at distance 2
        if len(word) <= MIN_TRANSLATION_WORD_LENGTH:
            continue
        for correct_word in long_correct_words:
            if word != correct_word and levenshtein_distance(word, correct_word) <= MAX_TYPO_DISTANCE:
                return SimilarityMatch(TYPO_SCORE, "typo")

    return None


def match_complexity_penalty(
    student: str, correct: str, translations: TranslationTable
) -> SimilarityMatch | None:
    """Cap short answers to long expected answers, which presumably lack context."""
    if len(correct.split()) > COMPLEX_ANSWER_WORDS and len(student.split()) < SHORT_ANSWER_WORDS:
        return SimilarityMatch(
            min(COMPLEXITY_CAP, lexical_similarity(student, correct)), "complexity_penalty"
        )
    return None


def match_lexical(student: str, correct: str, translations: TranslationTable) -> SimilarityMatch:
    return SimilarityMatch(lexical_similarity(student, correct), "lexical")


RULES: tuple[Rule, ...] = (
    match_exact,
    match_containment,
    match_single_word,
    match_translation_or_typo,
    match_complexity_penalty,
    match_lexical,
)


# ==============================================================================
# Matcher
# ==============================================================================


class TextSimilarity:
    """
    Tiered fuzzy matcher for free text answers.

    Holds only the translation table, so one instance can be shared across
    threads and requests.
    """

    def __init__(self, translations: TranslationTable | None = None, rules: tuple[Rule, ...] = RULES):
        self._translations = translations if translations is not None else TranslationTable()
        self._rules = rules

    @property
    def translations(self) -> TranslationTable:
        return self._translations

    def match(self, student_answer: str, correct_answer: str) -> SimilarityMatch:
        """
        Score a student answer against the correct answer.

        Args:
            student_answer: Raw student answer.
            correct_answer: Raw correct answer.

        Returns:
            SimilarityMatch with the score and the name of the rule that fired.
        """
        student = normalize_answer(student_answer)
        correct = normalize_answer(correct_answer)

        if not student:
            return SimilarityMatch(0.0, "empty")

        for rule in self._rules:
            result = rule(student, correct, self._translations)
            if result is not None:
                return result

        return match_lexical(student, correct, self._translations)

    def similarity(self, student_answer: str, correct_answer: str) -> float:
        """Return just the similarity score."""
        return self.match(student_answer, correct_answer).score

    def lexical_match(self, student_answer: str, correct_answer: str) -> SimilarityMatch:
        """Score with lexical similarity alone, skipping the heuristic rules."""
        student = normalize_answer(student_answer)
        if not student:
            return SimilarityMatch(0.0, "empty")
        return match_lexical(student, normalize_answer(correct_answer), self._translations)

    def is_answer_correct(
        self,
        student_answer: str,
        correct_answer: str,
        threshold: float = 0.7,
        semantic_matching_enabled: bool = True,
    ) -> bool:
        """
        Decide whether a text answer meets the threshold.

        With semantic matching disabled only lexical similarity is used.
        The threshold is inclusive.
        """
        if semantic_matching_enabled:
            match = self.match(student_answer, correct_answer)
        else:
            match = self.lexical_match(student_answer, correct_answer)
        return match.score >= threshold


_default_matcher = TextSimilarity()


def text_similarity(student_answer: str, correct_answer: str) -> float:
    """Similarity using the default translation table."""
    return _default_matcher.similarity(student_answer, correct_answer)


def is_answer_correct(
    student_answer: str,
    correct_answer: str,
    threshold: float = 0.7,
    semantic_matching_enabled: bool = True,
) -> bool:
    """Correctness check using the default translation table."""
    return _default_matcher.is_answer_correct(
        student_answer, correct_answer, threshold, semantic_matching_enabled
    )
