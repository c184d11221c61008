"""
Test dashboard aggregation.

Regrades stored answers for a test and summarizes them per student and
per question.
"""

import logging
from collections.abc import Iterable, Sequence

from quizgrader.grading.engine import GradingEngine
from quizgrader.models import (
    GradedAnswer,
    Question,
    QuestionSummary,
    StudentAnswerRecord,
    StudentSummary,
)

logger = logging.getLogger(__name__)


def grade_answers(
    engine: GradingEngine,
    questions: Iterable[Question],
    records: Iterable[StudentAnswerRecord],
) -> list[GradedAnswer]:
    """
    Grade stored answers against their questions.

    Answers whose question is unknown (for example deleted since the answer
    was stored) are skipped.

    Args:
        engine: Grading engine to use.
        questions: Questions of the test.
        records: Stored answers, in display order.

    Returns:
        Graded answers in the order the records were given.
    """
    by_id = {q.id: q for q in questions}
    known: list[StudentAnswerRecord] = []

    for record in records:
        if record.question_id in by_id:
            known.append(record)
        else:
            logger.debug("Skipping answer %s for unknown question %s", record.id, record.question_id)

    results = engine.evaluate_many((by_id[r.question_id], r.answer) for r in known)
    return [GradedAnswer(record=r, result=res) for r, res in zip(known, results)]


def summarize_by_student(graded: Iterable[GradedAnswer]) -> list[StudentSummary]:
    """Per-student totals, in order of each student's first answer."""
    grouped: dict[str, list[GradedAnswer]] = {}
    for answer in graded:
        grouped.setdefault(answer.record.student_name, []).append(answer)

    return [StudentSummary(name=name, answers=tuple(answers)) for name, answers in grouped.items()]


def summarize_by_question(
    questions: Sequence[Question], graded: Iterable[GradedAnswer]
) -> list[QuestionSummary]:
    """Per-question totals, in question order; questions without answers report zeros."""
    totals = {q.id: [0, 0] for q in questions}
    for answer in graded:
        counts = totals.get(answer.record.question_id)
        if counts is None:
            continue
        counts[0] += 1
        if answer.is_correct:
            counts[1] += 1

    return [
        QuestionSummary(
            question=q,
            total_answers=totals[q.id][0],
            correct_answers=totals[q.id][1],
        )
        for q in questions
    ]
