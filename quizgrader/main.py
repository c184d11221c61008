"""
Quiz Grader CLI Application.

Provides a command-line interface for grading single answers, regrading a
test's stored answers and checking the remote similarity service.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from quizgrader.config import get_settings
from quizgrader.dashboard import grade_answers, summarize_by_question, summarize_by_student
from quizgrader.grading import GradingEngine, SimilarityClient, TranslationTableError
from quizgrader.models import GradingResult, Question, StudentAnswerRecord
from quizgrader.questions import QuestionValidator, parse_grid_answer
from quizgrader.question_types import QuestionType

app = typer.Typer(
    name="quizgrader",
    help="Grade quiz answers against teacher answer keys",
    add_completion=False,
)

console = Console()

_questions_adapter = TypeAdapter(list[Question])
_answers_adapter = TypeAdapter(list[StudentAnswerRecord])


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_file(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


@app.command()
def grade(
    question_file: Annotated[Path, typer.Argument(help="Path to the question JSON file")],
    answer: Annotated[str, typer.Argument(help="The submitted answer")],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed output"),
    ] = False,
) -> None:
    """
    Grade one submitted answer against a question.

    The question file holds a single question object with its answer key.
    """
    _configure_logging(verbose)
    try:
        question = Question.model_validate_json(_read_file(question_file))
        engine = GradingEngine.from_settings(get_settings())

        if verbose:
            _, issues = QuestionValidator().validate(question)
            for issue in issues:
                console.print(f"[yellow]⚠ {issue}[/yellow]")

        result = engine.grade(question, answer)
        _display_result(question, answer, result)

    except ValidationError as e:
        console.print(f"[red]Invalid Question:[/red] {e}")
        raise typer.Exit(1)
    except TranslationTableError as e:
        console.print(f"[red]Translations Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def dashboard(
    questions_file: Annotated[Path, typer.Argument(help="JSON array of the test's questions")],
    answers_file: Annotated[Path, typer.Argument(help="JSON array of stored student answers")],
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show every graded answer"),
    ] = False,
) -> None:
    """
    Regrade a test's stored answers and summarize the results.
    """
    _configure_logging(verbose)
    try:
        questions = _questions_adapter.validate_json(_read_file(questions_file))
        records = _answers_adapter.validate_json(_read_file(answers_file))
        engine = GradingEngine.from_settings(get_settings())

        graded = grade_answers(engine, questions, records)

        students = Table(title="Students")
        students.add_column("Student", style="cyan")
        students.add_column("Answers", justify="right")
        students.add_column("Correct", justify="right")
        students.add_column("Percent", justify="right")
        for s in summarize_by_student(graded):
            students.add_row(s.name, str(s.total_answers), str(s.correct_answers), f"{s.percent_correct}%")
        console.print(students)

        per_question = Table(title="Questions")
        per_question.add_column("Question", style="cyan")
        per_question.add_column("Type")
        per_question.add_column("Answers", justify="right")
        per_question.add_column("Correct", justify="right")
        per_question.add_column("Percent", justify="right")
        for q in summarize_by_question(questions, graded):
            per_question.add_row(
                q.question.text[:50] or q.question.id,
                q.question.question_type.value,
                str(q.total_answers),
                str(q.correct_answers),
                f"{q.percent_correct}%",
            )
        console.print(per_question)

        if verbose:
            table = Table(title="Answers")
            table.add_column("Student", style="cyan")
            table.add_column("Question")
            table.add_column("Answer")
            table.add_column("Similarity", justify="right")
            table.add_column("Status")
            for g in graded:
                table.add_row(
                    g.record.student_name,
                    g.record.question_id,
                    g.record.answer[:40],
                    f"{g.result.percentage}%",
                    "✅" if g.is_correct else "❌",
                )
            console.print(table)

    except ValidationError as e:
        console.print(f"[red]Invalid Input:[/red] {e}")
        raise typer.Exit(1)
    except TranslationTableError as e:
        console.print(f"[red]Translations Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def health() -> None:
    """
    Check if the remote similarity service is usable.

    Local grading needs no service; this only verifies the optional delegate.
    """
    settings = get_settings()
    console.print("[bold]Quiz Grader Health Check[/bold]\n")

    console.print("[dim]Checking configuration...[/dim]")
    console.print(f"  Delegate Enabled: {settings.semantic_delegate_enabled}")
    console.print(f"  API Base URL: {settings.openai_base_url}")
    console.print(f"  Model: {settings.openai_model}")
    console.print(f"  Timeout: {settings.delegate_timeout_seconds}s")

    if not settings.delegate_configured:
        console.print("\n[green]Local grading only; no remote service to check[/green]")
        return

    console.print("\n[dim]Checking API connectivity...[/dim]")
    if SimilarityClient(settings).health_check():
        console.print("[green]✓ API is reachable[/green]")
    else:
        console.print("[red]✗ API is not reachable[/red] (grading will use local matching)")
        raise typer.Exit(1)


def _display_result(question: Question, answer: str, result: GradingResult) -> None:
    """Display a grading result."""
    if question.question_type == QuestionType.GRID:
        table = Table(title="Grid Answer (manual review)")
        table.add_column("Row", style="cyan")
        table.add_column("Column")
        for row, column in parse_grid_answer(answer).items():
            table.add_row(row, column)
        console.print(table)
        return

    color = "green" if result.is_correct else "red"
    verdict = "Correct" if result.is_correct else "Incorrect"
    console.print(
        Panel(
            f"[{color}][bold]{verdict}[/bold][/{color}]\n"
            f"Similarity: {result.percentage}% (threshold {question.similarity_threshold:.0%})\n"
            f"Matched by: {result.matched_by}",
            title=question.text or question.id,
        )
    )


if __name__ == "__main__":
    app()
