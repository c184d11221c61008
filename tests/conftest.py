"""
Pytest configuration and fixtures.

Provides common test fixtures for all test modules.
"""

import json
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from quizgrader.config import Settings, get_settings
from quizgrader.grading import GradingEngine
from quizgrader.models import Question, StudentAnswerRecord
from quizgrader.question_types import QuestionType


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ==============================================================================
# Sample Question Fixtures
# ==============================================================================


@pytest.fixture
def text_question() -> Question:
    """A free text question with a sentence answer."""
    return Question(
        id="q-text",
        text="What is the capital of Spain?",
        correct_answer="The capital of Spain is Madrid",
    )


@pytest.fixture
def city_question() -> Question:
    """A free text question whose answer is a single city name."""
    return Question(
        id="q-city",
        text="What is the capital of Finland?",
        correct_answer="Helsinki",
        similarity_threshold=0.8,
    )


@pytest.fixture
def multiple_choice_question() -> Question:
    """A multiple choice question."""
    return Question(
        id="q-mc",
        text="Which planet is largest?",
        correct_answer="Jupiter",
        question_type=QuestionType.MULTIPLE_CHOICE,
        options=("Mars", "Jupiter", "Venus"),
    )


@pytest.fixture
def checkbox_question() -> Question:
    """A checkbox question with three correct options."""
    return Question(
        id="q-cb",
        text="Select the primary colors",
        correct_answer="A,B,C",
        question_type=QuestionType.CHECKBOX,
        options=("A", "B", "C", "D"),
    )


@pytest.fixture
def rating_question() -> Question:
    """A rating question on a 1-5 scale."""
    return Question(
        id="q-rating",
        text="How many continents border the Atlantic?",
        correct_answer="4",
        question_type=QuestionType.RATING,
        rating_min=1,
        rating_max=5,
    )


@pytest.fixture
def grid_question() -> Question:
    """A grid question matching countries to capitals."""
    return Question(
        id="q-grid",
        text="Match each country to its capital",
        correct_answer="Sweden:Stockholm,Norway:Oslo",
        question_type=QuestionType.GRID,
        grid_rows=("Sweden", "Norway"),
        grid_columns=("Stockholm", "Oslo"),
    )


@pytest.fixture
def all_questions(
    text_question: Question,
    city_question: Question,
    multiple_choice_question: Question,
    checkbox_question: Question,
    rating_question: Question,
    grid_question: Question,
) -> list[Question]:
    """One question of every type."""
    return [
        text_question,
        city_question,
        multiple_choice_question,
        checkbox_question,
        rating_question,
        grid_question,
    ]


# ==============================================================================
# Stored Answer Fixtures
# ==============================================================================


@pytest.fixture
def answer_records() -> list[StudentAnswerRecord]:
    """Stored answers from two students, plus one for a deleted question."""
    submitted = datetime(2024, 5, 1, 10, 0, 0)
    rows = [
        ("a1", "q-text", "Anna", "Madrid"),
        ("a2", "q-city", "Anna", "Helsingfors"),
        ("a3", "q-mc", "Anna", "Jupiter"),
        ("a4", "q-text", "Ben", "Barcelona"),
        ("a5", "q-cb", "Ben", "B,A,C"),
        ("a6", "q-rating", "Ben", "3"),
        ("a7", "q-deleted", "Ben", "anything"),
    ]
    return [
        StudentAnswerRecord(
            id=answer_id,
            question_id=question_id,
            student_name=name,
            answer=answer,
            submitted_at=submitted,
            test_id="t-1",
        )
        for answer_id, question_id, name, answer in rows
    ]


# ==============================================================================
# Settings Fixtures
# ==============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with the delegate disabled."""
    return Settings(
        _env_file=None,
        openai_api_key="test-api-key-for-testing",
        openai_base_url="https://test.api.local",
        openai_model="test-model",
        semantic_delegate_enabled=False,
        delegate_timeout_seconds=2.0,
        delegate_max_retries=1,
        batch_max_workers=2,
    )


@pytest.fixture
def delegate_settings(test_settings: Settings) -> Settings:
    """Test settings with the delegate enabled."""
    return test_settings.model_copy(update={"semantic_delegate_enabled": True})


# ==============================================================================
# Engine and Mock Fixtures
# ==============================================================================


@pytest.fixture
def engine() -> GradingEngine:
    """A local-only grading engine."""
    return GradingEngine()


@pytest.fixture
def mock_openai() -> MagicMock:
    """Mock OpenAI client returning a fixed similarity reply."""
    client = MagicMock()
    client.chat.completions.create.return_value = _make_completion('{"similarity": 0.92}')
    return client


def _make_completion(content: str | None) -> MagicMock:
    response = MagicMock()
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response.choices = [choice]
    return response


@pytest.fixture
def make_completion():
    """Factory for chat completion responses carrying given content."""
    return _make_completion


# ==============================================================================
# File Fixtures
# ==============================================================================


@pytest.fixture
def question_file(temp_dir: Path) -> Path:
    """A question JSON file in the surrounding application's camelCase shape."""
    file_path = temp_dir / "question.json"
    file_path.write_text(
        json.dumps(
            {
                "id": "q-1",
                "text": "What is the capital of Spain?",
                "correctAnswer": "The capital of Spain is Madrid",
                "questionType": "text",
                "similarityThreshold": 0.7,
                "semanticMatchingEnabled": True,
            }
        ),
        encoding="utf-8",
    )
    return file_path


@pytest.fixture
def translations_file(temp_dir: Path) -> Path:
    """A translations file adding one city."""
    file_path = temp_dir / "translations.json"
    file_path.write_text(json.dumps({"Gothenburg": ["Göteborg"]}), encoding="utf-8")
    return file_path
