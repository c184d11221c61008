"""
Remote similarity client.

Provides a wrapper around the OpenAI SDK that asks a chat model how similar
two answers are. Every call is bounded by the configured timeout and a small
retry budget; callers are expected to fall back to local grading on failure.
"""

import logging
import time

from openai import APIConnectionError, APIStatusError, OpenAI, RateLimitError

from quizgrader.config import Settings, get_settings
from quizgrader.grading.prompt_builder import PromptBuilder
from quizgrader.grading.scorer import DelegateResponseParser, ScoringError

logger = logging.getLogger(__name__)


class DelegateError(Exception):
    """Raised when the remote similarity check fails."""

    def __init__(self, message: str, cause: Exception | None = None, retryable: bool = False):
        self.cause = cause
        self.retryable = retryable
        super().__init__(message)


class SimilarityClient:
    """
    Client for the remote similarity check.

    Uses the OpenAI SDK with a configurable base URL so any compatible
    endpoint can serve the comparisons. Callable as
    ``client(text1, text2, strictness) -> similarity``.
    """

    def __init__(self, settings: Settings | None = None, client: OpenAI | None = None):
        """
        Initialize the similarity client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
            client: Preconfigured OpenAI client, mainly for tests.
        """
        self._settings = settings or get_settings()
        self._client = client or OpenAI(
            api_key=self._settings.openai_api_key,
            base_url=self._settings.openai_base_url,
            timeout=self._settings.delegate_timeout_seconds,
            max_retries=0,
        )
        self._parser = DelegateResponseParser()

        # Retry configuration
        self._max_retries = self._settings.delegate_max_retries
        self._base_delay = 0.5  # seconds
        self._max_delay = 2.0  # seconds

    def __call__(self, text1: str, text2: str, strictness: float) -> float:
        return self.similarity(text1, text2, strictness)

    def similarity(self, text1: str, text2: str, strictness: float) -> float:
        """
        Ask the remote model how similar two answers are.

        Args:
            text1: The teacher's answer.
            text2: The student's answer.
            strictness: Threshold the score will be compared against.

        Returns:
            Similarity in [0, 1].

        Raises:
            DelegateError: If the call fails or the reply is unusable.
        """
        messages: list[dict[str, str]] = [
            {"role": "system", "content": PromptBuilder.get_system_prompt()},
            {
                "role": "user",
                "content": PromptBuilder.build_similarity_prompt(text1, text2, strictness),
            },
        ]

        raw_response = self._call_with_retry(messages)

        try:
            return self._parser.parse(raw_response)
        except ScoringError as e:
            raise DelegateError(f"Unusable similarity reply: {e}", cause=e) from e

    def _call_with_retry(self, messages: list[dict[str, str]]) -> str:
        """
        Call the API with exponential backoff retry.

        Args:
            messages: Chat messages to send.

        Returns:
            Generated text.

        Raises:
            DelegateError: If all retries fail.
        """
        last_error: Exception | None = None

        for attempt in range(self._max_retries + 1):
            try:
                response = self._client.chat.completions.create(
                    model=self._settings.openai_model,
                    messages=messages,  # type: ignore[arg-type]
                    temperature=self._settings.delegate_temperature,
                    max_tokens=50,
                )

                if response.choices and response.choices[0].message.content:
                    return response.choices[0].message.content

                raise DelegateError("Empty response from similarity model")

            except (RateLimitError, APIConnectionError) as e:
                last_error = e
                if attempt < self._max_retries:
                    logger.debug("Similarity request failed (attempt %d): %s", attempt + 1, e)
                    time.sleep(self._calculate_delay(attempt))
                    continue
                raise DelegateError(
                    f"Similarity request failed after {self._max_retries} retries: {e}",
                    cause=e,
                    retryable=True,
                ) from e

            except APIStatusError as e:
                # Don't retry on client errors (4xx except 429)
                if 400 <= e.status_code < 500:
                    raise DelegateError(f"API error: {e.message}", cause=e) from e

                last_error = e
                if attempt < self._max_retries:
                    time.sleep(self._calculate_delay(attempt))
                    continue
                raise DelegateError(
                    f"API error after {self._max_retries} retries: {e.message}",
                    cause=e,
                    retryable=True,
                ) from e

            except DelegateError:
                raise

            except Exception as e:
                raise DelegateError(f"Unexpected error: {e}", cause=e) from e

        raise DelegateError(f"Failed after {self._max_retries} retries", cause=last_error)

    def _calculate_delay(self, attempt: int) -> float:
        """Delay for exponential backoff, capped so a retry never outlasts the timeout."""
        delay = self._base_delay * (2**attempt)
        return min(delay, self._max_delay, self._settings.delegate_timeout_seconds)

    def health_check(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = self._client.chat.completions.create(
                model=self._settings.openai_model,
                messages=[{"role": "user", "content": "ping"}],
                max_tokens=5,
            )
            return bool(response.choices)
        except Exception as e:
            logger.warning("Similarity service health check failed: %s", e)
            return False
