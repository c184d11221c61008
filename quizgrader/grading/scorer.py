"""
Response parser for the remote similarity check.

Parses the model's reply into a similarity score and rejects anything
outside the expected shape, so a confused reply falls back to local grading
instead of producing a wrong grade.
"""

import json
import re
from typing import Any


class ScoringError(Exception):
    """Raised when a similarity reply cannot be parsed or validated."""

    def __init__(self, message: str, raw_response: str | None = None):
        self.raw_response = raw_response
        super().__init__(message)


class DelegateResponseParser:
    """
    Parses and validates similarity replies.

    Ensures:
    1. Reply contains a JSON object, or a bare true/false verdict
    2. The similarity field is present and numeric
    3. The similarity lies in [0, 1]
    """

    VERDICTS = {"true": 1.0, "false": 0.0}

    def parse(self, response: str) -> float:
        """
        Parse a model reply into a similarity score.

        Args:
            response: Raw model reply.

        Returns:
            Similarity in [0, 1].

        Raises:
            ScoringError: If parsing or validation fails.
        """
        verdict = response.strip().strip(".").lower()
        if verdict in self.VERDICTS:
            return self.VERDICTS[verdict]

        json_str = self._extract_json(response)

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ScoringError(f"Invalid JSON in response: {e}", raw_response=response) from e

        if not isinstance(data, dict):
            raise ScoringError("Response JSON must be an object", raw_response=response)

        return self._validate_similarity(data, response)

    def _extract_json(self, response: str) -> str:
        """
        Extract JSON from response, handling common formats.

        Args:
            response: Raw response text.

        Returns:
            Extracted JSON string.
        """
        # Remove markdown code block if present
        json_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", response)
        if json_match:
            return json_match.group(1).strip()

        brace_start = response.find("{")
        if brace_start == -1:
            raise ScoringError("No JSON object found in response", raw_response=response)

        depth = 0
        for i, char in enumerate(response[brace_start:], start=brace_start):
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return response[brace_start : i + 1]

        raise ScoringError("Unclosed JSON object in response", raw_response=response)

    def _validate_similarity(self, data: dict[str, Any], raw_response: str) -> float:
        if "similarity" not in data:
            raise ScoringError("Missing required field: similarity", raw_response=raw_response)

        value = data["similarity"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ScoringError(
                f"Invalid numeric value for similarity: {value!r}", raw_response=raw_response
            )

        similarity = float(value)
        if not 0.0 <= similarity <= 1.0:
            raise ScoringError(
                f"Similarity {similarity} is outside [0, 1]", raw_response=raw_response
            )

        return similarity
