"""
Prompt builder for the remote similarity check.

The remote model is asked for a single similarity number so its answer can
be compared against the question's threshold like the local score.
"""


class PromptBuilder:
    """Builds prompts for comparing a student answer with the answer key."""

    SYSTEM_PROMPT = """You are a teacher evaluating student answers against an answer key.

RULES:
1. Judge whether the student's answer means the same as the teacher's answer.
2. Translations and alternative spellings of the same name are equivalent (e.g. "Helsinki" and "Helsingfors").
3. Minor spelling mistakes do not change the meaning of an answer.
4. If the teacher's answer is a complex sentence and the student's answer is a single word taken from it, they are usually NOT equivalent.

OUTPUT RULES:
- Respond with ONLY a JSON object, no other text.
- The JSON object has exactly one field, "similarity", a number between 0 and 1."""

    @staticmethod
    def build_similarity_prompt(correct_answer: str, student_answer: str, strictness: float) -> str:
        """
        Build the user prompt for one comparison.

        Args:
            correct_answer: The teacher's answer.
            student_answer: The student's answer.
            strictness: The question's threshold; answers scored at or above it pass.

        Returns:
            The formatted user prompt.
        """
        return f"""Compare these answers semantically.

TEACHER'S ANSWER:
---BEGIN ANSWER---
{correct_answer}
---END ANSWER---

STUDENT'S ANSWER:
---BEGIN ANSWER---
{student_answer}
---END ANSWER---

The student passes when similarity is at least {strictness:.2f}.

OUTPUT FORMAT (respond with ONLY this JSON, no other text):
{{"similarity": <number between 0 and 1>}}"""

    @staticmethod
    def get_system_prompt() -> str:
        """Get the system prompt for similarity checks."""
        return PromptBuilder.SYSTEM_PROMPT
