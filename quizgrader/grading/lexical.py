"""
Lexical comparison primitives.

Dice coefficient over character bigrams is the baseline similarity used
when no heuristic rule applies. Levenshtein distance backs the typo
tolerance rule.
"""

from collections import Counter


def _bigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def lexical_similarity(first: str, second: str) -> float:
    """
    Compare two strings by shared character bigrams.

    Whitespace is ignored. Identical strings score 1.0; strings too short
    to form a bigram score 0.0 otherwise.

    Args:
        first: First string.
        second: Second string.

    Returns:
        Dice coefficient in [0, 1].
    """
    first = "".join(first.split())
    second = "".join(second.split())

    if first == second:
        return 1.0
    if len(first) < 2 or len(second) < 2:
        return 0.0

    first_bigrams = _bigrams(first)
    second_bigrams = _bigrams(second)
    shared = sum((first_bigrams & second_bigrams).values())

    return (2.0 * shared) / (len(first) + len(second) - 2)


def levenshtein_distance(first: str, second: str) -> int:
    """Minimum number of single-character insertions, deletions or substitutions."""
    m, n = len(first), len(second)
    table = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(m + 1):
        table[i][0] = i
    for j in range(n + 1):
        table[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if first[i - 1] == second[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )

    return table[m][n]
