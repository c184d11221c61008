"""
Encoding of submitted answers for structured question types.

Rating answers are stored as plain integers.
Checkbox answers are stored as the selected options joined by commas.
Grid answers are stored as ``row:column`` pairs joined by commas.
"""

import re
from collections.abc import Iterable, Mapping

CHECKBOX_SEPARATOR = ","
GRID_PAIR_SEPARATOR = ","
GRID_CELL_SEPARATOR = ":"

# ASCII digits only, no digit separators
_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_rating(value: str) -> int | None:
    """Parse a rating answer, returning None for anything but a plain integer."""
    value = value.strip()
    if not _INTEGER.fullmatch(value):
        return None
    return int(value)


def split_checkbox_answer(raw: str) -> list[str]:
    """
    Split a stored checkbox answer into its selected options.

    Tokens are trimmed and empty tokens dropped. Duplicates are kept so
    callers can detect inflated submissions.
    """
    tokens = (token.strip() for token in raw.split(CHECKBOX_SEPARATOR))
    return [token for token in tokens if token]


def join_checkbox_answer(selected: Iterable[str]) -> str:
    """Encode selected checkbox options for storage."""
    return CHECKBOX_SEPARATOR.join(option.strip() for option in selected)


def grid_selections_to_string(selections: Mapping[str, str]) -> str:
    """Encode a row -> column mapping for storage."""
    return GRID_PAIR_SEPARATOR.join(
        f"{row}{GRID_CELL_SEPARATOR}{column}" for row, column in selections.items()
    )


def parse_grid_answer(raw: str) -> dict[str, str]:
    """
    Decode a stored grid answer for manual review.

    Pairs without a separator or with an empty row are skipped. When a row
    repeats, the last selection wins.
    """
    selections: dict[str, str] = {}
    for pair in raw.split(GRID_PAIR_SEPARATOR):
        row, sep, column = pair.partition(GRID_CELL_SEPARATOR)
        row = row.strip()
        if not sep or not row:
            continue
        selections[row] = column.strip()
    return selections
