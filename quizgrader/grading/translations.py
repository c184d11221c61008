"""
Translation and synonym table for proper nouns.

Maps a canonical term to the spellings and translations that should be
accepted in its place. The table is plain data so a deployment can load
its own entries for its locale.
"""

import json
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any


class TranslationTableError(Exception):
    """Raised when a translation table file cannot be loaded."""

    def __init__(self, message: str, source: Path | None = None):
        self.source = source
        super().__init__(message)


DEFAULT_TRANSLATIONS: dict[str, tuple[str, ...]] = {
    "helsinki": ("helsingfors",),
    "copenhagen": ("köpenhamn", "kopenhamn", "kobenhavn"),
    "stockholm": ("tukholma",),
    "london": ("londres", "londra"),
    "paris": ("parigi", "parijs"),
    "rome": ("roma", "rom"),
    "moscow": ("moskva", "moscou", "moskau"),
    "vienna": ("wien", "bécs"),
    "prague": ("praha", "prag"),
    "athens": ("athen", "athina", "ateny"),
    "warsaw": ("warszawa", "varsóvia"),
    "lisbon": ("lisboa", "lissabon"),
    "dublin": ("baile átha cliath",),
    "amsterdam": ("amsterdã",),
    "brussels": ("bruxelles", "brussel"),
    "bern": ("berne", "berna"),
    "oslo": ("oslo",),
    "madrid": ("madri", "madryt"),
    "berlin": ("berlín",),
    "budapest": ("budapeszt",),
}


class TranslationTable(Mapping[str, tuple[str, ...]]):
    """
    Immutable canonical term -> variants mapping.

    Keys and variants are stored lowercased and stripped.
    """

    def __init__(self, entries: Mapping[str, Any] | None = None):
        source = DEFAULT_TRANSLATIONS if entries is None else entries
        self._entries: dict[str, tuple[str, ...]] = {}
        for canonical, variants in source.items():
            key = str(canonical).strip().lower()
            if not key:
                continue
            self._entries[key] = tuple(
                v for v in (str(variant).strip().lower() for variant in variants) if v
            )

    def __getitem__(self, key: str) -> tuple[str, ...]:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TranslationTable({len(self)} terms)"

    def merged(self, other: Mapping[str, Any]) -> "TranslationTable":
        """
        Return a new table with ``other``'s entries added.

        Variants for a canonical term present in both are combined,
        keeping this table's order first.
        """
        combined: dict[str, list[str]] = {k: list(v) for k, v in self._entries.items()}
        for canonical, variants in TranslationTable(other).items():
            existing = combined.setdefault(canonical, [])
            existing.extend(v for v in variants if v not in existing)
        return TranslationTable(combined)

    @classmethod
    def from_file(cls, path: Path, include_defaults: bool = True) -> "TranslationTable":
        """
        Load a table from a JSON object of ``{"canonical": ["variant", ...]}``.

        Args:
            path: Path to the JSON file.
            include_defaults: Merge the loaded entries into the default table.

        Returns:
            The loaded TranslationTable.

        Raises:
            TranslationTableError: If the file is unreadable or malformed.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise TranslationTableError(f"Cannot read translations file: {e}", path) from e
        except json.JSONDecodeError as e:
            raise TranslationTableError(f"Invalid JSON in translations file: {e}", path) from e

        if not isinstance(data, dict):
            raise TranslationTableError("Translations file must contain a JSON object", path)

        for canonical, variants in data.items():
            if not isinstance(variants, list) or not all(isinstance(v, str) for v in variants):
                raise TranslationTableError(
                    f"Variants for '{canonical}' must be a list of strings", path
                )

        if include_defaults:
            return cls().merged(data)
        return cls(data)
