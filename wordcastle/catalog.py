"""
Word Catalog: read-only word packs.

Loads the learnable items from a JSON file:

    {"categories": [
        {"name": "Unit 1 School",
         "words": [{"id": "u1-desk", "nativeText": "课桌", "targetText": "desk"}]}
    ]}

A bare list of categories is accepted too. The catalog is never modified.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"


class CatalogError(Exception):
    """Raised when a catalog file is missing or malformed."""
    pass


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class Word:
    """A single learnable item."""

    id: str
    native_text: str
    target_text: str
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict, category: str = "") -> Word:
        return cls(
            id=str(data["id"]),
            native_text=data["nativeText"],
            target_text=data["targetText"],
            category=category,
        )


@dataclass
class WordPack:
    """An ordered category of words."""

    name: str
    words: list[Word] = field(default_factory=list)


# =============================================================================
# Catalog
# =============================================================================


class Catalog:
    """
    Ordered collection of word packs.

    Lookups by id span all categories; the first occurrence of an id wins.
    """

    def __init__(self, packs: list[WordPack]):
        self._packs = list(packs)
        self._by_id: dict[str, Word] = {}
        for pack in self._packs:
            for word in pack.words:
                self._by_id.setdefault(word.id, word)

    @classmethod
    def load(cls, path: Path | None = None) -> Catalog:
        """
        Load a catalog from JSON.

        Args:
            path: Catalog file (defaults to the bundled sample)

        Returns:
            Catalog

        Raises:
            CatalogError: file missing or structure invalid
        """
        path = path or DEFAULT_CATALOG_PATH
        if not path.exists():
            raise CatalogError(f"Catalog not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read catalog {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("categories")
        if not isinstance(data, list):
            raise CatalogError(f"Catalog {path} has no category list")

        packs = []
        try:
            for raw in data:
                name = raw["name"]
                words = [Word.from_dict(w, category=name) for w in raw.get("words", [])]
                packs.append(WordPack(name=name, words=words))
        except (KeyError, TypeError) as e:
            raise CatalogError(f"Malformed catalog entry in {path}: {e}") from e

        catalog = cls(packs)
        logger.info(f"Loaded {catalog.total_words} words in {len(packs)} categories from {path}")
        return catalog

    @property
    def total_words(self) -> int:
        return len(self._by_id)

    @property
    def categories(self) -> list[str]:
        return [p.name for p in self._packs]

    def words(self, category: str) -> list[Word]:
        """Words in ``category``, in catalog order (empty if unknown)."""
        for pack in self._packs:
            if pack.name == category:
                return list(pack.words)
        return []

    def get(self, item_id: str) -> Word | None:
        return self._by_id.get(item_id)

    def get_by_ids(self, item_ids: list[str]) -> list[Word]:
        """Words for the given ids, in the given order, skipping unknown ids."""
        return [self._by_id[i] for i in item_ids if i in self._by_id]

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._by_id
