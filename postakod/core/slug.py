"""Turkish-aware slugs, search folding and collation.

Three views of a place name:

- ``normalize`` produces the stored URL identifier (slug). It must stay a
  pure function of the display name: the batch import and the slug repair
  job both call it and must agree byte for byte.
- ``fold_for_search`` expands a free-text query into per-character
  equivalence classes so that ``kadikoy`` finds ``Kadıköy``. It never
  collapses to a canonical string; it is tested against raw stored text.
- ``turkish_sort_key`` orders display names by the Turkish alphabet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from postakod.common.errors import InvalidInputError

TURKISH_SLUG_MAP = MappingProxyType(
    {
        "İ": "i",
        "I": "i",
        "ı": "i",
        "Ş": "s",
        "ş": "s",
        "Ğ": "g",
        "ğ": "g",
        "Ü": "u",
        "ü": "u",
        "Ö": "o",
        "ö": "o",
        "Ç": "c",
        "ç": "c",
    }
)
_SLUG_TABLE = str.maketrans(dict(TURKISH_SLUG_MAP))
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

_FOLD_GROUPS = (
    "iıİI",
    "oöOÖ",
    "uüUÜ",
    "sşSŞ",
    "cçCÇ",
    "gğGĞ",
)
FOLD_CLASSES = MappingProxyType(
    {char: frozenset(group) for group in _FOLD_GROUPS for char in group}
)

TURKISH_ALPHABET = "abcçdefgğhıijklmnoöprsştuüvyz"
_ALPHABET_RANK = MappingProxyType({char: rank for rank, char in enumerate(TURKISH_ALPHABET)})
_TURKISH_LOWER_TABLE = str.maketrans({"I": "ı", "İ": "i"})


def normalize(text: str) -> str:
    if not text:
        return ""
    slug = text.strip().translate(_SLUG_TABLE).lower()
    slug = _NON_ALNUM_RE.sub("-", slug)
    return slug.strip("-")


def slug_for_name(name: str | None) -> str:
    """``normalize`` for the import path, where an empty name is a caller error."""
    if name is None or not name.strip():
        raise InvalidInputError("Location name must not be empty")
    slug = normalize(name)
    if not slug:
        raise InvalidInputError(f"Location name has no slug-able characters: {name!r}")
    return slug


@dataclass(frozen=True)
class FoldPattern:
    """A query as a sequence of character classes, matched as a substring."""

    query: str
    classes: tuple[frozenset[str], ...]

    def __len__(self) -> int:
        return len(self.classes)

    def matches_at(self, text: str, start: int) -> bool:
        if start + len(self.classes) > len(text):
            return False
        for offset, allowed in enumerate(self.classes):
            if text[start + offset] not in allowed:
                return False
        return True

    def matches_in(self, text: str | None) -> bool:
        if text is None:
            return False
        if not self.classes:
            return True
        last_start = len(text) - len(self.classes)
        return any(self.matches_at(text, start) for start in range(last_start + 1))

    def matches_prefix(self, text: str | None) -> bool:
        if text is None:
            return False
        return self.matches_at(text, 0)


def _char_class(char: str) -> frozenset[str]:
    folded = FOLD_CLASSES.get(char)
    if folded is not None:
        return folded
    if char.isalpha():
        # str.upper() can expand (e.g. "ß" -> "SS"); keep single characters only.
        return frozenset(c for c in (char, char.lower(), char.upper()) if len(c) == 1)
    return frozenset(char)


def fold_for_search(text: str) -> FoldPattern:
    text = text or ""
    return FoldPattern(query=text, classes=tuple(_char_class(char) for char in text))


def turkish_lower(text: str) -> str:
    return text.translate(_TURKISH_LOWER_TABLE).lower()


def turkish_sort_key(text: str | None) -> tuple[tuple[int, int], ...]:
    """Collation key: separators and digits first, then the Turkish alphabet, then anything else."""
    key: list[tuple[int, int]] = []
    for char in turkish_lower(text or ""):
        rank = _ALPHABET_RANK.get(char)
        if rank is not None:
            key.append((1, rank))
        elif char.isalpha():
            key.append((2, ord(char)))
        else:
            key.append((0, ord(char)))
    return tuple(key)
