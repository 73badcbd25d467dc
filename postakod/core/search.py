"""Diacritic-insensitive search over location rows.

All-digit queries are postal-code lookups and only match as a prefix of the
postal code. Any other query is folded into Turkish character classes and
matched as a substring of the name fields. Stored postal codes are five
ASCII digits, so a query holding any other character cannot occur inside one
and is not tested against the code at all.

The matcher has no side effects. Recording searches for the popular-searches
list is the caller's job.
"""
from __future__ import annotations

from postakod.common.constants import DEFAULT_SEARCH_LIMIT
from postakod.common.errors import InvalidInputError
from postakod.common.models import LocationRecord
from postakod.common.postal_code import is_ascii_digits
from postakod.core.resolver import sort_locations
from postakod.core.slug import FoldPattern, fold_for_search
from postakod.core.store import LocationStore


def _matches_postal_prefix(record: LocationRecord, query: str) -> bool:
    return record.postal_code.startswith(query)


def _matches_text(record: LocationRecord, pattern: FoldPattern) -> bool:
    return (
        pattern.matches_in(record.province)
        or pattern.matches_in(record.district)
        or pattern.matches_in(record.neighborhood)
        or pattern.matches_in(record.subarea)
    )


def search(store: LocationStore, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[LocationRecord]:
    if limit < 1:
        raise InvalidInputError(f"Search limit must be at least 1: {limit}")

    query = (query or "").strip()
    if not query:
        return []

    if is_ascii_digits(query):
        matches = [record for record in store if _matches_postal_prefix(record, query)]
    else:
        pattern = fold_for_search(query)
        matches = [record for record in store if _matches_text(record, pattern)]

    return sort_locations(matches)[:limit]
