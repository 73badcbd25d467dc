"""Search history used for the popular-searches list."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from postakod.common.errors import InvalidInputError
from postakod.common.fs import append_jsonl, read_jsonl
from postakod.common.time_utils import utc_timestamp_iso


def log_search(path: Path, query: str, results_count: int, *, timestamp: str | None = None) -> dict:
    entry = {
        "query": query,
        "results_count": int(results_count),
        "timestamp": timestamp or utc_timestamp_iso(),
    }
    append_jsonl(path, entry)
    return entry


def popular_searches(path: Path, limit: int = 10) -> list[dict]:
    if limit < 1:
        raise InvalidInputError(f"Popular searches limit must be at least 1: {limit}")
    counts = Counter(entry["query"] for entry in read_jsonl(path) if entry.get("query"))
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"query": query, "count": count} for query, count in ranked[:limit]]


def total_searches(path: Path) -> int:
    return len(read_jsonl(path))
