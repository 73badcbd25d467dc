"""UTC-focused helpers for run metadata and sitemap lastmod values."""

from __future__ import annotations

from datetime import date, datetime, timezone

from postakod.common.errors import InvalidInputError


def utc_today_iso() -> str:
    return datetime.now(tz=timezone.utc).date().isoformat()


def parse_run_date(value: str | None) -> str:
    if not value:
        return utc_today_iso()
    try:
        parsed = date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError(f"Run date must be YYYY-MM-DD: {value!r}") from exc
    return parsed.isoformat()


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")
