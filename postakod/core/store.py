"""Read-only location record store backed by the canonical CSV file."""

from __future__ import annotations

import csv
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Iterator

from postakod.common.errors import StageError
from postakod.common.fs import write_csv
from postakod.common.models import LocationRecord

STORE_HEADERS = [
    "province",
    "district",
    "subarea",
    "neighborhood",
    "postal_code",
    "province_slug",
    "district_slug",
    "neighborhood_slug",
]


def _serialize_record(record: LocationRecord) -> dict:
    row = record.to_dict()
    if row["subarea"] is None:
        row["subarea"] = ""
    return row


def _parse_row(row: dict, line_no: int, path: Path) -> LocationRecord:
    missing = [name for name in STORE_HEADERS if name != "subarea" and not (row.get(name) or "")]
    if missing:
        raise StageError(f"{path}:{line_no} missing values for {', '.join(missing)}")
    return LocationRecord(
        province=row["province"],
        district=row["district"],
        subarea=row.get("subarea") or None,
        neighborhood=row["neighborhood"],
        postal_code=row["postal_code"],
        province_slug=row["province_slug"],
        district_slug=row["district_slug"],
        neighborhood_slug=row["neighborhood_slug"],
    )


class LocationStore:
    """Flat table of location rows with slug and postal-code indexes.

    Rows keep their insertion order; every filter returns rows in that order so
    callers can rely on stable sorts for tie-breaking.
    """

    def __init__(self, records: Iterable[LocationRecord]) -> None:
        self._records: tuple[LocationRecord, ...] = tuple(records)
        by_province: dict[str, list[LocationRecord]] = defaultdict(list)
        by_district: dict[tuple[str, str], list[LocationRecord]] = defaultdict(list)
        by_neighborhood: dict[tuple[str, str, str], list[LocationRecord]] = defaultdict(list)
        by_postal_code: dict[str, list[LocationRecord]] = defaultdict(list)
        by_neighborhood_name: dict[str, list[LocationRecord]] = defaultdict(list)

        for record in self._records:
            by_province[record.province_slug].append(record)
            by_district[(record.province_slug, record.district_slug)].append(record)
            by_neighborhood[
                (record.province_slug, record.district_slug, record.neighborhood_slug)
            ].append(record)
            by_postal_code[record.postal_code].append(record)
            by_neighborhood_name[record.neighborhood].append(record)

        self._by_province = {key: tuple(rows) for key, rows in by_province.items()}
        self._by_district = {key: tuple(rows) for key, rows in by_district.items()}
        self._by_neighborhood = {key: tuple(rows) for key, rows in by_neighborhood.items()}
        self._by_postal_code = {key: tuple(rows) for key, rows in by_postal_code.items()}
        self._by_neighborhood_name = {key: tuple(rows) for key, rows in by_neighborhood_name.items()}

    @classmethod
    def from_csv(cls, path: Path) -> "LocationStore":
        if not path.exists():
            raise StageError(f"Missing store file: {path}")
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            header = list(reader.fieldnames or [])
            if header != STORE_HEADERS:
                raise StageError(f"Unexpected store header in {path}: {header}")
            records = [_parse_row(row, idx, path) for idx, row in enumerate(reader, start=2)]
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LocationRecord]:
        return iter(self._records)

    @property
    def records(self) -> tuple[LocationRecord, ...]:
        return self._records

    def in_province(self, province_slug: str) -> tuple[LocationRecord, ...]:
        return self._by_province.get(province_slug, ())

    def in_district(self, province_slug: str, district_slug: str) -> tuple[LocationRecord, ...]:
        return self._by_district.get((province_slug, district_slug), ())

    def in_neighborhood(
        self,
        province_slug: str,
        district_slug: str,
        neighborhood_slug: str,
    ) -> tuple[LocationRecord, ...]:
        return self._by_neighborhood.get((province_slug, district_slug, neighborhood_slug), ())

    def with_postal_code(self, postal_code: str) -> tuple[LocationRecord, ...]:
        return self._by_postal_code.get(postal_code, ())

    def with_neighborhood_name(self, neighborhood: str) -> tuple[LocationRecord, ...]:
        return self._by_neighborhood_name.get(neighborhood, ())


def write_store(path: Path, records: Iterable[LocationRecord]) -> Path:
    write_csv(path, STORE_HEADERS, (_serialize_record(record) for record in records))
    return path
