"""Hierarchical lookups: province -> district -> neighborhood -> postal codes.

Slug arguments come straight from URL path segments, so they are run through
``normalize`` before use; an already-normalized slug is returned unchanged.
Unknown paths produce empty lists or ``NotFound``, never exceptions.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from postakod.common.models import (
    DistrictSummary,
    Found,
    Lookup,
    LocationRecord,
    NeighborhoodDetail,
    NeighborhoodSummary,
    NotFound,
    ProvinceSummary,
)
from postakod.common.postal_code import require_postal_code
from postakod.core.slug import normalize, turkish_sort_key
from postakod.core.store import LocationStore


def location_sort_key(record: LocationRecord) -> tuple:
    return (
        turkish_sort_key(record.province),
        turkish_sort_key(record.district),
        turkish_sort_key(record.neighborhood),
    )


def sort_locations(records: Iterable[LocationRecord]) -> list[LocationRecord]:
    # sorted() is stable: equal display names keep store insertion order.
    return sorted(records, key=location_sort_key)


def list_provinces(store: LocationStore) -> list[ProvinceSummary]:
    names: dict[str, str] = {}
    counts: Counter[str] = Counter()
    for record in store:
        names.setdefault(record.province_slug, record.province)
        counts[record.province_slug] += 1
    summaries = [
        ProvinceSummary(province=names[slug], province_slug=slug, record_count=counts[slug])
        for slug in names
    ]
    return sorted(summaries, key=lambda item: turkish_sort_key(item.province))


def find_province(store: LocationStore, province_slug: str) -> Lookup[ProvinceSummary]:
    slug = normalize(province_slug)
    rows = store.in_province(slug)
    if not rows:
        return NotFound(kind="province", key=(slug,))
    return Found(ProvinceSummary(province=rows[0].province, province_slug=slug, record_count=len(rows)))


def list_districts(store: LocationStore, province_slug: str) -> list[DistrictSummary]:
    names: dict[str, str] = {}
    counts: Counter[str] = Counter()
    for record in store.in_province(normalize(province_slug)):
        names.setdefault(record.district_slug, record.district)
        counts[record.district_slug] += 1
    summaries = [
        DistrictSummary(district=names[slug], district_slug=slug, postal_code_count=counts[slug])
        for slug in names
    ]
    return sorted(summaries, key=lambda item: turkish_sort_key(item.district))


def find_district(store: LocationStore, province_slug: str, district_slug: str) -> Lookup[DistrictSummary]:
    key = (normalize(province_slug), normalize(district_slug))
    rows = store.in_district(*key)
    if not rows:
        return NotFound(kind="district", key=key)
    return Found(DistrictSummary(district=rows[0].district, district_slug=key[1], postal_code_count=len(rows)))


def list_neighborhoods(store: LocationStore, province_slug: str, district_slug: str) -> list[NeighborhoodSummary]:
    seen: dict[str, NeighborhoodSummary] = {}
    for record in store.in_district(normalize(province_slug), normalize(district_slug)):
        if record.neighborhood_slug not in seen:
            seen[record.neighborhood_slug] = NeighborhoodSummary(
                neighborhood=record.neighborhood,
                neighborhood_slug=record.neighborhood_slug,
            )
    return sorted(seen.values(), key=lambda item: turkish_sort_key(item.neighborhood))


def get_neighborhood_detail(
    store: LocationStore,
    province_slug: str,
    district_slug: str,
    neighborhood_slug: str,
) -> Lookup[NeighborhoodDetail]:
    key = (normalize(province_slug), normalize(district_slug), normalize(neighborhood_slug))
    rows = store.in_neighborhood(*key)
    if not rows:
        return NotFound(kind="neighborhood", key=key)

    first = rows[0]
    return Found(
        NeighborhoodDetail(
            province=first.province,
            district=first.district,
            neighborhood=first.neighborhood,
            subarea=first.subarea,
            postal_codes=sorted({row.postal_code for row in rows}),
            province_slug=first.province_slug,
            district_slug=first.district_slug,
            neighborhood_slug=first.neighborhood_slug,
        )
    )


def get_locations_for_postal_code(store: LocationStore, postal_code: str) -> list[LocationRecord]:
    return sort_locations(store.with_postal_code(require_postal_code(postal_code)))


def list_postal_codes(store: LocationStore) -> list[str]:
    return sorted({record.postal_code for record in store})
