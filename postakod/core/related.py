"""Browse aids derived from the hierarchy: neighboring districts, namesakes, siblings."""

from __future__ import annotations

from postakod.common.models import DistrictNeighbor, LocationRecord, NeighborhoodSummary
from postakod.core.resolver import sort_locations
from postakod.core.slug import normalize, turkish_sort_key
from postakod.core.store import LocationStore


def neighboring_districts(store: LocationStore, province_slug: str, district_slug: str) -> list[DistrictNeighbor]:
    """Other districts of the same province, each with its distinct neighborhood count."""
    province_slug = normalize(province_slug)
    district_slug = normalize(district_slug)

    names: dict[str, str] = {}
    neighborhoods: dict[str, set[str]] = {}
    for record in store.in_province(province_slug):
        if record.district_slug == district_slug:
            continue
        names.setdefault(record.district_slug, record.district)
        neighborhoods.setdefault(record.district_slug, set()).add(record.neighborhood_slug)

    out = [
        DistrictNeighbor(district=names[slug], district_slug=slug, neighborhood_count=len(neighborhoods[slug]))
        for slug in names
    ]
    return sorted(out, key=lambda item: turkish_sort_key(item.district))


def similarly_named_neighborhoods(
    store: LocationStore,
    neighborhood_name: str,
    province_slug: str,
    district_slug: str,
    limit: int | None = None,
) -> list[LocationRecord]:
    """Rows elsewhere in the country whose neighborhood name is exactly ``neighborhood_name``.

    Exact comparison is enough here: the name comes from an already resolved
    row, not from user input.
    """
    origin = (normalize(province_slug), normalize(district_slug))
    matches = [
        record
        for record in store.with_neighborhood_name(neighborhood_name)
        if (record.province_slug, record.district_slug) != origin
    ]
    ordered = sort_locations(matches)
    if limit is not None:
        return ordered[:limit]
    return ordered


def sibling_neighborhoods(
    store: LocationStore,
    province_slug: str,
    district_slug: str,
    neighborhood_slug: str,
) -> list[NeighborhoodSummary]:
    excluded = normalize(neighborhood_slug)
    seen: dict[str, NeighborhoodSummary] = {}
    for record in store.in_district(normalize(province_slug), normalize(district_slug)):
        if record.neighborhood_slug == excluded or record.neighborhood_slug in seen:
            continue
        seen[record.neighborhood_slug] = NeighborhoodSummary(
            neighborhood=record.neighborhood,
            neighborhood_slug=record.neighborhood_slug,
        )
    return sorted(seen.values(), key=lambda item: turkish_sort_key(item.neighborhood))
