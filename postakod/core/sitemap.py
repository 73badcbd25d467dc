"""Bounded-size sitemap URL sets derived from the location hierarchy.

Neighborhood URLs are split into a fixed number of contiguous shards by plain
sequential slicing, so shard N keeps covering the same stretch of the ordered
list between regenerations. XML serialization belongs to the serving layer;
this module only produces ordered URL lists.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from postakod.common.constants import DEFAULT_SHARD_COUNT, MAX_URLS_PER_SITEMAP
from postakod.common.errors import ContractError, InvalidInputError
from postakod.common.models import Found, LocationRecord, Lookup, NotFound
from postakod.core.resolver import list_postal_codes
from postakod.core.store import LocationStore

STATIC_SITEMAP = "sitemap-static.xml"
CITIES_SITEMAP = "sitemap-cities.xml"
DISTRICTS_SITEMAP = "sitemap-districts.xml"
POSTAL_CODES_SITEMAP = "sitemap-postal-codes.xml"
NEIGHBORHOOD_SITEMAP_TEMPLATE = "sitemap-neighborhoods-{part}.xml"


def neighborhood_path(record: LocationRecord) -> str:
    return f"{record.province_slug}/{record.district_slug}/{record.neighborhood_slug}"


def shard_size(total: int, shard_count: int) -> int:
    if shard_count < 1:
        raise InvalidInputError(f"Shard count must be at least 1: {shard_count}")
    return math.ceil(total / shard_count)


def partition(all_neighborhoods: Sequence[LocationRecord], shard_count: int = DEFAULT_SHARD_COUNT) -> list[list[str]]:
    """Split neighborhood URLs into exactly ``shard_count`` contiguous shards.

    Every shard holds ``ceil(total / shard_count)`` URLs except the tail,
    which may be shorter or empty. Concatenating the shards in order gives
    back the input order with nothing dropped or repeated.
    """
    size = shard_size(len(all_neighborhoods), shard_count)
    paths = [neighborhood_path(record) for record in all_neighborhoods]
    return [paths[idx * size : (idx + 1) * size] for idx in range(shard_count)]


def check_shard_bounds(shards: Sequence[Sequence[str]], max_urls: int = MAX_URLS_PER_SITEMAP) -> None:
    oversized = [idx + 1 for idx, shard in enumerate(shards) if len(shard) > max_urls]
    if oversized:
        parts = ", ".join(str(part) for part in oversized)
        raise ContractError(f"Sitemap shards over {max_urls} URLs: {parts}")


def get_shard(shards: Sequence[list[str]], part: int) -> Lookup[list[str]]:
    """1-based shard access, as addressed by ``sitemap-neighborhoods-<part>.xml``."""
    if part < 1 or part > len(shards):
        return NotFound(kind="sitemap-shard", key=(str(part),))
    return Found(shards[part - 1])


def neighborhood_entries(store: LocationStore) -> list[LocationRecord]:
    """One record per distinct neighborhood, ordered by slug path."""
    seen: dict[tuple[str, str, str], LocationRecord] = {}
    for record in store:
        key = (record.province_slug, record.district_slug, record.neighborhood_slug)
        seen.setdefault(key, record)
    return [seen[key] for key in sorted(seen)]


def absolute_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


@dataclass(frozen=True)
class SitemapPlan:
    base_url: str
    files: dict[str, list[str]] = field(default_factory=dict)

    @property
    def index(self) -> list[str]:
        return [absolute_url(self.base_url, name) for name in self.files]


def build_sitemap_plan(
    store: LocationStore,
    *,
    base_url: str,
    shard_count: int = DEFAULT_SHARD_COUNT,
    static_pages: Sequence[str] = (),
    max_urls: int = MAX_URLS_PER_SITEMAP,
) -> SitemapPlan:
    province_slugs = sorted({record.province_slug for record in store})
    district_paths = sorted({f"{record.province_slug}/{record.district_slug}" for record in store})
    shards = partition(neighborhood_entries(store), shard_count)
    check_shard_bounds(shards, max_urls)

    files: dict[str, list[str]] = {
        STATIC_SITEMAP: [absolute_url(base_url, "")] + [absolute_url(base_url, page) for page in static_pages],
        CITIES_SITEMAP: [absolute_url(base_url, slug) for slug in province_slugs],
        DISTRICTS_SITEMAP: [absolute_url(base_url, path) for path in district_paths],
    }
    for part, shard in enumerate(shards, start=1):
        files[NEIGHBORHOOD_SITEMAP_TEMPLATE.format(part=part)] = [absolute_url(base_url, path) for path in shard]
    files[POSTAL_CODES_SITEMAP] = [absolute_url(base_url, f"kod/{code}") for code in list_postal_codes(store)]

    for name in (STATIC_SITEMAP, CITIES_SITEMAP, DISTRICTS_SITEMAP, POSTAL_CODES_SITEMAP):
        check_shard_bounds([files[name]], max_urls)

    return SitemapPlan(base_url=base_url, files=files)
