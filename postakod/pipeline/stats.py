"""Directory-wide counts."""

from __future__ import annotations

from postakod.core.store import LocationStore


def directory_stats(store: LocationStore) -> dict:
    provinces = {record.province_slug for record in store}
    districts = {(record.province_slug, record.district_slug) for record in store}
    neighborhoods = {
        (record.province_slug, record.district_slug, record.neighborhood_slug) for record in store
    }
    return {
        "total_provinces": len(provinces),
        "total_districts": len(districts),
        "total_neighborhoods": len(neighborhoods),
        "total_records": len(store),
        "total_postal_codes": len({record.postal_code for record in store}),
    }
