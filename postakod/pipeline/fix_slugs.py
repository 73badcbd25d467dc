"""Slug drift diagnosis and repair.

Slugs are stored data. Manual edits can leave a row whose stored slug no
longer equals ``normalize`` of its display name; the resolver does not
correct that on read. This job finds such rows, grouped by display-name
triple, and rewrites every row of a drifted group in one store write.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from postakod.common.errors import InvalidInputError
from postakod.common.fs import write_json
from postakod.common.models import LocationRecord
from postakod.common.postal_code import expected_province
from postakod.core.slug import normalize, slug_for_name
from postakod.core.store import LocationStore, write_store

SAMPLE_LIMIT = 50


@dataclass(frozen=True)
class SlugDrift:
    province: str
    district: str
    neighborhood: str
    stored: tuple[str, str, str]
    expected: tuple[str, str, str]
    row_count: int


def _group_by_display_names(store: LocationStore) -> dict[tuple[str, str, str], list[LocationRecord]]:
    groups: dict[tuple[str, str, str], list[LocationRecord]] = {}
    for record in store:
        groups.setdefault((record.province, record.district, record.neighborhood), []).append(record)
    return groups


def diagnose_slug_drift(store: LocationStore) -> tuple[list[SlugDrift], list[dict]]:
    """Return (drifted groups, groups whose names cannot produce a slug)."""
    drifts: list[SlugDrift] = []
    unrepairable: list[dict] = []

    for (province, district, neighborhood), rows in _group_by_display_names(store).items():
        try:
            expected = (slug_for_name(province), slug_for_name(district), slug_for_name(neighborhood))
        except InvalidInputError as exc:
            unrepairable.append(
                {"province": province, "district": district, "neighborhood": neighborhood, "error": str(exc)}
            )
            continue

        drifted = [
            row for row in rows if (row.province_slug, row.district_slug, row.neighborhood_slug) != expected
        ]
        if drifted:
            first = drifted[0]
            drifts.append(
                SlugDrift(
                    province=province,
                    district=district,
                    neighborhood=neighborhood,
                    stored=(first.province_slug, first.district_slug, first.neighborhood_slug),
                    expected=expected,
                    row_count=len(rows),
                )
            )
    return drifts, unrepairable


def diagnose_postal_prefixes(store: LocationStore) -> list[dict]:
    """Rows whose postal-code plate prefix names a different province. Reported, never fixed."""
    mismatches: list[dict] = []
    seen: set[tuple[str, str]] = set()
    for record in store:
        pair = (record.province, record.postal_code)
        if pair in seen:
            continue
        seen.add(pair)
        expected = expected_province(record.postal_code)
        if expected is None or normalize(expected) != normalize(record.province):
            mismatches.append(
                {"province": record.province, "postal_code": record.postal_code, "plate_province": expected}
            )
    return mismatches


def repair_records(store: LocationStore, drifts: list[SlugDrift]) -> list[LocationRecord]:
    expected_by_names = {(d.province, d.district, d.neighborhood): d.expected for d in drifts}
    out: list[LocationRecord] = []
    for record in store:
        expected = expected_by_names.get((record.province, record.district, record.neighborhood))
        if expected is None:
            out.append(record)
            continue
        out.append(
            replace(
                record,
                province_slug=expected[0],
                district_slug=expected[1],
                neighborhood_slug=expected[2],
            )
        )
    return out


def run_fix_slugs(data_dir: Path, store_filename: str, run_id: str, *, dry_run: bool = False) -> dict:
    store_path = data_dir / "out" / store_filename
    store = LocationStore.from_csv(store_path)

    drifts, unrepairable = diagnose_slug_drift(store)
    prefix_mismatches = diagnose_postal_prefixes(store)
    groups_total = len(_group_by_display_names(store))

    if drifts and not dry_run:
        write_store(store_path, repair_records(store, drifts))

    payload = {
        "run_id": run_id,
        "dry_run": dry_run,
        "rows": len(store),
        "groups_total": groups_total,
        "groups_fixed": 0 if dry_run else len(drifts),
        "groups_drifted": len(drifts),
        "groups_already_correct": groups_total - len(drifts) - len(unrepairable),
        "groups_unrepairable": len(unrepairable),
        "drift_samples": [
            {
                "names": [d.province, d.district, d.neighborhood],
                "stored": list(d.stored),
                "expected": list(d.expected),
                "row_count": d.row_count,
            }
            for d in drifts[:SAMPLE_LIMIT]
        ],
        "unrepairable_samples": unrepairable[:SAMPLE_LIMIT],
        "postal_prefix_mismatches": len(prefix_mismatches),
        "postal_prefix_samples": prefix_mismatches[:SAMPLE_LIMIT],
    }
    write_json(data_dir / "out" / "reports" / "slug_repair_report.json", payload)
    return payload
