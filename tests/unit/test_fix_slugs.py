from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from postakod.common.fs import read_json
from postakod.core.store import LocationStore, write_store
from postakod.pipeline.fix_slugs import diagnose_postal_prefixes, diagnose_slug_drift, run_fix_slugs


def _drifted_records(sample_store):
    out = []
    for record in sample_store:
        if record.neighborhood == "Acıbadem" and record.postal_code == "34718":
            record = replace(record, neighborhood_slug="acbadem")
        out.append(record)
    return out


def test_diagnose_slug_drift_groups_by_display_names(sample_store):
    drifts, unrepairable = diagnose_slug_drift(LocationStore(_drifted_records(sample_store)))

    assert unrepairable == []
    assert len(drifts) == 1
    assert drifts[0].stored == ("istanbul", "kadikoy", "acbadem")
    assert drifts[0].expected == ("istanbul", "kadikoy", "acibadem")
    assert drifts[0].row_count == 2


def test_clean_store_has_no_drift_or_prefix_mismatch(sample_store):
    assert diagnose_slug_drift(sample_store) == ([], [])
    assert diagnose_postal_prefixes(sample_store) == []


def test_run_fix_slugs_dry_run_leaves_store(tmp_path: Path, sample_store):
    store_path = write_store(tmp_path / "out" / "postal_codes.csv", _drifted_records(sample_store))
    before = store_path.read_bytes()

    report = run_fix_slugs(tmp_path, "postal_codes.csv", "run-test", dry_run=True)

    assert report["groups_total"] == 11
    assert report["groups_drifted"] == 1
    assert report["groups_fixed"] == 0
    assert store_path.read_bytes() == before


def test_run_fix_slugs_repairs_whole_group(tmp_path: Path, sample_store):
    write_store(tmp_path / "out" / "postal_codes.csv", _drifted_records(sample_store))

    report = run_fix_slugs(tmp_path, "postal_codes.csv", "run-test")

    assert report["groups_fixed"] == 1
    assert report["groups_already_correct"] == 10
    repaired = LocationStore.from_csv(tmp_path / "out" / "postal_codes.csv")
    assert len(repaired.in_neighborhood("istanbul", "kadikoy", "acibadem")) == 2
    assert repaired.in_neighborhood("istanbul", "kadikoy", "acbadem") == ()
    assert repaired.records == sample_store.records

    written = read_json(tmp_path / "out" / "reports" / "slug_repair_report.json")
    assert written["groups_fixed"] == 1

    again = run_fix_slugs(tmp_path, "postal_codes.csv", "run-test-2")
    assert again["groups_drifted"] == 0


def test_postal_prefix_mismatch_is_reported(sample_store, record_factory):
    records = list(sample_store) + [record_factory("Ankara", "Yenimahalle", "Batıkent", "34000")]
    mismatches = diagnose_postal_prefixes(LocationStore(records))

    assert mismatches == [{"province": "Ankara", "postal_code": "34000", "plate_province": "İstanbul"}]
