from __future__ import annotations

from pathlib import Path

import pytest

from postakod.common.errors import StageError
from postakod.common.fs import read_json
from postakod.core.store import LocationStore
from postakod.pipeline.import_csv import build_record, parse_rows, run_import


class FakeHttpClient:
    def __init__(self, text: str):
        self.text = text
        self.calls: list[tuple[str, str]] = []

    def get_text(self, url: str, *, encoding: str = "utf-8-sig") -> str:
        self.calls.append((url, encoding))
        return self.text


def test_run_import_counts_and_skip_reasons(tmp_path: Path, fixture_csv: Path, import_config: dict):
    report = run_import(str(fixture_csv), import_config, tmp_path, "postal_codes.csv", "run-test")

    assert report["rows_in"] == 11
    assert report["rows_out"] == 7
    assert report["skipped"] == {
        "duplicate": 1,
        "invalid_name": 1,
        "invalid_postal_code": 1,
        "missing_data": 1,
    }
    assert [sample["line"] for sample in report["skipped_samples"]] == [10, 11, 12, 13]

    written = read_json(tmp_path / "out" / "reports" / "import_report.json")
    assert written == report


def test_run_import_writes_slugged_store(tmp_path: Path, fixture_csv: Path, import_config: dict):
    run_import(str(fixture_csv), import_config, tmp_path, "postal_codes.csv", "run-test")
    store = LocationStore.from_csv(tmp_path / "out" / "postal_codes.csv")

    assert len(store) == 7
    caferaga = store.in_neighborhood("istanbul", "kadikoy", "caferaga")
    assert [(r.subarea, r.postal_code) for r in caferaga] == [("Moda", "34710")]
    kurtulus = store.in_neighborhood("adana", "seyhan", "kurtulus")
    assert kurtulus[0].postal_code == "01230"
    assert store.in_neighborhood("ankara", "kecioren", "merkez")[0].subarea is None


def test_run_import_remote_source_uses_http_client(tmp_path: Path, import_config: dict):
    client = FakeHttpClient("il;ilce;semt;mahalle;pk\nAnkara;Çankaya;;Kızılay;06420\n")

    report = run_import(
        "https://example.com/pk.csv",
        import_config,
        tmp_path,
        "postal_codes.csv",
        "run-test",
        http_client=client,
    )

    assert client.calls == [("https://example.com/pk.csv", "utf-8-sig")]
    assert report["rows_out"] == 1
    assert report["skipped"] == {}


def test_run_import_fails_when_no_row_is_valid(tmp_path: Path, import_config: dict):
    source = tmp_path / "bad.csv"
    source.write_text("il;ilce;semt;mahalle;pk\nAnkara;Çankaya;;Kızılay;XX\n", encoding="utf-8")

    with pytest.raises(StageError):
        run_import(str(source), import_config, tmp_path, "postal_codes.csv", "run-test")
    assert not (tmp_path / "out" / "postal_codes.csv").exists()


def test_run_import_missing_source(tmp_path: Path, import_config: dict):
    with pytest.raises(StageError):
        run_import(str(tmp_path / "nope.csv"), import_config, tmp_path, "postal_codes.csv", "run-test")


def test_parse_rows_without_header(import_config: dict):
    cfg = dict(import_config, has_header=False)
    rows = parse_rows("Ankara;Çankaya;;Kızılay;06420\n\nAdana;Seyhan;;Reşatbey;01120\n", cfg)

    assert [line for line, _ in rows] == [1, 3]
    assert rows[1][1]["mahalle"] == "Reşatbey"


def test_build_record_derives_slugs():
    record = build_record({"il": "İstanbul", "ilce": "Şişli", "semt": "", "mahalle": "Mecidiyeköy", "pk": "34387"})
    assert (record.province_slug, record.district_slug, record.neighborhood_slug) == (
        "istanbul",
        "sisli",
        "mecidiyekoy",
    )
    assert record.subarea is None
