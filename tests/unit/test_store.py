from pathlib import Path

import pytest

from postakod.common.errors import StageError
from postakod.core.store import STORE_HEADERS, LocationStore, write_store


def test_store_csv_preserves_rows_order_and_leading_zeros(tmp_path: Path, sample_store):
    path = write_store(tmp_path / "out" / "postal_codes.csv", sample_store)
    loaded = LocationStore.from_csv(path)

    assert loaded.records == sample_store.records
    assert loaded.with_postal_code("01120")[0].province == "Adana"
    assert loaded.in_neighborhood("istanbul", "kadikoy", "goztepe")[0].subarea is None


def test_store_indexes_return_rows_in_insertion_order(sample_store):
    rows = sample_store.in_neighborhood("istanbul", "kadikoy", "acibadem")
    assert [row.postal_code for row in rows] == ["34710", "34718"]
    assert len(sample_store.in_province("istanbul")) == 7
    assert sample_store.in_district("ankara", "yok") == ()
    assert len(sample_store.with_neighborhood_name("Merkez")) == 2


def test_from_csv_missing_file_raises(tmp_path: Path):
    with pytest.raises(StageError):
        LocationStore.from_csv(tmp_path / "missing.csv")


def test_from_csv_rejects_unexpected_header(tmp_path: Path):
    path = tmp_path / "bad.csv"
    path.write_text("il;ilce\nAnkara;Çankaya\n", encoding="utf-8")
    with pytest.raises(StageError):
        LocationStore.from_csv(path)


def test_from_csv_rejects_rows_with_missing_values(tmp_path: Path):
    path = tmp_path / "partial.csv"
    header = ",".join(STORE_HEADERS)
    path.write_text(f"{header}\nAnkara,Çankaya,,,06420,ankara,cankaya,\n", encoding="utf-8")
    with pytest.raises(StageError):
        LocationStore.from_csv(path)
