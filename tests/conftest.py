from __future__ import annotations

from pathlib import Path

import pytest

from postakod.common.models import LocationRecord
from postakod.core.slug import normalize
from postakod.core.store import LocationStore

REPO_ROOT = Path(__file__).resolve().parents[1]


def make_record(
    province: str,
    district: str,
    neighborhood: str,
    postal_code: str,
    subarea: str | None = None,
) -> LocationRecord:
    return LocationRecord(
        province=province,
        district=district,
        subarea=subarea,
        neighborhood=neighborhood,
        postal_code=postal_code,
        province_slug=normalize(province),
        district_slug=normalize(district),
        neighborhood_slug=normalize(neighborhood),
    )


SAMPLE_ROWS = [
    ("İstanbul", "Kadıköy", "Acıbadem", "34710", "Acıbadem"),
    ("İstanbul", "Kadıköy", "Acıbadem", "34718", "Acıbadem"),
    ("İstanbul", "Kadıköy", "Caferağa", "34710", "Moda"),
    ("İstanbul", "Kadıköy", "Göztepe", "34730", None),
    ("İstanbul", "Şişli", "Mecidiyeköy", "34387", None),
    ("İstanbul", "Şişli", "Merkez", "34381", None),
    ("İstanbul", "Beşiktaş", "Levent", "34330", None),
    ("Ankara", "Çankaya", "Kızılay", "06420", None),
    ("Ankara", "Çankaya", "Bahçelievler", "06490", None),
    ("Ankara", "Keçiören", "Merkez", "06280", None),
    ("İzmir", "Karşıyaka", "Bostanlı", "35590", None),
    ("Adana", "Seyhan", "Reşatbey", "01120", None),
]


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def sample_store() -> LocationStore:
    return LocationStore(make_record(*row) for row in SAMPLE_ROWS)


@pytest.fixture
def repo_config_dir() -> Path:
    return REPO_ROOT / "config"


@pytest.fixture
def fixture_csv() -> Path:
    return REPO_ROOT / "tests" / "fixtures" / "posta_kodlari_sample.csv"


@pytest.fixture
def import_config() -> dict:
    return {
        "delimiter": ";",
        "encoding": "utf-8-sig",
        "has_header": True,
        "columns": ["il", "ilce", "semt", "mahalle", "pk"],
    }
