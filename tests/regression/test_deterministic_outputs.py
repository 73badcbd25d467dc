import json
from pathlib import Path

import pytest

from postakod.cli import parse_args, run_command

REPO_ROOT = Path(__file__).resolve().parents[2]
FIXTURE_CSV = REPO_ROOT / "tests" / "fixtures" / "posta_kodlari_sample.csv"


def _run_once(data_dir: Path, run_id: str) -> None:
    common = [
        "--config-dir",
        str(REPO_ROOT / "config"),
        "--data-dir",
        str(data_dir),
        "--run-date",
        "2026-02-17",
        "--run-id",
        run_id,
    ]
    run_command(parse_args(["import", "--source", str(FIXTURE_CSV), *common]))
    assert run_command(parse_args(["sitemap", *common])) == 0


@pytest.mark.regression
def test_store_and_sitemaps_are_byte_stable_for_same_inputs(tmp_path: Path):
    first = tmp_path / "first"
    second = tmp_path / "second"

    _run_once(first, "run-a")
    _run_once(second, "run-b")

    assert (first / "out" / "postal_codes.csv").read_bytes() == (second / "out" / "postal_codes.csv").read_bytes()
    first_sitemaps = sorted(p.name for p in (first / "out" / "sitemaps").iterdir())
    assert first_sitemaps == sorted(p.name for p in (second / "out" / "sitemaps").iterdir())
    for name in first_sitemaps:
        assert (first / "out" / "sitemaps" / name).read_bytes() == (second / "out" / "sitemaps" / name).read_bytes()


@pytest.mark.regression
def test_skip_report_is_stable(tmp_path: Path):
    reports = []
    for run_id in ("run-a", "run-b"):
        data_dir = tmp_path / run_id
        _run_once(data_dir, run_id)
        report = json.loads((data_dir / "out" / "reports" / "import_report.json").read_text(encoding="utf-8"))
        reports.append((report["skipped"], report["skipped_samples"]))
    assert reports[0] == reports[1]
