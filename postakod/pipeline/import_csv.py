"""Batch import of the delimited postal-code source file into the store."""

from __future__ import annotations

import csv
import io
from collections import defaultdict
from pathlib import Path

from postakod.common.errors import InvalidInputError, StageError
from postakod.common.fs import write_json
from postakod.common.http import HttpClient
from postakod.common.models import LocationRecord
from postakod.common.postal_code import normalise_postal_code
from postakod.core.slug import slug_for_name
from postakod.core.store import write_store

REQUIRED_COLUMNS = ("il", "ilce", "mahalle", "pk")


def _is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def read_source_text(source: str, *, encoding: str, http_client: HttpClient | None = None) -> str:
    if _is_remote(source):
        if http_client is not None:
            return http_client.get_text(source, encoding=encoding)
        with HttpClient() as client:
            return client.get_text(source, encoding=encoding)

    path = Path(source)
    if not path.exists():
        raise StageError(f"Missing import source: {path}")
    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        raise StageError(f"Import source {path} is not valid {encoding}") from exc


def _row_values(row: list[str], columns: list[str]) -> dict[str, str]:
    values = {name: "" for name in columns}
    for name, value in zip(columns, row):
        values[name] = value.strip()
    return values


def parse_rows(text: str, import_config: dict) -> list[tuple[int, dict[str, str]]]:
    """Return (source line number, column values) for every non-blank data row."""
    reader = csv.reader(io.StringIO(text), delimiter=import_config["delimiter"])
    columns = list(import_config["columns"])
    header_pending = bool(import_config["has_header"])
    out: list[tuple[int, dict[str, str]]] = []
    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        if header_pending:
            header_pending = False
            continue
        out.append((reader.line_num, _row_values(row, columns)))
    return out


def build_record(values: dict[str, str]) -> LocationRecord:
    postal_code = normalise_postal_code(values["pk"])
    if postal_code is None:
        raise InvalidInputError(f"Invalid postal code: {values['pk']!r}")
    return LocationRecord(
        province=values["il"],
        district=values["ilce"],
        subarea=values.get("semt") or None,
        neighborhood=values["mahalle"],
        postal_code=postal_code,
        province_slug=slug_for_name(values["il"]),
        district_slug=slug_for_name(values["ilce"]),
        neighborhood_slug=slug_for_name(values["mahalle"]),
    )


def run_import(
    source: str,
    import_config: dict,
    data_dir: Path,
    store_filename: str,
    run_id: str,
    *,
    http_client: HttpClient | None = None,
) -> dict:
    text = read_source_text(source, encoding=import_config["encoding"], http_client=http_client)
    rows = parse_rows(text, import_config)

    skipped: dict[str, int] = defaultdict(int)
    skipped_samples: list[dict] = []
    records: list[LocationRecord] = []
    seen_keys: set[tuple[str, str, str, str]] = set()

    for line_no, values in rows:
        reason = None
        if any(not values.get(name) for name in REQUIRED_COLUMNS):
            reason = "missing_data"
        elif normalise_postal_code(values["pk"]) is None:
            reason = "invalid_postal_code"
        else:
            try:
                record = build_record(values)
            except InvalidInputError:
                reason = "invalid_name"
            else:
                if record.key in seen_keys:
                    reason = "duplicate"
                else:
                    seen_keys.add(record.key)
                    records.append(record)

        if reason is not None:
            skipped[reason] += 1
            if len(skipped_samples) < 50:
                skipped_samples.append({"line": line_no, "reason": reason, "values": values})

    if rows and not records:
        raise StageError(f"No valid rows in import source: {source}")

    store_path = write_store(data_dir / "out" / store_filename, records)

    payload = {
        "run_id": run_id,
        "source": source,
        "rows_in": len(rows),
        "rows_out": len(records),
        "skipped": dict(sorted(skipped.items())),
        "skipped_samples": skipped_samples,
        "store_path": str(store_path),
    }
    write_json(data_dir / "out" / "reports" / "import_report.json", payload)
    return payload
