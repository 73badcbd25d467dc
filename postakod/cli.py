"""CLI entrypoint for the Turkish postal-code directory."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

from postakod.common.config_loader import load_config
from postakod.common.constants import (
    COMMANDS,
    EXIT_HARD_FAIL,
    EXIT_NOT_FOUND,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
)
from postakod.common.errors import DirectoryError, InvalidInputError
from postakod.common.ids import generate_run_id
from postakod.common.logging import build_logger, close_logger, log_event
from postakod.common.models import Found, to_plain
from postakod.common.time_utils import parse_run_date
from postakod.core.related import neighboring_districts, sibling_neighborhoods, similarly_named_neighborhoods
from postakod.core.resolver import (
    find_district,
    find_province,
    get_locations_for_postal_code,
    get_neighborhood_detail,
    list_districts,
    list_neighborhoods,
    list_provinces,
)
from postakod.core.search import search
from postakod.core.sitemap import build_sitemap_plan
from postakod.core.store import LocationStore
from postakod.pipeline.fix_slugs import run_fix_slugs
from postakod.pipeline.import_csv import run_import
from postakod.pipeline.search_log import log_search, popular_searches, total_searches
from postakod.pipeline.sitemap_export import write_sitemap_files
from postakod.pipeline.stats import directory_stats


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--run-date", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--source", default=None, help="import: local path or http(s) URL")
    parser.add_argument("--dry-run", action="store_true", help="fix-slugs: report only")
    parser.add_argument("--province", default=None)
    parser.add_argument("--district", default=None)
    parser.add_argument("--neighborhood", default=None)
    parser.add_argument("--code", default=None, help="postal-code: 5-digit code")
    parser.add_argument("--query", default=None, help="search: free text or postal-code prefix")
    parser.add_argument("--limit", type=int, default=None)
    return parser.parse_args(argv)


def _require(args: argparse.Namespace, *names: str) -> None:
    missing = [f"--{name.replace('_', '-')}" for name in names if not getattr(args, name)]
    if missing:
        raise InvalidInputError(f"{args.command} requires {', '.join(missing)}")


def _emit(payload) -> None:
    print(json.dumps(to_plain(payload), ensure_ascii=False, indent=2))


class CommandContext:
    def __init__(self, args: argparse.Namespace, cfg: dict, data_dir: Path, run_id: str, run_date: str) -> None:
        self.args = args
        self.cfg = cfg
        self.data_dir = data_dir
        self.run_id = run_id
        self.run_date = run_date
        self._store: LocationStore | None = None

    @property
    def store_path(self) -> Path:
        return self.data_dir / "out" / self.cfg["data"]["store_filename"]

    @property
    def search_log_path(self) -> Path:
        return self.data_dir / "state" / self.cfg["data"]["search_log_filename"]

    @property
    def store(self) -> LocationStore:
        if self._store is None:
            self._store = LocationStore.from_csv(self.store_path)
        return self._store


def _run_import(ctx: CommandContext) -> tuple[int, dict]:
    _require(ctx.args, "source")
    report = run_import(
        ctx.args.source,
        ctx.cfg["import"],
        ctx.data_dir,
        ctx.cfg["data"]["store_filename"],
        ctx.run_id,
    )
    return (EXIT_PARTIAL if report["skipped"] else EXIT_SUCCESS), report


def _run_fix_slugs(ctx: CommandContext) -> tuple[int, dict]:
    report = run_fix_slugs(ctx.data_dir, ctx.cfg["data"]["store_filename"], ctx.run_id, dry_run=ctx.args.dry_run)
    pending = report["groups_unrepairable"] or (ctx.args.dry_run and report["groups_drifted"])
    return (EXIT_PARTIAL if pending else EXIT_SUCCESS), report


def _run_districts(ctx: CommandContext) -> tuple[int, object]:
    _require(ctx.args, "province")
    province = find_province(ctx.store, ctx.args.province)
    if not isinstance(province, Found):
        return EXIT_NOT_FOUND, province
    return EXIT_SUCCESS, {
        "province": province.value,
        "districts": list_districts(ctx.store, ctx.args.province),
    }


def _run_neighborhoods(ctx: CommandContext) -> tuple[int, object]:
    _require(ctx.args, "province", "district")
    district = find_district(ctx.store, ctx.args.province, ctx.args.district)
    if not isinstance(district, Found):
        return EXIT_NOT_FOUND, district
    return EXIT_SUCCESS, {
        "district": district.value,
        "neighborhoods": list_neighborhoods(ctx.store, ctx.args.province, ctx.args.district),
    }


def _run_detail(ctx: CommandContext) -> tuple[int, object]:
    args = ctx.args
    _require(args, "province", "district", "neighborhood")
    detail = get_neighborhood_detail(ctx.store, args.province, args.district, args.neighborhood)
    if not isinstance(detail, Found):
        return EXIT_NOT_FOUND, detail
    return EXIT_SUCCESS, {
        "detail": detail.value,
        "siblings": sibling_neighborhoods(ctx.store, args.province, args.district, args.neighborhood),
    }


def _run_postal_code(ctx: CommandContext) -> tuple[int, object]:
    _require(ctx.args, "code")
    locations = get_locations_for_postal_code(ctx.store, ctx.args.code)
    exit_code = EXIT_SUCCESS if locations else EXIT_NOT_FOUND
    return exit_code, {"postal_code": ctx.args.code, "locations": locations}


def _run_search(ctx: CommandContext, logger) -> tuple[int, object]:
    _require(ctx.args, "query")
    query = ctx.args.query.strip()
    limit = ctx.cfg["search"]["default_limit"] if ctx.args.limit is None else ctx.args.limit
    results = search(ctx.store, query, limit)
    if query:
        log_search(ctx.search_log_path, query, len(results))
        log_event(
            logger,
            "search",
            run_id=ctx.run_id,
            command="search",
            event="SEARCH",
            status="ok",
            query=query,
            results_count=len(results),
        )
    return EXIT_SUCCESS, {"query": query, "count": len(results), "results": results}


def _run_related(ctx: CommandContext) -> tuple[int, object]:
    args = ctx.args
    _require(args, "province", "district")
    district = find_district(ctx.store, args.province, args.district)
    if not isinstance(district, Found):
        return EXIT_NOT_FOUND, district

    payload: dict[str, object] = {
        "district": district.value,
        "neighboring_districts": neighboring_districts(ctx.store, args.province, args.district),
    }
    if args.neighborhood:
        detail = get_neighborhood_detail(ctx.store, args.province, args.district, args.neighborhood)
        if not isinstance(detail, Found):
            return EXIT_NOT_FOUND, detail
        payload["siblings"] = sibling_neighborhoods(ctx.store, args.province, args.district, args.neighborhood)
        payload["similarly_named"] = similarly_named_neighborhoods(
            ctx.store,
            detail.value.neighborhood,
            args.province,
            args.district,
            limit=ctx.cfg["related"]["similar_limit"],
        )
    return EXIT_SUCCESS, payload


def _run_sitemap(ctx: CommandContext) -> tuple[int, dict]:
    sitemap_cfg = ctx.cfg["sitemap"]
    plan = build_sitemap_plan(
        ctx.store,
        base_url=sitemap_cfg["base_url"],
        shard_count=sitemap_cfg["shard_count"],
        static_pages=sitemap_cfg["static_pages"],
        max_urls=sitemap_cfg["max_urls_per_file"],
    )
    out_dir = ctx.data_dir / "out" / ctx.cfg["data"]["sitemap_dir"]
    return EXIT_SUCCESS, write_sitemap_files(plan, out_dir, lastmod=ctx.run_date)


def _run_stats(ctx: CommandContext) -> tuple[int, dict]:
    stats = directory_stats(ctx.store)
    stats["total_searches"] = total_searches(ctx.search_log_path)
    return EXIT_SUCCESS, stats


def execute_command(ctx: CommandContext, logger) -> tuple[int, object]:
    command = ctx.args.command
    if command == "import":
        return _run_import(ctx)
    if command == "fix-slugs":
        return _run_fix_slugs(ctx)
    if command == "provinces":
        return EXIT_SUCCESS, list_provinces(ctx.store)
    if command == "districts":
        return _run_districts(ctx)
    if command == "neighborhoods":
        return _run_neighborhoods(ctx)
    if command == "detail":
        return _run_detail(ctx)
    if command == "postal-code":
        return _run_postal_code(ctx)
    if command == "search":
        return _run_search(ctx, logger)
    if command == "related":
        return _run_related(ctx)
    if command == "sitemap":
        return _run_sitemap(ctx)
    if command == "stats":
        return _run_stats(ctx)
    if command == "popular":
        limit = 10 if ctx.args.limit is None else ctx.args.limit
        return EXIT_SUCCESS, popular_searches(ctx.search_log_path, limit)
    raise ValueError(f"Unknown command: {command}")


def _log_failure(logger, args: argparse.Namespace, run_id: str, started: float, message: str, error_code: str) -> None:
    log_event(
        logger,
        message,
        run_id=run_id,
        command=args.command,
        event="COMMAND_FAIL",
        status="error",
        error_code=error_code,
        duration_ms=int((time.monotonic() - started) * 1000),
    )


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    started = time.monotonic()
    try:
        try:
            run_date = parse_run_date(args.run_date)
            cfg = load_config(config_dir, overlay_config_dir=overlay_config_dir)
            ctx = CommandContext(args, cfg, data_dir, run_id, run_date)
            log_event(logger, "command start", run_id=run_id, command=args.command, event="COMMAND_START", status="ok")
            exit_code, payload = execute_command(ctx, logger)
        except DirectoryError as exc:
            _log_failure(logger, args, run_id, started, f"command failed: {exc}", exc.error_code)
            return EXIT_HARD_FAIL
        except Exception as exc:
            _log_failure(logger, args, run_id, started, f"unexpected failure: {exc!r}", "UNEXPECTED_ERROR")
            return EXIT_HARD_FAIL

        _emit(payload)
        log_event(
            logger,
            "command end",
            run_id=run_id,
            command=args.command,
            event="COMMAND_END",
            status="ok" if exit_code == EXIT_SUCCESS else "partial",
            rows_in=payload.get("rows_in") if isinstance(payload, dict) else None,
            rows_out=payload.get("rows_out") if isinstance(payload, dict) else None,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return exit_code
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except DirectoryError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
