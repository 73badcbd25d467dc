"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from postakod.common.errors import ConfigError

IMPORT_COLUMNS = ("il", "ilce", "semt", "mahalle", "pk")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_int(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{ctx} must be a positive integer")


def validate_directory_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"data", "import", "search", "sitemap", "related"}
    _assert_required_keys(cfg, top_required, "directory config")
    _assert_no_unknown_keys(cfg, top_required, "directory config", allow_unknown)

    _assert_required_keys(cfg["data"], {"store_filename", "search_log_filename", "sitemap_dir"}, "data")
    _assert_required_keys(cfg["import"], {"delimiter", "encoding", "has_header", "columns"}, "import")
    _assert_required_keys(cfg["search"], {"default_limit"}, "search")
    _assert_required_keys(
        cfg["sitemap"],
        {"base_url", "shard_count", "max_urls_per_file", "static_pages"},
        "sitemap",
    )
    _assert_required_keys(cfg["related"], {"similar_limit"}, "related")

    delimiter = cfg["import"]["delimiter"]
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        raise ConfigError("import.delimiter must be a single character")

    columns = cfg["import"]["columns"]
    if not isinstance(columns, list) or sorted(columns) != sorted(IMPORT_COLUMNS):
        raise ConfigError(f"import.columns must list exactly: {', '.join(IMPORT_COLUMNS)}")

    _assert_positive_int(cfg["search"]["default_limit"], "search.default_limit")
    _assert_positive_int(cfg["sitemap"]["shard_count"], "sitemap.shard_count")
    _assert_positive_int(cfg["sitemap"]["max_urls_per_file"], "sitemap.max_urls_per_file")
    _assert_positive_int(cfg["related"]["similar_limit"], "related.similar_limit")

    if not isinstance(cfg["sitemap"]["static_pages"], list):
        raise ConfigError("sitemap.static_pages must be a list")

    return cfg
