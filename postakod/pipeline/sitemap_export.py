"""Write sitemap URL lists for the serving layer to render as XML."""

from __future__ import annotations

from pathlib import Path

from postakod.common.fs import write_json
from postakod.core.sitemap import SitemapPlan


def _json_name(sitemap_name: str) -> str:
    return sitemap_name.rsplit(".", 1)[0] + ".json"


def write_sitemap_files(plan: SitemapPlan, out_dir: Path, *, lastmod: str) -> dict:
    counts: dict[str, int] = {}
    for name, urls in plan.files.items():
        write_json(out_dir / _json_name(name), {"name": name, "lastmod": lastmod, "urls": urls})
        counts[name] = len(urls)

    index_payload = {
        "base_url": plan.base_url,
        "lastmod": lastmod,
        "sitemaps": plan.index,
    }
    write_json(out_dir / "index.json", index_payload)
    return {
        "files": len(plan.files),
        "url_counts": counts,
        "total_urls": sum(counts.values()),
        "out_dir": str(out_dir),
    }
