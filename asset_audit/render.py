"""HTML and JSON rendering of a report model."""

from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import quote

from .models import AssetRecord, ReportModel
from .utils import format_size

PreviewUrlBuilder = Callable[[str], str]

WATCH_REFRESH_SECONDS = 2

_STYLE = (
    "body{font-family:system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial}"
    "table{border-collapse:collapse;width:100%}"
    "th,td{border:1px solid #ddd;padding:8px}"
    "th{background:#f7f7f7;text-align:left}"
    "tr.unused{color:green}"
    "img{max-width:64px;max-height:64px;object-fit:contain}"
)


def file_preview_url(absolute_path: str) -> str:
    """Reference an image directly on the local filesystem."""
    return Path(absolute_path).as_uri()


def server_preview_url(absolute_path: str) -> str:
    """Reference an image through the live server's preview endpoint."""
    return f"/preview?path={quote(absolute_path, safe='')}"


def preview_url_builder(mode: str) -> PreviewUrlBuilder:
    return server_preview_url if mode == "watch" else file_preview_url


def _rows(assets: Sequence[AssetRecord], status: str, preview_url: PreviewUrlBuilder) -> List[str]:
    rows = []
    for asset in assets:
        src = html.escape(preview_url(asset.absolute_path), quote=True)
        css = ' class="unused"' if status == "unused" else ""
        rows.append(
            f"<tr{css}>"
            f'<td><img src="{src}" alt="" /></td>'
            f"<td>{html.escape(asset.relative_path)}</td>"
            f"<td>{format_size(asset.size_bytes)}</td>"
            f"<td>{status}</td>"
            "</tr>"
        )
    return rows


def render_html(
    model: ReportModel,
    mode: str = "static",
    preview_url: Optional[PreviewUrlBuilder] = None,
) -> str:
    """Render the report as a standalone HTML document.

    In watch mode the page reloads itself every few seconds so the browser
    tracks whatever the live server currently publishes.
    """
    if preview_url is None:
        preview_url = preview_url_builder(mode)

    head = ['<meta charset="utf-8">']
    if mode == "watch":
        head.append(f'<meta http-equiv="refresh" content="{WATCH_REFRESH_SECONDS}">')
    if model.favicon_href:
        head.append(f'<link rel="icon" href="{html.escape(model.favicon_href, quote=True)}">')
    title = f"{model.project_name} - Image Assets" if model.project_name else "Image Assets"
    head.append(f"<title>{html.escape(title)}</title>")
    head.append(f"<style>{_STYLE}</style>")

    summary = [
        ("Total size", format_size(model.totals["all"])),
        ("Used size", format_size(model.totals["used"])),
        ("Unused size", format_size(model.totals["unused"])),
        ("Total count", str(model.counts["all"])),
        ("Used count", str(model.counts["used"])),
        ("Unused count", str(model.counts["unused"])),
    ]
    summary_items = "".join(f"<li>{label}: {value}</li>" for label, value in summary)

    rows = _rows(model.used_assets, "used", preview_url)
    rows.extend(_rows(model.unused_assets, "unused", preview_url))

    return (
        "<!doctype html><html><head>"
        + "".join(head)
        + "</head><body><h1>Image Asset Report</h1>"
        + f'<ul id="summary">{summary_items}</ul>'
        + "<table><thead><tr><th>Preview</th><th>Path</th><th>Size</th><th>Status</th></tr></thead>"
        + "<tbody>"
        + "".join(rows)
        + "</tbody></table></body></html>"
    )


def _entries(assets: Sequence[AssetRecord]) -> List[Dict[str, object]]:
    return [{"path": asset.relative_path, "size": asset.size_bytes} for asset in assets]


def report_to_dict(model: ReportModel) -> Dict[str, object]:
    """Return the machine-readable report structure."""
    return {
        "allImages": _entries(model.all_assets),
        "usedImages": _entries(model.used_assets),
        "unusedImages": _entries(model.unused_assets),
        "totals": dict(model.totals),
        "counts": dict(model.counts),
    }


def render_json(model: ReportModel) -> str:
    return json.dumps(report_to_dict(model), indent=2, ensure_ascii=False)
