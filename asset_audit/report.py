"""Report cycle orchestration: scan, reconcile, aggregate and render."""

from __future__ import annotations

import base64
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from .config import AuditConfig
from .matcher import load_exclusion_patterns
from .models import AssetRecord, RenderedReport, ReportModel
from .reconcile import reconcile
from .render import render_html, render_json
from .scanner import scan_images
from .utils import canonical_path, format_size

if TYPE_CHECKING:
    from .server import LiveServer

logger = logging.getLogger("asset_audit")

DEFAULT_FAVICON_URL = "https://lacorda.github.io/img/favicon.ico"
FAVICON_CANDIDATES = ("src/favicon.icon", "src/favicon.ico")


def _sorted(assets: Iterable[AssetRecord]) -> tuple:
    return tuple(sorted(assets, key=lambda a: (a.relative_path, a.absolute_path)))


def build_report(
    inventory: Sequence[AssetRecord],
    used: Sequence[AssetRecord],
    unused: Sequence[AssetRecord],
    project_name: str = "",
    favicon_href: str = "",
) -> ReportModel:
    """Aggregate counts and byte totals for a reconciled inventory."""
    totals = {
        "all": sum(a.size_bytes for a in inventory),
        "used": sum(a.size_bytes for a in used),
        "unused": sum(a.size_bytes for a in unused),
    }
    counts = {"all": len(inventory), "used": len(used), "unused": len(unused)}
    return ReportModel(
        all_assets=_sorted(inventory),
        used_assets=_sorted(used),
        unused_assets=_sorted(unused),
        totals=totals,
        counts=counts,
        project_name=project_name,
        favicon_href=favicon_href,
    )


def detect_project_name(root: Path) -> str:
    """Use the ``package.json`` name when present, else the directory name."""
    manifest = root / "package.json"
    if manifest.is_file():
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.debug("Could not read %s: %s", manifest, exc)
        else:
            name = data.get("name") if isinstance(data, dict) else None
            if isinstance(name, str) and name.strip():
                return name.strip()
    return root.name


def detect_favicon(root: Path) -> str:
    """Inline a project favicon as a data URI, or fall back to a remote one."""
    for candidate in FAVICON_CANDIDATES:
        path = root / candidate
        if not path.is_file():
            continue
        try:
            payload = base64.b64encode(path.read_bytes()).decode("ascii")
        except OSError as exc:
            logger.debug("Could not read favicon %s: %s", path, exc)
            continue
        return f"data:image/x-icon;base64,{payload}"
    return DEFAULT_FAVICON_URL


def generate_report(
    root: Path,
    config: AuditConfig,
    referenced_paths: Iterable[str],
) -> ReportModel:
    """Run one scan and reconcile it against ``referenced_paths``."""
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Project root does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Project root is not a directory: {root}")
    root = Path(canonical_path(str(root)))

    patterns = load_exclusion_patterns(root, config.exclusion_filename)
    inventory = scan_images(
        root,
        config.allowed_extensions,
        config.ignore_directory_names,
        patterns,
    )
    referenced = {canonical_path(p) for p in referenced_paths}
    split = reconcile(inventory, referenced)
    model = build_report(
        inventory,
        split.used,
        split.unused,
        project_name=detect_project_name(root),
        favicon_href=detect_favicon(root),
    )
    logger.info(
        "Scanned %s: %d images (%s), %d used (%s), %d unused (%s)",
        root,
        model.counts["all"],
        format_size(model.totals["all"]),
        model.counts["used"],
        format_size(model.totals["used"]),
        model.counts["unused"],
        format_size(model.totals["unused"]),
    )
    return model


def render_and_publish(
    model: ReportModel,
    config: AuditConfig,
    server: Optional["LiveServer"] = None,
) -> RenderedReport:
    """Render both documents and hand the HTML to a live server if given."""
    html = render_html(model, config.mode)
    json_doc = render_json(model) if config.emit_json else None
    report = RenderedReport(html=html, json=json_doc)
    if server is not None:
        server.publish(report)
    return report
