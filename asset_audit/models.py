"""Data models used throughout the audit pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class AssetRecord:
    """Image file discovered under the scan root."""

    absolute_path: str
    relative_path: str
    size_bytes: int


@dataclass(frozen=True)
class Reconciliation:
    """Inventory split into referenced and unreferenced assets."""

    used: Tuple[AssetRecord, ...]
    unused: Tuple[AssetRecord, ...]


@dataclass(frozen=True)
class ReportModel:
    """Canonical report consumed by both the HTML and JSON renderers."""

    all_assets: Tuple[AssetRecord, ...]
    used_assets: Tuple[AssetRecord, ...]
    unused_assets: Tuple[AssetRecord, ...]
    totals: Dict[str, int]
    counts: Dict[str, int]
    project_name: str = ""
    favicon_href: str = ""


@dataclass(frozen=True)
class RenderedReport:
    """Documents produced by one report cycle."""

    html: str
    json: Optional[str] = None
