"""Configuration objects and constants for the asset audit."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_EXTENSIONS = [".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"]
DEFAULT_IGNORE_NAMES = ["node_modules", ".git", "dist"]
DEFAULT_HTML_REPORT = "assets-report.html"
DEFAULT_JSON_REPORT = "asset-report.json"
DEFAULT_EXCLUSION_FILE = ".gitignore"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8099
DEFAULT_REFRESH_INTERVAL = 2.0

REPORT_MODES = ("static", "watch")


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and make sure it carries a leading dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return ext


@dataclass
class AuditConfig:
    """Top-level settings that control scanning and report generation."""

    root: Path
    allowed_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    ignore_directory_names: List[str] = field(
        default_factory=lambda: list(DEFAULT_IGNORE_NAMES)
    )
    mode: str = "static"
    html_report_filename: str = DEFAULT_HTML_REPORT
    json_report_filename: str = DEFAULT_JSON_REPORT
    emit_json: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    exclusion_filename: str = DEFAULT_EXCLUSION_FILE
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        extensions = [normalize_extension(e) for e in self.allowed_extensions or []]
        self.allowed_extensions = [e for e in extensions if e] or list(DEFAULT_EXTENSIONS)
        self.ignore_directory_names = list(self.ignore_directory_names or DEFAULT_IGNORE_NAMES)
        if self.mode not in REPORT_MODES:
            raise ValueError(
                f"Unknown report mode {self.mode!r}; expected one of {', '.join(REPORT_MODES)}"
            )
