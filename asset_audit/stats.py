"""Referenced-path collection from bundler output.

The audit only needs the set of image files a build pulled in. A webpack
style stats document (``webpack --json``) lists them two ways: as module
resources and as emitted assets whose ``info.sourceFilename`` names the
source image. Plain JSON lists and newline-separated text files are also
accepted for hosts that compute the set themselves.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Set, Union

from .config import DEFAULT_EXTENSIONS
from .scanner import is_image
from .utils import canonical_path

logger = logging.getLogger("asset_audit")

_MODULE_KEYS = ("resource", "nameForCondition", "request", "identifier", "name")


def _module_resource(module: Any) -> Optional[str]:
    if not isinstance(module, dict):
        return None
    for key in _MODULE_KEYS:
        value = module.get(key)
        if isinstance(value, str) and value:
            # identifiers look like "asset/inline|/path" or "loader!/path?query"
            value = value.rsplit("|", 1)[-1]
            return value.rsplit("!", 1)[-1].split("?", 1)[0]
    return None


def _iter_modules(modules: Iterable[Any]) -> Iterator[Any]:
    for module in modules:
        yield module
        if isinstance(module, dict) and isinstance(module.get("modules"), list):
            yield from _iter_modules(module["modules"])


def _resolve(path: str, base_dir: Path) -> str:
    return canonical_path(os.path.join(os.fspath(base_dir), path))


def collect_referenced_paths(
    stats: Any,
    base_dir: Union[str, Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Set[str]:
    """Extract canonical image paths from a stats object or a list of paths."""
    base = Path(base_dir)
    allowed = frozenset(e.lower() for e in extensions)
    used: Set[str] = set()

    if isinstance(stats, list):
        for item in stats:
            if isinstance(item, str) and item.strip():
                used.add(_resolve(item.strip(), base))
        return used

    if not isinstance(stats, dict):
        raise ValueError("Stats document must be a JSON object or list of paths")

    for module in _iter_modules(stats.get("modules") or []):
        resource = _module_resource(module)
        if resource and is_image(resource, allowed):
            used.add(_resolve(resource, base))

    for asset in stats.get("assets") or []:
        info = asset.get("info") if isinstance(asset, dict) else None
        source = info.get("sourceFilename") if isinstance(info, dict) else None
        if isinstance(source, str) and is_image(source, allowed):
            used.add(_resolve(source, base))

    logger.debug("Collected %d referenced image(s) from stats", len(used))
    return used


def load_referenced_paths(
    path: Union[str, Path],
    base_dir: Union[str, Path],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> Set[str]:
    """Read referenced paths from a ``.json`` stats/list file or a text file."""
    source = Path(path)
    text = source.read_text(encoding="utf-8")
    if source.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise ValueError(f"Invalid JSON in {source}: {exc}") from exc
        return collect_referenced_paths(data, base_dir, extensions)
    lines: List[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            lines.append(stripped)
    return collect_referenced_paths(lines, base_dir, extensions)
