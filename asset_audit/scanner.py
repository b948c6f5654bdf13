"""Filesystem walk that inventories image files under a project root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .matcher import PathMatcher
from .models import AssetRecord
from .utils import canonical_path, to_posix

logger = logging.getLogger("asset_audit")


def is_image(name: str, extensions: Iterable[str]) -> bool:
    """Return True when ``name`` carries one of the allowed extensions."""
    return os.path.splitext(name)[1].lower() in extensions


def scan_images(
    root: Union[str, Path],
    extensions: Sequence[str],
    ignore_names: Iterable[str],
    exclusion_patterns: Sequence[str],
) -> List[AssetRecord]:
    """Collect every non-ignored image file below ``root``.

    Traversal uses an explicit stack, so sibling order is not defined.
    Directories that cannot be listed and files that cannot be stat'ed are
    skipped rather than failing the scan.
    """
    root_str = os.fspath(root)
    allowed = frozenset(e.lower() for e in extensions)
    matcher = PathMatcher(ignore_names, exclusion_patterns)
    results: List[AssetRecord] = []
    stack: List[str] = [root_str]

    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            continue

        for entry in entries:
            relative = to_posix(os.path.relpath(entry.path, root_str))
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as exc:
                logger.debug("Skipping %s: %s", entry.path, exc)
                continue

            if is_dir:
                if matcher.is_ignored_directory(entry.name):
                    continue
                if matcher.matches_exclusion_pattern(relative):
                    continue
                stack.append(entry.path)
                continue

            if not is_file:
                continue
            if matcher.matches_exclusion_pattern(relative):
                continue
            if not is_image(entry.name, allowed):
                continue

            try:
                size = entry.stat().st_size
            except OSError as exc:
                logger.debug("Skipping %s: %s", entry.path, exc)
                continue

            results.append(
                AssetRecord(
                    absolute_path=canonical_path(entry.path),
                    relative_path=relative,
                    size_bytes=size,
                )
            )
    return results
