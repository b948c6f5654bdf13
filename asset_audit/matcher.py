"""Directory ignore-lists and exclusion-file matching.

Exclusion patterns are a prefix approximation of ``.gitignore`` syntax, not
the real thing: a pattern matches when the root-relative path, in ``/``
form, starts with it as a plain string. A leading ``/`` only anchors the
pattern to the root, which for a prefix test means it is stripped. Globs,
trailing-slash directory markers and negation are not interpreted, so
``temp`` excludes ``temp/a.png`` and ``temporary.png`` but not
``a/temp/b.png``, and ``*.png`` excludes nothing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from .utils import to_posix

logger = logging.getLogger("asset_audit")


def parse_exclusion_lines(lines: Iterable[str]) -> List[str]:
    """Build prefix patterns from exclusion-file lines.

    Blank lines, comments (``#``) and negations (``!``) are dropped.
    """
    patterns: List[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("!"):
            continue
        patterns.append(stripped.replace("\\", "/"))
    return patterns


def load_exclusion_patterns(root: Path, filename: str = ".gitignore") -> List[str]:
    """Read exclusion patterns from ``root / filename``.

    A missing or unreadable file yields an empty list.
    """
    path = Path(root) / filename
    if not path.is_file():
        logger.debug("No exclusion file at %s", path)
        return []
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable exclusion file %s: %s", path, exc)
        return []
    return parse_exclusion_lines(raw.splitlines())


class PathMatcher:
    """Evaluate ignore rules for one scan."""

    def __init__(
        self,
        ignore_names: Iterable[str] = (),
        exclusion_patterns: Sequence[str] = (),
    ) -> None:
        self.ignore_names = frozenset(ignore_names)
        self.exclusion_patterns = tuple(exclusion_patterns)

    def is_ignored_directory(self, name: str) -> bool:
        return name in self.ignore_names

    def matches_exclusion_pattern(self, relative_path: str) -> bool:
        candidate = to_posix(relative_path)
        for pattern in self.exclusion_patterns:
            if not pattern:
                continue
            if pattern.startswith("/"):
                pattern = pattern[1:]
            if candidate.startswith(pattern):
                return True
        return False
