"""Utility helpers for path handling and size formatting."""

from __future__ import annotations

import os


def to_posix(path: str) -> str:
    """Return ``path`` with ``/`` separators regardless of host convention."""
    if os.sep == "/":
        return path
    return path.replace(os.sep, "/")


def canonical_path(path: str) -> str:
    """Resolve ``path`` into the absolute form used for set membership."""
    return os.path.realpath(os.path.abspath(path))


def format_size(size: int) -> str:
    """Format a byte count as KB below 1024 KB and MB above."""
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.2f} KB"
    return f"{kb / 1024:.2f} MB"
