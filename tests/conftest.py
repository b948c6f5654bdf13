"""Pytest configuration and fixtures"""

import io
from pathlib import Path

import pytest
from PIL import Image

from asset_audit.config import AuditConfig


def write_bytes(path: Path, size: int) -> Path:
    """Create ``path`` (and parents) holding exactly ``size`` bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    return path


def png_bytes(width: int = 4, height: int = 4) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def project(tmp_path):
    """Project root with a referenced and an unreferenced image."""
    root = tmp_path / "project"
    write_bytes(root / "a.png", 1024)
    write_bytes(root / "b.jpg", 2048)
    return root


@pytest.fixture
def config(project):
    return AuditConfig(root=project)


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "preview" / "logo.png"
    path.parent.mkdir(parents=True)
    path.write_bytes(png_bytes())
    return path
