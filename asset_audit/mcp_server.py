"""MCP server exposing a single asset audit cycle."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from mcp.server.fastmcp import FastMCP

from .config import AuditConfig
from .render import render_json
from .report import generate_report
from .stats import collect_referenced_paths

logger = logging.getLogger("asset_audit.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="asset-audit")


@mcp.tool()
def audit_assets(
    root: str,
    referenced_paths: Optional[List[str]] = None,
    extensions: Optional[List[str]] = None,
) -> str:
    """Scan a project for image files and report which are used, as JSON.

    ``referenced_paths`` are the images the build uses, absolute or relative
    to ``root``.
    """

    source = Path(root).expanduser()
    config = AuditConfig(root=source, allowed_extensions=extensions or [])
    referenced = collect_referenced_paths(
        referenced_paths or [], source, config.allowed_extensions
    )
    model = generate_report(source, config, referenced)
    return render_json(model)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
