"""Command-line entry point for the image asset audit."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, Set

from .config import (
    DEFAULT_EXTENSIONS,
    DEFAULT_HOST,
    DEFAULT_HTML_REPORT,
    DEFAULT_IGNORE_NAMES,
    DEFAULT_JSON_REPORT,
    DEFAULT_PORT,
    DEFAULT_REFRESH_INTERVAL,
    AuditConfig,
)
from .models import RenderedReport
from .report import generate_report, render_and_publish
from .server import LiveServer
from .stats import load_referenced_paths

logger = logging.getLogger("asset_audit.cli")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        type=Path,
        help="Project directory to scan (default: current directory)",
    )
    parser.add_argument(
        "--referenced",
        type=Path,
        default=None,
        help=(
            "Bundler stats JSON, JSON list of paths, or text file with one path per "
            "line naming the images the build uses"
        ),
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory where report files are written (default: <root>/dist)",
    )
    parser.add_argument(
        "--json",
        dest="emit_json",
        action="store_true",
        help="Also write the machine-readable JSON report",
    )
    parser.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        default=None,
        help=f"Image extension to include; repeatable (default: {' '.join(DEFAULT_EXTENSIONS)})",
    )
    parser.add_argument(
        "--ignore",
        dest="ignore_names",
        action="append",
        default=None,
        help=f"Directory name never descended into; repeatable (default: {' '.join(DEFAULT_IGNORE_NAMES)})",
    )
    parser.add_argument(
        "--html-name",
        default=DEFAULT_HTML_REPORT,
        help="File name of the HTML report",
    )
    parser.add_argument(
        "--json-name",
        default=DEFAULT_JSON_REPORT,
        help="File name of the JSON report",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_watch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--host", default=DEFAULT_HOST, help="Interface for the live server")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port for the live server")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_REFRESH_INTERVAL,
        help="Seconds between report cycles",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report which image files under a project are used by its build.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    report_parser = subparsers.add_parser("report", help="Scan once and write the report files")
    _add_common_arguments(report_parser)

    watch_parser = subparsers.add_parser(
        "watch", help="Rescan periodically and serve the live report over HTTP"
    )
    _add_common_arguments(watch_parser)
    _add_watch_arguments(watch_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AuditConfig:
    options = dict(
        root=args.root.resolve(),
        allowed_extensions=args.extensions or list(DEFAULT_EXTENSIONS),
        ignore_directory_names=args.ignore_names or list(DEFAULT_IGNORE_NAMES),
        mode="watch" if args.command == "watch" else "static",
        html_report_filename=args.html_name,
        json_report_filename=args.json_name,
        emit_json=args.emit_json,
    )
    if args.command == "watch":
        options.update(host=args.host, port=args.port, refresh_interval=args.interval)
    return AuditConfig(**options)


def _referenced(args: argparse.Namespace, config: AuditConfig) -> Set[str]:
    if args.referenced is None:
        return set()
    return load_referenced_paths(args.referenced, config.root, config.allowed_extensions)


def write_report(report: RenderedReport, config: AuditConfig, output_dir: Path) -> Path:
    """Persist the rendered documents and return the HTML report path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / config.html_report_filename
    html_path.write_text(report.html, encoding="utf-8")
    logger.info("Saved HTML report to %s", html_path)
    if report.json is not None:
        json_path = output_dir / config.json_report_filename
        json_path.write_text(report.json, encoding="utf-8")
        logger.info("Saved JSON report to %s", json_path)
    return html_path


def run_cycle(
    args: argparse.Namespace,
    config: AuditConfig,
    output_dir: Path,
    server: Optional[LiveServer] = None,
) -> RenderedReport:
    referenced = _referenced(args, config)
    model = generate_report(config.root, config, referenced)
    report = render_and_publish(model, config, server)
    write_report(report, config, output_dir)
    return report


def _run_watch(args: argparse.Namespace, config: AuditConfig, output_dir: Path) -> None:
    server = LiveServer(config.host, config.port)
    try:
        while True:
            started = time.perf_counter()
            try:
                run_cycle(args, config, output_dir, server)
            except (OSError, ValueError) as exc:
                logger.error("Report cycle failed: %s", exc)
            server.start()
            logger.debug("Cycle finished in %.2fs", time.perf_counter() - started)
            time.sleep(config.refresh_interval)
    except KeyboardInterrupt:
        logger.info("Stopping watch mode")
    finally:
        server.stop()


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    try:
        config = build_config(args)
    except ValueError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc
    output_dir = (args.output or config.root / "dist").resolve()

    if args.command == "watch":
        _run_watch(args, config, output_dir)
        return

    try:
        run_cycle(args, config, output_dir)
    except (OSError, ValueError) as exc:
        logger.error("Report generation failed: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
