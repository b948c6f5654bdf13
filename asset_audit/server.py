"""Live report server used in watch mode."""

from __future__ import annotations

import logging
import os
import shutil
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlsplit

from filetype import guess

from .config import DEFAULT_HOST, DEFAULT_PORT
from .models import RenderedReport

logger = logging.getLogger("asset_audit")

PLACEHOLDER_HTML = (
    "<!doctype html><html><head><meta charset=\"utf-8\"></head>"
    "<body><p>Report not yet generated</p></body></html>"
)

CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}
FALLBACK_CONTENT_TYPE = "image/x-icon"


def guess_content_type(path: str) -> str:
    """Map an image path to a MIME type, sniffing unknown extensions."""
    ext = os.path.splitext(path)[1].lower()
    if ext in CONTENT_TYPES:
        return CONTENT_TYPES[ext]
    try:
        kind = guess(path)
    except OSError:
        kind = None
    if kind and kind.mime.startswith("image/"):
        return kind.mime
    return FALLBACK_CONTENT_TYPE


class _ReportHandler(BaseHTTPRequestHandler):
    server: "_ReportHTTPServer"

    def do_GET(self) -> None:  # noqa: N802
        try:
            url = urlsplit(self.path)
            if url.path == "/preview":
                values = parse_qs(url.query).get("path")
                target = values[0] if values else ""
                if target and os.path.isfile(target):
                    self._send_file(target)
                else:
                    self._send_text(404, "Not Found")
                return
            report = self.server.owner.current_report
            body = report.html if report is not None else PLACEHOLDER_HTML
            self._send_bytes(200, "text/html; charset=utf-8", body.encode("utf-8"))
        except (BrokenPipeError, ConnectionResetError):
            logger.debug("Client disconnected during %s", self.path)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Failed to handle request %s", self.path)
            try:
                self._send_text(500, "Server Error")
            except OSError:
                pass

    def _send_file(self, path: str) -> None:
        content_type = guess_content_type(path)
        with open(path, "rb") as handle:
            size = os.fstat(handle.fileno()).st_size
            self.send_response(200)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(size))
            self.end_headers()
            shutil.copyfileobj(handle, self.wfile)

    def _send_text(self, status: int, text: str) -> None:
        self._send_bytes(status, "text/plain; charset=utf-8", text.encode("utf-8"))

    def _send_bytes(self, status: int, content_type: str, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class _ReportHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: Tuple[str, int], owner: "LiveServer") -> None:
        self.owner = owner
        super().__init__(address, _ReportHandler)


class LiveServer:
    """Serve the most recently published report over HTTP.

    ``publish`` swaps a single reference to an immutable ``RenderedReport``;
    request handlers read that reference once, so a response is always built
    from one complete document.

    ``/preview`` streams any regular file the process can read, not only
    scanned assets. Keep the default loopback host unless that is acceptable.
    """

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self._report: Optional[RenderedReport] = None
        self._httpd: Optional[_ReportHTTPServer] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def current_report(self) -> Optional[RenderedReport]:
        return self._report

    @property
    def is_listening(self) -> bool:
        return self._httpd is not None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    def publish(self, report: RenderedReport) -> None:
        self._report = report

    def start(self) -> None:
        """Bind and serve in a background thread; repeated calls are no-ops."""
        with self._lock:
            if self._httpd is not None:
                return
            httpd = _ReportHTTPServer((self.host, self.port), self)
            self.port = httpd.server_address[1]
            self._thread = threading.Thread(
                target=httpd.serve_forever,
                name="asset-audit-server",
                daemon=True,
            )
            self._httpd = httpd
            self._thread.start()
        logger.info("Serving live report at %s", self.url)

    def stop(self) -> None:
        with self._lock:
            httpd, thread = self._httpd, self._thread
            self._httpd = None
            self._thread = None
        if httpd is None:
            return
        httpd.shutdown()
        httpd.server_close()
        if thread is not None:
            thread.join(timeout=5)
        logger.debug("Live report server stopped")
