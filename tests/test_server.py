"""Tests for the live report server"""

import threading
from urllib.parse import quote

import pytest
import requests

from asset_audit.config import AuditConfig
from asset_audit.models import RenderedReport
from asset_audit.report import generate_report, render_and_publish
from asset_audit.server import PLACEHOLDER_HTML, LiveServer, guess_content_type


@pytest.fixture
def server():
    live = LiveServer(host="127.0.0.1", port=0)
    live.start()
    yield live
    live.stop()


def _preview(server, path):
    return requests.get(f"{server.url}preview?path={quote(str(path), safe='')}", timeout=5)


class TestLifecycle:
    def test_start_is_idempotent(self, server):
        port = server.port
        server.start()
        assert server.port == port
        assert server.is_listening

    def test_stop_is_safe_twice(self):
        live = LiveServer(host="127.0.0.1", port=0)
        live.start()
        live.stop()
        live.stop()
        assert not live.is_listening


class TestIndex:
    def test_placeholder_before_first_cycle(self, server):
        resp = requests.get(server.url, timeout=5)
        assert resp.status_code == 200
        assert resp.headers["Content-Type"].startswith("text/html")
        assert resp.text == PLACEHOLDER_HTML

    def test_serves_published_report(self, server, project):
        config = AuditConfig(root=project, mode="watch")
        model = generate_report(project, config, {str(project / "a.png")})
        render_and_publish(model, config, server)
        resp = requests.get(server.url, timeout=5)
        assert resp.status_code == 200
        assert "Used count: 1" in resp.text
        assert "Unused count: 1" in resp.text

    def test_other_paths_serve_report(self, server):
        server.publish(RenderedReport(html="<p>v1</p>"))
        assert requests.get(f"{server.url}anything", timeout=5).text == "<p>v1</p>"

    def test_readers_see_whole_documents(self, server):
        documents = {f"<p>{'x' * 5000}{i}</p>" for i in range(20)}
        seen = []

        def reader():
            for _ in range(10):
                seen.append(requests.get(server.url, timeout=5).text)

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for doc in sorted(documents):
            server.publish(RenderedReport(html=doc))
        for thread in threads:
            thread.join()
        assert set(seen) <= documents | {PLACEHOLDER_HTML}


class TestPreview:
    def test_streams_png(self, server, png_file):
        resp = _preview(server, png_file)
        assert resp.status_code == 200
        assert resp.headers["Content-Type"] == "image/png"
        assert resp.content == png_file.read_bytes()

    def test_serves_any_readable_file(self, server, tmp_path):
        notes = tmp_path / "notes.txt"
        notes.write_bytes(b"not an image")
        resp = _preview(server, notes)
        assert resp.status_code == 200
        assert resp.headers["Content-Type"] == "image/x-icon"
        assert resp.content == b"not an image"

    def test_missing_file_is_404(self, server, tmp_path):
        resp = _preview(server, tmp_path / "nope.png")
        assert resp.status_code == 404
        assert resp.headers["Content-Type"].startswith("text/plain")
        assert resp.text == "Not Found"

    def test_missing_parameter_is_404(self, server):
        resp = requests.get(f"{server.url}preview", timeout=5)
        assert resp.status_code == 404

    def test_directory_is_404(self, server, tmp_path):
        assert _preview(server, tmp_path).status_code == 404

    def test_unexpected_error_is_500(self, server, png_file, monkeypatch):
        def boom(path):
            raise RuntimeError("broken")

        monkeypatch.setattr("asset_audit.server.guess_content_type", boom)
        resp = _preview(server, png_file)
        assert resp.status_code == 500
        assert resp.headers["Content-Type"].startswith("text/plain")
        assert requests.get(server.url, timeout=5).status_code == 200


class TestContentType:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("a.png", "image/png"),
            ("a.JPG", "image/jpeg"),
            ("a.jpeg", "image/jpeg"),
            ("a.gif", "image/gif"),
            ("a.svg", "image/svg+xml"),
            ("a.webp", "image/webp"),
        ],
    )
    def test_by_extension(self, name, expected):
        assert guess_content_type(f"/nowhere/{name}") == expected

    def test_unknown_extension_sniffs_signature(self, tmp_path, png_file):
        renamed = tmp_path / "logo.bin"
        renamed.write_bytes(png_file.read_bytes())
        assert guess_content_type(str(renamed)) == "image/png"

    def test_unknown_falls_back_to_icon(self, tmp_path):
        other = tmp_path / "favicon.ico2"
        other.write_bytes(b"plain text")
        assert guess_content_type(str(other)) == "image/x-icon"

    def test_missing_unknown_file_falls_back(self):
        assert guess_content_type("/nowhere/favicon.ico") == "image/x-icon"
