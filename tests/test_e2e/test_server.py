"""Loopback trigger listener: verbs, status codes, publication."""

from __future__ import annotations

import http.client
import os
from pathlib import Path

import pytest

from splatasset.core.asset_store import AssetStore
from splatasset.server import normalize_request_path, start_listener


@pytest.fixture
def listener():
    store = AssetStore()
    server, thread = start_listener(port=0, store=store)
    yield server, store
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


def _request(server, method: str, body: str | None = None) -> tuple[int, str]:
    host, port = server.server_address[:2]
    conn = http.client.HTTPConnection(host, port, timeout=30)
    try:
        conn.request(method, "/", body=body.encode("utf-8") if body is not None else None)
        response = conn.getresponse()
        return response.status, response.read().decode("utf-8")
    finally:
        conn.close()


class TestNormalizeRequestPath:
    def test_strips_quotes(self, tmp_path: Path):
        assert normalize_request_path(f'"{tmp_path}/a.ply"') == tmp_path / "a.ply"

    def test_relative_made_absolute(self):
        path = normalize_request_path("scans/a.ply")
        assert path.is_absolute()
        assert path == Path(os.getcwd()) / "scans" / "a.ply"


class TestListener:
    def test_post_publishes(self, listener, two_splat_ply: Path):
        server, store = listener
        status, text = _request(server, "POST", f'"{two_splat_ply.as_posix()}"')
        assert status == 200
        assert text == "OK"
        assert store.current is not None
        assert store.current.splat_count == 2

    def test_post_missing_file(self, listener, tmp_path: Path):
        server, store = listener
        status, text = _request(server, "POST", str(tmp_path / "missing.ply"))
        assert status == 400
        assert "missing.ply" in text
        assert store.current is None

    def test_post_empty_cloud_is_ok(self, listener, make_splat_ply, tmp_path: Path):
        import numpy as np

        server, store = listener
        ply = make_splat_ply(tmp_path / "empty.ply", positions=np.zeros((0, 3)))
        status, text = _request(server, "POST", str(ply))
        assert (status, text) == (200, "OK")
        assert store.current is None

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS", "FOO"])
    def test_other_verbs_rejected(self, listener, method: str):
        server, _ = listener
        status, _ = _request(server, method, "" if method in ("PUT", "DELETE", "PATCH") else None)
        assert status == 405

    def test_head_reply_has_no_body(self, listener):
        server, _ = listener
        assert _request(server, "HEAD") == (405, "")

    def test_bad_header_is_400(self, listener, tmp_path: Path):
        server, store = listener
        bad = tmp_path / "bad.ply"
        bad.write_bytes(b"ply\nformat ascii 1.0\nelement vertex 1\nend_header\n")
        status, _ = _request(server, "POST", str(bad))
        assert status == 400
        assert store.current is None
