"""Loopback HTTP trigger: POST a PLY path, get it transcoded and published.

Usage:
    splatasset serve --port 8080
    curl -X POST --data '"C:/scans/room.ply"' http://127.0.0.1:8080/
"""

from __future__ import annotations

import logging
import os
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional

from splatasset.core.asset_store import AssetStore
from splatasset.core.contracts import EncodingFormats, PipelineConfig
from splatasset.core.errors import TranscodeError
from splatasset.core.pipeline_runner import default_pipeline_config, transcode

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def normalize_request_path(body: str) -> Path:
    """Strip quotes, use the platform separator, and make the path absolute."""
    text = body.strip().replace('"', "").replace("/", os.sep)
    return Path(os.path.abspath(text))


class TranscodeRequestHandler(BaseHTTPRequestHandler):
    server: TranscodeServer

    def do_POST(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length).decode("utf-8", errors="replace")
        source_path = normalize_request_path(body)
        logger.info(f"Transcode request: {source_path}")

        try:
            asset = transcode(source_path, formats=self.server.formats, pipeline_cfg=self.server.pipeline_cfg)
        except TranscodeError as e:
            logger.error(f"Transcode of {source_path} failed: {e}")
            self._reply(HTTPStatus.BAD_REQUEST, str(e))
            return
        except Exception as e:
            logger.exception(f"Unexpected failure transcoding {source_path}")
            self._reply(HTTPStatus.INTERNAL_SERVER_ERROR, str(e))
            return

        if asset is not None:
            self.server.store.publish(asset)
        self._reply(HTTPStatus.OK, "OK")

    def _method_not_allowed(self) -> None:
        self._reply(HTTPStatus.METHOD_NOT_ALLOWED, HTTPStatus.METHOD_NOT_ALLOWED.phrase)

    def __getattr__(self, name: str):
        # any verb but POST
        if name.startswith("do_"):
            return self._method_not_allowed
        raise AttributeError(name)

    def _reply(self, status: HTTPStatus, text: str) -> None:
        payload = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(payload)

    def log_message(self, format: str, *args) -> None:
        logger.debug(f"{self.address_string()} {format % args}")


class TranscodeServer(ThreadingHTTPServer):
    """Threaded listener; requests share only the asset store."""

    daemon_threads = True

    def __init__(
        self,
        address: tuple[str, int],
        store: Optional[AssetStore] = None,
        formats: Optional[EncodingFormats] = None,
        pipeline_cfg: Optional[PipelineConfig] = None,
    ):
        super().__init__(address, TranscodeRequestHandler)
        self.store = store or AssetStore()
        self.formats = formats
        self.pipeline_cfg = pipeline_cfg or default_pipeline_config()


def serve(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    store: Optional[AssetStore] = None,
    formats: Optional[EncodingFormats] = None,
    pipeline_cfg: Optional[PipelineConfig] = None,
) -> None:
    """Serve until interrupted. A bind failure is logged and ends the listener."""
    try:
        server = TranscodeServer((host, port), store, formats, pipeline_cfg)
    except OSError as e:
        logger.error(f"Cannot listen on {host}:{port}: {e}")
        return

    logger.info(f"Listening on http://{host}:{server.server_address[1]}/")
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Listener stopped")


def start_listener(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    store: Optional[AssetStore] = None,
    formats: Optional[EncodingFormats] = None,
    pipeline_cfg: Optional[PipelineConfig] = None,
) -> tuple[TranscodeServer, threading.Thread]:
    """Start the listener on a daemon thread. Call server.shutdown() to stop it."""
    server = TranscodeServer((host, port), store, formats, pipeline_cfg)
    thread = threading.Thread(target=server.serve_forever, name="listener", daemon=True)
    thread.start()
    logger.info(f"Listening on http://{host}:{server.server_address[1]}/")
    return server, thread
