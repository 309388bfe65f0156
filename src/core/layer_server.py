"""
HTTP server exposing the workspace so Clair can pull layer archives.

Clair fetches every submitted layer from the URL it is given, so the
server must be accepting connections before the first submission.
"""

import logging
import threading
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional

from constants import LAYER_SERVER_PORT, SERVER_SHUTDOWN_TIMEOUT

logger = logging.getLogger(__name__)


class LayerRequestHandler(SimpleHTTPRequestHandler):
    """Serves workspace files over GET and logs through the module logger."""

    def log_message(self, format, *args):
        logger.debug(f"Layer server: {self.address_string()} - {format % args}")


class LayerServer:
    """
    Background HTTP file server rooted at the workspace directory.

    The listening socket is bound in start(), so the server accepts
    connections as soon as start() returns.
    """

    def __init__(self, directory: Path, port: int = LAYER_SERVER_PORT, host: str = ""):
        """
        Initialize layer server.

        Args:
            directory: Directory whose files are served (the workspace)
            port: TCP port to listen on (0 picks a free port)
            host: Interface to bind (all interfaces by default)
        """
        self.directory = Path(directory)
        self.host = host
        self.requested_port = port
        self._httpd: Optional[ThreadingHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        """Port the server is bound to."""
        if self._httpd is None:
            return self.requested_port
        return self._httpd.server_address[1]

    @property
    def running(self) -> bool:
        """True between start() and stop()."""
        return self._httpd is not None

    def start(self) -> "LayerServer":
        """
        Bind the listener and serve requests on a daemon thread.

        Returns:
            The started server

        Raises:
            OSError: If the port cannot be bound
        """
        if self._httpd is not None:
            return self

        handler = partial(LayerRequestHandler, directory=str(self.directory))
        self._httpd = ThreadingHTTPServer((self.host, self.requested_port), handler)
        self._httpd.daemon_threads = True

        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name="layer-server",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Serving image layers on port {self.port}")
        return self

    def stop(self) -> None:
        """Shut the listener down. Safe to call more than once."""
        if self._httpd is None:
            return

        httpd, self._httpd = self._httpd, None
        httpd.shutdown()
        httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=SERVER_SHUTDOWN_TIMEOUT)
            self._thread = None
        logger.debug("Layer server stopped")

    def layer_url(self, scanner_ip: str, archive_path: str) -> str:
        """
        Build the URL Clair uses to fetch a layer archive.

        Args:
            scanner_ip: Address of this host as seen from Clair
            archive_path: Archive path relative to the workspace

        Returns:
            Absolute HTTP URL of the archive
        """
        return f"http://{scanner_ip}:{self.port}/{archive_path.lstrip('/')}"

    def __enter__(self) -> "LayerServer":
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()
