"""
Signal-driven cancellation of a scan.

SIGINT and SIGTERM set a cancellation event and abort the running scan
with ScanInterrupted, so teardown happens through normal unwinding
instead of a hard process exit.
"""

import logging
import signal
import threading
from typing import Optional

from core.exceptions import ScanInterrupted

logger = logging.getLogger(__name__)

WATCHED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class InterruptWatcher:
    """
    Context manager converting termination signals into cancellation.

    Only the first signal raises; later ones are logged so they cannot
    interrupt teardown. Handlers can only be installed from the main
    thread, elsewhere the watcher only exposes the event.
    """

    def __init__(self, event: Optional[threading.Event] = None):
        """
        Initialize interrupt watcher.

        Args:
            event: Cancellation event to set (a new one by default)
        """
        self.event = event or threading.Event()
        self._previous: dict = {}
        self._held = False

    @property
    def cancelled(self) -> bool:
        """True once a signal was received."""
        return self.event.is_set()

    def hold(self) -> None:
        """Stop raising on signals; from now on they only set the event and are logged."""
        self._held = True

    def _handle(self, signum, frame) -> None:
        name = signal.Signals(signum).name
        if self._held or self.event.is_set():
            self.event.set()
            logger.warning(f"Received {name}, cleanup in progress")
            return
        self.event.set()
        logger.warning(f"Received {name}, aborting scan")
        raise ScanInterrupted(name)

    def install(self) -> None:
        """Install signal handlers, remembering the previous ones."""
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, signal handlers not installed")
            return
        for signum in WATCHED_SIGNALS:
            self._previous[signum] = signal.signal(signum, self._handle)

    def restore(self) -> None:
        """Restore the handlers that were active before install()."""
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def __enter__(self) -> "InterruptWatcher":
        self.install()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.restore()
