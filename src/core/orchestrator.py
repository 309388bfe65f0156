"""
Orchestrates the scan workflow for Clair Scanner.

Sequence: create workspace, export the image, serve its layers, submit
them to Clair, fetch the vulnerabilities of the top layer and approve
them against the whitelist. Any failure skips straight to teardown.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from core.approval import decide
from core.cancellation import InterruptWatcher
from core.config import ScanConfig
from core.exceptions import ImageExportException, LayerServerException, ScanInterrupted
from core.layer_server import LayerServer
from core.models import ImageLayer, ScanResult
from core.workspace import Workspace
from integrations.clair_api import ClairClient
from utils.docker_utils import DockerClient
from utils.logging_helpers import log_info_header

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    """Steps of a scan, in the only order they can happen."""

    INIT = "init"
    WORKSPACE_READY = "workspace_ready"
    IMAGE_SAVED = "image_saved"
    LAYERS_RESOLVED = "layers_resolved"
    SERVER_LISTENING = "server_listening"
    LAYERS_SUBMITTED = "layers_submitted"
    VULNERABILITIES_FETCHED = "vulnerabilities_fetched"
    DECIDED = "decided"
    TORN_DOWN = "torn_down"


class ScanOrchestrator:
    """
    Runs one scan from workspace creation to teardown.

    Collaborators are created from the configuration unless injected.
    """

    def __init__(
        self,
        config: ScanConfig,
        image_source: Optional[DockerClient] = None,
        analyzer: Optional[ClairClient] = None,
        workspace_factory: Callable[[], Workspace] = Workspace,
        server_factory: Callable[..., LayerServer] = LayerServer,
        cancel_event: Optional[threading.Event] = None,
        handle_signals: bool = True,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Scan configuration
            image_source: Exports the image and lists its layers (DockerClient by default)
            analyzer: Clair client (built from config by default)
            workspace_factory: Creates the run's workspace
            server_factory: Creates the layer server from (directory, port)
            cancel_event: Event that cancels the run when set
            handle_signals: Whether to turn SIGINT/SIGTERM into cancellation
        """
        self.config = config
        self.image_source = image_source
        self.analyzer = analyzer or ClairClient(config.clair_url, timeout=config.timeout)
        self.workspace_factory = workspace_factory
        self.server_factory = server_factory
        self.cancel_event = cancel_event or threading.Event()
        self.handle_signals = handle_signals
        self._watcher: Optional[InterruptWatcher] = None
        self.state = ScanState.INIT
        self.history: list[ScanState] = [ScanState.INIT]

    def run(self) -> ScanResult:
        """
        Execute the scan.

        Returns:
            ScanResult with findings and approval decision

        Raises:
            ScannerException: On any fatal error or interruption, after teardown
        """
        self.config.validate()
        log_info_header(f"Scanning {self.config.image}", logger=logger)

        if not self.handle_signals:
            return self._run_scan()

        with InterruptWatcher(self.cancel_event) as watcher:
            self._watcher = watcher
            try:
                return self._run_scan()
            finally:
                self._watcher = None

    def _advance(self, state: ScanState) -> None:
        """Move to the next state unless the run was cancelled."""
        if self.cancel_event.is_set():
            raise ScanInterrupted()
        logger.debug(f"Scan state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _run_scan(self) -> ScanResult:
        workspace = self.workspace_factory()
        server = None
        try:
            workspace.create()
            self._advance(ScanState.WORKSPACE_READY)

            image_source = self._get_image_source()
            archive = image_source.save_image(self.config.image, workspace.path)
            self._advance(ScanState.IMAGE_SAVED)

            image_source.extract_archive(self.config.image, archive, workspace.path)
            layers = image_source.get_image_layers(self.config.image, workspace.path)
            self._advance(ScanState.LAYERS_RESOLVED)

            server = self._start_server(workspace)
            self._advance(ScanState.SERVER_LISTENING)

            self.analyzer.analyze_layers(
                layers,
                url_for=lambda layer: self._layer_url(server, layer),
                cancel_event=self.cancel_event,
            )
            self._advance(ScanState.LAYERS_SUBMITTED)

            # The top layer carries the vulnerabilities of its whole parent chain
            report = self.analyzer.fetch_vulnerabilities(layers[-1].layer_id)
            self._advance(ScanState.VULNERABILITIES_FETCHED)

            decision = decide(self.config.image, report.findings, self.config.whitelist)
            self._advance(ScanState.DECIDED)

            return ScanResult(
                image=self.config.image,
                findings=report.findings,
                decision=decision,
                layer_count=len(layers),
                unsupported=report.unsupported,
            )
        finally:
            self._teardown(server, workspace)

    def _get_image_source(self) -> DockerClient:
        if self.image_source is None:
            try:
                self.image_source = DockerClient()
            except RuntimeError as e:
                raise ImageExportException(self.config.image, str(e)) from e
        return self.image_source

    def _start_server(self, workspace: Workspace) -> LayerServer:
        server = self.server_factory(workspace.path, self.config.port)
        try:
            server.start()
        except OSError as e:
            raise LayerServerException(self.config.port, str(e)) from e
        return server

    def _layer_url(self, server: LayerServer, layer: ImageLayer) -> str:
        return server.layer_url(self.config.scanner_ip, layer.archive_path)

    def _teardown(self, server: Optional[LayerServer], workspace: Workspace) -> None:
        """Stop the server and remove the workspace, whatever happened before."""
        if self._watcher is not None:
            self._watcher.hold()
        try:
            if server is not None:
                server.stop()
        finally:
            workspace.destroy()
            self.state = ScanState.TORN_DOWN
            self.history.append(ScanState.TORN_DOWN)
