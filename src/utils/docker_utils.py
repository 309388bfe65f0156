"""
Docker/Podman utility functions for image export.

Provides a unified interface for saving a local container image to disk
and resolving its layers, supporting both Docker and Podman automatically.
"""

import json
import logging
import subprocess
import tarfile
from pathlib import Path
from typing import Optional

from constants import (
    DOCKER_MANIFEST_FILE,
    DOCKER_SAVE_TIMEOUT,
    IMAGE_ARCHIVE_NAME,
    VERSION_CHECK_TIMEOUT,
)
from core.exceptions import ImageExportException
from core.models import ImageLayer

logger = logging.getLogger(__name__)

LEGACY_LAYER_SUFFIX = "/layer.tar"


def layer_id_from_path(archive_path: str) -> str:
    """
    Derive a layer identifier from its path in a saved image.

    Args:
        archive_path: Path listed in manifest.json

    Returns:
        Layer identifier

    Examples:
        >>> layer_id_from_path("3c3a4604a545/layer.tar")
        '3c3a4604a545'
        >>> layer_id_from_path("blobs/sha256/9f5f6a2c")
        '9f5f6a2c'
    """
    if archive_path.endswith(LEGACY_LAYER_SUFFIX):
        return archive_path[: -len(LEGACY_LAYER_SUFFIX)]
    return archive_path.rstrip("/").rsplit("/", 1)[-1]


class DockerClient:
    """
    Unified client for Docker/Podman operations.

    Automatically detects available container runtime (docker or podman)
    and provides a consistent interface for image export.
    """

    def __init__(self):
        """Initialize Docker client and detect available runtime."""
        self.runtime = self._detect_runtime()
        if not self.runtime:
            raise RuntimeError("Neither docker nor podman found in PATH")
        logger.debug(f"Using container runtime: {self.runtime}")

    def _detect_runtime(self) -> Optional[str]:
        """Detect available container runtime."""
        for cmd in ["docker", "podman"]:
            try:
                result = subprocess.run(
                    [cmd, "--version"],
                    capture_output=True,
                    timeout=VERSION_CHECK_TIMEOUT,
                )
                if result.returncode == 0:
                    return cmd
            except (subprocess.TimeoutExpired, FileNotFoundError):
                continue
        return None

    def save_image(self, image: str, workspace: Path) -> Path:
        """
        Save an image to a tar archive inside the workspace.

        Args:
            image: Image reference (registry/repo:tag)
            workspace: Directory receiving the archive

        Returns:
            Path to the saved archive

        Raises:
            ImageExportException: If the runtime fails or times out
        """
        archive = Path(workspace) / IMAGE_ARCHIVE_NAME
        logger.info(f"Saving {image}")

        try:
            result = subprocess.run(
                [self.runtime, "save", "-o", str(archive), image],
                capture_output=True,
                text=True,
                timeout=DOCKER_SAVE_TIMEOUT,
            )
        except subprocess.TimeoutExpired:
            raise ImageExportException(image, f"{self.runtime} save timed out after {DOCKER_SAVE_TIMEOUT}s")
        except FileNotFoundError as e:
            raise ImageExportException(image, str(e)) from e

        if result.returncode != 0:
            error_msg = result.stderr.strip() if result.stderr else "unknown error"
            raise ImageExportException(image, error_msg)

        return archive

    def extract_archive(self, image: str, archive: Path, workspace: Path) -> None:
        """
        Unpack a saved image archive into the workspace.

        Args:
            image: Image reference (for error messages)
            archive: Archive written by save_image()
            workspace: Destination directory

        Raises:
            ImageExportException: If the archive cannot be read
        """
        try:
            with tarfile.open(archive) as tar:
                if hasattr(tarfile, "data_filter"):
                    tar.extractall(workspace, filter="data")
                else:
                    tar.extractall(workspace)
        except (tarfile.TarError, OSError) as e:
            raise ImageExportException(image, f"could not extract archive: {e}") from e

    def get_image_layers(self, image: str, workspace: Path) -> list[ImageLayer]:
        """
        Resolve the layers of an extracted image from its manifest.

        Args:
            image: Image reference (for error messages)
            workspace: Directory the archive was extracted into

        Returns:
            Layers in image order, base layer first

        Raises:
            ImageExportException: If the manifest is missing, invalid or lists no layers
        """
        manifest_path = Path(workspace) / DOCKER_MANIFEST_FILE
        try:
            with open(manifest_path) as f:
                manifest = json.load(f)
        except FileNotFoundError:
            raise ImageExportException(image, f"{DOCKER_MANIFEST_FILE} not found in saved image")
        except (json.JSONDecodeError, OSError) as e:
            raise ImageExportException(image, f"could not read {DOCKER_MANIFEST_FILE}: {e}") from e

        if not isinstance(manifest, list) or not manifest or not isinstance(manifest[0], dict):
            raise ImageExportException(image, f"unexpected {DOCKER_MANIFEST_FILE} format")

        layer_paths = manifest[0].get("Layers") or []
        if not layer_paths:
            raise ImageExportException(image, "image has no layers")

        layers = [
            ImageLayer(layer_id=layer_id_from_path(path), archive_path=path)
            for path in layer_paths
        ]
        logger.debug(f"Resolved {len(layers)} layers for {image}")
        return layers
