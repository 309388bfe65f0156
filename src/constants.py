"""
Centralized configuration constants for Clair Scanner.

This module provides a single source of truth for configuration values
that are used across multiple modules, making them easier to update
and maintain.
"""

# ============================================================================
# Analyzer (Clair) Configuration
# ============================================================================

DEFAULT_CLAIR_URL = "http://127.0.0.1:6060"
"""Default base URL of the Clair analyzer."""

POST_LAYER_URI = "/v1/layers"
"""Endpoint used to submit a layer for analysis."""

GET_LAYER_FEATURES_URI = "/v1/layers/{}?vulnerabilities"
"""Endpoint template returning the features and vulnerabilities of a layer."""

LAYER_FORMAT = "Docker"
"""Archive format announced to Clair for every submitted layer."""

DEFAULT_ANALYZER_TIMEOUT = None
"""Timeout for analyzer requests in seconds (None blocks until Clair answers)."""

# ============================================================================
# Layer Server Configuration
# ============================================================================

LAYER_SERVER_PORT = 9279
"""TCP port reserved for serving image layers to Clair."""

DEFAULT_SCANNER_IP = "localhost"
"""Address advertised to Clair for fetching layers from the Layer Server."""

# ============================================================================
# Workspace Configuration
# ============================================================================

TMP_PREFIX = "clair-scanner-"
"""Prefix for the temporary directory holding the exported image."""

IMAGE_ARCHIVE_NAME = "image.tar"
"""File name of the saved image archive inside the workspace."""

DOCKER_MANIFEST_FILE = "manifest.json"
"""Manifest listing the layers of a saved image."""

# ============================================================================
# Timeouts (in seconds)
# ============================================================================

VERSION_CHECK_TIMEOUT = 5
"""Timeout for container runtime version checks (5 seconds)."""

DOCKER_SAVE_TIMEOUT = 600
"""Timeout for exporting an image with `docker save` (10 minutes)."""

SERVER_SHUTDOWN_TIMEOUT = 5
"""Time to wait for the Layer Server thread to finish after shutdown (5 seconds)."""
