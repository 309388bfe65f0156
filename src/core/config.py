"""
Configuration dataclass for a scan run.

Provides a strongly-typed configuration object replacing loose
argparse namespaces inside the core.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from constants import (
    DEFAULT_ANALYZER_TIMEOUT,
    DEFAULT_CLAIR_URL,
    DEFAULT_SCANNER_IP,
    LAYER_SERVER_PORT,
)
from core.exceptions import ValidationException
from core.models import Whitelist


@dataclass
class ScanConfig:
    """Configuration for scanning one image."""

    image: str
    clair_url: str = DEFAULT_CLAIR_URL
    scanner_ip: str = DEFAULT_SCANNER_IP
    port: int = LAYER_SERVER_PORT
    timeout: Optional[float] = DEFAULT_ANALYZER_TIMEOUT
    whitelist: Whitelist = field(default_factory=Whitelist.empty)
    report_path: Optional[Path] = None

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValidationException: If configuration is invalid
        """
        if not self.image or not self.image.strip():
            raise ValidationException("image name is required", field="image")

        parsed = urlparse(self.clair_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValidationException(f"invalid URL '{self.clair_url}'", field="clair_url")

        if not self.scanner_ip:
            raise ValidationException("address is required", field="scanner_ip")

        if not 0 <= self.port <= 65535:
            raise ValidationException(f"port {self.port} out of range", field="port")

        if self.timeout is not None and self.timeout <= 0:
            raise ValidationException("timeout must be positive", field="timeout")
