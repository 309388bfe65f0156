"""Core business logic for image scanning and whitelist approval."""

from core.models import (
    ApprovalDecision,
    ImageLayer,
    LayerVulnerabilities,
    ScanResult,
    SeverityLevel,
    VulnerabilityFinding,
    Whitelist,
)
from core.approval import decide, image_key

__all__ = [
    "ApprovalDecision",
    "ImageLayer",
    "LayerVulnerabilities",
    "ScanResult",
    "SeverityLevel",
    "VulnerabilityFinding",
    "Whitelist",
    "decide",
    "image_key",
]
