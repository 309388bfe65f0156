"""
Clair Scanner - Local container image vulnerability scanning

Scan local container images for known vulnerabilities by feeding their
layers to a Clair analyzer and approving the findings against a whitelist.
"""

__version__ = "1.0.0"
__author__ = "Clair Scanner Contributors"

from core.models import (
    ApprovalDecision,
    ScanResult,
    VulnerabilityFinding,
    Whitelist,
)

__all__ = [
    "ApprovalDecision",
    "ScanResult",
    "VulnerabilityFinding",
    "Whitelist",
]
