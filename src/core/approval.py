"""
Whitelist approval of scan findings.

A finding is accepted when its identifier appears in the general whitelist
or in the whitelist of the scanned image. Severity plays no role: any
finding that is not whitelisted rejects the image.
"""

import logging
from typing import Iterable, Mapping

from core.models import ApprovalDecision, VulnerabilityFinding, Whitelist

logger = logging.getLogger(__name__)


def image_key(image_name: str) -> str:
    """
    Strip the tag from an image name for per-image whitelist lookups.

    Args:
        image_name: Image reference (e.g., "myapp:1.0")

    Returns:
        Everything before the first ":" (e.g., "myapp")

    Examples:
        >>> image_key("myapp:1.0")
        'myapp'
        >>> image_key("myapp")
        'myapp'
    """
    return image_name.split(":", 1)[0]


def is_whitelisted(name: str, whitelist: Whitelist, image_whitelist: Mapping[str, str]) -> bool:
    """Check a vulnerability identifier against both whitelist scopes."""
    return name in whitelist.general or name in image_whitelist


def decide(
    image_name: str,
    findings: Iterable[VulnerabilityFinding],
    whitelist: Whitelist,
) -> ApprovalDecision:
    """
    Decide whether an image is approved.

    Every non-whitelisted finding contributes its identifier to the
    rejection list, duplicates included.

    Args:
        image_name: Image reference that was scanned
        findings: Vulnerabilities reported by the analyzer
        whitelist: Accepted vulnerabilities

    Returns:
        ApprovalDecision, approving when nothing is left unapproved
    """
    image_whitelist = whitelist.for_image(image_key(image_name))

    unapproved = [
        finding.name
        for finding in findings
        if not is_whitelisted(finding.name, whitelist, image_whitelist)
    ]

    if unapproved:
        logger.debug(f"{len(unapproved)} unapproved vulnerabilities in {image_name}")
        return ApprovalDecision.reject(unapproved)
    return ApprovalDecision.accept()
