"""
Console summary of a scan result, written through logging.
"""

import logging
from typing import Optional

from core.models import ScanResult
from utils.formatting import format_findings_table, format_number, format_severity_counts
from utils.logging_helpers import log_error_section


def log_scan_summary(result: ScanResult, logger: Optional[logging.Logger] = None) -> None:
    """
    Log the findings of a scan and its approval outcome.

    Args:
        result: Scan result to summarize
        logger: Logger instance (defaults to root logger if not provided)
    """
    if logger is None:
        logger = logging.getLogger()

    logger.info(f"Layers analyzed: {format_number(result.layer_count)}")
    logger.info(
        f"Vulnerabilities found: {format_number(len(result.findings))} "
        f"({format_severity_counts(result.severity_counts())})"
    )

    if result.unsupported:
        logger.warning(f"NOTE: no features detected in {result.image}, Clair may not support this image")

    if result.findings:
        for row in format_findings_table(list(result.findings)):
            logger.info(f"  {row}")

    if result.approved:
        logger.info(f"✓ {result.image} contains no unapproved vulnerabilities")
    else:
        log_error_section(
            f"Image {result.image} contains unapproved vulnerabilities:",
            [f"  - {name}" for name in result.decision.unapproved],
            logger=logger,
        )
