"""
Logging helper utilities for the clair-scanner CLI.

Provides consistent formatting for error messages, warnings, and informational output.
"""

import logging
from typing import List, Optional


def _log_section(
    level: int,
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger],
    width: int,
) -> None:
    if logger is None:
        logger = logging.getLogger()

    logger.log(level, "=" * width)
    logger.log(level, title)
    for message in messages:
        logger.log(level, message or "")
    logger.log(level, "=" * width)


def log_error_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60
) -> None:
    """
    Log an error section with separator lines and multiple messages.

    Args:
        title: Title message for the error section
        messages: List of error messages to display
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters

    Examples:
        >>> log_error_section(
        ...     "Image contains unapproved vulnerabilities",
        ...     ["CVE-2020-2", "CVE-2021-44228"]
        ... )
        ============================================================
        Image contains unapproved vulnerabilities
        CVE-2020-2
        CVE-2021-44228
        ============================================================
    """
    _log_section(logging.ERROR, title, messages, logger, width)


def log_warning_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60
) -> None:
    """
    Log a warning section with separator lines and multiple messages.

    Args:
        title: Title message for the warning section
        messages: List of warning messages to display
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters
    """
    _log_section(logging.WARNING, title, messages, logger, width)


def log_info_header(
    message: str,
    logger: Optional[logging.Logger] = None,
    width: int = 60,
    char: str = "="
) -> None:
    """
    Log an informational header with separator lines.

    Args:
        message: Header message to display
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters
        char: Character to use for separator line

    Examples:
        >>> log_info_header("Scanning myapp:1.0")
        ============================================================
        Scanning myapp:1.0
        ============================================================
    """
    if logger is None:
        logger = logging.getLogger()

    logger.info(char * width)
    logger.info(message)
    logger.info(char * width)
