"""
Formatting utilities for clair-scanner output.

Provides common formatting functions for vulnerability listings and counts.
"""

from core.models import SeverityLevel, VulnerabilityFinding


def format_number(num: int) -> str:
    """
    Format number with thousands separators.

    Examples:
        >>> format_number(1234567)
        '1,234,567'
        >>> format_number(0)
        '0'
    """
    return f"{num:,}"


def format_severity_counts(counts: dict[str, int]) -> str:
    """
    Format per-severity counts on one line.

    Args:
        counts: Severity label -> count

    Returns:
        Comma-separated summary, or "none" when empty

    Examples:
        >>> format_severity_counts({"High": 2, "Low": 1})
        'High: 2, Low: 1'
        >>> format_severity_counts({})
        'none'
    """
    if not counts:
        return "none"
    return ", ".join(f"{severity}: {format_number(count)}" for severity, count in counts.items())


def format_findings_table(findings: list[VulnerabilityFinding]) -> list[str]:
    """
    Format findings as aligned rows, most severe first.

    Args:
        findings: Vulnerabilities to list

    Returns:
        Header row followed by one row per finding

    Examples:
        >>> format_findings_table([VulnerabilityFinding("CVE-1", "debian:11", "High")])
        ['SEVERITY  NAME   NAMESPACE', 'High      CVE-1  debian:11']
    """
    headers = ("SEVERITY", "NAME", "NAMESPACE")
    rows = [
        (finding.severity, finding.name, finding.namespace)
        for finding in sorted(findings, key=lambda f: SeverityLevel.rank(f.severity))
    ]

    widths = [
        max(len(str(row[column])) for row in [headers, *rows])
        for column in range(len(headers))
    ]

    def render(row) -> str:
        return "  ".join(str(value).ljust(width) for value, width in zip(row, widths)).rstrip()

    return [render(headers)] + [render(row) for row in rows]
