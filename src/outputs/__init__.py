"""Output generators for scan reports."""

from outputs.base import OutputGenerator
from outputs.console import log_scan_summary
from outputs.json_report import JSONReportGenerator

__all__ = [
    "OutputGenerator",
    "JSONReportGenerator",
    "log_scan_summary",
]
