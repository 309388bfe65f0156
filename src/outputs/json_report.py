"""
JSON report of a scan result.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from core.exceptions import ScannerException
from core.models import ScanResult
from outputs.base import OutputGenerator

logger = logging.getLogger(__name__)


class JSONReportGenerator(OutputGenerator):
    """Writes the findings and approval decision of a scan as JSON."""

    def supports_format(self) -> str:
        return "json"

    def build_report(self, result: ScanResult) -> dict:
        """Build the report document."""
        report = result.to_dict()
        report["generated_at"] = datetime.now(timezone.utc).isoformat()
        report["severity_counts"] = result.severity_counts()
        return report

    def generate(self, result: ScanResult, output_path: Path) -> None:
        """
        Write the report.

        Raises:
            ScannerException: If the file cannot be written
        """
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, "w") as f:
                json.dump(self.build_report(result), f, indent=2)
        except OSError as e:
            raise ScannerException(f"Failed to write report {output_path}: {e}") from e

        logger.info(f"Report written to {output_path}")
