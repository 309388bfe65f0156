"""Tests for report outputs and formatting helpers."""

import json
import logging

import pytest

from core.exceptions import ScannerException
from core.models import ApprovalDecision, ScanResult, VulnerabilityFinding
from outputs.console import log_scan_summary
from outputs.json_report import JSONReportGenerator
from utils.formatting import format_findings_table, format_severity_counts


@pytest.fixture
def rejected_result(sample_findings):
    """Scan result rejecting one of two findings."""
    return ScanResult(
        image="myapp:1.0",
        findings=tuple(sample_findings),
        decision=ApprovalDecision.reject(["CVE-2020-2"]),
        layer_count=3,
    )


class TestFormatting:
    """Tests for formatting helpers."""

    def test_severity_counts(self):
        """Test the one-line severity summary."""
        assert format_severity_counts({"High": 2, "Low": 1500}) == "High: 2, Low: 1,500"
        assert format_severity_counts({}) == "none"

    def test_findings_table_sorted_by_severity(self):
        """Test rows are aligned and most severe first."""
        rows = format_findings_table([
            VulnerabilityFinding("CVE-1", "alpine:3.18", "Low"),
            VulnerabilityFinding("CVE-22", "os", "Critical"),
        ])

        assert rows == [
            "SEVERITY  NAME    NAMESPACE",
            "Critical  CVE-22  os",
            "Low       CVE-1   alpine:3.18",
        ]


class TestConsoleSummary:
    """Tests for log_scan_summary."""

    def test_rejected_lists_unapproved(self, rejected_result, caplog):
        """Test rejection logs every unapproved identifier as an error."""
        logger = logging.getLogger("test-summary")
        with caplog.at_level(logging.INFO, logger="test-summary"):
            log_scan_summary(rejected_result, logger=logger)

        errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert "  - CVE-2020-2" in errors
        assert "Vulnerabilities found: 2 (High: 1, Low: 1)" in caplog.text

    def test_approved(self, caplog):
        """Test approval is logged without errors."""
        result = ScanResult(image="myapp:1.0", findings=(), decision=ApprovalDecision.accept())
        logger = logging.getLogger("test-summary")
        with caplog.at_level(logging.INFO, logger="test-summary"):
            log_scan_summary(result, logger=logger)

        assert "contains no unapproved vulnerabilities" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


class TestJSONReportGenerator:
    """Tests for JSONReportGenerator."""

    def test_generate(self, rejected_result, tmp_path):
        """Test the report contains findings, counts and decision."""
        output = tmp_path / "reports" / "scan.json"

        JSONReportGenerator().generate(rejected_result, output)

        data = json.loads(output.read_text())
        assert data["image"] == "myapp:1.0"
        assert data["layer_count"] == 3
        assert data["severity_counts"] == {"High": 1, "Low": 1}
        assert [v["name"] for v in data["vulnerabilities"]] == ["CVE-2020-1", "CVE-2020-2"]
        assert data["decision"] == {"approved": False, "unapproved": ["CVE-2020-2"]}
        assert "generated_at" in data

    def test_supports_json(self):
        """Test the declared format."""
        assert JSONReportGenerator().supports_format() == "json"

    def test_unwritable_path_raises(self, rejected_result, tmp_path):
        """Test a write failure raises ScannerException."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(ScannerException, match="Failed to write report"):
            JSONReportGenerator().generate(rejected_result, blocker / "scan.json")
