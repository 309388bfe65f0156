"""
Base output generator interface.

Defines the contract that all output generators must implement.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from core.models import ScanResult


class OutputGenerator(ABC):
    """
    Abstract base class for scan report generators.
    """

    @abstractmethod
    def generate(self, result: ScanResult, output_path: Path) -> None:
        """
        Generate report from a scan result.

        Args:
            result: Scan result to include in report
            output_path: Where to write the output file
        """
        pass

    @abstractmethod
    def supports_format(self) -> str:
        """
        Return the format this generator supports.

        Returns:
            Format identifier (e.g., "json")
        """
        pass
