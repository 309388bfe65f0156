"""
Domain models for image vulnerability scanning.

This module defines the core data structures used throughout the application.
All models are immutable (frozen dataclasses) to prevent accidental mutation.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class SeverityLevel(str, Enum):
    """Vulnerability severity levels as reported by Clair."""

    DEFCON1 = "Defcon1"
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    NEGLIGIBLE = "Negligible"
    UNKNOWN = "Unknown"

    @classmethod
    def ordered_levels(cls) -> list[str]:
        """Return severity levels in display order, most severe first."""
        return [level.value for level in cls]

    @classmethod
    def rank(cls, severity: str) -> int:
        """
        Get the display rank of a severity label.

        Labels Clair may add in the future sort after the known ones.

        Args:
            severity: Severity label (case-insensitive)

        Returns:
            Position in display order (0 is most severe)
        """
        normalized = (severity or "").lower()
        for index, level in enumerate(cls.ordered_levels()):
            if level.lower() == normalized:
                return index
        return len(cls.ordered_levels())


@dataclass(frozen=True)
class ImageLayer:
    """
    One layer of an exported image.

    Attributes:
        layer_id: Opaque layer identifier, unique within a scan
        archive_path: Layer archive path relative to the workspace
    """

    layer_id: str
    archive_path: str


@dataclass(frozen=True)
class VulnerabilityFinding:
    """
    A single vulnerability reported by the analyzer.

    Several findings may share a name when it was detected in
    different namespaces; each one is a distinct occurrence.

    Attributes:
        name: Vulnerability identifier (e.g., "CVE-2021-44228")
        namespace: OS or package ecosystem it was found in (e.g., "debian:11")
        severity: Severity label
    """

    name: str
    namespace: str
    severity: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "namespace": self.namespace,
            "severity": self.severity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VulnerabilityFinding":
        """Create from dictionary."""
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace", ""),
            severity=data.get("severity", SeverityLevel.UNKNOWN.value),
        )


@dataclass(frozen=True)
class Whitelist:
    """
    Vulnerabilities accepted by the user.

    Attributes:
        general: Vulnerability identifier -> justification, valid for every image
        images: Image name without tag -> (vulnerability identifier -> justification)

    Both mappings are copied into read-only views on construction.
    """

    general: Mapping[str, str] = field(default_factory=dict)
    images: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "general", MappingProxyType(dict(self.general)))
        object.__setattr__(
            self,
            "images",
            MappingProxyType({key: MappingProxyType(dict(entries)) for key, entries in self.images.items()}),
        )

    def for_image(self, image_key: str) -> Mapping[str, str]:
        """
        Get the per-image whitelist for an image key.

        Args:
            image_key: Image name without tag

        Returns:
            Per-image whitelist, empty if the image has none
        """
        return self.images.get(image_key, MappingProxyType({}))

    @classmethod
    def empty(cls) -> "Whitelist":
        """Create a whitelist that accepts nothing."""
        return cls()


@dataclass(frozen=True)
class ApprovalDecision:
    """
    Outcome of checking findings against a whitelist.

    Attributes:
        approved: True if every finding is whitelisted
        unapproved: Identifier of every non-whitelisted finding, in finding order
    """

    approved: bool
    unapproved: tuple[str, ...] = ()

    @classmethod
    def accept(cls) -> "ApprovalDecision":
        """Create an approving decision."""
        return cls(approved=True)

    @classmethod
    def reject(cls, unapproved: list[str]) -> "ApprovalDecision":
        """Create a rejecting decision listing the offending identifiers."""
        return cls(approved=False, unapproved=tuple(unapproved))

    @property
    def rejected(self) -> bool:
        """True if the image was rejected."""
        return not self.approved

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "approved": self.approved,
            "unapproved": list(self.unapproved),
        }


@dataclass(frozen=True)
class ScanResult:
    """
    Result of scanning one image.

    Attributes:
        image: Image reference that was scanned
        findings: Vulnerabilities reported for the top layer
        decision: Whitelist approval decision
        layer_count: Number of layers submitted to the analyzer
        unsupported: True if the analyzer detected no features in the image
    """

    image: str
    findings: tuple[VulnerabilityFinding, ...]
    decision: ApprovalDecision
    layer_count: int = 0
    unsupported: bool = False

    @property
    def approved(self) -> bool:
        """True if the image passed the whitelist check."""
        return self.decision.approved

    def severity_counts(self) -> dict[str, int]:
        """
        Count findings per severity label.

        Returns:
            Severity label -> count, ordered most severe first
        """
        counts: dict[str, int] = {}
        for finding in sorted(self.findings, key=lambda f: SeverityLevel.rank(f.severity)):
            counts[finding.severity] = counts.get(finding.severity, 0) + 1
        return counts

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "image": self.image,
            "layer_count": self.layer_count,
            "unsupported": self.unsupported,
            "vulnerabilities": [finding.to_dict() for finding in self.findings],
            "decision": self.decision.to_dict(),
        }


@dataclass(frozen=True)
class LayerVulnerabilities:
    """
    Vulnerabilities fetched for one layer.

    Attributes:
        layer_id: Layer that was queried
        findings: Flattened vulnerabilities of every feature
        unsupported: True if no features were detected at all
        namespace: Namespace Clair detected for the layer, if any
    """

    layer_id: str
    findings: tuple[VulnerabilityFinding, ...] = ()
    unsupported: bool = False
    namespace: Optional[str] = None
