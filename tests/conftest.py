"""
Pytest fixtures and configuration for Clair Scanner tests.

Provides shared fixtures and test utilities across the test suite.
"""

import json
import tarfile

import pytest

from core.models import (
    ImageLayer,
    VulnerabilityFinding,
    Whitelist,
)


@pytest.fixture
def sample_findings():
    """Findings for an image with two vulnerabilities."""
    return [
        VulnerabilityFinding(name="CVE-2020-1", namespace="os", severity="High"),
        VulnerabilityFinding(name="CVE-2020-2", namespace="os", severity="Low"),
    ]


@pytest.fixture
def sample_whitelist():
    """Whitelist with general and per-image entries."""
    return Whitelist(
        general={"CVE-2017-6055": "XML"},
        images={
            "myapp": {"CVE-2020-1": "ok"},
            "ubuntu": {"CVE-2017-5230": "XSX"},
        },
    )


@pytest.fixture
def sample_layers():
    """Three layers, base layer first."""
    return [
        ImageLayer(layer_id="L1", archive_path="L1/layer.tar"),
        ImageLayer(layer_id="L2", archive_path="L2/layer.tar"),
        ImageLayer(layer_id="L3", archive_path="L3/layer.tar"),
    ]


@pytest.fixture
def clair_layer_payload():
    """Clair envelope for a top layer with two features."""
    return {
        "Layer": {
            "Name": "L3",
            "NamespaceName": "debian:11",
            "ParentName": "L2",
            "Features": [
                {
                    "Name": "openssl",
                    "NamespaceName": "debian:11",
                    "Version": "1.1.1n-0",
                    "Vulnerabilities": [
                        {"Name": "CVE-2022-0778", "NamespaceName": "debian:11", "Severity": "High"},
                        {"Name": "CVE-2022-2068", "NamespaceName": "debian:11", "Severity": "Critical"},
                    ],
                },
                {
                    "Name": "bash",
                    "NamespaceName": "debian:11",
                    "Version": "5.1-2",
                },
                {
                    "Name": "zlib",
                    "NamespaceName": "debian:11",
                    "Version": "1.2.11",
                    "Vulnerabilities": [
                        {"Name": "CVE-2018-25032", "NamespaceName": "debian:11", "Severity": "Medium"},
                    ],
                },
            ],
        }
    }


@pytest.fixture
def saved_image_archive(tmp_path):
    """
    Image archive laid out like `docker save` output.

    Returns:
        Tuple of (archive path, layer paths listed in the manifest)
    """
    source = tmp_path / "source"
    source.mkdir()
    layer_paths = ["aaa111/layer.tar", "bbb222/layer.tar"]
    for layer_path in layer_paths:
        layer_file = source / layer_path
        layer_file.parent.mkdir(parents=True)
        layer_file.write_bytes(b"layer-bytes-" + layer_path.encode())

    manifest = [{"Config": "config.json", "RepoTags": ["myapp:1.0"], "Layers": layer_paths}]
    (source / "manifest.json").write_text(json.dumps(manifest))

    archive = tmp_path / "image.tar"
    with tarfile.open(archive, "w") as tar:
        for entry in sorted(source.iterdir()):
            tar.add(entry, arcname=entry.name)
    return archive, layer_paths
