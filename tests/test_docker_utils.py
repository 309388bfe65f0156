"""
Tests for Docker utilities used to export images.
"""

import json
import pytest
from unittest.mock import Mock, patch
import subprocess

from core.exceptions import ImageExportException
from core.models import ImageLayer
from utils.docker_utils import DockerClient, layer_id_from_path


class TestLayerIdFromPath:
    """Tests for layer_id_from_path function."""

    def test_legacy_layout(self):
        """Test the layer.tar suffix is removed."""
        assert layer_id_from_path("3c3a4604a545/layer.tar") == "3c3a4604a545"

    def test_oci_layout(self):
        """Test the blob digest is used for OCI layouts."""
        assert layer_id_from_path("blobs/sha256/9f5f6a2c") == "9f5f6a2c"


class TestDockerClient:
    """Tests for DockerClient."""

    @pytest.fixture
    def docker_client(self):
        """Create a DockerClient instance for testing."""
        with patch.object(DockerClient, '_detect_runtime', return_value='docker'):
            return DockerClient()

    def test_no_runtime_raises(self):
        """Test that a missing runtime fails construction."""
        with patch.object(DockerClient, '_detect_runtime', return_value=None):
            with pytest.raises(RuntimeError, match="Neither docker nor podman"):
                DockerClient()

    def test_detect_runtime_falls_back_to_podman(self):
        """Test podman is used when docker is missing."""
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = [FileNotFoundError(), Mock(returncode=0)]

            client = DockerClient()

            assert client.runtime == "podman"

    def test_save_image_command(self, docker_client, tmp_path):
        """Test the save command and returned archive path."""
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=0, stderr="", stdout="")

            archive = docker_client.save_image("myapp:1.0", tmp_path)

            assert archive == tmp_path / "image.tar"
            args = mock_run.call_args.args[0]
            assert args == ["docker", "save", "-o", str(tmp_path / "image.tar"), "myapp:1.0"]

    def test_save_image_failure(self, docker_client, tmp_path):
        """Test that a failed save raises with the runtime's message."""
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = Mock(returncode=1, stderr="No such image: myapp:1.0", stdout="")

            with pytest.raises(ImageExportException, match="No such image"):
                docker_client.save_image("myapp:1.0", tmp_path)

    def test_save_image_timeout(self, docker_client, tmp_path):
        """Test that a save timeout raises."""
        with patch('subprocess.run') as mock_run:
            mock_run.side_effect = subprocess.TimeoutExpired("docker", 600)

            with pytest.raises(ImageExportException, match="timed out"):
                docker_client.save_image("myapp:1.0", tmp_path)

    def test_extract_and_resolve_layers(self, docker_client, tmp_path, saved_image_archive):
        """Test layers are resolved from the extracted manifest in order."""
        archive, layer_paths = saved_image_archive
        workspace = tmp_path / "workspace"
        workspace.mkdir()

        docker_client.extract_archive("myapp:1.0", archive, workspace)
        layers = docker_client.get_image_layers("myapp:1.0", workspace)

        assert layers == [
            ImageLayer(layer_id="aaa111", archive_path="aaa111/layer.tar"),
            ImageLayer(layer_id="bbb222", archive_path="bbb222/layer.tar"),
        ]
        for layer_path in layer_paths:
            assert (workspace / layer_path).is_file()

    def test_extract_invalid_archive(self, docker_client, tmp_path):
        """Test that a corrupt archive raises."""
        archive = tmp_path / "image.tar"
        archive.write_bytes(b"not a tar file")

        with pytest.raises(ImageExportException, match="could not extract"):
            docker_client.extract_archive("myapp:1.0", archive, tmp_path)

    def test_missing_manifest(self, docker_client, tmp_path):
        """Test that a missing manifest raises."""
        with pytest.raises(ImageExportException, match="manifest.json not found"):
            docker_client.get_image_layers("myapp:1.0", tmp_path)

    def test_invalid_manifest(self, docker_client, tmp_path):
        """Test that an undecodable manifest raises."""
        (tmp_path / "manifest.json").write_text("{not json")

        with pytest.raises(ImageExportException, match="could not read"):
            docker_client.get_image_layers("myapp:1.0", tmp_path)

    def test_manifest_without_layers(self, docker_client, tmp_path):
        """Test that an image with no layers raises."""
        (tmp_path / "manifest.json").write_text(json.dumps([{"Layers": []}]))

        with pytest.raises(ImageExportException, match="no layers"):
            docker_client.get_image_layers("myapp:1.0", tmp_path)
