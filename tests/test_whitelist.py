"""Tests for whitelist file loading."""

import pytest
import yaml

from core.exceptions import WhitelistException
from utils.whitelist import load_whitelist, parse_whitelist


class TestLoadWhitelist:
    """Tests for load_whitelist function."""

    def test_load_full_file(self, tmp_path):
        """Test both sections are loaded."""
        whitelist_file = tmp_path / "whitelist.yaml"
        whitelist_file.write_text(
            "generalwhitelist:\n"
            "  CVE-2017-6055: XML\n"
            "  CVE-2017-5586: OpenText\n"
            "images:\n"
            "  ubuntu:\n"
            "    CVE-2017-5230: XSX\n"
            "    CVE-2017-5230a: Java\n"
            "  alpine:\n"
            "    CVE-2017-3261: SE\n"
        )

        whitelist = load_whitelist(whitelist_file)

        assert whitelist.general == {"CVE-2017-6055": "XML", "CVE-2017-5586": "OpenText"}
        assert whitelist.for_image("ubuntu") == {"CVE-2017-5230": "XSX", "CVE-2017-5230a": "Java"}
        assert whitelist.for_image("alpine") == {"CVE-2017-3261": "SE"}

    def test_empty_file(self, tmp_path):
        """Test an empty file is an empty whitelist."""
        whitelist_file = tmp_path / "whitelist.yaml"
        whitelist_file.write_text("")

        whitelist = load_whitelist(whitelist_file)

        assert whitelist.general == {}
        assert whitelist.images == {}

    def test_only_general_section(self, tmp_path):
        """Test a file without images section."""
        whitelist_file = tmp_path / "whitelist.yaml"
        whitelist_file.write_text(yaml.dump({"generalwhitelist": {"CVE-1": "ok"}}))

        whitelist = load_whitelist(whitelist_file)

        assert whitelist.general == {"CVE-1": "ok"}
        assert whitelist.images == {}

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(WhitelistException, match="not found"):
            load_whitelist(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test a syntax error raises."""
        whitelist_file = tmp_path / "whitelist.yaml"
        whitelist_file.write_text("generalwhitelist: [unclosed\n")

        with pytest.raises(WhitelistException, match="Invalid YAML"):
            load_whitelist(whitelist_file)


class TestParseWhitelist:
    """Tests for parse_whitelist function."""

    def test_none_values_become_empty_strings(self):
        """Test entries without justification are still whitelisted."""
        whitelist = parse_whitelist({"generalwhitelist": {"CVE-1": None}})

        assert whitelist.general == {"CVE-1": ""}

    def test_non_mapping_document(self):
        """Test a list document is rejected."""
        with pytest.raises(WhitelistException, match="must be a mapping"):
            parse_whitelist(["CVE-1"])

    def test_non_mapping_section(self):
        """Test a list in place of a section is rejected."""
        with pytest.raises(WhitelistException, match="'generalwhitelist' must be a mapping"):
            parse_whitelist({"generalwhitelist": ["CVE-1"]})

    def test_non_mapping_image_entry(self):
        """Test a per-image entry must be a mapping."""
        with pytest.raises(WhitelistException, match="'images.ubuntu' must be a mapping"):
            parse_whitelist({"images": {"ubuntu": "CVE-1"}})
