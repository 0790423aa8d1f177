"""Unit tests for importcat.lib.yaml_loader YAML parsing."""

from __future__ import annotations

import pytest
import yaml

from importcat.lib.yaml_loader import dump_yaml, load_yaml


class TestLoadYaml:
    """Tests for loading YAML from files."""

    def test_load_valid_yaml(self, tmp_path):
        """Load a valid YAML file and verify contents."""
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("key: value\nnested:\n  inner: 42\n")
        result = load_yaml(str(yaml_file))
        assert result == {"key": "value", "nested": {"inner": 42}}

    def test_load_empty_yaml(self, tmp_path):
        """Loading an empty file returns None."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert load_yaml(str(yaml_file)) is None

    def test_load_missing_file(self):
        """Loading a nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml("/nonexistent/path.yaml")

    def test_load_category_list(self, tmp_path):
        """Load a YAML file containing a category list."""
        yaml_file = tmp_path / "cats.yaml"
        yaml_file.write_text(
            'categories:\n  - label: "// A"\n    order: 0\n  - label: "// B"\n    order: 1\n'
        )
        result = load_yaml(yaml_file)
        assert [c["label"] for c in result["categories"]] == ["// A", "// B"]

    def test_safe_load_rejects_python_tags(self, tmp_path):
        """Python object tags are refused by the safe loader."""
        yaml_file = tmp_path / "evil.yaml"
        yaml_file.write_text("value: !!python/object/apply:os.getcwd []\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(yaml_file)


class TestDumpYaml:
    """Tests for writing YAML."""

    def test_preserves_key_order(self, tmp_path):
        """Keys are written in insertion order, not sorted."""
        target = tmp_path / "out.yaml"
        dump_yaml({"preset": "recommended", "categories": [], "enforce_order": True}, target)
        text = target.read_text(encoding="utf-8")
        assert text.index("preset") < text.index("categories") < text.index("enforce_order")

    def test_block_style(self, tmp_path):
        """Nested mappings are written in block style and read back equal."""
        target = tmp_path / "out.yaml"
        data = {"scope": {"exempt_paths": ["generated/"]}, "logging": {"enabled": False}}
        dump_yaml(data, target)
        assert "{" not in target.read_text(encoding="utf-8")
        assert load_yaml(target) == data
