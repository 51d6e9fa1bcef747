"""
Tests for configuration system.

This module tests the YAML-based configuration loading, merging,
_base_ inheritance and dot notation access.
"""

import pytest
import tempfile
from pathlib import Path

from projaug.configs.config import Config, ConfigDict, get_default_config, load_config, merge_config


class TestConfigCreation:
    """Tests for Config class creation and access."""

    def test_config_from_dict(self):
        """Test creating Config from dictionary."""
        config_dict = {
            'image': {
                'interpolation': 'nearest',
                'fill': 0.5,
            },
            'seed': 7,
        }

        config = Config(config_dict)

        assert config.image.interpolation == 'nearest'
        assert config.seed == 7

    def test_dot_notation_get(self):
        """Test nested get with dot notation and defaults."""
        config = Config({'image': {'fill': 0.25}})

        assert config.get('image.fill') == 0.25
        assert config.get('image.missing', default=3) == 3

    def test_set_creates_parents(self):
        config = Config({})
        config.set('image.extrapolation', 'border')

        assert config.image.extrapolation == 'border'
        assert 'image.extrapolation' in config

    def test_dict_style_access(self):
        """Test dictionary-style access still works."""
        config = Config({'seed': 3})

        assert config['seed'] == 3

    def test_pipeline_entries_are_config_dicts(self):
        """Dicts inside lists get attribute access too."""
        config = Config({'pipeline': {'train': [{'type': 'Rotate', 'degrees': 5}]}})

        entry = config.pipeline.train[0]
        assert isinstance(entry, ConfigDict)
        assert entry.type == 'Rotate'

    def test_missing_attribute_raises(self):
        with pytest.raises(AttributeError):
            Config({}).image


class TestConfigYAML:
    """Tests for YAML config loading."""

    def test_load_yaml_config(self):
        """Test loading config from YAML file."""
        yaml_content = """
seed: 1
pipeline:
  val:
    - {type: CenterResizeCrop, size: [64, 64]}
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(yaml_content)
            config_path = f.name

        try:
            config = load_config(config_path)

            assert config.seed == 1
            assert config.pipeline.val[0].size == [64, 64]
        finally:
            Path(config_path).unlink()

    def test_load_invalid_yaml_raises(self):
        """Invalid YAML should raise error."""
        invalid_yaml = """
key: value
  bad_indent: oops
"""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(invalid_yaml)
            config_path = f.name

        try:
            with pytest.raises(Exception):  # yaml.YAMLError
                load_config(config_path)
        finally:
            Path(config_path).unlink()

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does/not/exist.yaml")

    def test_base_inheritance(self):
        """A _base_ file is loaded first and overridden by the child."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir) / "base.yaml"
            child = Path(tmpdir) / "child.yaml"
            base.write_text("seed: 0\nimage:\n  fill: 0.0\n  interpolation: bilinear\n")
            child.write_text("_base_: base.yaml\nimage:\n  fill: 1.0\n")

            config = load_config(child)

            assert config.seed == 0
            assert config.image.fill == 1.0
            assert config.image.interpolation == 'bilinear'
            assert '_base_' not in config.to_dict()


class TestConfigMerge:
    """Tests for config merging and override."""

    def test_merge_override(self):
        """Test merging override values."""
        base_config = {
            'image': {'fill': 0.0, 'interpolation': 'bilinear'},
            'seed': None,
        }

        override = {
            'image': {'fill': 0.5},
        }

        merged = merge_config(Config(base_config), override)

        # Override should take effect
        assert merged.image.fill == 0.5
        # Non-overridden values should be preserved
        assert merged.image.interpolation == 'bilinear'

    def test_merge_replaces_lists(self):
        """Pipelines are replaced, not concatenated."""
        merged = get_default_config().merge({'pipeline': {'val': [{'type': 'FlipX'}]}})

        assert len(merged.pipeline.val) == 1
        assert len(merged.pipeline.train) == 3

    def test_merge_new_keys(self):
        """Test adding new keys via merge."""
        merged = merge_config(Config({'a': 1}), Config({'b': 2}))

        assert merged.a == 1
        assert merged.b == 2


class TestConfigSaveLoad:
    """Tests for config save and reload."""

    def test_save_and_reload(self):
        """Test saving config to file and reloading."""
        original = get_default_config()

        with tempfile.TemporaryDirectory() as tmpdir:
            save_path = Path(tmpdir) / "nested" / "config.yaml"

            original.save(save_path)

            assert save_path.exists()

            reloaded = load_config(save_path)

            assert reloaded.to_dict() == original.to_dict()


class TestConfigEdgeCases:
    """Tests for edge cases in config handling."""

    def test_empty_config(self):
        """Test empty config creation."""
        config = Config({})

        assert len(config) == 0

    def test_list_values(self):
        """Test config with list values."""
        config = Config({
            'size': [224, 224],
            'degrees': [-5.0, 5.0],
        })

        assert config.size == [224, 224]
        assert len(config.degrees) == 2

    def test_none_values(self):
        """Test config with None values."""
        config = Config({
            'seed': None,
        })

        assert config.seed is None
