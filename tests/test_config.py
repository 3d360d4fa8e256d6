"""Tests for configuration loading and merging."""

import dataclasses
import os

import pytest
import yaml

from inkshape.config import (
    DetectionConfig, PipelineConfig, config_to_dict, load_config, merge_config,
    save_default_config,
)


class TestDefaults:
    """Tests for default values."""

    def test_detection_defaults(self):
        """Test the recognition thresholds."""
        config = DetectionConfig()

        assert config.min_points == 5
        assert config.circularity_threshold == 0.85
        assert config.rectangularity_threshold == 0.80
        assert config.line_straightness_threshold == 0.95
        assert config.arrow_angle_tolerance == 30.0
        assert config.triangle_threshold == 0.75

    def test_config_is_frozen(self):
        """Test that configs cannot be mutated in place."""
        config = PipelineConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.detection.min_points = 3

    def test_pre_passes_off_by_default(self, default_config):
        """Test that strokes are used as given unless asked otherwise."""
        assert not default_config.simplify.enabled
        assert not default_config.normalize.enabled
        assert not default_config.render_enabled


class TestMerge:
    """Tests for applying overrides."""

    def test_partial_override(self):
        """Test that one key changes and the rest keep their defaults."""
        config = merge_config(PipelineConfig(), {"detection": {"min_points": 8}})

        assert config.detection.min_points == 8
        assert config.detection.circularity_threshold == 0.85
        assert config.diagram == PipelineConfig().diagram

    def test_unknown_keys_ignored(self):
        """Test that unknown sections and keys do not raise."""
        config = merge_config(PipelineConfig(), {
            "detection": {"not_a_threshold": 1},
            "nonsense": {"x": 1},
        })

        assert config == PipelineConfig()

    def test_lists_become_tuples(self):
        """Test that keyword lists from YAML are stored as tuples."""
        config = merge_config(PipelineConfig(), {"diagram": {"flow_keywords": ["start", "stop"]}})

        assert config.diagram.flow_keywords == ("start", "stop")

    def test_render_flag(self):
        """Test the top-level render switch."""
        assert merge_config(PipelineConfig(), {"render_enabled": True}).render_enabled

    def test_original_untouched(self):
        """Test that merging returns a new config."""
        base = PipelineConfig()

        merge_config(base, {"simplify": {"enabled": True}})

        assert not base.simplify.enabled


class TestLoadSave:
    """Tests for YAML round trips."""

    def test_missing_file_gives_defaults(self, temp_dir):
        """Test that a path that does not exist falls back to defaults."""
        assert load_config(os.path.join(temp_dir, "missing.yaml")) == PipelineConfig()
        assert load_config(None) == PipelineConfig()

    def test_load_partial_yaml(self, temp_dir):
        """Test a file overriding a couple of values."""
        path = os.path.join(temp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.dump({"normalize": {"enabled": True, "padding": 5.0}}, f)

        config = load_config(path)

        assert config.normalize.enabled
        assert config.normalize.padding == 5.0
        assert config.normalize.target_width == 1920.0

    def test_empty_yaml(self, temp_dir):
        """Test that an empty file gives defaults."""
        path = os.path.join(temp_dir, "empty.yaml")
        open(path, "w").close()

        assert load_config(path) == PipelineConfig()

    def test_default_roundtrip(self, temp_dir):
        """Test that the saved defaults load back unchanged."""
        path = os.path.join(temp_dir, "defaults.yaml")

        save_default_config(path)

        assert load_config(path) == PipelineConfig()

    def test_dict_is_plain_data(self):
        """Test that the dict view holds lists, not tuples."""
        data = config_to_dict(PipelineConfig())

        assert isinstance(data["diagram"]["oo_keywords"], list)
        assert data["detection"]["min_points"] == 5
