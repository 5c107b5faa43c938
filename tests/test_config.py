"""
Tests for layout and camera configuration loading.
"""

import math
import os
import tempfile

import pytest

from spatial_core.config import CameraConfig, EngineSettings, LayoutConfig, load_config, settings_from_dict
from spatial_core.enums import Easing, RetriggerPolicy


class TestDefaults:
    def test_layout_defaults(self):
        config = LayoutConfig()
        assert config.level_distance == 12.0
        assert config.radius == 30.0
        assert config.galaxy_arms == 3
        assert config.connection_strength == 0.5
        assert config.layout_hidden_subtrees is True

    def test_camera_defaults(self):
        config = CameraConfig()
        assert config.target_azimuth == 0.0
        assert config.target_polar == pytest.approx(math.pi / 2)
        assert config.rate == pytest.approx(1 / 1.5)
        assert config.retrigger_policy is RetriggerPolicy.IGNORE
        assert CameraConfig(transition_duration=0).rate == math.inf


class TestSettingsFromDict:
    def test_overrides_and_coercion(self):
        settings = settings_from_dict(
            {
                "layout": {"level_distance": 8, "galaxy_arms": "5", "show_connections": 0},
                "camera": {
                    "easing": "ease_in_out",
                    "retrigger_policy": "retarget",
                    "trigger_modes": ["COUNTDOWN", "INTRO"],
                },
            }
        )

        assert isinstance(settings, EngineSettings)
        assert settings.layout.level_distance == 8.0
        assert isinstance(settings.layout.level_distance, float)
        assert settings.layout.galaxy_arms == 5
        assert settings.layout.show_connections is False
        assert settings.camera.easing is Easing.EASE_IN_OUT
        assert settings.camera.retrigger_policy is RetriggerPolicy.RETARGET
        assert settings.camera.trigger_modes == ("COUNTDOWN", "INTRO")

    def test_enum_values_pass_through(self):
        settings = settings_from_dict({"camera": {"easing": Easing.LINEAR}})
        assert settings.camera.easing is Easing.LINEAR

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="wobble"):
            settings_from_dict({"layout": {"wobble": 1}})

    def test_unknown_easing_rejected(self):
        with pytest.raises(ValueError, match="Unknown camera easing: 'bogus'"):
            settings_from_dict({"camera": {"easing": "bogus"}})

    def test_unknown_retrigger_policy_rejected(self):
        with pytest.raises(ValueError, match="retrigger_policy"):
            settings_from_dict({"camera": {"retrigger_policy": "sometimes"}})

    def test_empty_sections(self):
        settings = settings_from_dict({"layout": None})
        assert settings.layout == LayoutConfig()
        assert settings.camera == CameraConfig()


def test_load_config_from_yaml_file():
    text = "layout:\n  radius: 12.5\ncamera:\n  transition_duration: 3\n"
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "settings.yaml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        settings = load_config(path)

    assert settings.layout.radius == 12.5
    assert settings.camera.transition_duration == 3.0
    assert settings.camera.rate == pytest.approx(1 / 3)
