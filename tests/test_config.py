import pytest

from starfield.config import Background, StarfieldConfig, hex_to_bgr
from starfield.errors import ConfigurationError


def test_defaults():
    config = StarfieldConfig.from_options()
    assert config.star_count == "auto"
    assert config.speed == 0.6
    assert config.focal_length == 300
    assert config.star_colors.hue_range == (180, 260)
    assert config.star_size.range == (0.5, 2.0)
    assert config.background == Background("radial", ("#001018", "#000000"))
    assert config.trail_effect == 0.3


def test_nested_groups_override_only_given_keys():
    config = StarfieldConfig().merged({"star_colors": {"saturation": 10}, "star_size": {"max": 4}})
    assert config.star_colors.saturation == 10
    assert config.star_colors.hue == (180, 260)
    assert config.star_colors.lightness == 90
    assert config.star_size.range == (0.5, 4)


def test_scalar_hue_collapses_range():
    config = StarfieldConfig().merged({"star_colors": {"hue": 0}})
    assert config.star_colors.hue_range == (0, 0)
    config = config.merged({"star_colors": {"hue": [10, 20]}})
    assert config.star_colors.hue_range == (10, 20)


def test_background_can_be_disabled_and_restored():
    config = StarfieldConfig().merged({"background": False})
    assert config.background is False
    config = config.merged({"background": {"kind": "linear"}})
    assert config.background == Background("linear", ("#001018", "#000000"))


@pytest.mark.parametrize(
    "options",
    [
        {"speed": 0},
        {"speed": 11},
        {"speed": float("nan")},
        {"speed": "fast"},
        {"speed": True},
        {"focal_length": 49},
        {"trail_effect": 1.5},
        {"star_count": 0},
        {"star_count": 10001},
        {"star_count": "many"},
        {"star_count": 2.5},
        {"max_star_count": 99},
        {"max_star_count": 50001},
        {"star_size": {"min": 0}},
        {"star_size": {"min": 3, "max": 2}},
        {"star_size": {"min": 5}},
        {"star_colors": {"hue": [10, 20, 30]}},
        {"star_colors": {"hue": [10, 400]}},
        {"star_colors": {"hue": -1}},
        {"star_colors": {"saturation": 101}},
        {"star_colors": {"tint": 3}},
        {"device_detection": {"mobile": 0}},
        {"background": True},
        {"background": {"kind": "conic"}},
        {"background": {"colors": ["#000"]}},
        {"background": {"colors": ["#000", "black"]}},
        {"debug": "yes"},
        {"warp_drive": 9},
    ],
)
def test_invalid_options_are_rejected(options):
    with pytest.raises(ConfigurationError):
        StarfieldConfig().merged(options)


def test_rejected_update_leaves_config_untouched():
    config = StarfieldConfig().merged({"speed": 2})
    with pytest.raises(ConfigurationError):
        config.merged({"speed": 3, "trail_effect": 5})
    assert config.speed == 2
    assert config.trail_effect == 0.3


def test_cached_count_is_clamped():
    config = StarfieldConfig(max_star_count=1000)
    assert config.initial_star_count(cached=50000) == 1000
    assert config.initial_star_count(cached=20) == 100
    assert config.initial_star_count(cached=640) == 640


def test_explicit_count_wins_over_cache():
    config = StarfieldConfig(star_count=321)
    assert config.initial_star_count(cached=900) == 321


def test_device_detection_without_cache(monkeypatch):
    config = StarfieldConfig().merged({"device_detection": {"mobile": 111, "desktop": 999}})
    monkeypatch.setattr("os.cpu_count", lambda: 2)
    assert config.initial_star_count() == 111
    monkeypatch.setattr("os.cpu_count", lambda: 16)
    assert config.initial_star_count() == 999


def test_hex_to_bgr():
    assert hex_to_bgr("#001018") == (0x18, 0x10, 0x00)
    assert hex_to_bgr("#f00") == (0, 0, 255)
