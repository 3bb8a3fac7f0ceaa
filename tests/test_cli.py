from starfield.__main__ import build_options, get_args
from starfield.config import StarfieldConfig
from starfield.display import WindowHost
from starfield.surface import Surface


def test_default_options_are_valid():
    options = build_options(get_args([]))
    config = StarfieldConfig.from_options(options)
    assert config.star_count == "auto"
    assert config.star_colors.hue_range == (180, 260)


def test_options_from_flags():
    args = get_args(["--star-count", "400", "--hue", "30", "--no-background", "--trail", "0", "--debug"])
    config = StarfieldConfig.from_options(build_options(args))
    assert config.star_count == 400
    assert config.star_colors.hue_range == (30, 30)
    assert config.background is False
    assert config.trail_effect == 0
    assert config.debug


def test_window_host_keeps_one_pending_frame():
    host = WindowHost(Surface(10, 10))
    calls = []
    first = host.request_frame(lambda: calls.append(1))
    host.cancel_frame(first)
    assert host._callback is None

    host.request_frame(lambda: calls.append(2))
    host.cancel_frame(first)
    assert host._callback is not None


def test_window_host_listeners():
    host = WindowHost(Surface(10, 10))
    listener = lambda width, height: None  # noqa: E731
    host.add_resize_listener(listener)
    host.remove_resize_listener(listener)
    host.remove_resize_listener(listener)
    assert host._listeners == []
