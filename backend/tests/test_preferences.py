import pytest

from sunpulse.core.errors import InvalidPreferences
from sunpulse.services.gateway import GatewayService
from sunpulse.services.preferences import PreferenceStore


def test_defaults():
    store = PreferenceStore()
    config = store.get()
    assert config["window"] == {
        "width": 280,
        "height": 280,
        "alwaysOnTop": True,
        "frameRate": 30,
        "fov": 45,
        "quality": "balanced",
    }
    assert config["rendering"] == {"source": "auto", "band": "auto", "view": "norm", "side": "near"}
    assert config["hologram"] == {"preset": "off", "streaming": False, "webrtc": False}


def test_getters_reflect_applied_config():
    store = PreferenceStore()
    store.apply({
        "window": {"width": 400, "height": 300, "alwaysOnTop": False, "frameRate": 60, "fov": 35},
        "hologram": {"streaming": True, "preset": "pepper"},
    })
    assert store.window_geometry() == (400, 300)
    assert store.always_on_top() is False
    assert store.frame_rate() == 60
    assert store.field_of_view() == 35
    assert store.streaming_enabled() is True
    assert store.preset() == "pepper"


def test_partial_apply_keeps_other_fields():
    store = PreferenceStore()
    config = store.apply({"rendering": {"band": "171"}})
    assert config["rendering"] == {"source": "auto", "band": "171", "view": "norm", "side": "near"}
    assert config["window"]["width"] == 280


@pytest.mark.parametrize("size,expected", [(100, 220), (1000, 640), (333.6, 334)])
def test_window_size_is_clamped(size, expected):
    store = PreferenceStore()
    store.apply({"window": {"width": size, "height": size}})
    assert store.window_geometry() == (expected, expected)


def test_unknown_sections_are_ignored():
    store = PreferenceStore()
    assert store.apply({"theme": "dark"}) == PreferenceStore().get()


def test_gateway_exposes_config_pair():
    gateway = GatewayService(sources=None, cache=None, preferences=PreferenceStore())
    gateway.apply_config({"hologram": {"webrtc": True}})
    assert gateway.config()["hologram"]["webrtc"] is True


@pytest.mark.parametrize("incoming", [
    ["window"],
    {"window": "wide"},
    {"window": {"width": "wide"}},
    {"window": {"height": None}},
    {"window": {"frameRate": "fast"}},
])
def test_invalid_config_is_rejected_and_keeps_current(incoming):
    store = PreferenceStore()
    store.apply({"window": {"width": 400}})
    before = store.get()

    with pytest.raises(InvalidPreferences):
        store.apply(incoming)

    assert store.get() == before
