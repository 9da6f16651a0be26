import json

from livebattery import config


def test_first_run_writes_defaults(tmp_path):
    loaded = config.load_config()
    assert loaded == config.DEFAULTS
    path = tmp_path / "config" / "livebattery" / "config.json"
    assert json.loads(path.read_text()) == config.DEFAULTS


def test_user_values_are_deep_merged():
    path = config.get_config_path()
    path.write_text(json.dumps({"privileged_read": {"enabled": False}, "device_profiles": {"x": 1}}))

    loaded = config.load_config()
    assert loaded["privileged_read"]["enabled"] is False
    assert loaded["privileged_read"]["timeout_seconds"] == 2.0
    assert loaded["device_profiles"] == {"x": 1}


def test_corrupt_config_falls_back_to_defaults():
    config.get_config_path().write_text("{not json")
    assert config.load_config() == config.DEFAULTS


def test_defaults_are_not_mutated_by_callers():
    loaded = config.load_config()
    loaded["paths"]["temp"].append("/x")
    assert config.DEFAULTS["paths"]["temp"] == []


def test_get_dot_notation():
    data = {"a": {"b": {"c": 3}}}
    assert config.get(data, "a.b.c") == 3
    assert config.get(data, "a.x", "fallback") == "fallback"


def test_config_accessor():
    cfg = config.Config({"polling": {"interval_seconds": 30}})
    assert cfg.polling["interval_seconds"] == 30
    assert cfg.notifications == config.DEFAULTS["notifications"]
    assert cfg["polling.interval_seconds"] == 30
