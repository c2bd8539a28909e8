import pytest
import yaml

from institutionalized.config import (
    PROVIDERS,
    Preferences,
    available_keys,
    config_file_path,
    detect_available_providers,
    load_preferences,
    save_preferences,
    set_preference,
)
from institutionalized.exceptions import ConfigError


def test_defaults_when_file_missing():
    prefs = load_preferences()

    assert prefs.use_emoji is False
    assert prefs.providers.openai and prefs.providers.gemini and prefs.providers.claude
    assert prefs.providers.priority == "openai"
    assert prefs.providers.delay_threshold == 10


def test_config_path_honours_override(tmp_path):
    assert config_file_path() == tmp_path / "config" / "config.yaml"


def test_save_and_load_roundtrip():
    prefs = Preferences()
    prefs.use_emoji = True
    prefs.providers.gemini = False
    prefs.providers.priority = "claude"
    prefs.providers.delay_threshold = 30

    path = save_preferences(prefs)
    loaded = load_preferences()

    assert path.exists()
    assert loaded == prefs


def test_saved_yaml_shape():
    path = save_preferences(Preferences())
    data = yaml.safe_load(path.read_text())

    assert data == {
        "use_emoji": False,
        "providers": {
            "openai": {"enabled": True},
            "gemini": {"enabled": True},
            "claude": {"enabled": True},
            "priority": "openai",
            "delay_threshold": 10,
        },
    }


def test_partial_file_keeps_defaults():
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text("use_emoji: true\nproviders:\n  gemini:\n    enabled: false\n")

    prefs = load_preferences()

    assert prefs.use_emoji is True
    assert prefs.providers.gemini is False
    assert prefs.providers.openai is True
    assert prefs.providers.delay_threshold == 10


def test_unreadable_yaml_falls_back_to_defaults():
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text("use_emoji: [unclosed\n")

    assert load_preferences() == Preferences()


@pytest.mark.parametrize(
    "value,expected",
    [("true", True), ("YES", True), ("1", True), ("off", False), ("0", False)],
)
def test_set_bool_values(value, expected):
    prefs = set_preference(Preferences(), "use_emoji", value)
    assert prefs.use_emoji is expected


def test_set_provider_enabled():
    prefs = set_preference(Preferences(), "providers.claude.enabled", "false")
    assert prefs.providers.claude is False


def test_set_invalid_bool():
    with pytest.raises(ConfigError):
        set_preference(Preferences(), "use_emoji", "maybe")


def test_set_priority_validates_name():
    prefs = set_preference(Preferences(), "providers.priority", "gemini")
    assert prefs.providers.priority == "gemini"

    with pytest.raises(ConfigError) as ei:
        set_preference(prefs, "providers.priority", "mistral")
    assert "mistral" in str(ei.value)
    assert prefs.providers.priority == "gemini"


@pytest.mark.parametrize("value", ["1", "300", "45"])
def test_delay_threshold_in_range(value):
    prefs = set_preference(Preferences(), "providers.delay_threshold", value)
    assert prefs.providers.delay_threshold == int(value)


@pytest.mark.parametrize("value", ["0", "301", "-5", "ten", "1.5"])
def test_delay_threshold_rejected_not_clamped(value):
    prefs = Preferences()
    with pytest.raises(ConfigError):
        set_preference(prefs, "providers.delay_threshold", value)
    assert prefs.providers.delay_threshold == 10


@pytest.mark.parametrize("key", ["colour", "providers.mistral.enabled", "providers"])
def test_unknown_key(key):
    with pytest.raises(ConfigError) as ei:
        set_preference(Preferences(), key, "true")
    assert "unknown config key" in str(ei.value)


def test_available_keys_cover_every_provider():
    keys = available_keys()
    for name in PROVIDERS:
        assert f"providers.{name}.enabled" in keys


def test_detect_available_providers():
    env = {"GEMINI_API_KEY": "g", "OPENAI_API_KEY": "", "ANTHROPIC_API_KEY": "a"}
    assert detect_available_providers(env) == ["gemini", "claude"]



@pytest.mark.parametrize(
    "text, expected",
    [("'false'", False), ('"no"', False), ("'on'", True), ("true", True)],
)
def test_quoted_bools_in_file_use_set_vocabulary(text, expected):
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text(
        f"use_emoji: {text}\nproviders:\n  claude:\n    enabled: {text}\n"
    )

    prefs = load_preferences()

    assert prefs.use_emoji is expected
    assert prefs.providers.claude is expected


def test_unrecognised_bool_in_file_keeps_default(caplog):
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text("use_emoji: maybe\n")

    with caplog.at_level("WARNING", logger="institutionalized.config"):
        prefs = load_preferences()

    assert prefs.use_emoji is False
    assert "use_emoji" in caplog.text


@pytest.mark.parametrize("value", ["0", "-5", "301", "'ten'", "true"])
def test_out_of_range_threshold_in_file_keeps_default(value, caplog):
    path = config_file_path()
    path.parent.mkdir(parents=True)
    path.write_text(f"providers:\n  delay_threshold: {value}\n")

    with caplog.at_level("WARNING", logger="institutionalized.config"):
        prefs = load_preferences()

    assert prefs.providers.delay_threshold == 10
    assert "delay_threshold" in caplog.text
