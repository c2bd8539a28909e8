"""Preference store and provider table for institutionalized."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "INSTITUTIONALIZED_CONFIG_HOME"
CONFIG_FILE_NAME = "config.yaml"

# Tie-break order: priority provider first, then the rest in this order.
PROVIDER_ORDER = ("openai", "gemini", "claude")

PROVIDERS: Dict[str, Dict[str, str]] = {
    "openai": {
        "display_name": "OpenAI",
        "api_key_env": "OPENAI_API_KEY",
        "model": "gpt-3.5-turbo",
        "endpoint": "https://api.openai.com/v1",
    },
    "gemini": {
        "display_name": "Gemini",
        "api_key_env": "GEMINI_API_KEY",
        "model": "gemini-pro",
        "endpoint": "https://generativelanguage.googleapis.com/v1beta",
    },
    "claude": {
        "display_name": "Claude",
        "api_key_env": "ANTHROPIC_API_KEY",
        "model": "claude-3-haiku-20240307",
        "endpoint": "https://api.anthropic.com",
    },
}

MIN_DELAY_THRESHOLD = 1
MAX_DELAY_THRESHOLD = 300

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@dataclass
class ProviderSettings:
    """Per-provider enablement plus ordering and deadline."""

    openai: bool = True
    gemini: bool = True
    claude: bool = True
    priority: str = "openai"
    # Seconds each backend attempt may take before falling back.
    delay_threshold: int = 10

    def is_enabled(self, provider: str) -> bool:
        return bool(getattr(self, provider, False))


@dataclass
class Preferences:
    """User preferences persisted as YAML."""

    use_emoji: bool = False
    providers: ProviderSettings = field(default_factory=ProviderSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the on-disk YAML shape."""
        data = asdict(self)
        prov = data["providers"]
        return {
            "use_emoji": data["use_emoji"],
            "providers": {
                **{name: {"enabled": prov[name]} for name in PROVIDER_ORDER},
                "priority": prov["priority"],
                "delay_threshold": prov["delay_threshold"],
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Preferences":
        prefs = cls()
        if not isinstance(data, Mapping):
            return prefs
        if "use_emoji" in data:
            prefs.use_emoji = _load_bool(
                "use_emoji", data["use_emoji"], prefs.use_emoji
            )
        raw = data.get("providers")
        if isinstance(raw, Mapping):
            settings = prefs.providers
            for name in PROVIDER_ORDER:
                entry = raw.get(name)
                if isinstance(entry, Mapping) and "enabled" in entry:
                    key = f"providers.{name}.enabled"
                    current = settings.is_enabled(name)
                    setattr(settings, name, _load_bool(key, entry["enabled"], current))
            if raw.get("priority"):
                settings.priority = str(raw["priority"])
            threshold = raw.get("delay_threshold")
            if threshold is not None:
                settings.delay_threshold = _load_threshold(
                    threshold, settings.delay_threshold
                )
        return prefs


def config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "institutionalized"


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def load_preferences(path: Optional[Path] = None) -> Preferences:
    """Load preferences, falling back to defaults when missing or unreadable."""
    cfg_path = path or config_file_path()
    if not cfg_path.exists():
        return Preferences()
    try:
        data = yaml.safe_load(cfg_path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, exc)
        return Preferences()
    return Preferences.from_dict(data or {})


def save_preferences(prefs: Preferences, path: Optional[Path] = None) -> Path:
    """Persist preferences as YAML, creating the directory if needed."""
    cfg_path = path or config_file_path()
    try:
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        cfg_path.write_text(yaml.safe_dump(prefs.to_dict(), sort_keys=False))
    except OSError as exc:
        raise ConfigError(f"failed to write config file {cfg_path}: {exc}") from exc
    return cfg_path


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"invalid value for {key}: {value} (expected true/false)")


def _load_bool(key: str, value: Any, default: bool) -> bool:
    """Coerce a YAML value to bool; quoted strings use the ``set`` vocabulary."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return _parse_bool(key, value)
        except ConfigError:
            pass
    logger.warning("Ignoring invalid %s in config: %r", key, value)
    return default


def _load_threshold(value: Any, default: int) -> int:
    if (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_DELAY_THRESHOLD <= value <= MAX_DELAY_THRESHOLD
    ):
        return value
    logger.warning(
        "Ignoring invalid providers.delay_threshold in config: %r (expected %d-%d)",
        value,
        MIN_DELAY_THRESHOLD,
        MAX_DELAY_THRESHOLD,
    )
    return default


def available_keys() -> List[str]:
    keys = ["use_emoji"]
    keys += [f"providers.{name}.enabled" for name in PROVIDER_ORDER]
    keys += ["providers.priority", "providers.delay_threshold"]
    return keys


def set_preference(prefs: Preferences, key: str, value: str) -> Preferences:
    """Validate and apply a single ``key = value`` update in place.

    Out-of-range or unknown values raise ConfigError; nothing is clamped.
    """
    if key == "use_emoji":
        prefs.use_emoji = _parse_bool(key, value)
        return prefs

    parts = key.split(".")
    if len(parts) == 3 and parts[0] == "providers" and parts[2] == "enabled":
        name = parts[1]
        if name in PROVIDERS:
            setattr(prefs.providers, name, _parse_bool(key, value))
            return prefs

    if key == "providers.priority":
        if value not in PROVIDERS:
            raise ConfigError(
                "invalid value for providers.priority: {} (expected {})".format(
                    value, "/".join(PROVIDER_ORDER)
                )
            )
        prefs.providers.priority = value
        return prefs

    if key == "providers.delay_threshold":
        try:
            seconds = int(value)
        except ValueError:
            raise ConfigError(
                f"invalid value for {key}: {value} (expected number of seconds)"
            ) from None
        if not MIN_DELAY_THRESHOLD <= seconds <= MAX_DELAY_THRESHOLD:
            raise ConfigError(
                "invalid value for {}: {} (expected {}-{} seconds)".format(
                    key, seconds, MIN_DELAY_THRESHOLD, MAX_DELAY_THRESHOLD
                )
            )
        prefs.providers.delay_threshold = seconds
        return prefs

    raise ConfigError(
        "unknown config key: {} (available: {})".format(
            key, ", ".join(available_keys())
        )
    )


def detect_available_providers(
    env: Optional[Mapping[str, str]] = None,
) -> List[str]:
    """Return provider keys whose credential variable is set and non-empty."""
    env_dict = os.environ if env is None else env
    found: List[str] = []
    for name in PROVIDER_ORDER:
        key_name = PROVIDERS[name]["api_key_env"]
        if (env_dict.get(key_name) or "").strip():
            found.append(name)
    return found
