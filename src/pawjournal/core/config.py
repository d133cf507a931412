"""
Hierarchical configuration management.

Loads configuration from multiple sources with this precedence (highest wins):
    1. Environment variables (PREFIX_SECTION__KEY)
    2. Config file (YAML or JSON)
    3. Built-in defaults

The built-in defaults carry every analytics threshold, score weight and
reminder bound, so the engine behaves identically with no file at all.

Usage:
    config = Config(config_file="pawjournal.yaml")

    config.get("analytics.window_days")         # 7
    config.get("score.weights.activity")        # 1.0
    config.get("reminders.max_reminder_slots")  # 10
"""

import copy
import json
import os
from typing import Any

import yaml

from .exceptions import ConfigurationError

_DEFAULT_ENV_PREFIX = "PAWJOURNAL_"
_DEFAULT_DATA_DIR_NAME = ".pawjournal-data"

DEFAULTS: dict[str, Any] = {
    "analytics": {
        "window_days": 7,
        "activity_change_pct": 20,
        "recurring_symptom_min": 2,
        "digestive_issue_min": 2,
        "low_mood_threshold": 3.0,
        "min_meals_per_day": 2,
        "max_correlated_meal_types": 3,
    },
    "score": {
        "daily_activity_goal_minutes": 30,
        "target_meals_per_day": 2,
        "water_logs_per_day": 1,
        "symptom_penalty": 10,
        "severity_penalty": 5,
        "digestion_penalty": 10,
        "mood_penalty": 10,
        "weights": {
            "activity": 1.0,
            "nutrition": 1.0,
            "wellness": 1.0,
            "consistency": 1.0,
        },
    },
    "reminders": {
        "max_reminder_slots": 10,
        "timezone": "UTC",
    },
    "assistant": {
        "model": "gpt-4o-mini",
        "temperature": 0.7,
        "max_tokens": 1024,
        "recent_event_limit": 50,
    },
    "routine": {
        "meal_reminders": False,
        "walk_reminders": False,
        "breakfast_time": "08:00",
        "dinner_time": "18:00",
        "morning_walk_time": "07:30",
        "evening_walk_time": "17:30",
    },
    "logging": {
        "level": "WARNING",
        "file": "",
        "rotation": "10 MB",
        "retention": "7 days",
    },
}


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """Merge *source* into *target* in place; nested mappings merge key by key."""
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, dict):
            deep_merge(existing, value)
        else:
            target[key] = value
    return target


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Nested overrides from ``PREFIX_SECTION__KEY=value`` variables.

    Values stay strings; the typed getters coerce them on read.
    """
    if not prefix:
        return {}
    overrides: dict[str, Any] = {}
    for env_key, env_value in (os.environ if environ is None else environ).items():
        if not env_key.startswith(prefix):
            continue
        *sections, leaf = env_key[len(prefix) :].lower().split("__")
        node = overrides
        for section in sections:
            if not isinstance(node.get(section), dict):
                node[section] = {}
            node = node[section]
        node[leaf] = env_value
    return overrides


def load_config_file(path: str) -> dict[str, Any]:
    """Read a YAML or JSON file; other extensions contribute nothing."""
    ext = os.path.splitext(path)[1].lower()
    if ext not in (".yaml", ".yml", ".json"):
        return {}
    try:
        with open(path) as f:
            data = json.load(f) if ext == ".json" else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping at the top level")
    return data


class Config:
    """
    Engine configuration: built-in defaults, then a config file, then env vars.

    Env vars use double underscores for nesting:
    PAWJOURNAL_SCORE__DAILY_ACTIVITY_GOAL_MINUTES=45 ->
    config["score"]["daily_activity_goal_minutes"] = "45"

    Values the engine cannot work with (a zero-day window, negative score
    weights, non-numeric thresholds) raise ``ConfigurationError`` at load.
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = _DEFAULT_ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: Path to a YAML or JSON file. Missing files are ignored.
            env_prefix: Prefix for environment overrides; empty disables them.
            data_dir: Base directory for engine data. Defaults to ~/.pawjournal-data.
            defaults: Host-specific defaults merged over the built-in ones.
        """
        self.config_file = config_file
        self.env_prefix = env_prefix or ""
        self._data_dir = os.path.expanduser(data_dir or os.path.join("~", _DEFAULT_DATA_DIR_NAME))

        self.config_data: dict[str, Any] = copy.deepcopy(DEFAULTS)
        self.config_data["paths"] = {
            "data_dir": self._data_dir,
            "log_dir": os.path.join(self._data_dir, "logs"),
        }
        deep_merge(self.config_data, copy.deepcopy(defaults or {}))
        if config_file and os.path.exists(config_file):
            deep_merge(self.config_data, load_config_file(config_file))
        deep_merge(self.config_data, env_overrides(self.env_prefix))

        self.validate()

    def validate(self) -> None:
        """Check the values the analytics and reminder code depend on."""
        for key in ("analytics.window_days", "reminders.max_reminder_slots", "assistant.recent_event_limit"):
            if self.get_int(key, 1) < 1:
                raise ConfigurationError(f"{key} must be at least 1")
        weights = self.get("score.weights", {})
        if not isinstance(weights, dict):
            raise ConfigurationError("score.weights must be a mapping of sub-score name to weight")
        for name in weights:
            if self.get_float(f"score.weights.{name}") < 0:
                raise ConfigurationError(f"score.weights.{name} must not be negative")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a value by dot-notation path.

        Args:
            key_path: e.g. "analytics.window_days", "score.weights.activity"
            default: Returned when any segment is missing.
        """
        node: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_int(self, key_path: str, default: int = 0) -> int:
        """Get a value coerced to int (env overrides arrive as strings)."""
        return int(self._numeric(key_path, default))

    def get_float(self, key_path: str, default: float = 0.0) -> float:
        return self._numeric(key_path, default)

    def _numeric(self, key_path: str, default: float) -> float:
        value = self.get(key_path, default)
        if isinstance(value, bool):
            raise ConfigurationError(f"{key_path} must be numeric, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key_path} must be numeric, got {value!r}") from e

    def set(self, key_path: str, value: Any) -> None:
        """Set a value by dot-notation path, creating intermediate sections."""
        *sections, leaf = key_path.split(".")
        node = self.config_data
        for section in sections:
            if not isinstance(node.get(section), dict):
                node[section] = {}
            node = node[section]
        node[leaf] = value

    def get_data_dir(self) -> str:
        """Resolved data directory."""
        return os.path.expanduser(self.get("paths.data_dir", self._data_dir))

    def ensure_directories(self) -> None:
        """Create the data and log directories."""
        for path_value in self.get("paths", {}).values():
            if isinstance(path_value, str):
                os.makedirs(os.path.expanduser(path_value), exist_ok=True)


_config_instance: Config | None = None


def get_config(
    config_file: str | None = None,
    env_prefix: str = _DEFAULT_ENV_PREFIX,
    data_dir: str | None = None,
) -> Config:
    """Get or create the process-wide Config."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config(config_file=config_file, env_prefix=env_prefix, data_dir=data_dir)
    return _config_instance


def reset_config() -> None:
    """Drop the process-wide Config (tests use this between cases)."""
    global _config_instance
    _config_instance = None
