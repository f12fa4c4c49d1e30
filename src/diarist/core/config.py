"""
Layered configuration for a journal.

Three layers are merged, later ones winning:

    defaults  <  config file (YAML or JSON)  <  DIARIST_SECTION__KEY env vars

Environment values are read as YAML scalars, so ``DIARIST_JOURNAL__TOP_TAGS=5``
arrives as the integer 5 and ``DIARIST_STORAGE__COMPRESS=true`` as True.

Nothing here is global. Build one Config at startup and hand it to
``diarist.app.build_journal``:

    config = Config(config_file="~/.diarist.yaml")
    config.get("journal.trend_weeks")
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError

ENV_PREFIX = "DIARIST_"
DATA_DIR_NAME = ".diarist-data"

_TRUE_STRINGS = ("1", "true", "yes", "on")


def _defaults(data_dir: str) -> dict[str, Any]:
    return {
        "paths": {
            "data_dir": data_dir,
            "storage_dir": os.path.join(data_dir, "storage"),
            "log_dir": os.path.join(data_dir, "logs"),
        },
        "storage": {"backend": "local", "compress": False},
        "journal": {
            "default_title": "Untitled Entry",
            "trend_weeks": 8,
            "top_tags": 10,
            "week_start": "sunday",
        },
        "logging": {"level": "WARNING", "file": ""},
    }


def _merge(into: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge ``overlay`` into ``into`` in place; nested mappings merge key by key."""
    for key, value in overlay.items():
        current = into.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge(current, value)
        else:
            into[key] = value
    return into


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Parse a .yaml/.yml or .json file into a mapping.

    Files with any other suffix contribute nothing.

    Raises:
        ConfigurationError: The file does not parse or is not a mapping.
    """
    path = Path(path).expanduser()
    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        return {}

    try:
        text = path.read_text()
        data = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _env_value(raw: str) -> Any:
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    # Only plain scalars are coerced; anything structured stays a string.
    return value if isinstance(value, (str, int, float, bool)) else raw


def env_overrides(prefix: str, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Nested mapping built from ``PREFIX_SECTION__KEY`` variables."""
    overrides: dict[str, Any] = {}
    if not prefix:
        return overrides

    for name, raw in (os.environ if environ is None else environ).items():
        if not name.startswith(prefix):
            continue
        *sections, leaf = name[len(prefix) :].lower().split("__")
        node = overrides
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = _env_value(raw)
    return overrides


class Config:
    """
    Merged configuration with dot-path access.

    ``config.get("paths.storage_dir")`` walks nested sections; a missing
    section or key gives the default instead of raising.
    """

    def __init__(
        self,
        config_file: str | None = None,
        env_prefix: str = ENV_PREFIX,
        data_dir: str | None = None,
        defaults: dict[str, Any] | None = None,
    ):
        """
        Args:
            config_file: YAML or JSON file; silently skipped when it does not exist.
            env_prefix: Prefix for environment overrides. Empty disables them.
            data_dir: Root for journal data. Defaults to ~/.diarist-data.
            defaults: Extra defaults layered over the built-in ones.
        """
        self.config_file = os.path.expanduser(config_file) if config_file else None
        self.env_prefix = env_prefix or ""
        self.data_dir = os.path.expanduser(data_dir or os.path.join("~", DATA_DIR_NAME))

        self.config_data = _defaults(self.data_dir)
        _merge(self.config_data, defaults or {})
        if self.config_file and os.path.exists(self.config_file):
            _merge(self.config_data, read_config_file(self.config_file))
        _merge(self.config_data, env_overrides(self.env_prefix))

    def __repr__(self) -> str:
        return f"Config(config_file={self.config_file!r}, data_dir={self.data_dir!r})"

    def get(self, key_path: str, default: Any = None) -> Any:
        node: Any = self.config_data
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key_path: str, value: Any) -> None:
        *sections, leaf = key_path.split(".")
        node = self.config_data
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = value

    def get_bool(self, key_path: str, default: bool = False) -> bool:
        """Read a flag that may still be a string (set by hand or from a file)."""
        value = self.get(key_path, default)
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    def get_data_dir(self) -> str:
        return os.path.expanduser(self.get("paths.data_dir", self.data_dir))

    def ensure_directories(self) -> None:
        """Create every directory named under ``paths``."""
        for value in self.get("paths", {}).values():
            if isinstance(value, str):
                os.makedirs(os.path.expanduser(value), exist_ok=True)
