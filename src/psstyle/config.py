"""
Configuration loading for psstyle.

Settings come from (lowest to highest precedence):
    1. Built-in defaults (Config())
    2. A YAML file: --config PATH, else $PSSTYLE_CONFIG, else the first
       .psstyle.yaml / psstyle.yaml found walking up from the working
       directory
    3. Command-line flags (applied by the CLI via Config.with_overrides)

Example file:

    indent_size: 4
    max_line_length: 115
    max_blank_lines: 2
    extra_verbs: [Sync]
    exclude: ["build/**"]
    rules:
      PS602: {enabled: true}
      line-length: {severity: error}
      PS701: false          # shorthand for {enabled: false}

Rule keys are validated against the rule registry by the engine, since
this module does not know which rules exist.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from psstyle.errors import ConfigError
from psstyle.logging import get_logger
from psstyle.model import Severity

logger = get_logger(__name__)

CONFIG_FILENAMES = (".psstyle.yaml", "psstyle.yaml")
CONFIG_ENV_VAR = "PSSTYLE_CONFIG"

_INT_KEYS = ("indent_size", "max_line_length", "max_blank_lines")
_LIST_KEYS = ("extra_verbs", "exclude")
_KNOWN_KEYS = frozenset(_INT_KEYS + _LIST_KEYS + ("rules",))


@dataclass(frozen=True)
class RuleSettings:
    """Per-rule overrides. None means "keep the rule's default"."""

    enabled: Optional[bool] = None
    severity: Optional[Severity] = None


@dataclass(frozen=True)
class Config:
    """Resolved settings for a lint run."""

    indent_size: int = 4
    max_line_length: int = 115
    max_blank_lines: int = 2
    extra_verbs: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()
    rules: Mapping[str, RuleSettings] = field(default_factory=dict)
    select: Tuple[str, ...] = ()
    ignore: Tuple[str, ...] = ()
    source: Optional[str] = None

    def with_overrides(self, **changes: Any) -> "Config":
        """Return a copy with the non-None values of ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def config_from_dict(data: Optional[Mapping[str, Any]], source: Optional[str] = None) -> Config:
    """
    Build a Config from a parsed YAML mapping.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    if data is None:
        return Config(source=source)
    where = source or "configuration"
    if not isinstance(data, Mapping):
        raise ConfigError(f"{where}: top level must be a mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{where}: unknown setting(s): {', '.join(unknown)}")

    values: Dict[str, Any] = {"source": source}
    for key in _INT_KEYS:
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{where}: '{key}' must be a positive integer, got {value!r}")
            values[key] = value
    for key in _LIST_KEYS:
        if key in data:
            value = data[key]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{where}: '{key}' must be a list of strings")
            values[key] = tuple(value)
    if "rules" in data:
        values["rules"] = _parse_rules(data["rules"] or {}, where)
    return Config(**values)


def _parse_rules(data: Any, where: str) -> Dict[str, RuleSettings]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{where}: 'rules' must be a mapping of rule id to settings")

    rules: Dict[str, RuleSettings] = {}
    for key, value in data.items():
        key = str(key)
        if isinstance(value, bool):
            rules[key] = RuleSettings(enabled=value)
            continue
        if isinstance(value, str):
            value = {"severity": value}
        if not isinstance(value, Mapping):
            raise ConfigError(f"{where}: settings for rule '{key}' must be a mapping")

        extra = sorted(set(value) - {"enabled", "severity"})
        if extra:
            raise ConfigError(f"{where}: unknown setting(s) for rule '{key}': {', '.join(extra)}")
        enabled = value.get("enabled")
        if enabled is not None and not isinstance(enabled, bool):
            raise ConfigError(f"{where}: 'enabled' for rule '{key}' must be true or false")
        severity = None
        if value.get("severity") is not None:
            try:
                severity = Severity.parse(str(value["severity"]))
            except ValueError as e:
                raise ConfigError(f"{where}: rule '{key}': {e}") from e
        rules[key] = RuleSettings(enabled=enabled, severity=severity)
    return rules


def load_config(path: str) -> Config:
    """
    Load a YAML configuration file.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or holds
            invalid settings
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"configuration file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e
    logger.debug("loaded configuration from %s", path)
    return config_from_dict(data, source=path)


def find_config(start: Optional[str] = None) -> Optional[str]:
    """Return the nearest configuration file at or above ``start``."""
    directory = Path(start or os.getcwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_FILENAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return str(candidate)
    return None


def resolve_config(path: Optional[str] = None, start: Optional[str] = None) -> Config:
    """Load the explicit, environment or discovered configuration, or defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR) or find_config(start)
    if path is None:
        logger.debug("no configuration file found; using defaults")
        return Config()
    return load_config(path)
