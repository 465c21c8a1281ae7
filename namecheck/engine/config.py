"""
YAML configuration for namecheck.

A config file (``.namecheck.yml`` or ``namecheck.yml``, found by walking up
from the analyzed path) is merged over DEFAULTS: scalar keys replace the
default, ``rule_severities`` and ``rule_configs`` are merged per rule.
Example::

    enabled_rules: ["naming.*"]
    severity_threshold: warn
    rule_severities:
      naming.conventions: error
    rule_configs:
      naming.conventions:
        skip_kinds: [local, parameter]
"""

import copy
import logging
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_NAMES = [".namecheck.yml", ".namecheck.yaml", "namecheck.yml", "namecheck.yaml"]

DEFAULTS: Dict[str, Any] = {
    "enabled_rules": ["*"],
    "max_findings_per_file": 200,
    "severity_threshold": "info",
    "rule_severities": {
        "naming.conventions": "warn",
    },
    "rule_configs": {
        "naming.conventions": {
            "skip_kinds": [],
        },
    },
}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load config from {path}: {reason}")
        self.path = path


@dataclass
class EngineConfig:
    """Configuration for the namecheck engine."""

    # Rule patterns to run ("*" for all)
    enabled_rules: List[str] = field(default_factory=lambda: ["*"])
    max_findings_per_file: int = 200

    # "info", "warn", "error"
    severity_threshold: str = "info"

    # Rule severity overrides (rule_id -> severity)
    rule_severities: Dict[str, str] = field(default_factory=dict)

    # Rule-specific configuration (rule_id -> options)
    rule_configs: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def _mapping(config_path: str, key: str, value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(config_path, f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def load_config(config_path: Optional[str] = None, required: bool = False) -> EngineConfig:
    """
    Build an EngineConfig from DEFAULTS and, when it exists, the YAML file at ``config_path``.

    Args:
        config_path: YAML file to merge over the defaults
        required: The path was given explicitly, so a missing file is an error

    Raises:
        ConfigError: The file is missing (when required), unreadable, not YAML,
            not a mapping, has unknown keys or a malformed per-rule section
    """
    merged = copy.deepcopy(DEFAULTS)
    if not config_path:
        return EngineConfig(**merged)
    if not os.path.exists(config_path):
        if required:
            raise ConfigError(config_path, "file does not exist")
        return EngineConfig(**merged)

    try:
        with open(config_path, encoding='utf-8') as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(config_path, str(e)) from e

    loaded = loaded or {}
    if not isinstance(loaded, dict):
        raise ConfigError(config_path, "top level must be a mapping")

    unknown = sorted(set(loaded) - set(DEFAULTS))
    if unknown:
        raise ConfigError(config_path, f"unknown keys: {', '.join(unknown)}")

    for key, value in loaded.items():
        if key == "rule_severities":
            merged[key].update(_mapping(config_path, key, value))
        elif key == "rule_configs":
            for rule_id, options in _mapping(config_path, key, value).items():
                options = _mapping(config_path, f"{key}.{rule_id}", options)
                merged[key].setdefault(rule_id, {}).update(options)
        else:
            merged[key] = value

    logger.info(f"Loaded config from {config_path}")
    return EngineConfig(**merged)


def get_default_config() -> EngineConfig:
    return load_config(None)


def save_config(config: EngineConfig, config_path: str) -> None:
    """Write ``config`` as YAML, creating the parent directory if needed."""
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False, sort_keys=False)


def find_config_file(start_path: str = ".") -> Optional[str]:
    """
    Return the nearest config file at or above ``start_path`` (a file or directory).

    Within one directory CONFIG_NAMES are tried in order.
    """
    directory = os.path.abspath(start_path)
    if os.path.isfile(directory):
        directory = os.path.dirname(directory)

    while True:
        for name in CONFIG_NAMES:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
        parent = os.path.dirname(directory)
        if parent == directory:
            return None
        directory = parent


def get_rule_severity(rule_id: str, config: EngineConfig, default: str = "warn") -> str:
    return config.rule_severities.get(rule_id, default)


SEVERITY_ORDER = {"info": 0, "warn": 1, "error": 2}


def meets_threshold(severity: str, config: EngineConfig) -> bool:
    """True if ``severity`` is at or above the configured threshold."""
    return SEVERITY_ORDER.get(severity, 0) >= SEVERITY_ORDER.get(config.severity_threshold, 0)
