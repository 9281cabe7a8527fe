#!/usr/bin/env python3

import os
import re
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional, Union

import logging
import sys

import yaml

from .exit_codes import ConfigError

logger = logging.getLogger("zgit")

CONFIG_ENV_VAR = "ZGIT_CONFIG"
ENV_PREFIX = "ZGIT_"
CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
FLOAT_PATTERN = re.compile(r"\d+\.\d*|\.\d+")

# Registry location shared with existing zg installs
DEFAULT_REPOS_FILE = "~/.config/zg-repos.json"


def setup_logging(level: Union[str, int] = "WARNING", fmt: str = "%(levelname)s: %(message)s") -> None:
    """Send zgit log records to stderr at the given level."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt))

    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def get_config_dir() -> Path:
    return Path.home() / '.config' / 'zgit'


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Checks in order:
    1. ZGIT_CONFIG environment variable
    2. ~/.config/zgit/ directory (json, toml, yaml)
    """
    if CONFIG_ENV_VAR in os.environ:
        return Path(os.environ[CONFIG_ENV_VAR]).expanduser()

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        "general": {
            "repos_file": DEFAULT_REPOS_FILE,
            "git_binary": "git",
            "max_workers": 8,
            "timeout_seconds": 30,
        },
        "status": {
            "stop_at_first_untracked": False,
        },
        "logging": {
            "level": "WARNING",
            "format": "%(levelname)s: %(message)s",
        },
    }


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    suffix = config_path.suffix.lower()
    try:
        if suffix == '.toml':
            with open(config_path, 'rb') as f:
                file_config = tomllib.load(f)
        elif suffix in ('.yaml', '.yml'):
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f)
        else:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {config_path}: {e}") from e

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return file_config


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration.

    Layers, later wins: defaults, config file, ZGIT_* environment variables.

    Args:
        config_path: Explicit config file; resolved with get_config_path() if None

    Raises:
        ConfigError: If an existing config file cannot be parsed
    """
    config_path = Path(config_path).expanduser() if config_path else get_config_path()

    config = get_default_config()

    if config_path.exists():
        config = merge_configs(config, _read_config_file(config_path))
        logger.debug(f"Loaded config from {config_path}")

    return apply_env_overrides(config)


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config, environ=None):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: ZGIT_SECTION_KEY
    For example: ZGIT_GENERAL_MAX_WORKERS=16

    ZGIT_CONFIG names the config file itself and ZGIT_REPOS_FILE is a
    shorthand for ZGIT_GENERAL_REPOS_FILE.
    """
    environ = os.environ if environ is None else environ

    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX) or env_key == CONFIG_ENV_VAR:
            continue

        if env_key == "ZGIT_REPOS_FILE":
            config.setdefault("general", {})["repos_file"] = value
            continue

        key_parts = env_key[len(ENV_PREFIX):].lower().split('_')

        # Convert value
        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        elif FLOAT_PATTERN.fullmatch(value):
            typed_value = float(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if matched_key is None:
                break

            if i + best_match_len == len(key_parts):
                current_level[matched_key] = typed_value
                break

            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                break

    return config


def get_repos_file(config: Dict[str, Any]) -> Path:
    """Registry file path from a loaded config."""
    return Path(config.get("general", {}).get("repos_file") or DEFAULT_REPOS_FILE).expanduser()


def get_int_setting(config: Dict[str, Any], section: str, key: str, default: int, minimum: int = 1) -> int:
    """
    Read an integer setting, validating it.

    Raises:
        ConfigError: If the value is not an integer >= minimum
    """
    value = config.get(section, {}).get(key, default)
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{section}.{key} must be an integer, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{section}.{key} must be at least {minimum}, got {value}")
    return value


def get_float_setting(config: Dict[str, Any], section: str, key: str, default: float) -> float:
    """
    Read a positive number setting, validating it.

    Raises:
        ConfigError: If the value is not a number > 0
    """
    value = config.get(section, {}).get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{section}.{key} must be a number, got {value!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{section}.{key} must be a number, got {value!r}")
    if not value > 0 or value == float('inf'):
        raise ConfigError(f"{section}.{key} must be a positive number, got {value}")
    return value
