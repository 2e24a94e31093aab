#!/usr/bin/env python3
"""
Layered settings for gitplumb repositories.

Settings are merged, in increasing priority, from:
1. Built-in defaults
2. The repository's config file (``.git/config``), if present
3. GITPLUMB_* environment variables

The config file is read as git-style INI with configparser, so configs
written by git itself (tab-indented keys, ``[remote "origin"]``
subsections) load fine. It is written with toml, whose flat ``[core]``
table of ``key = value`` lines is valid INI that git reads as well.
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import logging

import toml

from .exceptions import ConfigError
from .infra.file_store import write_atomic

logger = logging.getLogger(__name__)

ENV_PREFIX = "GITPLUMB_"

SUPPORTED_FORMAT_VERSION = 0

_TRUE_STRINGS = ('true', '1', 'yes', 'on')
_FALSE_STRINGS = ('false', '0', 'no', 'off')


@dataclass(frozen=True)
class CoreSettings:
    """The ``[core]`` section."""
    repositoryformatversion: int = SUPPORTED_FORMAT_VERSION
    filemode: bool = os.name != "nt"
    bare: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repositoryformatversion': self.repositoryformatversion,
            'filemode': self.filemode,
            'bare': self.bare,
        }


@dataclass(frozen=True)
class Settings:
    """Typed snapshot of a repository's configuration."""
    core: CoreSettings = field(default_factory=CoreSettings)

    @property
    def format_version(self) -> int:
        return self.core.repositoryformatversion

    def to_dict(self) -> Dict[str, Any]:
        return {'core': self.core.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Settings':
        """
        Build settings from a merged configuration dictionary.

        Values are coerced to their declared types; unknown keys are ignored.

        Raises:
            ConfigError: If a value cannot be coerced
        """
        core = data.get('core', {})
        if not isinstance(core, Mapping):
            raise ConfigError(f"Config section 'core' must be a table, got {core!r}")
        return cls(core=CoreSettings(
            repositoryformatversion=_coerce_int('core.repositoryformatversion',
                                                core.get('repositoryformatversion')),
            filemode=_coerce_bool('core.filemode', core.get('filemode')),
            bare=_coerce_bool('core.bare', core.get('bare')),
        ))


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for {name}: expected integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] == '-' else text
        if digits.isascii() and digits.isdigit():
            return int(text)
    raise ConfigError(f"Invalid value for {name}: expected integer, got {value!r}")


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        if value.strip().lower() in _TRUE_STRINGS:
            return True
        if value.strip().lower() in _FALSE_STRINGS:
            return False
    raise ConfigError(f"Invalid value for {name}: expected boolean, got {value!r}")


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return Settings().to_dict()


def get_default_settings() -> Settings:
    return Settings()


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a git-style INI config file.

    Section names are lowercased; subsections such as ``[remote "origin"]``
    are kept under their full name, subsection case preserved. Option
    names are lowercased by configparser. Values stay strings and are
    coerced by Settings.from_dict().
    A key with no ``=`` is read as "true" and surrounding double quotes
    are dropped, as git does.

    Returns an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        return {}

    config_parser = configparser.ConfigParser(
        strict=False,
        allow_no_value=True,
        interpolation=None,
        inline_comment_prefixes=('#', ';'),
        default_section='\0',
    )
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_parser.read_file(f)
    except (configparser.Error, UnicodeDecodeError) as e:
        raise ConfigError(f"Error parsing config {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading config {config_path}: {e}") from e

    config: Dict[str, Any] = {}
    for section in config_parser.sections():
        values = config.setdefault(_section_key(section), {})
        for key, value in config_parser.items(section):
            values[key] = _config_value(value)
    return config


def _section_key(section: str) -> str:
    # Section names are case-insensitive in git, subsection names are not.
    name, space, subsection = section.partition(' ')
    return name.lower() + space + subsection


def _config_value(value: Optional[str]) -> str:
    if value is None:
        return 'true'
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


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
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def apply_env_overrides(config, environ: Optional[Mapping[str, str]] = None):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: GITPLUMB_SECTION_KEY
    For example: GITPLUMB_CORE_BARE=true

    Values stay strings here; Settings.from_dict() coerces them.
    """
    environ = os.environ if environ is None else environ

    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue

        key_parts = env_key[len(ENV_PREFIX):].lower().split('_')

        current_level = config
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i : i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                logger.debug(f"Ignoring unknown setting override {env_key}")
                break

            # If we are at the end of the env var, we have found the key to set
            if i + best_match_len == len(key_parts):
                if isinstance(current_level[matched_key], dict):
                    break
                current_level[matched_key] = value
                logger.debug(f"Setting override from {env_key}")
                break

            # Otherwise, we descend into the dictionary
            if isinstance(current_level[matched_key], dict):
                current_level = current_level[matched_key]
                i += best_match_len
            else:
                # Path conflict, e.g., env var is longer but we found a non-dict value
                break

    return config


def resolve_settings(config_path: Optional[Union[str, Path]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolve settings from defaults, an optional config file and the environment.

    Args:
        config_path: Repository config file; skipped when None or missing
        environ: Environment mapping, defaults to os.environ

    Raises:
        ConfigError: If the file is malformed or a value has the wrong type
    """
    config = get_default_config()

    if config_path is not None:
        file_config = load_config_file(config_path)
        if file_config:
            logger.debug(f"Loaded config from {config_path}")
            config = merge_configs(config, file_config)

    config = apply_env_overrides(config, environ)

    return Settings.from_dict(config)


def dump_settings(settings: Settings) -> str:
    """Serialize settings to the TOML text stored in ``.git/config``."""
    return toml.dumps(settings.to_dict())


def save_settings(settings: Settings, config_path: Union[str, Path]) -> None:
    """Write settings to ``config_path`` atomically."""
    write_atomic(config_path, dump_settings(settings).encode('utf-8'))
    logger.debug(f"Configuration saved to {config_path}")
