# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Scan configuration loading and validation."""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

import yaml

from sigdiff.rename_hints import DEFAULT_RENAME_THRESHOLD

logger = logging.getLogger(__name__)

OutputFormat = Literal["table", "json"]

CONFIG_FILE_NAMES = (".sigdiff.yaml", ".sigdiff.yml", ".sigdiff.json")
OUTPUT_FORMATS: tuple[str, ...] = ("table", "json")


class ConfigError(ValueError):
    """Represent an unreadable or invalid configuration."""


@dataclass(frozen=True)
class ScanConfig:
    """Represent scan settings merged from file and CLI.

    Attributes:
        ignored_paths: Gitignore-style patterns of paths to skip.
        enabled_extractors: Extractor names to run; ``None`` runs all.
        max_workers: Worker threads used to analyze files.
        output_format: CLI output format.
        rename_threshold: Minimum name similarity for rename hints.
    """

    ignored_paths: tuple[str, ...] = ()
    enabled_extractors: tuple[str, ...] | None = None
    max_workers: int = 1
    output_format: OutputFormat = "table"
    rename_threshold: float = DEFAULT_RENAME_THRESHOLD


def find_config_file(search_root: Path) -> Path | None:
    """Return the first known config file in ``search_root``, if any."""
    for name in CONFIG_FILE_NAMES:
        candidate = search_root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Path | None = None, search_root: Path | None = None) -> ScanConfig:
    """Load scan configuration.

    An explicit ``config_path`` must exist. Without one, ``search_root`` is
    searched for ``.sigdiff.yaml``, ``.sigdiff.yml`` and ``.sigdiff.json``
    in that order; defaults apply when none is found. JSON is read with the
    YAML loader.

    Args:
        config_path: Explicit configuration file.
        search_root: Directory searched when no explicit path is given.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if config_path is None:
        config_path = find_config_file(search_root) if search_root is not None else None
        if config_path is None:
            logger.debug(f"No config file found, using defaults (search_root={search_root})")
            return ScanConfig()
    elif not config_path.is_file():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read configuration file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid configuration file {config_path}: {exc}") from exc

    config = config_from_mapping(data if data is not None else {})
    logger.info(f"Loaded configuration (config_path={config_path})")
    return config


def config_from_mapping(data: Any) -> ScanConfig:
    """Validate a decoded configuration mapping.

    Unknown keys are ignored with a warning.

    Args:
        data: Decoded YAML or JSON document.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If a value has the wrong type or range.
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    config = ScanConfig()
    for key, value in data.items():
        if key == "ignoredPaths" or key == "ignored_paths":
            config = replace(config, ignored_paths=_string_tuple(key, value))
        elif key == "extractors" or key == "enabled_extractors":
            config = replace(config, enabled_extractors=_string_tuple(key, value))
        elif key == "maxWorkers" or key == "max_workers":
            config = replace(config, max_workers=validate_max_workers(value))
        elif key == "outputFormat" or key == "output_format":
            config = replace(config, output_format=validate_output_format(value))
        elif key == "renameThreshold" or key == "rename_threshold":
            config = replace(config, rename_threshold=_threshold(value))
        else:
            logger.warning(f"Ignoring unknown configuration key (key={key})")
    return config


def validate_max_workers(value: Any) -> int:
    """Validate a worker count.

    Raises:
        ConfigError: If ``value`` is not an integer greater than zero.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError("max_workers must be an integer > 0")
    return value


def validate_output_format(value: Any) -> OutputFormat:
    """Validate an output format name.

    Raises:
        ConfigError: If ``value`` is not a supported format.
    """
    if value not in OUTPUT_FORMATS:
        raise ConfigError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}")
    return value


def _threshold(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
        raise ConfigError("rename_threshold must be a number between 0 and 1")
    return float(value)


def _string_tuple(key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(value)
