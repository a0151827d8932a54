"""
Config Loader
=============
Loads and validates plod.config.json (or a YAML equivalent) into a RunConfig.

Pipeline:
    1. Existence check        → ConfigNotFoundError / ConfigAccessError
    2. Read + parse           → ConfigParseError (JSON, or YAML for .yaml/.yml)
    3. Apply polling defaults  (interval 10s, budget 30min, 10 attempts)
    4. Schema validation      → ConfigValidationError (pydantic)

The Orchestrator only ever receives a RunConfig produced here.
"""
import json
import logging
import os
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from plod.core.constants import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_MAX_POLL_TIME_MINUTES,
    DEFAULT_MAX_WORK_ITERATIONS,
)
from plod.models.run_config import RunConfig

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = (".yaml", ".yml")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class ConfigError(Exception):
    """Base class for every configuration loading failure."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: str) -> None:
        super().__init__(path, f"Configuration file not found: {path}")


class ConfigParseError(ConfigError):
    def __init__(self, path: str, cause: Any) -> None:
        super().__init__(path, f"Failed to parse configuration: {path}: {cause}")
        self.cause = cause


class ConfigValidationError(ConfigError):
    def __init__(self, path: str, errors: list) -> None:
        super().__init__(path, f"Configuration validation failed: {path}")
        self.errors = errors


class ConfigAccessError(ConfigError):
    def __init__(self, path: str, cause: Any) -> None:
        super().__init__(path, f"Failed to access configuration file: {path}: {cause}")
        self.cause = cause


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------
def _parse(path: str, contents: str) -> Any:
    if path.lower().endswith(_YAML_SUFFIXES):
        try:
            return yaml.safe_load(contents)
        except yaml.YAMLError as exc:
            raise ConfigParseError(path, exc) from exc
    try:
        return json.loads(contents)
    except json.JSONDecodeError as exc:
        raise ConfigParseError(path, exc) from exc


def apply_defaults(parsed: Any) -> Any:
    """Fill in missing polling settings. Non-dict input is returned untouched."""
    if not isinstance(parsed, dict):
        return parsed
    polling = parsed.get("polling") or {}
    if not isinstance(polling, dict):
        return parsed
    return {
        **parsed,
        "polling": {
            "intervalSeconds": DEFAULT_INTERVAL_SECONDS,
            "maxPollTimeMinutes": DEFAULT_MAX_POLL_TIME_MINUTES,
            "maxWorkIterations": DEFAULT_MAX_WORK_ITERATIONS,
            **_camel_polling(polling),
        },
    }


def _camel_polling(polling: dict) -> dict:
    # Accept snake_case keys too without producing duplicates of the defaults
    renames = {
        "interval_seconds": "intervalSeconds",
        "max_poll_time_minutes": "maxPollTimeMinutes",
        "max_work_iterations": "maxWorkIterations",
    }
    return {renames.get(key, key): value for key, value in polling.items()}


def load_config_from(path: str) -> RunConfig:
    """
    Load, default and validate the configuration at ``path``.

    Raises
    ------
    ConfigError
        One of the four ConfigError subclasses.
    """
    try:
        exists = os.path.exists(path)
    except (OSError, ValueError) as exc:
        raise ConfigAccessError(path, exc) from exc
    if not exists:
        raise ConfigNotFoundError(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = f.read()
    except UnicodeDecodeError as exc:
        raise ConfigParseError(path, exc) from exc
    except OSError as exc:
        raise ConfigAccessError(path, exc) from exc

    parsed = apply_defaults(_parse(path, contents))

    try:
        config = RunConfig.model_validate(parsed)
    except ValidationError as exc:
        raise ConfigValidationError(path, exc.errors(include_url=False)) from exc

    logger.info("Loaded configuration from %s", path)
    return config


def load_config(cwd: Optional[str] = None) -> RunConfig:
    """Load plod.config.json from ``cwd`` (default: current directory)."""
    return load_config_from(os.path.join(cwd or os.getcwd(), DEFAULT_CONFIG_FILENAME))
