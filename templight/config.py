"""
Configuration for templight.

Settings come from the ``[templight]`` table of a ``templight.toml`` file,
then from ``TEMPLIGHT_*`` environment variables, on top of the defaults
below.
"""

import dataclasses
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ConfigError

CONFIG_FILENAME = "templight.toml"

DEFAULT_KEYWORDS = ("templ", "css", "script")
DEFAULT_IGNORE_DIRS = frozenset({"build", "__pycache__", ".git", ".idea", ".vscode", "node_modules"})


@dataclass(frozen=True)
class HighlightConfig:
    language_id: str = "templ"
    markup_grammar: str = "markup"
    script_grammar: str = "go"
    extra_keywords: tuple = DEFAULT_KEYWORDS
    max_brace_depth: int = 2
    watch_extensions: frozenset = frozenset({".templ"})
    ignore_dirs: frozenset = DEFAULT_IGNORE_DIRS
    log_level: str = "WARNING"
    source: Path = field(default=None, compare=False)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)


_FIELD_TYPES = {
    "language_id": str,
    "markup_grammar": str,
    "script_grammar": str,
    "extra_keywords": list,
    "max_brace_depth": int,
    "watch_extensions": list,
    "ignore_dirs": list,
    "log_level": str,
}


def _coerce(key, value):
    expected = _FIELD_TYPES[key]
    if expected is int and isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ConfigError(f"'{key}' must be of type {expected.__name__}, got {type(value).__name__}")
    if expected is list:
        if not all(isinstance(item, str) for item in value):
            raise ConfigError(f"'{key}' must be a list of strings")
        if key == "extra_keywords":
            return tuple(value)
        return frozenset(value)
    if key == "max_brace_depth" and value < 0:
        raise ConfigError(f"'max_brace_depth' must be >= 0, got {value}")
    if key == "log_level":
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log level: {value!r}")
        return level
    return value


def _read_file(path):
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    table = data.get("templight", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[templight] in {path} must be a table")
    unknown = sorted(set(table) - set(_FIELD_TYPES))
    if unknown:
        raise ConfigError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return {key: _coerce(key, value) for key, value in table.items()}


def _read_environ(environ):
    values = {}
    depth = environ.get("TEMPLIGHT_MAX_BRACE_DEPTH")
    if depth is not None:
        try:
            values["max_brace_depth"] = _coerce("max_brace_depth", int(depth))
        except ValueError:
            raise ConfigError(f"TEMPLIGHT_MAX_BRACE_DEPTH must be an integer, got {depth!r}") from None
    level = environ.get("TEMPLIGHT_LOG_LEVEL")
    if level is not None:
        values["log_level"] = _coerce("log_level", level)
    return values


def find_config(start=None):
    """Return ``templight.toml`` in ``start`` (or the cwd) if it exists."""
    candidate = Path(start or os.getcwd()) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(path=None, environ=None):
    """
    Build a HighlightConfig.

    Args:
        path: A config file, or a directory to look for ``templight.toml`` in.
            Defaults to the current working directory.
        environ: Mapping used for overrides. Defaults to ``os.environ``.
    """
    environ = os.environ if environ is None else environ
    values = {}

    if path is not None and Path(path).is_file():
        config_file = Path(path)
    elif path is not None and not Path(path).exists():
        raise ConfigError(f"Config file not found: {path}")
    else:
        config_file = find_config(path)

    if config_file is not None:
        values.update(_read_file(config_file))
        values["source"] = config_file

    values.update(_read_environ(environ))
    return HighlightConfig(**values)
