"""Configuration management utilities"""

import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Mapping, Optional, Tuple, Union

from execop.errors import ConfigurationError
from execop.policy import FailureMode


ENV_PREFIX = "EXECOP_"

# Default configuration values
DEFAULTS = {
    "timeout": "30",
    "fail": "normal",
    "encoding": "utf-8",
    "drain_grace": "2"
}


# Mapping from hyphen to underscore format (for CLI compatibility)
KEY_MAPPING = {
    "drain-grace": "drain_grace"
}


def normalize_config_key(key: str) -> str:
    """Normalize config key: convert hyphen to underscore format"""
    if key in KEY_MAPPING:
        return KEY_MAPPING[key]
    return key


def get_config(key: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Get configuration value from EXECOP_<KEY> with fallback to defaults"""
    normalized_key = normalize_config_key(key)
    if environ is None:
        environ = os.environ
    value = environ.get(ENV_PREFIX + normalized_key.upper())
    if value is None or not value.strip():
        return DEFAULTS.get(normalized_key)
    return value.strip()


def get_config_float(key: str, environ: Optional[Mapping[str, str]] = None) -> float:
    """Get configuration value as float"""
    value = get_config(key, environ)
    try:
        return float(value) if value else 0.0
    except ValueError:
        raise ConfigurationError(f"Config {normalize_config_key(key)} must be a number, got {value!r}") from None


def get_config_modes(environ: Optional[Mapping[str, str]] = None) -> FrozenSet[FailureMode]:
    """Get the default failure modes; comma-separated names are accepted"""
    value = get_config("fail", environ) or ""
    return frozenset(FailureMode.parse(name) for name in value.split(",") if name.strip())


def validate_timeout(seconds) -> float:
    try:
        timeout = float(seconds)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Timeout must be a number of seconds, got {seconds!r}") from None
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be greater than 0, got {seconds!r}")
    return timeout


@dataclass(frozen=True)
class Project:
    """Host project context; supplies the default working directory"""

    work_directory: Path = field(default_factory=Path.cwd)


@dataclass(frozen=True)
class ExecutionConfig:
    """Finalized, immutable settings for a single execution"""

    command: Tuple[str, ...]
    work_dir: Optional[Union[str, os.PathLike]] = None
    project_dir: Optional[Union[str, os.PathLike]] = None
    timeout: float = 30.0
    fail_modes: FrozenSet[FailureMode] = frozenset()
    silent: bool = False
    encoding: str = "utf-8"
    drain_grace: float = 2.0

    def __post_init__(self):
        if not self.command:
            raise ConfigurationError("A command must be specified.")
        if any(not isinstance(arg, str) for arg in self.command):
            raise ConfigurationError(f"Command arguments must be strings: {list(self.command)!r}")
        validate_timeout(self.timeout)
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigurationError(f"Unknown output encoding: {self.encoding!r}") from None
        if self.drain_grace < 0:
            raise ConfigurationError(f"Drain grace must not be negative, got {self.drain_grace!r}")
