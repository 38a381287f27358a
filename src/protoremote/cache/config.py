# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Wrapper configuration file and cache root discovery."""

import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from protoremote.resolver.paths import HostingPatternError, compile_hosting_pattern

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".protoc-remote.yaml"
CONFIG_ENV_VAR = "PROTOC_REMOTE_CONFIG"
CACHE_DIR_ENV_VAR = "PROTOC_CACHE_DIR"
DEFAULT_PROTOC_VERSION = "3.22.2"


class ConfigError(Exception):
    """Raised when the configuration cannot be read or is invalid."""


class WrapperConfig(BaseModel):
    """Settings of the protoc wrapper.

    Attributes:
        cache_dir: Cache root; derived from the environment when unset.
        protoc_version: Version namespace of the cache directory.
        protoc: protoc executable name or path.
        git_backend: ``command`` (git executable) or ``library`` (GitPython).
        git_url_prefix: Prefix turning an identifier into a clone URL.
        hosting_patterns: Extra hosting layouts tried after the built-in ones.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    cache_dir: Path | None = Field(alias="cache-dir", default=None)
    protoc_version: str = Field(alias="protoc-version", default=DEFAULT_PROTOC_VERSION)
    protoc: str = "protoc"
    git_backend: Literal["command", "library"] = Field(alias="git-backend", default="command")
    git_url_prefix: str | None = Field(alias="git-url-prefix", default=None)
    hosting_patterns: list[str] = Field(alias="hosting-patterns", default_factory=list)

    @field_validator("hosting_patterns")
    @classmethod
    def _check_patterns(cls, patterns: list[str]) -> list[str]:
        for expression in patterns:
            try:
                compile_hosting_pattern(expression)
            except HostingPatternError as exc:
                raise ValueError(str(exc)) from exc
        return patterns


def load_config(path: Path) -> WrapperConfig:
    """Load and validate a wrapper configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        A validated WrapperConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML,
            or does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config must be a YAML mapping")

    try:
        return WrapperConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc


def find_config(cwd: Path, environ: Mapping[str, str]) -> Path | None:
    """Locate the configuration file: the env variable first, then *cwd*."""
    explicit = environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit)
    candidate = cwd / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def default_cache_root(environ: Mapping[str, str], platform: str = sys.platform) -> Path:
    """Return the user cache directory following OS conventions.

    ``PROTOC_CACHE_DIR`` overrides everything.  Otherwise macOS uses
    ``~/Library/Caches``, Windows ``%LOCALAPPDATA%`` and other systems the
    XDG base directory ``$XDG_CACHE_HOME`` (default ``~/.cache``).

    Raises:
        ConfigError: If the required environment variables are missing.
    """
    if environ.get(CACHE_DIR_ENV_VAR):
        return Path(environ[CACHE_DIR_ENV_VAR])
    if platform == "darwin":
        return Path(_require_env(environ, "HOME")) / "Library" / "Caches"
    if platform.startswith("win"):
        return Path(_require_env(environ, "LOCALAPPDATA"))
    if environ.get("XDG_CACHE_HOME"):
        return Path(environ["XDG_CACHE_HOME"])
    return Path(_require_env(environ, "HOME")) / ".cache"


# ################
# Implementation
# ################


def _require_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigError(f"Cannot determine cache directory: ${name} is not set (set ${CACHE_DIR_ENV_VAR})")
    return value
