# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Repository cache, its process lock and the wrapper configuration."""

from protoremote.cache.config import (
    CACHE_DIR_ENV_VAR,
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_PROTOC_VERSION,
    ConfigError,
    WrapperConfig,
    default_cache_root,
    find_config,
    load_config,
)
from protoremote.cache.lock import LockError, ProcessLock
from protoremote.cache.repository_cache import (
    CacheLayout,
    CloneError,
    RepositoryCache,
    ResolutionError,
)

__all__ = [
    "CACHE_DIR_ENV_VAR",
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "CacheLayout",
    "CloneError",
    "ConfigError",
    "DEFAULT_PROTOC_VERSION",
    "LockError",
    "ProcessLock",
    "RepositoryCache",
    "ResolutionError",
    "WrapperConfig",
    "default_cache_root",
    "find_config",
    "load_config",
]
