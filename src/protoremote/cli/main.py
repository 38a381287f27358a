# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the protoc-remote command-line interface."""

import argparse
import logging
import os
import sys
from pathlib import Path

from yachalk import chalk

from protoremote.cache.config import (
    ConfigError,
    WrapperConfig,
    default_cache_root,
    find_config,
    load_config,
)
from protoremote.cache.lock import LockError, ProcessLock
from protoremote.cache.repository_cache import CacheLayout, RepositoryCache, ResolutionError
from protoremote.protoc.arguments import expand_directories, rewrite_arguments
from protoremote.protoc.runner import ProtocNotFoundError, run_protoc
from protoremote.resolver.paths import DEFAULT_HOSTING_PATTERNS, compile_hosting_pattern
from protoremote.resolver.resolve import ImportResolver
from protoremote.vcs import BACKEND_NAMES, create_backend

# ###############
# Public Interface
# ###############


def main(argv: list[str] | None = None) -> None:
    """Run protoc with remote imports resolved to the local repository cache.

    Options starting with ``--remote-`` configure the wrapper; every other
    argument is a protoc argument.
    """
    parser = argparse.ArgumentParser(
        prog="protoc-remote",
        description="protoc wrapper resolving imports from remote git repositories",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--remote-help",
        action="help",
        help="Show this help message and exit",
    )
    parser.add_argument(
        "--remote-config",
        type=Path,
        default=None,
        help="Path to the wrapper configuration file (default: $PROTOC_REMOTE_CONFIG or ./.protoc-remote.yaml)",
    )
    parser.add_argument(
        "--remote-cache-dir",
        type=Path,
        default=None,
        help="Cache root directory (default: $PROTOC_CACHE_DIR or the user cache directory)",
    )
    parser.add_argument(
        "--remote-git-backend",
        choices=BACKEND_NAMES,
        default=None,
        help="Git implementation used to clone repositories (default: command)",
    )
    parser.add_argument(
        "--remote-verbose",
        action="store_true",
        help="Log cache and git activity to stderr",
    )

    args, protoc_args = parser.parse_known_args(argv)
    sys.exit(_run(args, protoc_args))


# ################
# Implementation
# ################


def _run(args: argparse.Namespace, protoc_args: list[str]) -> int:
    """Resolve remote imports under the cache lock, then run protoc."""
    _configure_logging(args.remote_verbose)

    try:
        config = _load_config(args.remote_config)
        layout = CacheLayout(
            root=args.remote_cache_dir or config.cache_dir or default_cache_root(os.environ),
            version=config.protoc_version,
        )
    except ConfigError as exc:
        _print_error(exc)
        return 1

    backend = create_backend(args.remote_git_backend or config.git_backend, config.git_url_prefix)
    patterns = DEFAULT_HOSTING_PATTERNS + tuple(compile_hosting_pattern(p) for p in config.hosting_patterns)
    resolver = ImportResolver(RepositoryCache(layout, backend, hosting_patterns=patterns))

    try:
        with ProcessLock(layout.lock_path):
            rewritten = rewrite_arguments(protoc_args, resolver, layout)
            files = expand_directories(rewritten.files)
            return run_protoc(config.protoc, rewritten.options, files)
    except (LockError, ResolutionError, ProtocNotFoundError) as exc:
        _print_error(exc)
        return 1


def _load_config(explicit: Path | None) -> WrapperConfig:
    """Load the configuration file if one is given or found, else the defaults."""
    path = explicit or find_config(Path.cwd(), os.environ)
    if path is None:
        return WrapperConfig()
    return load_config(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _print_error(exc: Exception) -> None:
    print(f"{chalk.red('Error:')} {exc}", file=sys.stderr)
