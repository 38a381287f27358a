# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rewriting of protoc command lines that reference remote import paths."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from protoremote import __version__
from protoremote.cache.repository_cache import CacheLayout

# ###############
# Public Interface
# ###############

PROTO_SUFFIX = ".proto"


class Resolver(Protocol):
    def resolve(self, raw_token: str) -> Path: ...


@dataclass
class RewrittenArguments:
    """protoc arguments after remote paths were replaced with local ones.

    Attributes:
        options: Flags passed to every protoc invocation.
        files: Input files (or directories) to compile.
    """

    options: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)


def rewrite_arguments(args: list[str], resolver: Resolver, layout: CacheLayout) -> RewrittenArguments:
    """Replace remote repository paths in a protoc command line with local paths.

    * ``-I <dir>`` is rewritten to ``-I=<dir>``.
    * An include option (``--proto_path=``, ``-I=``, ``-I``) naming a path
      that does not exist locally points into the repository cache instead.
    * Other flags are passed as they are.
    * Existing local paths are input files.
    * Anything else is resolved with *resolver*; the local file becomes an
      input and its directory is added to the include path.

    Raises:
        ResolutionError: If a remote path cannot be resolved.  Nothing has
            been executed at that point.
    """
    result = RewrittenArguments()
    pending = list(args)
    index = 0
    while index < len(pending):
        arg = pending[index]
        index += 1
        if arg == "--version":
            print(f"protoc wrapper {__version__}")
        if arg.startswith("-"):
            # Obsolete but still supported: `-I <dir>`.
            if arg == "-I" and index < len(pending):
                pending[index] = "-I=" + pending[index]
                continue
            result.options.append(_rewrite_include(arg, layout))
        elif os.path.exists(arg):
            result.files.append(arg)
        else:
            local = resolver.resolve(arg)
            result.options.append(f"-I{local.parent}")
            result.files.append(str(local))
    return result


def expand_directories(paths: list[str]) -> list[str]:
    """Replace each directory in *paths* by the ``.proto`` files below it."""
    files: list[str] = []
    for path in paths:
        if os.path.isdir(path):
            files.extend(str(proto) for proto in sorted(Path(path).rglob(f"*{PROTO_SUFFIX}")) if proto.is_file())
        else:
            files.append(path)
    return files


# ################
# Implementation
# ################

_INCLUDE_PREFIXES = ("--proto_path=", "-I=", "-I")


def _rewrite_include(arg: str, layout: CacheLayout) -> str:
    for prefix in _INCLUDE_PREFIXES:
        if arg.startswith(prefix):
            path = arg.removeprefix(prefix)
            break
    else:
        return arg
    if not path or os.path.exists(path):
        return arg
    return f"-I={layout.repo_dir(path.strip('/'))}"
