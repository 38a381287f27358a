# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Import token parsing and repository boundary search.

The end-to-end resolver lives in :mod:`protoremote.resolver.resolve`.
"""

from protoremote.resolver.paths import (
    DEFAULT_HOSTING_PATTERNS,
    HostingPattern,
    HostingPatternError,
    clone_candidates,
    compile_hosting_pattern,
    open_candidates,
    split_segments,
)
from protoremote.resolver.revision import ImportToken, RevisionKind, clean_path, parse_import_token

__all__ = [
    "DEFAULT_HOSTING_PATTERNS",
    "HostingPattern",
    "HostingPatternError",
    "ImportToken",
    "RevisionKind",
    "clean_path",
    "clone_candidates",
    "compile_hosting_pattern",
    "open_candidates",
    "parse_import_token",
    "split_segments",
]
