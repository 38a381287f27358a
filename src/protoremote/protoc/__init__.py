# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""protoc command line rewriting and execution."""

from protoremote.protoc.arguments import RewrittenArguments, expand_directories, rewrite_arguments
from protoremote.protoc.runner import ProtocNotFoundError, run_protoc

__all__ = [
    "ProtocNotFoundError",
    "RewrittenArguments",
    "expand_directories",
    "rewrite_arguments",
    "run_protoc",
]
