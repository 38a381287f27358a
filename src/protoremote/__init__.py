# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""protoc wrapper resolving import paths from remote git repositories."""

__version__ = "0.1.0"
