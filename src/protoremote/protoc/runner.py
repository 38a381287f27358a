# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Execution of the protoc compiler."""

import logging
import subprocess

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ProtocNotFoundError(Exception):
    """Raised when the protoc executable cannot be started."""


def run_protoc(executable: str, options: list[str], files: list[str]) -> int:
    """Run protoc with the current stdio and return its exit status.

    Without input files protoc runs once (e.g. for ``--version``).  Otherwise
    it runs once per file, stopping at the first failure.

    Raises:
        ProtocNotFoundError: If *executable* cannot be started.
    """
    if not files:
        return _execute([executable, *options])
    for proto_file in files:
        status = _execute([executable, *options, proto_file])
        if status != 0:
            return status
    return 0


# ################
# Implementation
# ################


def _execute(command: list[str]) -> int:
    logger.debug("Running %s", " ".join(command))
    try:
        return subprocess.run(command).returncode
    except FileNotFoundError as exc:
        raise ProtocNotFoundError(f"protoc executable not found: {command[0]}") from exc
    except PermissionError as exc:
        raise ProtocNotFoundError(f"protoc executable is not runnable: {command[0]}") from exc
