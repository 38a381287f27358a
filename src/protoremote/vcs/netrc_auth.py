# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Credential lookup in the user's ``.netrc`` file."""

import logging
import netrc
from pathlib import Path

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def netrc_credentials(host: str, path: Path | None = None) -> tuple[str, str] | None:
    """Return the ``(login, password)`` pair stored for *host*, if any.

    Falls back to the ``default`` entry when *host* has no ``machine`` entry.
    A missing or malformed file is treated as having no credentials.

    Args:
        host: Host name, e.g. ``github.com``.
        path: Explicit ``.netrc`` location; defaults to ``~/.netrc``.
    """
    netrc_path = path if path is not None else Path.home() / ".netrc"
    if not netrc_path.is_file():
        return None
    try:
        entries = netrc.netrc(str(netrc_path))
    except (netrc.NetrcParseError, OSError) as exc:
        logger.debug("Ignoring unreadable netrc file %s: %s", netrc_path, exc)
        return None

    auth = entries.authenticators(host)
    if auth is None:
        return None
    login, _account, password = auth
    if not login and not password:
        return None
    return login or "", password or ""
