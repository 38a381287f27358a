# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parsing of ``path[@revision]`` import tokens."""

import enum
import posixpath
from dataclasses import dataclass

from protoremote.vcs.base import LATEST_REVISION

# ###############
# Public Interface
# ###############


class RevisionKind(enum.Enum):
    """How the revision part of an import token is interpreted."""

    UNSPECIFIED = "unspecified"
    LATEST = "latest"
    NAMED = "named"


@dataclass(frozen=True)
class ImportToken:
    """An import token split into its cleaned path and revision.

    Attributes:
        path: Slash-separated remote path, e.g. ``github.com/org/repo/a.proto``.
        revision: Text after the last ``@``; empty when there was none.
    """

    path: str
    revision: str = ""

    @property
    def kind(self) -> RevisionKind:
        if not self.revision:
            return RevisionKind.UNSPECIFIED
        if self.revision == LATEST_REVISION:
            return RevisionKind.LATEST
        return RevisionKind.NAMED


def parse_import_token(raw: str) -> ImportToken:
    """Split *raw* on its last ``@`` and clean the path part."""
    path, separator, revision = raw.rpartition("@")
    if not separator:
        path, revision = raw, ""
    return ImportToken(path=clean_path(path), revision=revision)


def clean_path(path: str) -> str:
    """Collapse ``.``, ``..`` and repeated slashes in a slash-separated path."""
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned
