# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for import token parsing."""

import pytest

from protoremote.resolver.revision import ImportToken, RevisionKind, clean_path, parse_import_token

# ###############
# Public Interface
# ###############


@pytest.mark.parametrize(
    "raw",
    [
        "github.com/org/repo/a.proto",
        "example.com/group/sub/project/protos/b.proto",
        "host/file.proto",
    ],
)
def test_token_without_revision_is_unspecified(raw: str):
    """Without '@' the revision is empty and the path is the cleaned token."""
    token = parse_import_token(raw)
    assert token == ImportToken(path=raw, revision="")
    assert token.kind is RevisionKind.UNSPECIFIED


def test_latest_revision():
    token = parse_import_token("github.com/org/repo/a.proto@latest")
    assert token.path == "github.com/org/repo/a.proto"
    assert token.revision == "latest"
    assert token.kind is RevisionKind.LATEST


def test_named_revision():
    token = parse_import_token("github.com/org/repo/a.proto@v1.0.0")
    assert token.revision == "v1.0.0"
    assert token.kind is RevisionKind.NAMED


def test_splits_on_last_at_sign():
    token = parse_import_token("example.com/@scope/repo/a.proto@v2")
    assert token.path == "example.com/@scope/repo/a.proto"
    assert token.revision == "v2"


def test_trailing_at_sign_is_unspecified():
    token = parse_import_token("example.com/org/repo/a.proto@")
    assert token.path == "example.com/org/repo/a.proto"
    assert token.kind is RevisionKind.UNSPECIFIED


def test_path_is_cleaned():
    token = parse_import_token("./example.com//org/./repo/sub/../a.proto@v1")
    assert token.path == "example.com/org/repo/a.proto"
    assert token.revision == "v1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("a/b/../c", "a/c"),
        ("a/./b/", "a/b"),
        ("", "."),
        ("//a//b", "/a/b"),
        ("../a", "../a"),
    ],
)
def test_clean_path(raw: str, expected: str):
    assert clean_path(raw) == expected
