# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for protoc-remote documentation."""

project = "protoc-remote"
author = "protoc-remote Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
