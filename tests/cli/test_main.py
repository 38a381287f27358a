# Copyright 2026 protoc-remote Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the protoc-remote CLI entry point."""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from conftest import FakeBackend

from protoremote.cache.config import CONFIG_ENV_VAR
from protoremote.cache.repository_cache import CacheLayout
from protoremote.cli.main import main

# ###############
# Helpers
# ###############


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def _run_main(argv: list[str], backend: FakeBackend, protoc_status: int = 0) -> tuple[int, MagicMock]:
    with (
        patch("protoremote.cli.main.create_backend", return_value=backend),
        patch("protoremote.cli.main.run_protoc", return_value=protoc_status) as mock_protoc,
    ):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
    return exc_info.value.code, mock_protoc


# ###############
# Public Interface
# ###############


def test_remote_help_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--remote-help"])
    assert exc_info.value.code == 0
    assert "--remote-cache-dir" in capsys.readouterr().out


def test_local_file_is_compiled(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    proto = Path("a.proto").absolute()
    proto.write_text("syntax = 'proto3';")

    code, mock_protoc = _run_main(["--remote-cache-dir", str(layout.root), "--go_out=.", str(proto)], fake_backend)

    assert code == 0
    mock_protoc.assert_called_once_with("protoc", ["--go_out=."], [str(proto)])
    assert fake_backend.clone_attempts == []


def test_remote_import_is_cloned_and_included(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    fake_backend.add_remote("example.com/org/repo")

    code, mock_protoc = _run_main(
        ["--remote-cache-dir", str(layout.root), "--go_out=.", "example.com/org/repo/api/a.proto"],
        fake_backend,
    )

    assert code == 0
    local = layout.repo_dir("example.com/org/repo") / "api" / "a.proto"
    mock_protoc.assert_called_once_with("protoc", ["--go_out=.", f"-I{local.parent}"], [str(local)])
    assert layout.lock_path.exists()


def test_protoc_status_is_the_exit_code(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    code, _ = _run_main(["--remote-cache-dir", str(layout.root), "--version"], fake_backend, protoc_status=3)
    assert code == 3


def test_clone_failure_exits_before_protoc(
    layout: CacheLayout, fake_backend: FakeBackend, capsys: pytest.CaptureFixture[str]
) -> None:
    code, mock_protoc = _run_main(["--remote-cache-dir", str(layout.root), "example.com/missing.proto"], fake_backend)

    assert code == 1
    mock_protoc.assert_not_called()
    err = capsys.readouterr().err
    assert "Error:" in err
    assert "clone failed: example.com/missing.proto" in err


def test_invalid_config_exits_one(tmp_path: Path, fake_backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("unknown-key: 1\n")

    code, mock_protoc = _run_main(["--remote-config", str(config), "--version"], fake_backend)

    assert code == 1
    mock_protoc.assert_not_called()
    assert "Invalid config file" in capsys.readouterr().err


def test_config_file_in_cwd_is_used(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    Path(".protoc-remote.yaml").write_text(f"cache-dir: {layout.root}\nprotoc: /opt/protoc/bin/protoc\n")

    code, mock_protoc = _run_main(["--version"], fake_backend)

    assert code == 0
    mock_protoc.assert_called_once_with("/opt/protoc/bin/protoc", ["--version"], [])
    assert layout.lock_path.exists()


def test_git_backend_option_selects_backend(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    with (
        patch("protoremote.cli.main.create_backend", return_value=fake_backend) as mock_create,
        patch("protoremote.cli.main.run_protoc", return_value=0),
    ):
        with pytest.raises(SystemExit):
            main(["--remote-cache-dir", str(layout.root), "--remote-git-backend", "library", "--version"])
    mock_create.assert_called_once_with("library", None)


def test_missing_protoc_exits_one(tmp_path: Path, layout: CacheLayout, capsys: pytest.CaptureFixture[str]) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("protoc: no-such-protoc-executable\n")

    with patch("subprocess.run", side_effect=FileNotFoundError):
        with pytest.raises(SystemExit) as exc_info:
            main(["--remote-config", str(config), "--remote-cache-dir", str(layout.root), "--version"])

    assert exc_info.value.code == 1
    assert "no-such-protoc-executable" in capsys.readouterr().err


def test_verbose_enables_info_logging(layout: CacheLayout, fake_backend: FakeBackend) -> None:
    _run_main(["--remote-cache-dir", str(layout.root), "--remote-verbose", "--version"], fake_backend)
    assert logging.getLogger().level == logging.INFO


def test_parent_relative_missing_file_is_an_error(
    layout: CacheLayout, fake_backend: FakeBackend, capsys: pytest.CaptureFixture[str]
) -> None:
    code, mock_protoc = _run_main(["--remote-cache-dir", str(layout.root), "../protos/missing.proto"], fake_backend)

    assert code == 1
    mock_protoc.assert_not_called()
    assert "Error:" in capsys.readouterr().err
    assert layout.lock_path.exists()
