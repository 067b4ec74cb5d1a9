from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from rpa import __version__
from rpa.cli.app import app
from rpa.cli.context import CONFIG_ENV, REPO_ENV, VERBOSE_ENV
from rpa.core.errors import ErrorCode

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # The callback hands options to commands through the environment.
    for name in (REPO_ENV, CONFIG_ENV, VERBOSE_ENV):
        monkeypatch.setenv(name, "")


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_repo_must_be_a_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--repo", str(tmp_path / "missing"), "release-version"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_commands_need_a_git_repository(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--repo", str(tmp_path), "push-remote-repos", "develop"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_broken_config_is_an_environment_error(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / ".rpa.toml").write_text("[remotes\n")

    result = runner.invoke(app, ["--repo", str(tmp_path), "close-version"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)


def test_no_remotes(tmp_path: Path) -> None:
    (tmp_path / ".git").mkdir()
    (tmp_path / ".rpa.toml").write_text("[remotes]\nnames = []\n")

    result = runner.invoke(app, ["--repo", str(tmp_path), "push-remote-repos", "develop"])

    assert result.exit_code == int(ErrorCode.ENV_ERROR)
    assert "no remotes" in result.output
