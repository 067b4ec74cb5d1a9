from __future__ import annotations

import os
from pathlib import Path

import typer

from rpa import __version__
from rpa.cli.commands.push_cmd import push_remote_repos
from rpa.cli.commands.release_cmd import close_version, new_release_branch, release_version
from rpa.cli.context import CONFIG_ENV, REPO_ENV, VERBOSE_ENV
from rpa.core.errors import ErrorCode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("release-version")(release_version)
app.command("new-release-branch")(new_release_branch)
app.command("close-version")(close_version)
app.command("push-remote-repos")(push_remote_repos)


def _show_version(value: bool) -> None:
    # Eager, so it runs before click asks for a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show git and Jira diagnostics."),
    config: Path | None = typer.Option(None, "--config", help="Configuration file (default: <repo>/.rpa.toml)"),
    repo: Path | None = typer.Option(None, "--repo", help="Repository root (default: current directory)"),
) -> None:
    if verbose:
        os.environ[VERBOSE_ENV] = "1"

    if repo is not None:
        try:
            root = repo.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --repo: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        if not root.is_dir():
            typer.echo(f"error: --repo '{root}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        os.environ[REPO_ENV] = str(root)

    if config is not None:
        os.environ[CONFIG_ENV] = str(config.expanduser())


def main() -> None:
    app()
