"""Push command - publish a branch (and tag) to every configured remote."""

from __future__ import annotations

import typer

from rpa.cli.context import build_context
from rpa.core.errors import ErrorCode
from rpa.core.result import Err, Ok
from rpa.git.operations import push_to_repos, usable_remotes
from rpa.output.errors import print_git_error


def push_remote_repos(
    branch: str = typer.Argument(..., help="Branch to push"),
    tag: str | None = typer.Option(None, "--tag", help="Tag to push along with the branch"),
) -> None:
    """Push a branch (and optionally a tag) to all configured remotes."""
    ctx = build_context()
    remotes = usable_remotes(ctx.config.remotes.names)
    if not remotes:
        ctx.console.error("There were no remotes specified in the config")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    match push_to_repos(ctx.git, remotes, branch, tag):
        case Err(e):
            print_git_error(e, ctx.console)
            raise typer.Exit(code=int(ErrorCode.REPOSITORY_ERROR))
        case Ok(_):
            ctx.console.success(f"Pushed '{branch}' to {', '.join(remotes)}")
