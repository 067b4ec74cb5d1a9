"""Release commands - start, prepare and finish releases."""

from __future__ import annotations

import typer

from rpa.cli.context import CLIContext, build_context, build_environment
from rpa.core.result import Err, Ok, Result
from rpa.output.errors import pipeline_error_exit_code, print_pipeline_error
from rpa.pipeline.actions import PauseAndStop, Stop
from rpa.pipeline.context import PipelineContext
from rpa.pipeline.dispatch import continue_release, start_release
from rpa.pipeline.errors import PipelineError


def _finish(result: Result[Stop | PauseAndStop, PipelineError], ctx: CLIContext) -> None:
    match result:
        case Err(e):
            print_pipeline_error(e, ctx.console)
            raise typer.Exit(code=pipeline_error_exit_code(e))
        case Ok(PauseAndStop(message=message)):
            ctx.console.info(message)
        case Ok(Stop(message=message)):
            ctx.console.success(message)


def release_version(
    commit: str | None = typer.Option(None, "--commit", help="Commit to release (default: HEAD)"),
    pause_for_commit: bool = typer.Option(
        False,
        "--pause-for-commit",
        help="Stop after the version metadata is updated; finish with close-version",
    ),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push branches and tags"),
    squash_unreleased: bool = typer.Option(
        False,
        "--squash-unreleased",
        help="Fold unreleased Jira versions up to the next version into it",
    ),
) -> None:
    """Release the next version from the current branch."""
    ctx = build_context()
    ctx.console.header("Release version")
    pipeline = PipelineContext(
        commit_hash=commit,
        pause_for_commit=pause_for_commit,
        no_push=no_push,
        squash_unreleased=squash_unreleased,
    )
    _finish(start_release(build_environment(ctx), pipeline), ctx)


def new_release_branch(
    commit: str | None = typer.Option(None, "--commit", help="Commit to branch from (default: HEAD)"),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push the new branch"),
) -> None:
    """Create a release branch without releasing yet."""
    ctx = build_context()
    ctx.console.header("New release branch")
    pipeline = PipelineContext(commit_hash=commit, no_push=no_push, start_release_phase=True)
    _finish(start_release(build_environment(ctx), pipeline), ctx)


def close_version(
    ancestor: str | None = typer.Option(
        None,
        "--ancestor",
        help="Branch the release was cut from (asked when it cannot be found)",
    ),
    no_push: bool = typer.Option(False, "--no-push", help="Do not push branches and tags"),
) -> None:
    """Finish a release paused with --pause-for-commit."""
    ctx = build_context()
    ctx.console.header("Close version")
    _finish(continue_release(build_environment(ctx), PipelineContext(ancestor=ancestor, no_push=no_push)), ctx)
