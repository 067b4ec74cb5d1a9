from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from rpa.cli.operator import TyperOperator
from rpa.core.config import CONFIG_FILE_NAME, Config, load_config, load_credentials
from rpa.core.errors import ErrorCode
from rpa.core.result import Err
from rpa.git.repository import Repository
from rpa.git.versioned import SemanticVersionedRepository
from rpa.output.console import ConsoleProtocol, RichConsole, Style
from rpa.pipeline.build import CommandBuildAndCommit
from rpa.pipeline.context import ReleaseEnvironment
from rpa.tracker.client import Tracker
from rpa.tracker.http import RealHttpClient
from rpa.tracker.jira import JiraTracker

REPO_ENV = "RPA_REPO_ROOT"
CONFIG_ENV = "RPA_CONFIG"
VERBOSE_ENV = "RPA_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    config: Config
    console: ConsoleProtocol
    git: Repository


def build_context() -> CLIContext:
    console = RichConsole(verbose=os.environ.get(VERBOSE_ENV) == "1")

    root = Path(os.environ.get(REPO_ENV) or Path.cwd())
    if not (root / ".git").exists():
        console.error(f"'{root}' is not the root of a git repository")
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    explicit = os.environ.get(CONFIG_ENV)
    config_path = Path(explicit) if explicit else root / CONFIG_FILE_NAME

    config = Config()
    if explicit or config_path.exists():
        config_result = load_config(config_path)
        if isinstance(config_result, Err):
            console.error(config_result.error.message)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        config = config_result.value
    else:
        console.warning(f"No {CONFIG_FILE_NAME} found in '{root}', using defaults")

    return CLIContext(repo_root=root, config=config, console=console, git=Repository(root))


def build_tracker(ctx: CLIContext) -> Tracker | None:
    api_url = ctx.config.jira.api_url
    if api_url is None or ctx.config.jira.project_key is None:
        return None

    credentials = load_credentials()
    if credentials is None:
        ctx.console.print("Jira credentials are not set, sending anonymous requests", Style.DIM)
        return JiraTracker(RealHttpClient(), api_url)
    return JiraTracker(RealHttpClient(basic_auth=(credentials.user, credentials.token)), api_url)


def build_environment(ctx: CLIContext) -> ReleaseEnvironment:
    return ReleaseEnvironment(
        git=ctx.git,
        versions=SemanticVersionedRepository(ctx.git),
        operator=TyperOperator(ctx.console),
        build=CommandBuildAndCommit(ctx.git, ctx.config.build, ctx.repo_root, ctx.console),
        config=ctx.config,
        console=ctx.console,
        tracker=build_tracker(ctx),
    )
