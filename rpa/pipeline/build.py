"""``BuildAndCommit`` over a configured build command.

Each configured step runs ``<command> <target>``; ``{version}`` in the
command and in the commit message is replaced by the version being built.
"""

from __future__ import annotations

from pathlib import Path

from rpa.core.config import BuildConfig, BuildStep
from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitClient
from rpa.output.console import ConsoleProtocol, Style
from rpa.pipeline.collaborators import BuildMode
from rpa.pipeline.errors import BuildFailed, GitCommandFailed, PipelineError
from rpa.platform.process import run_interactive
from rpa.semver import SemanticVersion

__all__ = ["CommandBuildAndCommit"]

_VERSION_PLACEHOLDER = "{version}"


class CommandBuildAndCommit:
    def __init__(self, git: GitClient, build: BuildConfig, cwd: Path, console: ConsoleProtocol) -> None:
        self.git = git
        self.build = build
        self.cwd = cwd
        self.console = console

    def steps_for(self, mode: BuildMode) -> tuple[BuildStep, ...]:
        if mode is BuildMode.PREPARE_NEXT_VERSION:
            return self.build.prepare_next_version
        return self.build.development_for_next_release

    def call_build_steps_and_commit(self, mode: BuildMode, version: SemanticVersion) -> Result[None, PipelineError]:
        steps = self.steps_for(mode)
        if not steps:
            self.console.print(f"No build steps configured for '{mode}'", Style.DIM)
            return Ok(None)
        if not self.build.command:
            self.console.warning(f"No build command configured, skipping the '{mode}' build steps")
            return Ok(None)

        for step in steps:
            result = self._run_step(step, version)
            if isinstance(result, Err):
                return result
        return Ok(None)

    def _run_step(self, step: BuildStep, version: SemanticVersion) -> Result[None, PipelineError]:
        if step.commit_message and not self.git.is_working_directory_clean():
            return Err(BuildFailed(step.target, "working directory must be clean before a committing build step"))

        text = str(version)
        cmd = [part.replace(_VERSION_PLACEHOLDER, text) for part in self.build.command]
        cmd.append(step.target)
        self.console.print(f"Running build target '{step.target}' for version {text}", Style.DIM)
        ran = run_interactive(cmd, cwd=self.cwd)
        if isinstance(ran, Err):
            return Err(BuildFailed(step.target, str(ran.error)))

        if not step.commit_message:
            if not self.git.is_working_directory_clean():
                return Err(BuildFailed(step.target, "build step changed files but has no commit message"))
            return Ok(None)

        staged = self.git.add_all()
        if isinstance(staged, Err):
            return Err(GitCommandFailed(staged.error))
        committed = self.git.commit_all(step.commit_message.replace(_VERSION_PLACEHOLDER, text))
        if isinstance(committed, Err):
            return Err(GitCommandFailed(committed.error))
        return Ok(None)
