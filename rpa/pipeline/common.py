"""Building blocks shared by the release steps."""

from __future__ import annotations

from collections.abc import Sequence

from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitError
from rpa.git.errors import InvalidBranchError
from rpa.git.operations import ensure_branch_up_to_date, push_to_repos
from rpa.git.topology import HOTFIX_PREFIX, PRERELEASE_PREFIX, RELEASE_PREFIX, SUPPORT_PREFIX, resolve_ancestor
from rpa.output.console import Style
from rpa.pipeline.collaborators import BuildMode
from rpa.pipeline.context import ReleaseEnvironment
from rpa.pipeline.errors import GitCommandFailed, OperatorAborted, PipelineError, StepPreconditionFailed
from rpa.semver import SemanticVersion, next_patch
from rpa.tracker.sync import (
    create_version_if_absent,
    release_version,
    release_version_and_squash_unreleased,
)

__all__ = [
    "choose_version",
    "create_tag",
    "ensure_up_to_date",
    "ensure_working_directory_clean",
    "git_call",
    "merge_skipping_ignored",
    "offer_support_branch",
    "prerelease_branch",
    "push_branch",
    "release_branch",
    "release_version_and_move_issues",
    "require_branch",
    "require_new_branch",
    "require_new_tag",
    "resolve_base_branch",
]

_ISSUES_SHOWN = 5


def release_branch(version: SemanticVersion) -> str:
    return f"{RELEASE_PREFIX}v{version}"


def prerelease_branch(version: SemanticVersion) -> str:
    return f"{PRERELEASE_PREFIX}v{version}"


def git_call[T](result: Result[T, GitError]) -> Result[T, GitCommandFailed]:
    if isinstance(result, Err):
        return Err(GitCommandFailed(result.error))
    return result


def choose_version(env: ReleaseEnvironment, prompt: str, candidates: Sequence[SemanticVersion]) -> SemanticVersion:
    """Ask the operator unless there is nothing to choose between."""
    if len(candidates) == 1:
        env.console.print(f"{prompt} {candidates[0]} (only candidate)", Style.DIM)
        return candidates[0]
    return env.operator.read_version_choice(prompt, candidates)


def ensure_working_directory_clean(env: ReleaseEnvironment) -> Result[None, OperatorAborted]:
    if env.git.is_working_directory_clean():
        return Ok(None)
    env.console.warning("Your working directory is not clean")
    if env.operator.read_confirmation("Do you still wish to continue?"):
        return Ok(None)
    return Err(OperatorAborted("Working directory not clean, user does not want to continue. Release process stopped."))


def require_branch(env: ReleaseEnvironment, name: str, expected: str) -> Result[str, InvalidBranchError]:
    """The current branch, when it is ``name`` (or starts with ``name`` ending in ``/``)."""
    current = env.git.current_branch_name()
    if current is None or not env.git.is_on_branch(name):
        return Err(InvalidBranchError(branch=current, expected=expected))
    return Ok(current)


def require_new_branch(env: ReleaseEnvironment, name: str) -> Result[None, StepPreconditionFailed]:
    if env.git.does_branch_exist(name):
        return Err(StepPreconditionFailed(f"The branch '{name}' already exists."))
    return Ok(None)


def require_new_tag(env: ReleaseEnvironment, name: str) -> Result[None, StepPreconditionFailed]:
    if env.git.does_tag_exist(name):
        return Err(
            StepPreconditionFailed(
                f"There is already a commit tagged with '{name}'.",
                hint="delete the tag or release a different version",
            )
        )
    return Ok(None)


def create_tag(env: ReleaseEnvironment, name: str) -> Result[None, GitCommandFailed]:
    env.console.print(f"Creating tag '{name}'", Style.DIM)
    return git_call(env.git.tag(name, f"Create tag with version {name}"))


def resolve_base_branch(env: ReleaseEnvironment, given: str | None, expected: Sequence[str]) -> str:
    if given:
        return given
    return resolve_ancestor(env.git, env.operator, expected, console=env.console)


def ensure_up_to_date(env: ReleaseEnvironment, branch: str) -> Result[None, PipelineError]:
    result = ensure_branch_up_to_date(env.git, env.config.remotes.names, branch, console=env.console)
    if isinstance(result, Err) and isinstance(result.error, GitError):
        return Err(GitCommandFailed(result.error))
    return result


def push_branch(env: ReleaseEnvironment, branch: str, tag: str | None = None) -> Result[None, GitCommandFailed]:
    target = f"'{branch}' with tag '{tag}'" if tag else f"'{branch}'"
    env.console.print(f"Pushing {target}", Style.DIM)
    return git_call(push_to_repos(env.git, env.config.remotes.names, branch, tag))


def merge_skipping_ignored(
    env: ReleaseEnvironment,
    target: str,
    source: str,
    ignored: Sequence[str],
) -> Result[None, PipelineError]:
    """Merge ``source`` into ``target`` keeping ``target``'s copy of ``ignored`` files."""
    git = env.git
    checked_out = git_call(git.checkout(target))
    if isinstance(checked_out, Err):
        return checked_out

    merged = git_call(git.merge_branch(source, no_commit=True))
    if isinstance(merged, Err):
        return merged

    for path in ignored:
        env.console.print(f"Resetting '{path}'", Style.DIM)
        reset = git.reset_file(path)
        if isinstance(reset, Ok):
            reset = git.checkout_discard(path)
        if isinstance(reset, Err):
            env.console.warning(f"Could not reset '{path}': {reset.error.message}")

    resolved = git_call(git.resolve_merge_conflicts())
    if isinstance(resolved, Err):
        return resolved
    return git_call(git.commit_all(f"Merge branch '{source}' into {target}"))


def offer_support_branch(env: ReleaseEnvironment, released: SemanticVersion) -> Result[None, PipelineError]:
    """Optionally open ``support/vX.Y`` and its first hotfix branch at the current commit."""
    support = f"{SUPPORT_PREFIX}v{released.major}.{released.minor}"
    if env.git.does_branch_exist(support):
        env.console.print(f"Support branch '{support}' already exists", Style.DIM)
        return Ok(None)
    if not env.operator.read_confirmation("Do you wish to create a new support branch?"):
        return Ok(None)

    created = git_call(env.git.checkout_new_branch(support))
    if isinstance(created, Err):
        return created

    hotfix_version = next_patch(released)
    hotfix = f"{HOTFIX_PREFIX}v{hotfix_version}"
    if env.git.does_branch_exist(hotfix):
        env.console.print(f"Hotfix branch '{hotfix}' already exists", Style.DIM)
        return Ok(None)

    created = git_call(env.git.checkout_new_branch(hotfix))
    if isinstance(created, Err):
        return created
    return env.build.call_build_steps_and_commit(BuildMode.DEVELOPMENT_FOR_NEXT_RELEASE, hotfix_version)


def release_version_and_move_issues(
    env: ReleaseEnvironment,
    current: SemanticVersion,
    next_version: SemanticVersion,
    *,
    squash: bool = False,
) -> Result[None, PipelineError]:
    """Mirror the release of ``current`` in Jira.

    Both versions are created when missing. Open issues of ``current`` move
    to ``next_version`` once the operator agrees.
    """
    tracker = env.tracker
    project = env.config.jira.project_key
    if tracker is None or project is None:
        env.console.warning(f"Jira is not configured, version '{current}' is not released there")
        return Ok(None)

    current_id = create_version_if_absent(tracker, project, str(current), console=env.console)
    if isinstance(current_id, Err):
        return current_id
    next_id = create_version_if_absent(tracker, project, str(next_version), console=env.console)
    if isinstance(next_id, Err):
        return next_id

    env.console.info(f"Releasing version '{current}' on Jira")
    move = True
    if current_id.value != next_id.value:
        open_issues = tracker.find_all_non_closed_issues(current_id.value)
        if isinstance(open_issues, Err):
            return open_issues
        if open_issues.value:
            env.console.print("These are some of the issues that will be moved by releasing the version on Jira:")
            for issue in open_issues.value[:_ISSUES_SHOWN]:
                env.console.print(f"  {issue.key} - {issue.summary}")
            move = env.operator.read_confirmation(
                f"Do you want to move these issues to '{next_version}' (otherwise just release '{current}')?"
            )

    if squash:
        return release_version_and_squash_unreleased(
            tracker,
            current_id.value,
            next_id.value,
            project,
            move_open_issues=move,
            console=env.console,
        )
    return release_version(
        tracker,
        current_id.value,
        next_id.value if move else None,
        console=env.console,
    )
