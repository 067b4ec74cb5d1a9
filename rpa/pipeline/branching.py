"""Entry steps: decide which version to release from the branch we are on.

Each function returns the release step to run next. Nothing here touches
the repository beyond reading branches and tags.
"""

from __future__ import annotations

from dataclasses import replace

from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitError
from rpa.git.errors import InvalidAncestorError
from rpa.git.topology import DEVELOP, HOTFIX_PREFIX, MASTER
from rpa.output.console import Style
from rpa.pipeline.actions import Action, ContinueWith, Step
from rpa.pipeline.common import choose_version, resolve_base_branch
from rpa.pipeline.context import PipelineContext, ReleaseEnvironment
from rpa.pipeline.errors import GitCommandFailed, PipelineError, StepPreconditionFailed
from rpa.semver import (
    PreReleaseStage,
    SemanticVersion,
    current_possible_versions_hotfix,
    next_patch,
    next_possible_versions_develop,
    next_rc,
    parse_from_branch_name,
)

__all__ = [
    "branch_from_develop",
    "branch_from_hotfix",
    "branch_from_master",
    "branch_from_prerelease_for_continue",
    "branch_from_release",
    "branch_from_release_for_continue",
]

_CONTINUE_ANCESTORS = (DEVELOP, f"{HOTFIX_PREFIX}v")


def branch_from_develop(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Action, PipelineError]:
    develop = env.versions.current_version("HEAD")
    if isinstance(develop, Err):
        return Err(GitCommandFailed(develop.error))

    master: SemanticVersion | None = None
    if env.git.does_branch_exist(MASTER):
        on_master = env.versions.current_version(MASTER)
        if isinstance(on_master, Err):
            return Err(GitCommandFailed(on_master.error))
        master = on_master.value

    known = [v for v in (develop.value, master) if v is not None]
    if not known:
        version = env.operator.read_version("Enter the next version of the branch")
    else:
        most_recent = max(known)
        env.console.print(f"Most recent version: {most_recent}", Style.DIM)
        candidates = next_possible_versions_develop(most_recent, without_pre_release=ctx.start_release_phase)
        version = choose_version(env, "Please choose the next version", candidates)

    match version.pre_release_stage:
        case None:
            return Ok(ContinueWith(Step.RELEASE_ON_MASTER, version, ctx))
        case PreReleaseStage.ALPHA | PreReleaseStage.BETA:
            return Ok(ContinueWith(Step.RELEASE_ALPHA_BETA, version, ctx))
        case _:
            return Err(
                StepPreconditionFailed(
                    f"Cannot release '{version}' from develop",
                    hint="release candidates are released from a release branch",
                )
            )


def branch_from_master(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Action, PipelineError]:
    current = env.versions.current_version(MASTER)
    if isinstance(current, Err):
        return Err(GitCommandFailed(current.error))
    if current.value is None:
        return Err(StepPreconditionFailed("No current version exists on 'master'.", hint="tag a release first"))

    version = next_patch(current.value)
    while env.git.does_tag_exist(version.to_tag()):
        version = next_patch(version)

    return Ok(ContinueWith(Step.RELEASE_PATCH, version, replace(ctx, on_master=True)))


def branch_from_release(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Action, PipelineError]:
    current = parse_from_branch_name(ctx.branch_name)
    if isinstance(current, Err):
        return current

    rc = next_rc(current.value)
    while env.git.does_tag_exist(rc.to_tag()):
        rc = next_rc(rc)

    choice = env.operator.read_version_choice("Which version do you wish to release?", sorted((rc, current.value)))
    if choice == rc:
        return Ok(ContinueWith(Step.RELEASE_RC, rc, ctx))
    return Ok(ContinueWith(Step.RELEASE_WITH_RC, current.value, ctx))


def branch_from_hotfix(env: ReleaseEnvironment, ctx: PipelineContext) -> Result[Action, PipelineError]:
    if ctx.start_release_phase:
        parsed = parse_from_branch_name(ctx.branch_name)
        if isinstance(parsed, Err):
            return parsed
        version = parsed.value
    else:
        recent = env.versions.most_recent_hotfix_version()
        if isinstance(recent, Err):
            if isinstance(recent.error, GitError):
                return Err(GitCommandFailed(recent.error))
            return Err(recent.error)
        version = choose_version(env, "Please choose the next version", current_possible_versions_hotfix(recent.value))

    if version.is_pre_release:
        return Ok(ContinueWith(Step.RELEASE_ALPHA_BETA, version, replace(ctx, on_master=False)))
    return Ok(ContinueWith(Step.RELEASE_PATCH, version, replace(ctx, on_master=False)))


def branch_from_release_for_continue(
    env: ReleaseEnvironment, ctx: PipelineContext
) -> Result[Action, PipelineError]:
    version = parse_from_branch_name(ctx.branch_name)
    if isinstance(version, Err):
        return version

    ancestor = resolve_base_branch(env, ctx.ancestor, _CONTINUE_ANCESTORS)
    resumed = replace(ctx, ancestor=ancestor)
    if ancestor == DEVELOP:
        return Ok(ContinueWith(Step.CONTINUE_RELEASE_ON_MASTER, version.value, resumed))
    if ancestor.startswith(HOTFIX_PREFIX):
        return Ok(ContinueWith(Step.CONTINUE_RELEASE_PATCH, version.value, replace(resumed, on_master=False)))
    return Err(InvalidAncestorError(branch=ctx.branch_name, ancestor=ancestor))


def branch_from_prerelease_for_continue(
    env: ReleaseEnvironment, ctx: PipelineContext
) -> Result[Action, PipelineError]:
    version = parse_from_branch_name(ctx.branch_name)
    if isinstance(version, Err):
        return version
    env.console.print(f"Continuing prerelease {version.value}", Style.DIM)
    return Ok(ContinueWith(Step.CONTINUE_ALPHA_BETA, version.value, ctx))
