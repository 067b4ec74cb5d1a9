"""Release steps: cut the release or prerelease branch and prepare it.

A release step ends in one of three ways:
- ``start_release_phase``: the new branch exists, nothing else happened
- ``pause_for_commit``: Jira and the build ran, the operator commits next
- otherwise it hands over to the matching continue step
"""

from __future__ import annotations

from dataclasses import replace

from rpa.core.result import Err, Ok, Result
from rpa.git.errors import InvalidAncestorError, InvalidBranchError
from rpa.git.topology import DEVELOP, HOTFIX_PREFIX, MASTER, RELEASE_PREFIX
from rpa.pipeline.actions import Action, ContinueWith, PauseAndStop, Step, Stop
from rpa.pipeline.collaborators import BuildMode
from rpa.pipeline.common import (
    choose_version,
    ensure_working_directory_clean,
    git_call,
    prerelease_branch,
    release_branch,
    release_version_and_move_issues,
    require_branch,
    require_new_branch,
    require_new_tag,
    resolve_base_branch,
)
from rpa.pipeline.context import PipelineContext, ReleaseEnvironment
from rpa.pipeline.errors import PipelineError
from rpa.semver import (
    SemanticVersion,
    next_possible_versions_develop,
    next_possible_versions_for_release_branch_from_develop,
    next_possible_versions_for_release_branch_from_hotfix,
    next_possible_versions_hotfix,
)

__all__ = [
    "release_alpha_beta",
    "release_on_master",
    "release_patch",
    "release_rc",
    "release_with_rc",
]

_NEXT_VERSION_PROMPT = "Please choose the next version (open Jira issues get moved there)"
_RELEASE_ANCESTORS = (DEVELOP, f"{HOTFIX_PREFIX}v")


def _paused(version: SemanticVersion) -> PauseAndStop:
    return PauseAndStop(f"Paused before finishing '{version}'. Commit your changes and run 'rpa close-version'.")


def _new_release_branch_done(ctx: PipelineContext, version: SemanticVersion, base: str) -> Action:
    if ctx.no_push:
        return Stop(f"Created '{release_branch(version)}' without pushing")
    return ContinueWith(Step.PUSH_NEW_RELEASE_BRANCH, version, replace(ctx, ancestor=base))


def release_on_master(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Cut ``release/v<version>`` from develop for a final release."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean
    on_develop = require_branch(env, DEVELOP, "releasing a final version requires the 'develop' branch")
    if isinstance(on_develop, Err):
        return on_develop

    branch = release_branch(version)
    fresh = require_new_branch(env, branch)
    if isinstance(fresh, Err):
        return fresh

    next_version = choose_version(env, _NEXT_VERSION_PROMPT, next_possible_versions_develop(version))

    created = git_call(env.git.checkout_commit_with_new_branch(ctx.commit_hash, branch))
    if isinstance(created, Err):
        return created

    back = git_call(env.git.checkout(DEVELOP))
    if isinstance(back, Err):
        return back
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, next_version)
    if isinstance(built, Err):
        return built

    switched = git_call(env.git.checkout(branch))
    if isinstance(switched, Err):
        return switched

    if ctx.start_release_phase:
        return Ok(_new_release_branch_done(ctx, version, DEVELOP))

    synced = release_version_and_move_issues(env, version, next_version, squash=ctx.squash_unreleased)
    if isinstance(synced, Err):
        return synced
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, version)
    if isinstance(built, Err):
        return built

    if ctx.pause_for_commit:
        return Ok(_paused(version))
    return Ok(ContinueWith(Step.CONTINUE_RELEASE_ON_MASTER, version, replace(ctx, ancestor=DEVELOP)))


def release_alpha_beta(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Cut ``prerelease/v<version>`` from develop or a hotfix branch."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean

    base = env.git.current_branch_name()
    if base is not None and env.git.is_on_branch(DEVELOP):
        candidates = next_possible_versions_develop(version)
    elif base is not None and env.git.is_on_branch(HOTFIX_PREFIX):
        candidates = next_possible_versions_hotfix(version)
    else:
        return Err(InvalidBranchError(branch=base, expected="a prerelease requires 'develop' or a 'hotfix/*' branch"))

    branch = prerelease_branch(version)
    fresh = require_new_branch(env, branch)
    if isinstance(fresh, Err):
        return fresh

    created = git_call(env.git.checkout_commit_with_new_branch(ctx.commit_hash, branch))
    if isinstance(created, Err):
        return created

    next_version = choose_version(env, _NEXT_VERSION_PROMPT, candidates)
    synced = release_version_and_move_issues(env, version, next_version, squash=ctx.squash_unreleased)
    if isinstance(synced, Err):
        return synced
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, version)
    if isinstance(built, Err):
        return built

    if ctx.pause_for_commit:
        return Ok(_paused(version))
    return Ok(ContinueWith(Step.CONTINUE_ALPHA_BETA, version, replace(ctx, branch_name=branch, ancestor=base)))


def release_patch(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Cut ``release/v<version>`` from master or a hotfix branch."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean

    if ctx.on_master:
        base = require_branch(env, MASTER, "a patch for master is released from 'master'")
    else:
        base = require_branch(env, HOTFIX_PREFIX, "a patch is released from a 'hotfix/*' branch")
    if isinstance(base, Err):
        return base

    env.console.info(f"The version to be released: {version}")
    next_version = choose_version(env, _NEXT_VERSION_PROMPT, next_possible_versions_hotfix(version))

    branch = release_branch(version)
    fresh = require_new_branch(env, branch)
    if isinstance(fresh, Err):
        return fresh
    untagged = require_new_tag(env, version.to_tag())
    if isinstance(untagged, Err):
        return untagged

    created = git_call(env.git.checkout_commit_with_new_branch(ctx.commit_hash, branch))
    if isinstance(created, Err):
        return created

    if ctx.start_release_phase:
        return Ok(_new_release_branch_done(ctx, version, base.value))

    synced = release_version_and_move_issues(env, version, next_version, squash=ctx.squash_unreleased)
    if isinstance(synced, Err):
        return synced
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, version)
    if isinstance(built, Err):
        return built

    if ctx.pause_for_commit:
        return Ok(_paused(version))
    return Ok(ContinueWith(Step.CONTINUE_RELEASE_PATCH, version, replace(ctx, ancestor=base.value)))


def release_rc(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Cut ``prerelease/v<rc>`` from the release branch."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean
    current = require_branch(env, RELEASE_PREFIX, "a release candidate is released from a 'release/*' branch")
    if isinstance(current, Err):
        return current

    ancestor = resolve_base_branch(env, ctx.ancestor, _RELEASE_ANCESTORS)
    if ancestor == DEVELOP or ancestor.startswith(RELEASE_PREFIX):
        candidates = next_possible_versions_develop(version)
    elif ancestor.startswith(HOTFIX_PREFIX):
        candidates = next_possible_versions_hotfix(version)
    else:
        return Err(InvalidAncestorError(branch=current.value, ancestor=ancestor))

    next_version = choose_version(env, _NEXT_VERSION_PROMPT, candidates)

    branch = prerelease_branch(version)
    fresh = require_new_branch(env, branch)
    if isinstance(fresh, Err):
        return fresh
    created = git_call(env.git.checkout_commit_with_new_branch(ctx.commit_hash, branch))
    if isinstance(created, Err):
        return created

    synced = release_version_and_move_issues(env, version, next_version, squash=ctx.squash_unreleased)
    if isinstance(synced, Err):
        return synced
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, version)
    if isinstance(built, Err):
        return built

    if ctx.pause_for_commit:
        return Ok(_paused(version))
    return Ok(
        ContinueWith(Step.CONTINUE_ALPHA_BETA, version, replace(ctx, branch_name=branch, ancestor=current.value))
    )


def release_with_rc(
    env: ReleaseEnvironment, ctx: PipelineContext, version: SemanticVersion
) -> Result[Action, PipelineError]:
    """Release the final version of the release branch we are on."""
    clean = ensure_working_directory_clean(env)
    if isinstance(clean, Err):
        return clean
    current = require_branch(env, RELEASE_PREFIX, "a final release is finished from a 'release/*' branch")
    if isinstance(current, Err):
        return current

    ancestor = resolve_base_branch(env, ctx.ancestor, _RELEASE_ANCESTORS)
    untagged = require_new_tag(env, version.to_tag())
    if isinstance(untagged, Err):
        return untagged

    env.console.info(f"You are releasing version '{version}'")
    if ancestor == DEVELOP:
        candidates = next_possible_versions_for_release_branch_from_develop(version)
        follow_up = Step.CONTINUE_RELEASE_ON_MASTER
    elif ancestor.startswith(HOTFIX_PREFIX) or ancestor == MASTER:
        candidates = next_possible_versions_for_release_branch_from_hotfix(version)
        follow_up = Step.CONTINUE_RELEASE_PATCH
    else:
        return Err(InvalidAncestorError(branch=current.value, ancestor=ancestor))

    next_version = choose_version(env, _NEXT_VERSION_PROMPT, candidates)
    synced = release_version_and_move_issues(env, version, next_version, squash=ctx.squash_unreleased)
    if isinstance(synced, Err):
        return synced
    built = env.build.call_build_steps_and_commit(BuildMode.PREPARE_NEXT_VERSION, version)
    if isinstance(built, Err):
        return built

    if ctx.pause_for_commit:
        return Ok(_paused(version))
    resumed = replace(ctx, ancestor=ancestor, on_master=ancestor == MASTER)
    return Ok(ContinueWith(follow_up, version, resumed))
