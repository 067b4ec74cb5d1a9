"""Candidate next versions for each release context.

Every ``next_possible_versions_*`` function returns a deduplicated tuple,
sorted ascending, whose members are all strictly greater than the input.
``current_possible_versions_hotfix`` is the exception: it lists what a hotfix
branch may ship as *its own* version, which can be the branch version itself.
"""

from __future__ import annotations

from collections.abc import Iterable

from rpa.semver.version import PreReleaseStage, SemanticVersion

__all__ = [
    "current_possible_versions_hotfix",
    "final_release",
    "next_major",
    "next_minor",
    "next_patch",
    "next_possible_versions_develop",
    "next_possible_versions_for_release_branch_from_develop",
    "next_possible_versions_for_release_branch_from_hotfix",
    "next_possible_versions_hotfix",
    "next_pre_release_counter",
    "next_pre_release_stage",
    "next_rc",
    "with_stage",
]


def final_release(v: SemanticVersion) -> SemanticVersion:
    return SemanticVersion(v.major, v.minor, v.patch)


def next_patch(v: SemanticVersion) -> SemanticVersion:
    return SemanticVersion(v.major, v.minor, v.patch + 1)


def next_minor(v: SemanticVersion) -> SemanticVersion:
    return SemanticVersion(v.major, v.minor + 1, 0)


def next_major(v: SemanticVersion) -> SemanticVersion:
    return SemanticVersion(v.major + 1, 0, 0)


def with_stage(v: SemanticVersion, stage: PreReleaseStage, counter: int = 1) -> SemanticVersion:
    return SemanticVersion(v.major, v.minor, v.patch, stage, counter)


def next_pre_release_counter(v: SemanticVersion) -> SemanticVersion:
    """``1.2.0-beta.2`` -> ``1.2.0-beta.3``."""
    if v.pre_release_stage is None or v.pre_release_counter is None:
        raise ValueError(f"{v} is not a prerelease")
    return with_stage(v, v.pre_release_stage, v.pre_release_counter + 1)


def next_pre_release_stage(v: SemanticVersion) -> SemanticVersion | None:
    """Promote alpha to beta and beta to rc at counter 1; ``None`` after rc."""
    if v.pre_release_stage is None:
        raise ValueError(f"{v} is not a prerelease")
    if v.pre_release_stage is PreReleaseStage.RC:
        return None
    return with_stage(v, PreReleaseStage(int(v.pre_release_stage) + 1))


def next_rc(v: SemanticVersion) -> SemanticVersion:
    """The next release candidate of ``v``'s release line."""
    if v.pre_release_stage is PreReleaseStage.RC:
        return next_pre_release_counter(v)
    return with_stage(final_release(v), PreReleaseStage.RC)


def _train(v: SemanticVersion) -> list[SemanticVersion]:
    """``v``'s alpha.1, beta.1 and final release."""
    return [with_stage(v, PreReleaseStage.ALPHA), with_stage(v, PreReleaseStage.BETA), v]


def _ascending(items: Iterable[SemanticVersion]) -> tuple[SemanticVersion, ...]:
    return tuple(sorted(set(items)))


def _strictly_after(v: SemanticVersion, items: Iterable[SemanticVersion]) -> tuple[SemanticVersion, ...]:
    candidates = _ascending(items)
    if any(c <= v for c in candidates):
        raise AssertionError(f"derived candidates for {v} are not all greater: {candidates}")
    return candidates


def next_possible_versions_develop(
    v: SemanticVersion, without_pre_release: bool = False
) -> tuple[SemanticVersion, ...]:
    """Versions develop may move to after ``v``.

    With ``without_pre_release`` only final releases are offered, which is
    what a new release branch needs.
    """
    major = next_major(v)
    if v.pre_release_stage is None:
        minor = next_minor(v)
        if without_pre_release:
            return _strictly_after(v, [minor, major])
        return _strictly_after(v, [*_train(minor), *_train(major)])

    if without_pre_release:
        return _strictly_after(v, [final_release(v), major])

    items = [final_release(v), *_train(major)]
    # Release candidates are cut on release branches, never on develop.
    if v.pre_release_stage is not PreReleaseStage.RC:
        items.append(next_pre_release_counter(v))
    if v.pre_release_stage is PreReleaseStage.ALPHA:
        promoted = next_pre_release_stage(v)
        if promoted is not None:
            items.append(promoted)
    return _strictly_after(v, items)


def next_possible_versions_hotfix(v: SemanticVersion) -> tuple[SemanticVersion, ...]:
    """Versions a hotfix line may move to after ``v``."""
    patch = next_patch(v)
    if v.pre_release_stage is None:
        return _strictly_after(v, _train(patch))

    items = [next_pre_release_counter(v), final_release(v), patch]
    if v.pre_release_stage is PreReleaseStage.ALPHA:
        items.append(with_stage(v, PreReleaseStage.BETA))
    return _strictly_after(v, items)


def next_possible_versions_for_release_branch_from_develop(
    v: SemanticVersion,
) -> tuple[SemanticVersion, ...]:
    """Next tracker versions once release branch ``v`` (cut from develop) ships."""
    final = final_release(v)
    return _strictly_after(v, [next_patch(final), *next_possible_versions_develop(final)])


def next_possible_versions_for_release_branch_from_hotfix(
    v: SemanticVersion,
) -> tuple[SemanticVersion, ...]:
    """Next tracker versions once release branch ``v`` (cut from a hotfix) ships."""
    final = final_release(v)
    return _strictly_after(v, next_possible_versions_hotfix(final))


def current_possible_versions_hotfix(v: SemanticVersion) -> tuple[SemanticVersion, ...]:
    """Versions a hotfix branch labelled ``v`` may release right now."""
    if v.pre_release_stage is None:
        return _ascending(_train(v))

    items = [next_pre_release_counter(v), final_release(v)]
    if v.pre_release_stage is PreReleaseStage.ALPHA:
        items.append(with_stage(v, PreReleaseStage.BETA))
    return _ascending(items)
