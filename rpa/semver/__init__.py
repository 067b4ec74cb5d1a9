"""Semantic versions: parsing, ordering and next-version derivation."""

from rpa.semver.derivation import (
    current_possible_versions_hotfix,
    final_release,
    next_major,
    next_minor,
    next_patch,
    next_possible_versions_develop,
    next_possible_versions_for_release_branch_from_develop,
    next_possible_versions_for_release_branch_from_hotfix,
    next_possible_versions_hotfix,
    next_pre_release_counter,
    next_pre_release_stage,
    next_rc,
)
from rpa.semver.version import (
    PreReleaseStage,
    SemanticVersion,
    VersionFormatError,
    parse,
    parse_from_branch_name,
    parse_tag,
    try_parse,
)

__all__ = [
    # version
    "PreReleaseStage",
    "SemanticVersion",
    "VersionFormatError",
    "parse",
    "parse_from_branch_name",
    "parse_tag",
    "try_parse",
    # derivation
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
]
