"""Branch classification and ancestor resolution."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from rpa.git.client import GitClient
from rpa.output.console import ConsoleProtocol, Style

if TYPE_CHECKING:
    from rpa.pipeline.collaborators import Operator

__all__ = [
    "DEVELOP",
    "HOTFIX_PREFIX",
    "MASTER",
    "PRERELEASE_PREFIX",
    "RELEASE_PREFIX",
    "SUPPORT_PREFIX",
    "Classification",
    "branch_label",
    "classify",
    "find_ancestor",
    "resolve_ancestor",
]

DEVELOP = "develop"
MASTER = "master"
RELEASE_PREFIX = "release/"
HOTFIX_PREFIX = "hotfix/"
SUPPORT_PREFIX = "support/"
PRERELEASE_PREFIX = "prerelease/"


class Classification(Enum):
    DEVELOP = "develop"
    MASTER = "master"
    RELEASE = "release"
    HOTFIX = "hotfix"
    SUPPORT = "support"
    PRERELEASE = "prerelease"
    OTHER = "other"


_PREFIXES = (
    (RELEASE_PREFIX, Classification.RELEASE),
    (HOTFIX_PREFIX, Classification.HOTFIX),
    (SUPPORT_PREFIX, Classification.SUPPORT),
    (PRERELEASE_PREFIX, Classification.PRERELEASE),
)


def classify(branch_name: str | None) -> Classification:
    """Classify a branch name; prefixes are case-sensitive."""
    if branch_name is None:
        return Classification.OTHER
    if branch_name == DEVELOP:
        return Classification.DEVELOP
    if branch_name == MASTER:
        return Classification.MASTER
    for prefix, classification in _PREFIXES:
        if branch_name.startswith(prefix) and len(branch_name) > len(prefix):
            return classification
    return Classification.OTHER


def branch_label(branch_name: str) -> str | None:
    """``release/v1.3.5-rc.2`` -> ``v1.3.5-rc.2``; None for unprefixed branches."""
    for prefix, _ in _PREFIXES:
        if branch_name.startswith(prefix):
            return branch_name[len(prefix) :] or None
    return None


def find_ancestor(git: GitClient, expected: Sequence[str]) -> tuple[str, ...]:
    """All expected branches HEAD descends from, in the order git lists them."""
    return git.get_ancestors(expected)


def resolve_ancestor(
    git: GitClient,
    operator: Operator,
    expected: Sequence[str],
    *,
    console: ConsoleProtocol,
) -> str:
    """Pick the single ancestor to work against.

    One match is used directly. Otherwise the operator decides: by typing a
    name when nothing matched, or by choosing when several matched.
    """
    console.print(f"Trying to get ancestor from {', '.join(expected)}", Style.DIM)
    found = find_ancestor(git, expected)

    if len(found) == 1:
        return found[0]

    if not found:
        console.warning(f"Expected one of the following ancestors but found none: {', '.join(expected)}")
        return operator.read_string("Please enter the name of the ancestor branch")

    console.warning(f"Multiple matching ancestors were found: {', '.join(found)}")
    return operator.read_string_choice("Please choose the ancestor branch", found)
