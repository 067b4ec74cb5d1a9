"""Git access for the release process.

- ``GitClient``: the operations the release steps need
- ``Repository``: ``GitClient`` over the git command line
- ``topology``: branch classification and ancestor resolution
- ``operations``: up-to-date checks and pushing to the configured remotes
- ``SemanticVersionedRepository``: versions read from release tags

Usage:
    from rpa.git import Repository, ensure_branch_up_to_date

    repo = Repository(Path("."))
    result = ensure_branch_up_to_date(repo, ["origin"], "develop", console=console)
"""

from rpa.git.client import GitClient, GitError
from rpa.git.errors import (
    BehindError,
    DivergedError,
    InvalidAncestorError,
    InvalidBranchError,
    NoRemotesConfigured,
    SyncError,
    TopologyError,
)
from rpa.git.operations import ensure_branch_up_to_date, push_to_repos, should_set_upstream
from rpa.git.repository import Repository
from rpa.git.topology import Classification, branch_label, classify, find_ancestor, resolve_ancestor
from rpa.git.versioned import SemanticVersionedRepository

__all__ = [
    # client
    "GitClient",
    "GitError",
    "Repository",
    # errors
    "BehindError",
    "DivergedError",
    "InvalidAncestorError",
    "InvalidBranchError",
    "NoRemotesConfigured",
    "SyncError",
    "TopologyError",
    # topology
    "Classification",
    "branch_label",
    "classify",
    "find_ancestor",
    "resolve_ancestor",
    # operations
    "ensure_branch_up_to_date",
    "push_to_repos",
    "should_set_upstream",
    # versions
    "SemanticVersionedRepository",
]
