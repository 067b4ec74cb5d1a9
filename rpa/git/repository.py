"""Git command line implementation of ``GitClient``.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.get_tags("develop"):
        case Ok(tags):
            print(", ".join(tags))
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rpa.core.result import Err, Ok, Result
from rpa.git.client import GitError
from rpa.git.operations import push_to_repos
from rpa.platform.process import ProcessError
from rpa.platform.process import run as run_process
from rpa.platform.process import run_interactive

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = {"fetch", "pull", "push", "ls-remote"}

__all__ = ["Repository"]


class Repository:
    """A working copy driven through the ``git`` executable.

    Attributes:
        path: Path to the working copy root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch_name(self) -> str | None:
        """Current branch, or None on a detached HEAD."""
        result = self._run(["symbolic-ref", "--short", "-q", "HEAD"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def is_on_branch(self, name: str) -> bool:
        current = self.current_branch_name()
        if current is None:
            return False
        return current == name or (name.endswith("/") and current.startswith(name))

    def get_ancestors(self, expected: Sequence[str]) -> tuple[str, ...]:
        """Expected branches HEAD was cut from.

        A candidate qualifies when its fork point with HEAD is the newest
        among the candidates. A fork point that is an ancestor of another
        candidate's fork point is older history, not the base. Branches
        sharing the newest fork point are all returned.
        """
        current = self.current_branch_name()
        if current is None:
            return ()

        forks: dict[str, str] = {}
        for branch in self._local_branches():
            if branch == current or branch in forks:
                continue
            if not any(branch == e or branch.startswith(e) for e in expected if e):
                continue
            fork = self._fork_point(branch)
            if fork is not None:
                forks[branch] = fork

        return tuple(
            branch
            for branch, fork in forks.items()
            if not any(other != fork and self._is_ancestor(fork, other) for other in forks.values())
        )

    def does_branch_exist(self, name: str) -> bool:
        return isinstance(self._run(["show-ref", "--verify", "--quiet", f"refs/heads/{name}"]), Ok)

    def does_tag_exist(self, name: str) -> bool:
        return isinstance(self._run(["show-ref", "--verify", "--quiet", f"refs/tags/{name}"]), Ok)

    def is_commit_hash(self, ref: str) -> bool:
        result = self._run(["cat-file", "-t", ref])
        return isinstance(result, Ok) and result.value.strip() == "commit"

    def is_working_directory_clean(self) -> bool:
        """Returns False if status cannot be determined."""
        result = self._run(["status", "--porcelain"])
        match result:
            case Ok(stdout):
                return stdout.strip() == ""
            case Err(_):
                return False

    def get_tags(self, from_ref: str = "HEAD", contains: str | None = None) -> Result[tuple[str, ...], GitError]:
        args = ["tag", f"--merged={from_ref}"]
        if contains:
            args.append(f"--contains={contains}")
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(e, f"could not list tags merged into '{from_ref}'"))
            case Ok(stdout):
                return Ok(tuple(line.strip() for line in stdout.splitlines() if line.strip()))

    def get_hash(self, branch: str, remote: str | None = None) -> str | None:
        ref = f"{remote}/{branch}" if remote else branch
        return self._stdout_or_none(["rev-parse", "--verify", "--quiet", ref])

    def get_most_recent_common_ancestor_with_remote(
        self, branch: str, branch_on_remote: str, remote: str
    ) -> str | None:
        return self._stdout_or_none(["merge-base", branch, f"{remote}/{branch_on_remote}"])

    def get_remote_of_branch(self, branch: str) -> str | None:
        return self._stdout_or_none(["config", f"branch.{branch}.remote"])

    def get_first_ancestor(self) -> str | None:
        current = self.current_branch_name()
        if current is None:
            return None

        nearest: tuple[int, str] | None = None
        for branch in self._local_branches():
            if branch == current or self._fork_point(branch) is None:
                continue
            count = self._stdout_or_none(["rev-list", "--count", f"{branch}..HEAD"])
            if count is None or not count.isdigit():
                continue
            candidate = (int(count), branch)
            if nearest is None or candidate < nearest:
                nearest = candidate
        return nearest[1] if nearest else None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def checkout(self, ref: str) -> Result[None, GitError]:
        return self._mutate(["checkout", ref], f"could not checkout '{ref}'")

    def checkout_new_branch(self, name: str) -> Result[None, GitError]:
        return self._mutate(["checkout", "-b", name], f"could not create branch '{name}'")

    def checkout_commit_with_new_branch(self, commit: str | None, name: str) -> Result[None, GitError]:
        args = ["checkout", "-b", name]
        if commit:
            args.append(commit)
        return self._mutate(args, f"could not create branch '{name}' at '{commit or 'HEAD'}'")

    def merge_branch(self, name: str, *, no_commit: bool = False) -> Result[None, GitError]:
        args = ["merge", name, "--no-ff"]
        if no_commit:
            args.append("--no-commit")
        result = self._run(args)
        if isinstance(result, Err):
            if self._conflicted_files():
                return Ok(None)
            return Err(_git_error(result.error, f"could not merge branch '{name}'"))
        return Ok(None)

    def merge_branch_taking_content(self, name: str) -> Result[None, GitError]:
        merged = self._mutate(
            ["merge", "-s", "ours", "--no-ff", "--no-commit", name],
            f"could not merge branch '{name}'",
        )
        if isinstance(merged, Err):
            return merged
        return self._mutate(["read-tree", "-m", "-u", name], f"could not take over the content of '{name}'")

    def commit_all(self, message: str) -> Result[None, GitError]:
        return self._mutate(["commit", "-a", "-m", message, "--allow-empty"], "could not commit")

    def add_all(self) -> Result[None, GitError]:
        return self._mutate(["add", "--all"], "could not stage changes")

    def resolve_merge_conflicts(self) -> Result[None, GitError]:
        """Open ``git mergetool`` for conflicted files, if there are any."""
        conflicted = self._conflicted_files()
        if not conflicted:
            return Ok(None)

        tool = run_interactive(["git", "-C", str(self.path), "mergetool", *conflicted], cwd=self.path)
        if isinstance(tool, Err):
            return Err(_git_error(tool.error, "mergetool did not finish"))

        remaining = self._conflicted_files()
        if remaining:
            return Err(GitError(command="mergetool", message=f"unresolved conflicts: {', '.join(remaining)}"))
        return Ok(None)

    def reset_file(self, path: str) -> Result[None, GitError]:
        return self._mutate(["reset", "HEAD", "--", path], f"could not reset '{path}'")

    def checkout_discard(self, path: str) -> Result[None, GitError]:
        return self._mutate(["checkout", "--", path], f"could not discard changes of '{path}'")

    def tag(self, name: str, message: str) -> Result[None, GitError]:
        return self._mutate(["tag", "-a", name, "-m", message], f"could not create tag '{name}'")

    def fetch(self, remote: str, branch: str) -> Result[str, GitError]:
        result = self._run(["fetch", remote, branch])
        match result:
            case Err(e):
                return Err(_git_error(e, f"could not fetch '{branch}' from '{remote}'"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def push(
        self, remote: str, branch: str, tag: str | None = None, *, set_upstream: bool = False
    ) -> Result[str, GitError]:
        args = ["push"]
        if set_upstream:
            args.append("-u")
        args += [remote, branch]
        if tag:
            args.append(tag)
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error(e, f"could not push '{branch}' to '{remote}'"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def push_to_repos(self, remotes: Sequence[str], branch: str, tag: str | None = None) -> Result[None, GitError]:
        return push_to_repos(self, remotes, branch, tag)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _local_branches(self) -> list[str]:
        result = self._run(["for-each-ref", "--format=%(refname:short)", "refs/heads"])
        if isinstance(result, Err):
            return []
        return [line.strip() for line in result.value.splitlines() if line.strip()]

    def _fork_point(self, branch: str) -> str | None:
        return self._stdout_or_none(["merge-base", branch, "HEAD"])

    def _is_ancestor(self, commit: str, of: str) -> bool:
        return isinstance(self._run(["merge-base", "--is-ancestor", commit, of]), Ok)

    def _conflicted_files(self) -> list[str]:
        result = self._run(["diff", "--name-only", "--diff-filter=U"])
        if isinstance(result, Err):
            return []
        return [line.strip() for line in result.value.splitlines() if line.strip()]

    def _stdout_or_none(self, args: list[str]) -> str | None:
        result = self._run(args)
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def _mutate(self, args: list[str], description: str) -> Result[None, GitError]:
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error(result.error, description))
        return Ok(None)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)


def _git_error(error: ProcessError, description: str) -> GitError:
    command = error.command[3] if len(error.command) > 3 else "git"
    detail = error.stderr.strip() or error.stdout.strip()
    message = f"{description}: {detail}" if detail else description
    return GitError(command=command, message=message, returncode=error.returncode)
