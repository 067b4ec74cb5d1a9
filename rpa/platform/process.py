"""Subprocess execution returning ``Result`` values.

``run`` captures output (git queries, git mutations whose stderr we want to
report). ``run_interactive`` lets the child own the terminal, which is what
build tools and ``git mergetool`` need.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from rpa.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_interactive"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A subprocess that could not be started, timed out, or exited non-zero.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, -1 when the process never completed.
        stdout: Captured standard output (may be empty).
        stderr: Captured standard error or a synthetic reason.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return its stdout.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_interactive(cmd: list[str], cwd: Path) -> Result[None, ProcessError]:
    """Execute a command attached to the current terminal.

    Only the exit status is observed; output streams straight to the user.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr=""))

    return Ok(None)
