"""Interactive ``Operator`` on top of typer prompts."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from rpa.core.result import Err
from rpa.output.console import ConsoleProtocol, Style
from rpa.semver import SemanticVersion, parse


class TyperOperator:
    def __init__(self, console: ConsoleProtocol) -> None:
        self.console = console

    def read_version_choice(self, prompt: str, versions: Sequence[SemanticVersion]) -> SemanticVersion:
        if not versions:
            raise ValueError("no versions to choose from")
        return versions[self._pick(prompt, [str(v) for v in versions])]

    def read_version(self, prompt: str) -> SemanticVersion:
        while True:
            raw = typer.prompt(prompt)
            parsed = parse(raw.strip())
            if isinstance(parsed, Err):
                self.console.error(str(parsed.error))
                continue
            return parsed.value

    def read_string_choice(self, prompt: str, choices: Sequence[str]) -> str:
        if not choices:
            raise ValueError("no choices to choose from")
        return choices[self._pick(prompt, list(choices))]

    def read_string(self, prompt: str) -> str:
        while True:
            raw: str = typer.prompt(prompt).strip()
            if raw:
                return raw
            self.console.error("a value is required")

    def read_confirmation(self, prompt: str) -> bool:
        return typer.confirm(prompt, default=True)

    def _pick(self, prompt: str, labels: list[str]) -> int:
        self.console.print(prompt, Style.BOLD)
        for i, label in enumerate(labels, start=1):
            self.console.print(f"{i:2}. {label}")

        while True:
            raw = typer.prompt("Pick number", default="1")
            try:
                idx = int(raw)
            except ValueError:
                self.console.error("invalid number")
                continue
            if idx < 1 or idx > len(labels):
                self.console.error("out of range")
                continue
            return idx - 1
