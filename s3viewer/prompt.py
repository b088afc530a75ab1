"""Interactive prompts for picking buckets and keys."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Protocol, TextIO


class Prompter(Protocol):
    """What the retrieval flow needs from the user interface."""

    def pick(self, options: Sequence[str], placeholder: str) -> str | None:
        """Return the chosen option, or None if the user cancelled."""
        ...

    def ask(self, message: str) -> str | None:
        """Return free text, or None if the user cancelled."""
        ...

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsolePrompter:
    """Numbered menus on a terminal. Empty input or EOF cancels."""

    def __init__(
        self, stdin: TextIO | None = None, stdout: TextIO | None = None
    ) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def _readline(self, prompt: str) -> str | None:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            self.stdout.write("\n")
            return None
        return line.strip()

    def pick(self, options: Sequence[str], placeholder: str) -> str | None:
        if not options:
            self.info("Nothing to select.")
            return None

        self.stdout.write(f"{placeholder}:\n")
        width = len(str(len(options)))
        for i, option in enumerate(options, start=1):
            self.stdout.write(f"  {i:>{width}}) {option}\n")

        while True:
            answer = self._readline(f"Choice [1-{len(options)}, empty to cancel]: ")
            if not answer:
                return None
            if answer in options:
                return answer
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            self.stdout.write(f"Invalid choice: {answer}\n")

    def ask(self, message: str) -> str | None:
        return self._readline(f"{message}: ") or None

    def info(self, message: str) -> None:
        self.stdout.write(f"{message}\n")
        self.stdout.flush()

    def error(self, message: str) -> None:
        print(message, file=sys.stderr)
