"""Interactive confirmation.

The provisioner only talks to a :class:`ConfirmationPort`; the terminal
implementation below blocks on stdin with no timeout.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt


class ConfirmationPort(Protocol):
    def ask_yes_no(self, prompt: str) -> bool: ...

    def ask_text(self, prompt: str) -> str: ...


class TerminalPrompts:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask_yes_no(self, prompt: str) -> bool:
        return Confirm.ask(prompt, console=self.console)

    def ask_text(self, prompt: str) -> str:
        while True:
            answer = Prompt.ask(prompt, console=self.console).strip()
            if answer:
                return answer
            self.console.print("[red]A value is required.[/red]")
