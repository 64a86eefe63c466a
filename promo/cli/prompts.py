"""Terminal implementation of the confirmation port."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from promo.output.console import ConsoleProtocol, Style
from promo.promotion.ports import Validator


class TyperPrompts:
    """Ask the operator through typer prompts.

    Ctrl-C at any prompt counts as a cancellation, as does an empty answer to
    a free-text question or ``q`` at a numbered choice.
    """

    def __init__(self, console: ConsoleProtocol, *, assume_yes: bool = False) -> None:
        self._console = console
        self._assume_yes = assume_yes

    def confirm(self, prompt: str) -> bool:
        if self._assume_yes:
            self._console.print(f"{prompt} yes (--yes)", Style.DIM)
            return True
        try:
            return typer.confirm(prompt, default=False)
        except typer.Abort:
            return False

    def choose_one(self, prompt: str, options: Sequence[str]) -> int | None:
        if not options:
            return None

        self._console.print(prompt)
        for i, option in enumerate(options, start=1):
            self._console.print(f"{i:2}. {option}", Style.DIM)

        while True:
            try:
                raw = typer.prompt("Pick number (q to cancel)", default="1")
            except typer.Abort:
                return None
            if raw.strip().lower() == "q":
                return None
            try:
                idx = int(raw)
            except ValueError:
                self._console.error("invalid number")
                continue
            if idx < 1 or idx > len(options):
                self._console.error("out of range")
                continue
            return idx - 1

    def input_text(self, prompt: str, validator: Validator) -> str | None:
        while True:
            try:
                raw = typer.prompt(f"{prompt} (empty to cancel)", default="", show_default=False)
            except typer.Abort:
                return None
            if not raw.strip():
                return None
            message = validator(raw)
            if message is None:
                return raw.strip()
            self._console.error(message)
