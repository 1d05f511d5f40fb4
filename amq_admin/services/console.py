# amq_admin/services/console.py
from __future__ import annotations

from typing import Callable, Optional, Sequence

import click
from tabulate import tabulate

from amq_admin.core.exceptions import ConfirmationDeclined


class Console:
    """
    Prompts, messages and table rendering for topic commands.
    Messages are returned as plain strings; the caller decides where they go.
    """

    def __init__(
        self,
        prompt: Optional[Callable[[str], bool]] = None,
        table_format: str = "psql",
    ) -> None:
        self._prompt = prompt or (lambda text: click.confirm(text, default=False))
        self.table_format = table_format

    def confirm(self, force: bool = False, text: str = "Are you sure?") -> None:
        """Return when forced or confirmed; raise ConfirmationDeclined otherwise."""
        if force:
            return
        if not self._prompt(text):
            raise ConfirmationDeclined("Command aborted")

    def info(self, msg: str) -> str:
        return msg

    def warn(self, msg: str) -> str:
        return msg

    def render_table(self, rows: Sequence[Sequence], headers: Sequence[str]) -> str:
        return tabulate(rows, headers=list(headers), tablefmt=self.table_format, disable_numparse=True)


def non_interactive() -> Console:
    """Console for callers without a terminal: every prompt is declined."""
    return Console(prompt=lambda _text: False)
