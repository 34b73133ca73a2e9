"""Preview-and-confirm gate in front of every destructive step."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, NamedTuple

import click

from bootsweep.config import RunConfig
from bootsweep.errors import ConfirmationDeclined

log = logging.getLogger(__name__)

PreviewFn = Callable[[], Iterable[str]]

_AFFIRMATIVE = ("y", "yes")


class PreviewSection(NamedTuple):
    """A labelled block of preview lines shown before a prompt."""

    label: str
    preview: PreviewFn


class ConfirmationGate:
    """Shows previews and asks the operator before anything is destroyed.

    ``confirm()`` returns True when the caller may proceed and False in a
    dry run. A declined prompt raises ConfirmationDeclined, which ends the
    whole run.
    """

    def __init__(self, config: RunConfig) -> None:
        self.config = config

    def confirm(self, sections: list[PreviewSection]) -> bool:
        if self.config.dry_run:
            if not self.config.silent:
                self._render(sections)
                click.echo(click.style("(dry run, nothing changed)", fg="bright_black"))
            return False

        # Previews are never built in unattended runs.
        if self.config.auto_confirm:
            return True

        self._render(sections)
        answer = self._ask()
        if answer.strip().lower() not in _AFFIRMATIVE:
            raise ConfirmationDeclined("Aborted at prompt")
        click.echo()
        return True

    def _render(self, sections: list[PreviewSection]) -> None:
        click.echo()
        for section in sections:
            click.echo(click.style(section.label, bold=True))
            for line in section.preview():
                click.echo(f"  {line}")
            click.echo()

    def _ask(self) -> str:
        try:
            return click.prompt("Proceed? [y/N]", default="n", show_default=False)
        except click.Abort:
            # Ctrl-C or EOF at the prompt
            raise ConfirmationDeclined("Aborted at prompt")
