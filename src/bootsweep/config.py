"""Run configuration shared by every pipeline component."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum


class Verbosity(Enum):
    """Output granularity, most to least chatty."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    PROMPTS = "PROMPTS"
    SILENT = "SILENT"

    @property
    def log_level(self) -> int:
        """Logging threshold for this verbosity.

        ``PROMPTS`` hides progress messages but still shows previews and
        prompts; ``SILENT`` only lets errors through.
        """
        return _LOG_LEVELS[self]


_LOG_LEVELS = {
    Verbosity.DEBUG: logging.DEBUG,
    Verbosity.INFO: logging.INFO,
    Verbosity.PROMPTS: logging.WARNING,
    Verbosity.SILENT: logging.ERROR,
}


@dataclass(frozen=True)
class RunConfig:
    """Immutable options for a single run, built once by the CLI."""

    auto_confirm: bool = False
    verbosity: Verbosity = Verbosity.INFO
    dry_run: bool = False

    def __post_init__(self) -> None:
        # Nobody is there to answer a prompt in a silent run.
        if self.verbosity is Verbosity.SILENT and not self.auto_confirm:
            object.__setattr__(self, "auto_confirm", True)

    @property
    def verbose(self) -> bool:
        return self.verbosity is Verbosity.DEBUG

    @property
    def silent(self) -> bool:
        return self.verbosity is Verbosity.SILENT
