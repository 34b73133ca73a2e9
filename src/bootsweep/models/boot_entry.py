"""Bootloader entry dataclasses."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BootEntry:
    """One entry of the ``grubby --info`` listing."""

    index: int
    id: str
    kernel: str = ""
    title: str = ""


@dataclass(frozen=True, slots=True)
class Unchanged:
    """The saved default entry is still valid."""

    saved_entry: str


@dataclass(frozen=True, slots=True)
class Repaired:
    """The saved default entry was replaced with *entry*.

    ``committed`` is False for a dry run, where the repair was only previewed.
    """

    previous: str
    entry: BootEntry
    committed: bool = True

    @property
    def new_entry_id(self) -> str:
        return self.entry.id
