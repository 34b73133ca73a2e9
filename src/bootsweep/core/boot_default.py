"""Keep the GRUB saved default entry pointing at an existing entry."""

from __future__ import annotations

import logging

from bootsweep.backends.grub import GrubBootloader
from bootsweep.core.gate import ConfirmationGate, PreviewSection
from bootsweep.models.boot_entry import BootEntry, Repaired, Unchanged

log = logging.getLogger(__name__)


def _describe(entry: BootEntry) -> list[str]:
    return [
        f"index={entry.index}",
        f'kernel="{entry.kernel}"',
        f'title="{entry.title}"',
        f'id="{entry.id}"',
    ]


class BootDefaultValidator:
    """Checks the saved default entry and falls back to the newest entry.

    Validity is a plain text containment test of the saved id against the
    full ``grubby --info=ALL`` dump, not a structured lookup. An empty
    saved id is therefore always considered valid.
    """

    def __init__(self, bootloader: GrubBootloader, gate: ConfirmationGate) -> None:
        self.bootloader = bootloader
        self.gate = gate

    def is_valid(self, saved_entry: str, dump: str) -> bool:
        return saved_entry in dump

    def validate_and_repair(self) -> Unchanged | Repaired:
        saved = self.bootloader.saved_entry()
        log.debug("Saved entry: '%s'", saved)

        if self.is_valid(saved, self.bootloader.entries_dump()):
            log.info("Default boot entry still exists")
            return Unchanged(saved_entry=saved)

        log.info("Default boot entry '%s' no longer exists", saved)
        # grubby lists the newest kernel first.
        newest = self.bootloader.entry(0)

        confirmed = self.gate.confirm([
            PreviewSection("This entry will become the default:", lambda: _describe(newest)),
        ])
        if not confirmed:
            return Repaired(previous=saved, entry=newest, committed=False)

        self.bootloader.set_default(newest.id)
        self.bootloader.regenerate_config()
        log.info("Default boot entry set to %s", newest.id)
        return Repaired(previous=saved, entry=newest)
