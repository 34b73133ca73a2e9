"""Bootloader backend: GRUB 2 driven through grubby and grub2-* tools."""

from __future__ import annotations

import logging
from pathlib import Path

from bootsweep.errors import NoBootEntry
from bootsweep.models.boot_entry import BootEntry
from bootsweep.utils import run_command

log = logging.getLogger(__name__)

GRUB_CFG = Path("/boot/grub2/grub.cfg")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_grubby_info(text: str) -> list[BootEntry]:
    """Parse ``grubby --info`` output into entries.

    Each entry starts with an ``index=N`` line followed by ``key="value"``
    lines (kernel, args, root, initrd, title, id).
    """
    entries: list[BootEntry] = []
    current: dict[str, str] | None = None

    def _flush() -> None:
        if current is not None and "id" in current:
            entries.append(
                BootEntry(
                    index=int(current["index"]),
                    id=current["id"],
                    kernel=current.get("kernel", ""),
                    title=current.get("title", ""),
                )
            )

    for line in text.splitlines():
        key, sep, value = line.strip().partition("=")
        if not sep:
            continue
        if key == "index":
            _flush()
            current = {"index": value}
        elif current is not None:
            current[key] = _unquote(value)
    _flush()
    return entries


class GrubBootloader:
    """Query and update the GRUB default boot entry."""

    def __init__(self, grub_cfg: Path = GRUB_CFG) -> None:
        self.grub_cfg = grub_cfg

    def saved_entry(self) -> str:
        """Return the persisted ``saved_entry`` value, or '' when unset."""
        out = run_command(["grub2-editenv", "list"])
        for line in out.splitlines():
            if line.startswith("saved_entry="):
                return line.removeprefix("saved_entry=").strip()
        return ""

    def entries_dump(self) -> str:
        """Full text of ``grubby --info=ALL``."""
        return run_command(["grubby", "--info=ALL"])

    def entry(self, index: int) -> BootEntry:
        """Return the entry at *index* of the listing."""
        parsed = parse_grubby_info(run_command(["grubby", f"--info={index}"]))
        if not parsed:
            raise NoBootEntry(f"grubby reported no boot entry at index {index}")
        return parsed[0]

    def set_default(self, entry_id: str) -> None:
        run_command(["grub2-set-default", entry_id])

    def regenerate_config(self) -> None:
        log.debug("Regenerating %s", self.grub_cfg)
        run_command(["grub2-mkconfig", "-o", str(self.grub_cfg)])
