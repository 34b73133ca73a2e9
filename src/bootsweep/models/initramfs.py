"""Initramfs image dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

RESCUE_PREFIX = "initramfs-0-rescue-"
# kdump and other generic images share this prefix with rescue images.
GENERIC_PREFIX = "initramfs-0-"


class InitramfsKind(Enum):
    VERSIONED = "versioned"
    RESCUE = "rescue"
    ORPHANED = "orphaned"


@dataclass(frozen=True, slots=True)
class InitramfsFile:
    """Single ``/boot/initramfs-*`` image."""

    path: Path
    mtime: float = 0.0
    size_bytes: int = 0

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_rescue(self) -> bool:
        return self.name.startswith(RESCUE_PREFIX)

    @property
    def is_generic(self) -> bool:
        return self.name.startswith(GENERIC_PREFIX)


@dataclass(frozen=True, slots=True)
class Reconciliation:
    """Partition of the on-disk initramfs images into keep and delete sets."""

    keep: tuple[InitramfsFile, ...] = ()
    rescue_delete: tuple[InitramfsFile, ...] = ()
    orphan_delete: tuple[InitramfsFile, ...] = ()

    @property
    def delete(self) -> tuple[InitramfsFile, ...]:
        return self.rescue_delete + self.orphan_delete

    @property
    def is_noop(self) -> bool:
        return not self.delete

    def kind_of(self, image: InitramfsFile) -> InitramfsKind:
        """Classify *image* as decided by this reconciliation."""
        if image.is_rescue:
            return InitramfsKind.RESCUE
        if image in self.orphan_delete:
            return InitramfsKind.ORPHANED
        return InitramfsKind.VERSIONED
