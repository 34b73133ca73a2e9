"""Filesystem backend for the /boot partition."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from bootsweep.models.initramfs import RESCUE_PREFIX, InitramfsFile

log = logging.getLogger(__name__)

BOOT_DIR = Path("/boot")


class BootDirectory:
    """Lists, deletes and measures initramfs images under /boot."""

    def __init__(self, root: Path = BOOT_DIR) -> None:
        self.root = root

    def _images(self, pattern: str) -> list[InitramfsFile]:
        images: list[InitramfsFile] = []
        for path in sorted(self.root.glob(pattern)):
            try:
                st = path.stat()
            except OSError:
                log.debug("Cannot access: %s", path)
                continue
            if path.is_file():
                images.append(InitramfsFile(path=path, mtime=st.st_mtime, size_bytes=st.st_size))
        return images

    def rescue_images(self) -> list[InitramfsFile]:
        return self._images(f"{RESCUE_PREFIX}*")

    def versioned_images(self) -> list[InitramfsFile]:
        """Every ``initramfs-*`` image that is not a rescue image."""
        return [i for i in self._images("initramfs-*") if not i.is_rescue]

    def remove(self, images: list[InitramfsFile] | tuple[InitramfsFile, ...]) -> tuple[int, int, list[str]]:
        """Delete *images* and return (freed_bytes, files_removed, errors)."""
        freed = 0
        removed = 0
        errors: list[str] = []

        for image in images:
            try:
                image.path.unlink()
                log.debug("Removed %s", image.path)
                removed += 1
                freed += image.size_bytes
            except FileNotFoundError:
                log.debug("Already gone: %s", image.path)
            except OSError as e:
                errors.append(f"{image.path}: {e}")

        return freed, removed, errors

    def used_bytes(self) -> int:
        """Used space on the filesystem holding /boot."""
        return shutil.disk_usage(self.root).used
