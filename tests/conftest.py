"""Shared test fixtures and fake collaborators."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from bootsweep.backends.boot_dir import BootDirectory
from bootsweep.errors import ConfirmationDeclined, NoBootEntry
from bootsweep.models.boot_entry import BootEntry

# kernel-uek packages, newest first
UEK_PACKAGES = [
    "kernel-uek-5.15.0-300.163.18.el8uek.x86_64",
    "kernel-uek-5.15.0-209.161.7.el8uek.x86_64",
    "kernel-uek-5.15.0-208.159.3.el8uek.x86_64",
    "kernel-uek-5.15.0-207.156.6.el8uek.x86_64",
    "kernel-uek-5.15.0-206.153.7.el8uek.x86_64",
]
UEK_VERSIONS = [p.removeprefix("kernel-uek-") for p in UEK_PACKAGES]
PLAIN_KERNEL = "kernel-4.18.0-513.24.1.el8_9.x86_64"

MACHINE_ID = "4b1c9e2f0a6d4c7e8f3b2a1d0c9e8f7a"


class FakePackageManager:
    """In-memory stand-in for RpmPackageManager.

    ``removal_candidates`` mimics ``dnf repoquery --installonly
    --latest-limit=-N``: everything past the N newest of each name.
    """

    def __init__(self, installed: dict[str, list[str]] | None = None, ineffective: bool = False) -> None:
        self._installed = {name: list(pkgs) for name, pkgs in (installed or {}).items()}
        self.ineffective = ineffective
        self.removed: list[tuple[str, ...]] = []

    def installed(self, name: str) -> tuple[str, ...]:
        return tuple(self._installed.get(name, []))

    def count(self, name: str) -> int:
        return len(self.installed(name))

    def latest(self, name: str, limit: int) -> tuple[str, ...]:
        # Plain string order matches rpm version order for the fixture packages.
        return tuple(sorted(self._installed.get(name, []), reverse=True)[:limit])

    def removal_candidates(self, keep: int) -> tuple[str, ...]:
        return tuple(p for pkgs in self._installed.values() for p in pkgs[keep:])

    def remove(self, packages) -> None:
        self.removed.append(tuple(packages))
        if self.ineffective:
            return
        for name, pkgs in self._installed.items():
            self._installed[name] = [p for p in pkgs if p not in packages]


def grubby_text(entries: list[BootEntry]) -> str:
    """Render entries the way ``grubby --info`` prints them."""
    lines: list[str] = []
    for e in entries:
        lines += [
            f"index={e.index}",
            f'kernel="{e.kernel}"',
            'args="ro crashkernel=auto rhgb quiet"',
            'root="/dev/mapper/ol-root"',
            f'initrd="/boot/initramfs-{e.kernel.removeprefix("/boot/vmlinuz-")}.img"',
            f'title="{e.title}"',
            f'id="{e.id}"',
        ]
    return "\n".join(lines) + "\n"


def make_entry(index: int, version: str) -> BootEntry:
    return BootEntry(
        index=index,
        id=f"{MACHINE_ID}-{version}",
        kernel=f"/boot/vmlinuz-{version}",
        title=f"Oracle Linux Server (5.15.0 {version}) 8.10",
    )


class FakeBootloader:
    """In-memory stand-in for GrubBootloader."""

    def __init__(self, saved: str, entries: list[BootEntry]) -> None:
        self.saved = saved
        self._entries = entries
        self.set_calls: list[str] = []
        self.regenerated = 0

    def saved_entry(self) -> str:
        return self.saved

    def entries_dump(self) -> str:
        return grubby_text(self._entries)

    def entry(self, index: int) -> BootEntry:
        if index >= len(self._entries):
            raise NoBootEntry(f"grubby reported no boot entry at index {index}")
        return self._entries[index]

    def set_default(self, entry_id: str) -> None:
        self.set_calls.append(entry_id)
        self.saved = entry_id

    def regenerate_config(self) -> None:
        self.regenerated += 1


class ScriptedGate:
    """Gate double that proceeds, except at prompts whose label starts with *decline_on*.

    Records every label it was shown; preview functions are evaluated so
    tests notice broken previews.
    """

    def __init__(self, decline_on: str | None = None, dry_run: bool = False) -> None:
        self.decline_on = decline_on
        self.dry_run = dry_run
        self.labels: list[str] = []

    def confirm(self, sections) -> bool:
        for section in sections:
            self.labels.append(section.label)
            list(section.preview())
            if self.decline_on and section.label.startswith(self.decline_on):
                raise ConfirmationDeclined("Aborted at prompt")
        return not self.dry_run


def make_image(boot: Path, name: str, age: float = 0, size: int = 1024) -> Path:
    """Create a fake initramfs image, *age* seconds old."""
    path = boot / name
    path.write_bytes(b"i" * size)
    if age:
        mtime = time.time() - age
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def boot(tmp_path) -> Path:
    """A /boot with images for five UEK kernels, three rescue images and kdump leftovers."""
    boot = tmp_path / "boot"
    boot.mkdir()
    (boot / "grub2").mkdir()
    (boot / "grub2" / "grub.cfg").write_text("menuentry {}")
    (boot / f"vmlinuz-{UEK_VERSIONS[0]}").write_bytes(b"k" * 512)

    for i, version in enumerate(UEK_VERSIONS):
        make_image(boot, f"initramfs-{version}.img", age=100 * i)
    make_image(boot, f"initramfs-{UEK_VERSIONS[0]}kdump.img")
    make_image(boot, f"initramfs-{UEK_VERSIONS[3]}kdump.img", age=300)

    make_image(boot, f"initramfs-0-rescue-{MACHINE_ID}.img", age=10)
    make_image(boot, "initramfs-0-rescue-0d2e5b1a9c8f4e7d6b5a4c3d2e1f0a9b.img", age=5000)
    make_image(boot, "initramfs-0-rescue-7f6e5d4c3b2a19081726354453627180.img", age=9000)
    return boot


@pytest.fixture
def boot_dir(boot) -> BootDirectory:
    return BootDirectory(boot)


@pytest.fixture
def uek_packages() -> FakePackageManager:
    return FakePackageManager({"kernel-uek": UEK_PACKAGES, "kernel": [PLAIN_KERNEL]})


@pytest.fixture
def stale_bootloader() -> FakeBootloader:
    """Saved entry points at a kernel that will be removed."""
    entries = [make_entry(0, UEK_VERSIONS[0]), make_entry(1, UEK_VERSIONS[1])]
    return FakeBootloader(saved=f"{MACHINE_ID}-{UEK_VERSIONS[3]}", entries=entries)
