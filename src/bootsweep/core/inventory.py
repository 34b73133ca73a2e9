"""Resolve which kernel package flavor is installed."""

from __future__ import annotations

import logging

from bootsweep.backends.rpm import RpmPackageManager
from bootsweep.errors import NoKernelFound
from bootsweep.models.kernel import KEEP_LATEST, KERNEL_CANDIDATES, InstalledKernelSet, KernelPackageName

log = logging.getLogger(__name__)


class InventoryResolver:
    """Finds the active kernel package name and lists its installed versions."""

    def __init__(
        self,
        packages: RpmPackageManager,
        candidates: tuple[KernelPackageName, ...] = KERNEL_CANDIDATES,
        keep: int = KEEP_LATEST,
    ) -> None:
        self.packages = packages
        self.candidates = candidates
        self.keep = keep

    def resolve(self) -> tuple[KernelPackageName, int]:
        """Return the first candidate name with installed packages and its count.

        Raises:
            NoKernelFound: If no candidate is installed.
        """
        for name in self.candidates:
            count = self.packages.count(name.value)
            log.debug("%s kernel count: %d", name, count)
            if count > 0:
                log.debug("Kernel name: %s", name)
                return name, count
        raise NoKernelFound(
            f"No kernel package found (tried: {', '.join(n.value for n in self.candidates)})"
        )

    def snapshot(self, name: KernelPackageName) -> InstalledKernelSet:
        """Query the installed kernels of *name* afresh.

        The *keep* highest versions come first, so ``newest(keep)`` agrees
        with what dnf keeps even when kernels were installed out of order.
        """
        installed = self.packages.installed(name.value)
        if len(installed) <= self.keep:
            return InstalledKernelSet(name=name, packages=installed)

        latest = set(self.packages.latest(name.value, self.keep))
        ordered = tuple(p for p in installed if p in latest) + tuple(p for p in installed if p not in latest)
        if ordered != installed:
            log.debug("Install order differs from version order, newest: %s", ", ".join(ordered[: self.keep]))
        return InstalledKernelSet(name=name, packages=ordered)
