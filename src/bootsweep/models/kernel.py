"""Kernel package inventory dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class KernelPackageName(Enum):
    """Recognized kernel package names."""

    KERNEL = "kernel"
    KERNEL_UEK = "kernel-uek"

    def __str__(self) -> str:
        return self.value


# Detection order: the first name with installed packages wins.
KERNEL_CANDIDATES: tuple[KernelPackageName, ...] = (
    KernelPackageName.KERNEL_UEK,
    KernelPackageName.KERNEL,
)

# Number of newest kernels that are never removed.
KEEP_LATEST = 2


@dataclass(frozen=True, slots=True)
class InstalledKernelSet:
    """Snapshot of installed kernel packages, newest first.

    ``packages`` holds full identifiers (``kernel-uek-5.4.17-2136.el8uek.x86_64``),
    ``versions`` the same entries with the ``<name>-`` prefix stripped.
    """

    name: KernelPackageName
    packages: tuple[str, ...] = ()

    @property
    def versions(self) -> tuple[str, ...]:
        prefix = f"{self.name.value}-"
        return tuple(p.removeprefix(prefix) for p in self.packages)

    @property
    def count(self) -> int:
        return len(self.packages)

    def newest(self, n: int) -> tuple[str, ...]:
        """Return the versions of the *n* newest kernels."""
        return self.versions[:n]


@dataclass(frozen=True, slots=True)
class RemovalPlan:
    """Package identifiers the package manager proposes to remove."""

    packages: tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.packages

    def __len__(self) -> int:
        return len(self.packages)


@dataclass(frozen=True, slots=True)
class Skip:
    """A step with nothing to do. Not an error."""

    reason: str
