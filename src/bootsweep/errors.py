"""Fatal conditions that abort a bootsweep run."""

from __future__ import annotations


class BootSweepError(Exception):
    """Base class for every condition that stops the pipeline."""

    exit_code = 1


class NotRootError(BootSweepError):
    """Raised when the process lacks root privileges."""


class NoKernelFound(BootSweepError):
    """Raised when neither ``kernel-uek`` nor ``kernel`` is installed."""


class RemovalIneffective(BootSweepError):
    """Raised when the package manager succeeded but no kernel disappeared."""


class DeletionIneffective(BootSweepError):
    """Raised when initramfs files marked for deletion are all still present."""


class NoRescueImage(BootSweepError):
    """Raised when /boot holds no rescue initramfs at all."""


class NoBootEntry(BootSweepError):
    """Raised when the bootloader lists no entry to fall back to."""


class ConfirmationDeclined(BootSweepError):
    """Raised when the operator answers anything but yes at a prompt."""


class CommandError(BootSweepError):
    """Raised when an external tool exits non-zero."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"'{' '.join(cmd)}' failed (exit {returncode}){detail}")
