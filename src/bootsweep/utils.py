"""Shared utility functions."""

from __future__ import annotations

import logging
import subprocess

from bootsweep.errors import CommandError

log = logging.getLogger(__name__)


def run_command(cmd: list[str]) -> str:
    """Run an external tool and return its stdout.

    Output is captured and echoed line by line at DEBUG level.

    Raises:
        CommandError: If the tool is missing, or exits non-zero.
    """
    log.debug("Running: %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise CommandError(cmd, 127, f"{cmd[0]}: command not found")

    for line in proc.stdout.splitlines():
        log.debug("  %s", line)
    if proc.returncode != 0:
        raise CommandError(cmd, proc.returncode, proc.stderr)
    return proc.stdout


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"
