"""Root privilege check."""

from __future__ import annotations

import logging
import os

from bootsweep.errors import NotRootError

log = logging.getLogger(__name__)


def is_root() -> bool:
    """Check if the current process is running as root."""
    return os.geteuid() == 0


def require_root() -> None:
    """Raise NotRootError unless running as root."""
    if not is_root():
        raise NotRootError("bootsweep must be run as root")
    log.debug("Running as root")
