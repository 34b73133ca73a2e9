"""Package manager backend: ``rpm`` for queries, ``dnf`` for removal."""

from __future__ import annotations

import logging

from bootsweep.utils import run_command

log = logging.getLogger(__name__)

# Same layout as rpm's default query format, so ids compare equal.
_NEVRA_FORMAT = "%{name}-%{version}-%{release}.%{arch}"


class RpmPackageManager:
    """Thin wrapper around the rpm and dnf command-line tools."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def installed(self, name: str) -> tuple[str, ...]:
        """Installed packages named *name*, newest install first.

        ``rpm -qa --last`` prints ``<nvra>  <install date>`` per line. The
        order is by install time, not version; see :meth:`latest`.
        """
        out = run_command(["rpm", "-qa", "--last", name])
        packages = tuple(line.split()[0] for line in out.splitlines() if line.strip())
        log.debug("Installed %s packages: %d", name, len(packages))
        return packages

    def count(self, name: str) -> int:
        return len(self.installed(name))

    def latest(self, name: str, limit: int) -> tuple[str, ...]:
        """The *limit* installed packages named *name* with the highest versions.

        Uses the same rpm version ordering as ``--latest-limit`` in
        :meth:`removal_candidates`.
        """
        out = run_command([
            "dnf", "repoquery",
            "--installed",
            f"--latest-limit={limit}",
            "-q",
            "--qf", _NEVRA_FORMAT,
            name,
        ])
        return tuple(line.strip() for line in out.splitlines() if line.strip())

    def removal_candidates(self, keep: int) -> tuple[str, ...]:
        """Installed-only packages outside the *keep* newest of each name."""
        out = run_command([
            "dnf", "repoquery",
            "--installonly",
            f"--latest-limit=-{keep}",
            "-q",
            "--qf", _NEVRA_FORMAT,
        ])
        return tuple(line.strip() for line in out.splitlines() if line.strip())

    def remove(self, packages: tuple[str, ...] | list[str]) -> None:
        """Remove *packages* non-interactively."""
        if not packages:
            return
        cmd = ["dnf", "-y"]
        if self.verbose:
            cmd.append("-v")
        cmd += ["remove", *packages]
        run_command(cmd)
