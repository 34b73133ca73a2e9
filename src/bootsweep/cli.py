"""CLI interface for bootsweep."""

from __future__ import annotations

import logging
import sys

import click

from bootsweep import __version__
from bootsweep.config import RunConfig, Verbosity
from bootsweep.core.engine import BootSweepEngine
from bootsweep.core.privileges import require_root
from bootsweep.errors import BootSweepError
from bootsweep.models.boot_entry import Repaired
from bootsweep.models.step_result import DONE, DRY_RUN, RunReport
from bootsweep.utils import bytes_to_human

log = logging.getLogger(__name__)

_STEP_NAMES = {
    "kernels": "Old kernels",
    "dependencies": "Kernel dependencies",
    "rescue_initramfs": "Rescue initramfs",
    "initramfs": "Orphaned initramfs",
}

_BANNER = """\
bootsweep: reclaims space on /boot
  1) removes all but the two newest kernels
  2) removes kernel dependencies left behind on UEK systems
  3) deletes old rescue initramfs images
  4) deletes initramfs images of removed kernels
  5) resets the GRUB default entry if it points to a removed kernel
"""


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def _setup_logging(verbosity: Verbosity) -> None:
    """Progress to stdout, errors to stderr, both timestamped."""
    formatter = logging.Formatter("[%(asctime)s][%(levelname)s]: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    out = logging.StreamHandler(sys.stdout)
    out.addFilter(_BelowError())
    err = logging.StreamHandler(sys.stderr)
    err.setLevel(logging.ERROR)
    for handler in (out, err):
        handler.setFormatter(formatter)

    logging.basicConfig(level=verbosity.log_level, handlers=[out, err], force=True)


def _resolve_verbosity(loglevel: str | None, verbose: bool, silent: bool) -> Verbosity:
    if sum((loglevel is not None, verbose, silent)) > 1:
        raise click.UsageError("--loglevel, --verbose and --silent are mutually exclusive")
    if verbose:
        return Verbosity.DEBUG
    if silent:
        return Verbosity.SILENT
    if loglevel:
        return Verbosity(loglevel.upper())
    return Verbosity.INFO


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--yes", "-y", is_flag=True, help="Answer yes to every prompt")
@click.option(
    "--loglevel",
    "-l",
    type=click.Choice([v.value for v in Verbosity], case_sensitive=False),
    default=None,
    help="Output granularity (default INFO)",
)
@click.option("--verbose", "-v", is_flag=True, help="Same as --loglevel DEBUG")
@click.option("--silent", "-s", is_flag=True, help="Errors only, implies --yes")
@click.option("--dry-run", "-n", is_flag=True, help="Show what would be removed without doing it")
@click.version_option(__version__, prog_name="bootsweep")
def main(yes: bool, loglevel: str | None, verbose: bool, silent: bool, dry_run: bool) -> None:
    """Reclaim /boot space on RPM systems.

    \b
    1) removes all but the two newest kernels
    2) removes kernel dependencies left behind on UEK systems
    3) deletes old rescue initramfs images
    4) deletes initramfs images of removed kernels
    5) resets the GRUB default entry if it points to a removed kernel
    """
    verbosity = _resolve_verbosity(loglevel, verbose, silent)
    config = RunConfig(auto_confirm=yes, verbosity=verbosity, dry_run=dry_run)
    _setup_logging(verbosity)
    if not config.silent:
        click.echo(_BANNER)
    log.debug("Configuration: %s", config)

    try:
        require_root()
        report = BootSweepEngine(config).run()
    except BootSweepError as exc:
        log.error("%s", exc)
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        log.error("Interrupted")
        sys.exit(130)

    if verbosity in (Verbosity.DEBUG, Verbosity.INFO):
        _print_summary(report)


def _print_summary(report: RunReport) -> None:
    click.echo()
    for step in report.steps:
        label = _STEP_NAMES.get(step.step_id, step.step_id)
        if step.status == DONE:
            removed = step.packages_removed or step.files_removed
            noun = "package(s)" if step.packages_removed else "file(s)"
            click.echo(f"  {click.style('✓', fg='green')} {label:25s} — removed {removed} {noun}")
        elif step.status == DRY_RUN:
            click.echo(f"  {click.style('~', fg='yellow')} {label:25s} — {step.message}")
        else:
            click.echo(f"  {click.style('·', fg='bright_black')} {label:25s} — {step.message or 'nothing to do'}")

    boot_default = report.boot_default
    if isinstance(boot_default, Repaired):
        verb = "set to" if boot_default.committed else "would be set to"
        click.echo(f"  {click.style('✓', fg='green')} {'Default boot entry':25s} — {verb} {boot_default.new_entry_id}")
    else:
        click.echo(f"  {click.style('·', fg='bright_black')} {'Default boot entry':25s} — still valid")

    click.echo(
        f"\nKernels ({report.kernel_name}): {report.kernels_before} → {report.kernels_after}"
        f"{' (projected)' if report.dry_run else ''}"
    )
    click.echo(f"/boot space reclaimed: {click.style(bytes_to_human(report.reclaimed_bytes), fg='green', bold=True)}\n")
