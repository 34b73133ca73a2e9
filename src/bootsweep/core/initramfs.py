"""Reconcile /boot initramfs images against the installed kernels."""

from __future__ import annotations

import logging
import time
from typing import Sequence

from bootsweep.backends.boot_dir import BootDirectory
from bootsweep.core.gate import ConfirmationGate, PreviewSection
from bootsweep.errors import DeletionIneffective, NoRescueImage
from bootsweep.models.initramfs import InitramfsFile, Reconciliation
from bootsweep.models.kernel import KEEP_LATEST, InstalledKernelSet
from bootsweep.models.step_result import DRY_RUN, SKIPPED, StepResult
from bootsweep.utils import bytes_to_human

log = logging.getLogger(__name__)


def _describe(image: InitramfsFile) -> str:
    stamp = time.strftime("%Y-%m-%d %H:%M", time.localtime(image.mtime))
    return f"{stamp}  {bytes_to_human(image.size_bytes):>9s}  {image.path}"


class InitramfsReconciler:
    """Splits initramfs images into keep and delete sets, then prunes.

    Rescue images: the newest by modification time survives, the rest go.
    Per-kernel images: kept when the name contains one of the newest
    installed kernel versions, or carries the generic ``initramfs-0-``
    prefix (rescue, kdump). Anything else is orphaned. Substring matching
    keeps decorated names such as ``...x86_64kdump.img``.
    """

    def __init__(self, boot_dir: BootDirectory, gate: ConfirmationGate, keep: int = KEEP_LATEST) -> None:
        self.boot_dir = boot_dir
        self.gate = gate
        self.keep = keep

    def scan(self, kernels: InstalledKernelSet) -> Reconciliation:
        """List /boot and reconcile it against *kernels*."""
        return self.reconcile(
            kernels.versions,
            self.boot_dir.rescue_images(),
            self.boot_dir.versioned_images(),
        )

    def reconcile(
        self,
        current_versions: Sequence[str],
        rescue_files: Sequence[InitramfsFile],
        versioned_files: Sequence[InitramfsFile],
    ) -> Reconciliation:
        """Partition the images. Never touches the filesystem.

        Raises:
            NoRescueImage: If *rescue_files* is empty.
        """
        if not rescue_files:
            raise NoRescueImage("No rescue initramfs found in /boot")

        by_age = sorted(rescue_files, key=lambda f: f.mtime, reverse=True)
        keep: list[InitramfsFile] = [by_age[0]]
        rescue_delete = tuple(by_age[1:])
        log.debug("Rescue initramfs: %d, keeping %s", len(by_age), by_age[0].name)

        newest = tuple(current_versions[: self.keep])
        orphans: list[InitramfsFile] = []
        for image in versioned_files:
            if image.is_generic or any(v in image.name for v in newest):
                log.debug("%s is kept", image.name)
                keep.append(image)
            else:
                log.debug("%s matches none of %s, marking for deletion", image.name, ", ".join(newest))
                orphans.append(image)

        return Reconciliation(keep=tuple(keep), rescue_delete=rescue_delete, orphan_delete=tuple(orphans))

    def prune(self, reconciliation: Reconciliation) -> list[StepResult]:
        """Delete what *reconciliation* marked, one prompt per image group."""
        rescue_keep = [i for i in reconciliation.keep if i.is_rescue]
        versioned_keep = [i for i in reconciliation.keep if not i.is_rescue]

        results = [
            self._prune_group(
                "rescue_initramfs",
                "rescue initramfs",
                current=sorted(rescue_keep + list(reconciliation.rescue_delete), key=lambda f: -f.mtime),
                delete=reconciliation.rescue_delete,
            ),
            self._prune_group(
                "initramfs",
                "initramfs",
                current=sorted(versioned_keep + list(reconciliation.orphan_delete), key=lambda f: f.name),
                delete=reconciliation.orphan_delete,
            ),
        ]
        return results

    def _prune_group(
        self,
        step_id: str,
        label: str,
        current: list[InitramfsFile],
        delete: tuple[InitramfsFile, ...],
    ) -> StepResult:
        if not delete:
            log.info("No unneeded %s images found", label)
            return StepResult(step_id=step_id, status=SKIPPED, message="nothing to remove")

        confirmed = self.gate.confirm([
            PreviewSection(f"Current {label} images:", lambda: [_describe(i) for i in current]),
            PreviewSection(f"To delete ({len(delete)}):", lambda: [str(i.path) for i in delete]),
        ])
        if not confirmed:
            return StepResult(
                step_id=step_id,
                status=DRY_RUN,
                message=f"would delete {len(delete)} file(s), {bytes_to_human(sum(i.size_bytes for i in delete))}",
            )

        freed, removed, errors = self.boot_dir.remove(delete)
        if errors:
            raise DeletionIneffective(
                f"{len(errors)} of {len(delete)} {label} image(s) could not be deleted: {'; '.join(errors)}"
            )
        if removed == 0:
            raise DeletionIneffective(f"None of the {len(delete)} {label} image(s) could be deleted")

        log.info("%d %s image(s) deleted (%d → %d)", removed, label, len(current), len(current) - removed)
        return StepResult(step_id=step_id, files_removed=removed, freed_bytes=freed)
