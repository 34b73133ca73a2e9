"""Old kernel removal, keeping the newest installed kernels."""

from __future__ import annotations

import logging

from bootsweep.backends.rpm import RpmPackageManager
from bootsweep.config import RunConfig
from bootsweep.core.gate import ConfirmationGate, PreviewSection
from bootsweep.core.inventory import InventoryResolver
from bootsweep.errors import NoKernelFound, RemovalIneffective
from bootsweep.models.kernel import KEEP_LATEST, InstalledKernelSet, KernelPackageName, RemovalPlan, Skip
from bootsweep.models.step_result import DRY_RUN, SKIPPED, StepResult

log = logging.getLogger(__name__)


class RetentionPlanner:
    """Decides when to ask the package manager for old kernels and removes them.

    The exact removal set is computed by dnf's own "installonly, latest
    limit" query; this class only decides whether to run it and checks
    that the removal actually happened.
    """

    def __init__(
        self,
        packages: RpmPackageManager,
        inventory: InventoryResolver,
        gate: ConfirmationGate,
        config: RunConfig,
        keep: int = KEEP_LATEST,
    ) -> None:
        self.packages = packages
        self.inventory = inventory
        self.gate = gate
        self.config = config
        self.keep = keep

    def plan_removal(self, name: KernelPackageName, count: int) -> RemovalPlan | Skip:
        """Return the packages to remove, or a Skip when at most *keep* are installed.

        Raises:
            RemovalIneffective: If more than *keep* are installed but dnf
                proposes nothing to remove.
        """
        if count <= self.keep:
            log.info("Only %d %s package(s) installed, nothing to remove", count, name)
            return Skip(f"only {count} kernel(s) installed")

        candidates = self.packages.removal_candidates(self.keep)
        if not candidates:
            raise RemovalIneffective(
                f"{count} {name} packages installed but dnf proposes none for removal"
            )
        log.debug("Removal candidates: %s", " ".join(candidates))
        return RemovalPlan(packages=candidates)

    def execute(self, plan: RemovalPlan, before: InstalledKernelSet) -> tuple[InstalledKernelSet, StepResult]:
        """Remove *plan* and return the re-queried kernel set.

        In a dry run nothing is removed and the returned set is the one
        the removal would leave behind.

        Raises:
            RemovalIneffective: If the kernel count did not drop.
        """
        confirmed = self.gate.confirm([
            PreviewSection(f"Installed {before.name} packages:", lambda: before.packages),
            PreviewSection(f"Packages to remove ({len(plan)}):", lambda: plan.packages),
        ])
        if not confirmed:
            remaining = tuple(p for p in before.packages if p not in plan.packages)
            projected = InstalledKernelSet(name=before.name, packages=remaining)
            return projected, StepResult(
                step_id="kernels",
                status=DRY_RUN,
                message=f"would remove {before.count - projected.count} kernel(s)",
            )

        log.debug("Removing old kernels with dnf")
        self.packages.remove(plan.packages)

        after = self.inventory.snapshot(before.name)
        removed = before.count - after.count
        if removed <= 0:
            raise RemovalIneffective(
                f"dnf finished but no {before.name} package was removed ({before.count} installed)"
            )
        if after.count == 0:
            raise NoKernelFound(f"No {before.name} package left after removal")
        message = f"{before.count} → {after.count} kernels"
        if after.count > self.keep:
            log.warning("%d %s packages still installed, expected %d", after.count, before.name, self.keep)
            message += f" (expected {self.keep})"

        log.info("%d kernel(s) removed (%d → %d)", removed, before.count, after.count)
        return after, StepResult(
            step_id="kernels",
            packages_removed=removed,
            message=message,
        )

    def clean_dependencies(self, name: KernelPackageName) -> StepResult:
        """Remove the plain ``kernel`` package left behind on UEK systems."""
        if name is not KernelPackageName.KERNEL_UEK:
            log.debug("Not a UEK system, no kernel dependencies to remove")
            return StepResult(step_id="dependencies", status=SKIPPED, message="not a UEK system")

        leftovers = self.packages.installed(KernelPackageName.KERNEL.value)
        if not leftovers:
            log.info("No unneeded kernel dependencies installed")
            return StepResult(step_id="dependencies", status=SKIPPED, message="nothing to remove")

        confirmed = self.gate.confirm([
            PreviewSection(
                "This system boots UEK kernels; these plain kernel packages are not needed:",
                lambda: leftovers,
            ),
        ])
        if not confirmed:
            return StepResult(
                step_id="dependencies",
                status=DRY_RUN,
                message=f"would remove {len(leftovers)} package(s)",
            )

        self.packages.remove(leftovers)
        log.info("Removed %d unneeded kernel dependency package(s)", len(leftovers))
        return StepResult(step_id="dependencies", packages_removed=len(leftovers))
