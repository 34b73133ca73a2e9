"""/boot cleanup pipeline orchestration."""

from __future__ import annotations

import logging

from bootsweep.backends.boot_dir import BootDirectory
from bootsweep.backends.grub import GrubBootloader
from bootsweep.backends.rpm import RpmPackageManager
from bootsweep.config import RunConfig
from bootsweep.core.boot_default import BootDefaultValidator
from bootsweep.core.gate import ConfirmationGate
from bootsweep.core.initramfs import InitramfsReconciler
from bootsweep.core.inventory import InventoryResolver
from bootsweep.core.planner import RetentionPlanner
from bootsweep.models.kernel import Skip
from bootsweep.models.step_result import SKIPPED, RunReport, StepResult

log = logging.getLogger(__name__)


class BootSweepEngine:
    """Runs the cleanup steps in their fixed order.

    1. resolve the kernel package name
    2. remove all but the newest kernels
    3. remove UEK leftovers
    4. prune rescue and orphaned initramfs images, against a fresh inventory
    5. check the GRUB default entry

    Any exception stops the run; earlier steps are not rolled back.
    """

    def __init__(
        self,
        config: RunConfig,
        packages: RpmPackageManager | None = None,
        bootloader: GrubBootloader | None = None,
        boot_dir: BootDirectory | None = None,
        gate: ConfirmationGate | None = None,
    ) -> None:
        self.config = config
        self.packages = packages or RpmPackageManager(verbose=config.verbose)
        self.bootloader = bootloader or GrubBootloader()
        self.boot_dir = boot_dir or BootDirectory()
        self.gate = gate or ConfirmationGate(config)

        self.inventory = InventoryResolver(self.packages)
        self.planner = RetentionPlanner(self.packages, self.inventory, self.gate, config)
        self.reconciler = InitramfsReconciler(self.boot_dir, self.gate)
        self.validator = BootDefaultValidator(self.bootloader, self.gate)

    def run(self) -> RunReport:
        used_before = self.boot_dir.used_bytes()

        log.info("Kernel cleanup")
        name, count = self.inventory.resolve()
        before = self.inventory.snapshot(name)
        report = RunReport(
            kernel_name=name,
            kernels_before=before.count,
            kernels_after=before.count,
            boot_used_before=used_before,
            dry_run=self.config.dry_run,
        )

        plan = self.planner.plan_removal(name, count)
        if isinstance(plan, Skip):
            after = before
            report.steps.append(StepResult(step_id="kernels", status=SKIPPED, message=plan.reason))
        else:
            after, result = self.planner.execute(plan, before)
            report.steps.append(result)
        report.kernels_after = after.count

        log.info("Removing unneeded kernel dependencies")
        report.steps.append(self.planner.clean_dependencies(name))

        log.info("Removing unneeded initramfs images")
        # A dry run has nothing fresh to query; use the projected set.
        current = after if self.config.dry_run else self.inventory.snapshot(name)
        reconciliation = self.reconciler.scan(current)
        report.steps.extend(self.reconciler.prune(reconciliation))

        log.info("Checking GRUB entries")
        report.boot_default = self.validator.validate_and_repair()

        report.boot_used_after = self.boot_dir.used_bytes()
        log.info("/boot cleanup finished")
        return report
