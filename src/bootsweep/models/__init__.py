"""bootsweep data models."""

from bootsweep.models.boot_entry import BootEntry, Repaired, Unchanged
from bootsweep.models.initramfs import InitramfsFile, InitramfsKind, Reconciliation
from bootsweep.models.kernel import (
    KEEP_LATEST,
    KERNEL_CANDIDATES,
    InstalledKernelSet,
    KernelPackageName,
    RemovalPlan,
    Skip,
)
from bootsweep.models.step_result import RunReport, StepResult

__all__ = [
    "BootEntry",
    "InitramfsFile",
    "InitramfsKind",
    "InstalledKernelSet",
    "KEEP_LATEST",
    "KERNEL_CANDIDATES",
    "KernelPackageName",
    "Reconciliation",
    "RemovalPlan",
    "Repaired",
    "RunReport",
    "Skip",
    "StepResult",
    "Unchanged",
]
