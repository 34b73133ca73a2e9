"""Per-step and per-run result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field

from bootsweep.models.boot_entry import Repaired, Unchanged
from bootsweep.models.kernel import KernelPackageName

DONE = "done"
SKIPPED = "skipped"
DRY_RUN = "dry_run"


@dataclass(slots=True)
class StepResult:
    """Outcome of a single pipeline step."""

    step_id: str
    status: str = DONE
    packages_removed: int = 0
    files_removed: int = 0
    freed_bytes: int = 0
    message: str = ""

    @property
    def changed(self) -> bool:
        return self.status == DONE and (self.packages_removed > 0 or self.files_removed > 0)


@dataclass(slots=True)
class RunReport:
    """Summary of a whole pipeline run."""

    kernel_name: KernelPackageName
    kernels_before: int
    kernels_after: int
    boot_used_before: int = 0
    boot_used_after: int = 0
    dry_run: bool = False
    steps: list[StepResult] = field(default_factory=list)
    boot_default: Unchanged | Repaired | None = None

    @property
    def kernels_removed(self) -> int:
        return self.kernels_before - self.kernels_after

    @property
    def reclaimed_bytes(self) -> int:
        return self.boot_used_before - self.boot_used_after

    @property
    def changed(self) -> bool:
        return any(s.changed for s in self.steps) or isinstance(self.boot_default, Repaired)
