"""
Patch Result Models

Per-modification outcomes produced by the patch applier.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .review import ModificationRequest


class ApplyStatus(Enum):
    """Outcome of one apply attempt"""
    APPLIED = "applied"
    NO_OP = "no-op"
    FAILED = "failed"


@dataclass
class ApplyResult:
    """Result of applying a single ModificationRequest"""
    modification: ModificationRequest
    status: ApplyStatus
    backup_path: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        """Validate fields"""
        if self.status == ApplyStatus.FAILED and not self.error:
            raise ValueError("Failed results must carry an error")

    @property
    def file_path(self) -> str:
        return self.modification.file

    @property
    def succeeded(self) -> bool:
        return self.status == ApplyStatus.APPLIED


@dataclass
class ApplySummary:
    """Ordered results of one batch"""
    results: List[ApplyResult] = field(default_factory=list)

    def by_status(self, status: ApplyStatus) -> List[ApplyResult]:
        return [r for r in self.results if r.status == status]

    @property
    def applied(self) -> int:
        return len(self.by_status(ApplyStatus.APPLIED))

    @property
    def no_op(self) -> int:
        return len(self.by_status(ApplyStatus.NO_OP))

    @property
    def failed(self) -> int:
        return len(self.by_status(ApplyStatus.FAILED))

    def __len__(self) -> int:
        return len(self.results)
