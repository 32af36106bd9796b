"""
L1 Domain — Step outcome reporting (pure).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class StepStatus(StrEnum):
    """How one lifecycle step ended."""

    DONE = "done"
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ABSENT = "already absent"
    STOPPED = "stopped"
    NOT_RUNNING = "not running"


@dataclass(frozen=True)
class StepReport:
    """Outcome of a single step: what it targeted and what happened."""

    step: str
    status: StepStatus
    target: str = ""
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "status": str(self.status),
            "target": self.target,
            "detail": self.detail,
        }
