"""
Structured records produced by the log parser.

Both records are frozen: strategies build them up in call-local lists
and the parser hands callers tuples, so nothing returned can be mutated
behind the parser's back.
"""

from dataclasses import dataclass
from enum import Enum


class StepStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class BuildStep:
    """One recognized unit of work (a stage, group, or block)."""
    name: str
    status: StepStatus = StepStatus.SUCCESS
    error_message: str | None = None
    line_number: int | None = None  # 1-based
    duration: int | None = None  # reserved, never filled by a strategy

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "error_message": self.error_message,
            "line_number": self.line_number,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class LogAnalysis:
    """Full extraction result for one log."""
    steps: tuple[BuildStep, ...] = ()
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    total_duration: int | None = None  # milliseconds

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def failed_steps(self) -> int:
        return sum(1 for s in self.steps if s.failed)

    @property
    def has_failures(self) -> bool:
        return self.failed_steps > 0

    def to_dict(self) -> dict:
        return {
            "total_steps": self.total_steps,
            "failed_steps": self.failed_steps,
            "total_duration": self.total_duration,
            "steps": [s.to_dict() for s in self.steps],
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
