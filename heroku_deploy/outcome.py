"""
Script: heroku_deploy/outcome.py
What: Result type returned by one deploy run.
Doing: Names each way a run can end and maps it to a process exit code.
Why: Lets the pipeline return instead of exiting, so the entry point owns exit behavior.
Goal: Keep "skipped", "bad input", and "failed" runs distinguishable for callers and tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class RunStatus(Enum):
    SUCCESS = "success"
    # No environment rule matched the branch, so nothing was deployed.
    NO_OP = "no-op"
    USAGE_ERROR = "usage-error"
    VALIDATION_ERROR = "validation-error"
    RUNTIME_ERROR = "runtime-error"


EXIT_CODES = {
    RunStatus.SUCCESS: 0,
    RunStatus.NO_OP: 0,
    RunStatus.USAGE_ERROR: -1,
    RunStatus.VALIDATION_ERROR: -2,
    RunStatus.RUNTIME_ERROR: 1,
}


@dataclass(frozen=True)
class RunResult:
    status: RunStatus
    message: str = ""
    # Per-line rule errors for VALIDATION_ERROR.
    details: tuple[str, ...] = ()
    # Build JSON returned by Heroku for SUCCESS.
    build: dict = field(default_factory=dict)
    show_usage: bool = False

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.status]

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
