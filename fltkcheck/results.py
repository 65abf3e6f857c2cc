"""
fltk-check Results — Outcome types produced by the prober.

Results are printed the moment they are produced; ProbeReport only keeps
them in memory for the duration of a run so callers can summarise or
decide an exit status.
"""

from dataclasses import dataclass, field
from enum import Enum


class CheckStatus(Enum):
    """How a single check turned out."""
    PASS = "pass"    # Requirement satisfied
    WARN = "warn"    # Optional requirement missing; builds still work
    FAIL = "fail"    # Building fltk-rs will not work


@dataclass
class CheckResult:
    """A single check outcome."""
    name: str        # Stable identifier (e.g., "toolchain", "lib:X11")
    status: CheckStatus
    message: str     # Line shown to the user

    def __str__(self) -> str:
        return f"[{self.status.value.upper()}] {self.name}: {self.message}"


@dataclass
class ProbeReport:
    """All results of one prober run."""
    results: list[CheckResult] = field(default_factory=list)
    aborted: bool = False          # True if the C++11 compile gate failed
    residual_files: list[str] = field(default_factory=list)

    def add(self, result: CheckResult) -> None:
        self.results.append(result)

    def get(self, name: str) -> CheckResult | None:
        for result in self.results:
            if result.name == name:
                return result
        return None

    @property
    def pass_count(self) -> int:
        return sum(1 for r in self.results if r.status is CheckStatus.PASS)

    @property
    def warning_count(self) -> int:
        return sum(1 for r in self.results if r.status is CheckStatus.WARN)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if r.status is CheckStatus.FAIL)

    @property
    def ok(self) -> bool:
        return self.failure_count == 0 and not self.aborted

    def library_statuses(self) -> dict[str, CheckStatus]:
        """Map of library name → status for the linkage checks."""
        return {
            r.name.split(":", 1)[1]: r.status
            for r in self.results
            if r.name.startswith("lib:")
        }

    def __str__(self) -> str:
        lines = [
            f"fltk-check: {self.pass_count} passed, "
            f"{self.warning_count} warnings, {self.failure_count} failed"
        ]
        if self.aborted:
            lines.append("Library checks skipped: no working C++11 compiler.")
        return "\n".join(lines)
