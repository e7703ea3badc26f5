from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

"""Unified diagnostic collection for a placement run."""


class DiagnosticSeverity(Enum):
    """Severity levels for planner diagnostics."""

    DEBUG = "debug"  # Internal planner information
    INFO = "info"  # Informational messages for users
    WARNING = "warning"  # A stage degraded but the run continued
    ERROR = "error"  # The run could not produce a layout


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # calculator, units, transporters, pipes, relays, boosters, emission
    position: Optional[Tuple[float, float]] = None  # map position if relevant


class PlannerDiagnostics:
    """Central diagnostic collection for a whole placement run.

    Every stage reports into the same collector so the CLI can show a single
    list of messages after the run.

    Usage:
        diagnostics = PlannerDiagnostics()
        diagnostics.warning("No underground belt for 'x'", stage="transporters")
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(self, verbose: bool = False, debug: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.verbose = verbose
        self.debug_enabled = debug
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "unknown"

    def debug(
        self,
        message: str,
        stage: str | None = None,
        position: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Add a debug message (kept only in debug mode)."""
        if self.debug_enabled:
            self._add(DiagnosticSeverity.DEBUG, message, stage, position)

    def info(
        self,
        message: str,
        stage: str | None = None,
        position: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Add an informational message (kept in verbose mode)."""
        if self.verbose or self.debug_enabled:
            self._add(DiagnosticSeverity.INFO, message, stage, position)

    def warning(
        self,
        message: str,
        stage: str | None = None,
        position: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Add a warning (always kept, the run continues)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, position)
        self._warning_count += 1

    def error(
        self,
        message: str,
        stage: str | None = None,
        position: Optional[Tuple[float, float]] = None,
    ) -> None:
        """Add an error (always kept, the run produced no layout)."""
        self._add(DiagnosticSeverity.ERROR, message, stage, position)
        self._error_count += 1

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: str | None,
        position: Optional[Tuple[float, float]],
    ) -> None:
        self.diagnostics.append(
            Diagnostic(
                severity=severity,
                message=message,
                stage=stage or self.default_stage,
                position=position,
            )
        )

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = _SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if _SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        # Format: SEVERITY [stage@x,y]: message
        location = diag.stage
        if diag.position is not None:
            location += f"@{diag.position[0]:g},{diag.position[1]:g}"
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        if self.debug_enabled:
            min_severity = DiagnosticSeverity.DEBUG
        elif self.verbose:
            min_severity = DiagnosticSeverity.INFO
        else:
            min_severity = DiagnosticSeverity.WARNING

        messages = self.get_messages(min_severity)
        summary = (
            f"\nPlacement summary: {self._error_count} error(s), "
            f"{self._warning_count} warning(s)"
        )
        return "\n".join(messages) + summary

    def merge(self, other: "PlannerDiagnostics") -> None:
        """Merge diagnostics from another collector."""
        self.diagnostics.extend(other.diagnostics)
        self._error_count += other._error_count
        self._warning_count += other._warning_count
