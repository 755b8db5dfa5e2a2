"""
Non-fatal diagnostics for the model pipeline.

The builder and the linker never abort on questionable input. Instead they
report findings here:

- ``unresolvedType``: a type reference matched no primitive and no symbol
- ``duplicateSymbol``: a later declaration replaced an earlier one with the
  same key (last one wins)

A ``DiagnosticCollector`` is threaded through a pipeline run and read back
by the caller afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

__all__ = [
    "DiagnosticSeverity",
    "Diagnostic",
    "DiagnosticCollector",
    "UNRESOLVED_TYPE",
    "DUPLICATE_SYMBOL",
]

UNRESOLVED_TYPE = "unresolvedType"
DUPLICATE_SYMBOL = "duplicateSymbol"


class DiagnosticSeverity(Enum):
    """Severity levels, most severe first."""
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    DEBUG = "debug"


_SEVERITY_ORDER = {
    DiagnosticSeverity.ERROR: 0,
    DiagnosticSeverity.WARNING: 1,
    DiagnosticSeverity.INFORMATION: 2,
    DiagnosticSeverity.DEBUG: 3,
}


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    A single finding.

    Attributes:
        error_id: Identifier of the finding kind (e.g. "unresolvedType")
        message: Human-readable description
        severity: How serious the finding is
        key: Key of the symbol or unresolved type concerned
        source_name: Compilation unit the finding came from, if known
    """
    error_id: str
    message: str
    severity: DiagnosticSeverity
    key: str = ""
    source_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "errorId": self.error_id,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.key:
            result["key"] = self.key
        if self.source_name:
            result["source"] = self.source_name
        return result

    def to_gcc_format(self) -> str:
        """Format as GCC-style diagnostic string."""
        loc_str = self.source_name or "<model>"
        return f"{loc_str}: {self.severity.value}: [{self.error_id}] {self.message}"


class DiagnosticCollector:
    """
    Collects diagnostics during model building and linking.
    Findings below ``min_severity`` are dropped.
    """

    def __init__(
        self,
        *,
        min_severity: DiagnosticSeverity = DiagnosticSeverity.INFORMATION,
    ) -> None:
        self._diagnostics: List[Diagnostic] = []
        self._min_severity = min_severity

    def report(
        self,
        error_id: str,
        message: str,
        severity: DiagnosticSeverity = DiagnosticSeverity.WARNING,
        key: str = "",
        source_name: Optional[str] = None,
    ) -> None:
        """Record a finding unless it is filtered out by severity."""
        if _SEVERITY_ORDER[severity] > _SEVERITY_ORDER[self._min_severity]:
            return
        self._diagnostics.append(
            Diagnostic(
                error_id=error_id,
                message=message,
                severity=severity,
                key=key,
                source_name=source_name,
            )
        )

    @property
    def diagnostics(self) -> List[Diagnostic]:
        """Get all collected diagnostics."""
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        """Get WARNING severity diagnostics."""
        return [d for d in self._diagnostics if d.severity == DiagnosticSeverity.WARNING]

    def count(self, error_id: str) -> int:
        """Count diagnostics with the given error id."""
        return sum(1 for d in self._diagnostics if d.error_id == error_id)

    def has_errors(self) -> bool:
        return any(d.severity == DiagnosticSeverity.ERROR for d in self._diagnostics)

    def clear(self) -> None:
        self._diagnostics.clear()

    def __len__(self) -> int:
        return len(self._diagnostics)
