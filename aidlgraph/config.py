"""Configuration knobs and logging setup for aidlgraph."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List

from aidlgraph.diagnostics import DiagnosticSeverity

__all__ = ["DuplicatePolicy", "AnalysisConfig", "configure_logging"]


class DuplicatePolicy(Enum):
    """What the builder does when two declarations share a key."""
    OVERWRITE = "overwrite"   # last one wins, reported as a diagnostic
    ERROR = "error"           # raise DuplicateSymbolError


@dataclass
class AnalysisConfig:
    """Tuning knobs for the build and link stages."""
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE
    warn_unresolved: bool = True
    min_severity: DiagnosticSeverity = DiagnosticSeverity.INFORMATION

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty if valid)."""
        problems: List[str] = []
        if not isinstance(self.duplicate_policy, DuplicatePolicy):
            problems.append("duplicate_policy must be a DuplicatePolicy")
        if not isinstance(self.min_severity, DiagnosticSeverity):
            problems.append("min_severity must be a DiagnosticSeverity")
        return problems


def configure_logging(verbosity: int) -> logging.Logger:
    """Set up the ``aidlgraph`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("aidlgraph")
    root.setLevel(level)
    root.addHandler(handler)
    return root
