"""
Analysis session: the parse → build → link pipeline behind one object.

A session holds the most recently published snapshot (resolved model,
per-unit parse errors, diagnostics).  ``load`` computes a complete new
snapshot and publishes it with a single attribute assignment, so readers
see either the old snapshot or the new one, never a mix.  A load that
raises publishes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from aidlgraph.builder import build, primitive_registry
from aidlgraph.config import AnalysisConfig
from aidlgraph.diagnostics import Diagnostic, DiagnosticCollector
from aidlgraph.errors import ParseFileError
from aidlgraph.graph import Dependency, dependencies_of, references_of
from aidlgraph.linker import link
from aidlgraph.model import ResolvedModel, Symbol
from aidlgraph.parser import Sources, parse_batch
from aidlgraph.sexp import dumps_model, dumps_symbol

__all__ = ["AnalysisSession", "Snapshot"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    model: ResolvedModel
    parse_errors: Tuple[ParseFileError, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()


class AnalysisSession:
    """Loads batches of AIDL sources and answers queries on the result."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or AnalysisConfig()
        problems = self.config.validate()
        if problems:
            raise ValueError("invalid configuration: " + "; ".join(problems))
        self._snapshot = Snapshot(ResolvedModel({}, primitive_registry()))

    def load(self, sources: Sources) -> ResolvedModel:
        """Parse, build and link *sources*, then publish the result.

        *sources* is a mapping or an iterable of ``(name, text)`` pairs.
        Units that fail to parse are reported in ``parse_errors`` and left
        out of the model.
        """
        batch = parse_batch(sources)
        collector = DiagnosticCollector(min_severity=self.config.min_severity)
        unresolved = build(batch.files, self.config, collector)
        resolved = link(unresolved, self.config, collector)

        self._snapshot = Snapshot(
            model=resolved,
            parse_errors=batch.errors,
            diagnostics=tuple(collector.diagnostics),
        )
        logger.info(
            "Published model: %d symbol(s), %d parse error(s), %d unresolved",
            len(resolved), len(batch.errors), len(resolved.unresolved),
        )
        return resolved

    # -- snapshot accessors --------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def model(self) -> ResolvedModel:
        return self._snapshot.model

    @property
    def parse_errors(self) -> Tuple[ParseFileError, ...]:
        return self._snapshot.parse_errors

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self._snapshot.diagnostics

    # -- queries -------------------------------------------------------------

    def symbol(self, key: str) -> Symbol:
        return self.model.get(key)

    def dependencies(self, key: str) -> List[Dependency]:
        return dependencies_of(self.model, key)

    def references(self, key: str) -> List[Dependency]:
        return references_of(self.model, key)

    def listing(self) -> List[Symbol]:
        """Every symbol, interfaces first, then structs, then enums; by name within a kind."""
        return sorted(self.model, key=lambda s: (s.kind.rank, s.name))

    def dump(self, key: Optional[str] = None) -> str:
        """S-expression of one symbol, or of the whole model when *key* is None."""
        model = self._snapshot.model
        if key is None:
            return dumps_model(model)
        return dumps_symbol(model.get(key))
