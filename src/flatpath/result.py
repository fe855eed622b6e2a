"""ValidationReport dataclass for bulk validation of flat entry sets.

This module provides the result type returned by validate() calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from flatpath.errors import FlatPathError

__all__ = ["ValidationReport"]


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of checking a flat entry set without raising.

    Attributes:
        errors: Every violation found, in discovery order. Empty when valid.
        entry_count: Number of well-formed entries (malformed lines excluded).
        node_count: Number of nodes in the rebuilt tree; 0 when invalid.
        computation_time_ms: Wall-clock duration of the check in milliseconds.
    """

    errors: list[FlatPathError]
    entry_count: int
    node_count: int
    computation_time_ms: float

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_of(self, kind: type[FlatPathError]) -> list[FlatPathError]:
        """The subset of ``errors`` that are instances of ``kind``."""
        return [err for err in self.errors if isinstance(err, kind)]
