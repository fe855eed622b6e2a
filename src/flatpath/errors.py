"""Exception taxonomy for the flat-path codec.

Every decoding failure is a ``FlatPathError`` carrying the offending path
(when known) and the 1-based input line number (when the entry came from
text). The encoder only ever raises ``DepthLimitError``.

- FormatError:         a line or path that cannot be parsed.
- StructureError:      a parsed path that does not fit a single tree.
- ConflictError:       two different values asserted at one exact path.
- EmptyInputError:     no entries at all, so no root can be determined.
- DepthLimitError:     the tree is deeper than ``CodecConfig.max_depth``.
- ReconstructionError: every violation found in ``ErrorMode.COLLECT``.
"""

from __future__ import annotations

__all__ = [
    "ConflictError",
    "DepthLimitError",
    "EmptyInputError",
    "FlatPathError",
    "FormatError",
    "ReconstructionError",
    "StructureError",
]


class FlatPathError(Exception):
    """Base class for all codec errors.

    Attributes:
        path:        Structural path the error refers to, or None.
        line_number: 1-based line number of the offending entry, or None.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.message = message
        self.path = path
        self.line_number = line_number
        super().__init__(self._describe())

    def _describe(self) -> str:
        location = []
        if self.line_number is not None:
            location.append(f"line {self.line_number}")
        if self.path is not None:
            location.append(f"path {self.path!r}")
        if not location:
            return self.message
        return f"{self.message} ({', '.join(location)})"


class FormatError(FlatPathError):
    """A line lacks the delimiter or its path is not syntactically valid."""


class StructureError(FlatPathError):
    """A path does not descend from the established tree shape."""


class EmptyInputError(FlatPathError):
    """The entry sequence is empty."""


class DepthLimitError(FlatPathError):
    """The tree exceeds the configured maximum depth."""


class ConflictError(FlatPathError):
    """Two entries assert different values at the identical path.

    Attributes:
        first:  Value seen first.
        second: Conflicting value seen later.
    """

    def __init__(
        self,
        path: str,
        first: str,
        second: str,
        *,
        line_number: int | None = None,
    ) -> None:
        self.first = first
        self.second = second
        super().__init__(
            f"conflicting values {first!r} and {second!r}",
            path=path,
            line_number=line_number,
        )


class ReconstructionError(FlatPathError):
    """All violations collected while rebuilding a tree.

    Raised only in ``ErrorMode.COLLECT``; ``errors`` preserves discovery order.
    """

    def __init__(self, errors: list[FlatPathError]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"  - {err}" for err in self.errors)
        super().__init__(f"{len(self.errors)} error(s) while rebuilding tree:\n{lines}")
