"""CodecConfig and ErrorMode for flat-path encoding and tree rebuilding.

CodecConfig is a frozen (immutable) dataclass holding the codec parameters.
ErrorMode selects how the tree builder reports violations: stop at the first
one, or collect every one before failing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from flatpath.codec.paths import ATTRIBUTE_MARKER, DEFAULT_DELIMITER, STEP_SEPARATOR

__all__ = ["CodecConfig", "ErrorMode"]


class ErrorMode(StrEnum):
    """How the tree builder reports invalid input.

    - FAIL_FAST: Raise the first error found.
    - COLLECT:   Gather every error, then raise one ReconstructionError.
    """

    FAIL_FAST = auto()
    COLLECT = auto()


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Immutable configuration for the encoder and tree builder.

    Attributes:
        delimiter: Single character separating path from value on a line.
            Defaults to ``"|"``. Decoders split on its first occurrence only,
            so it may appear inside values.
        error_mode: Fail-fast or collect-all error reporting for rebuilding.
        max_depth: Deepest element depth accepted (root is depth 1), or None
            for no limit. Traversals are iterative either way; the limit
            exists to reject pathological input early.
    """

    delimiter: str = DEFAULT_DELIMITER
    error_mode: ErrorMode = ErrorMode.FAIL_FAST
    max_depth: int | None = None

    def __post_init__(self) -> None:
        if len(self.delimiter) != 1:
            msg = f"delimiter must be a single character, got {self.delimiter!r}"
            raise ValueError(msg)
        if self.delimiter in (STEP_SEPARATOR, ATTRIBUTE_MARKER, "[", "]"):
            msg = f"delimiter {self.delimiter!r} is part of the path grammar"
            raise ValueError(msg)
        if self.delimiter.isalnum() or self.delimiter in "\r\n":
            msg = f"delimiter {self.delimiter!r} could occur inside a path"
            raise ValueError(msg)
        if self.max_depth is not None and self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
