"""FlatEntry: one ``(structural path, value)`` pair and its line format.

Serialized as ``<path><delimiter><value>``. The delimiter never occurs in a
path, so parsing splits on the first occurrence and leaves the rest of the
line, delimiters included, as the value.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from flatpath.codec.paths import ATTRIBUTE_MARKER, DEFAULT_DELIMITER, STEP_SEPARATOR
from flatpath.errors import FormatError

__all__ = ["FlatEntry", "dumps_entries", "loads_entries", "split_lines"]


@dataclass(frozen=True, slots=True)
class FlatEntry:
    """A leaf text value or an attribute value, located by its path.

    Attributes:
        path:        Structural path string, e.g. ``/Root/Item[2]``.
        value:       The text or attribute value.
        line_number: 1-based source line when parsed from text; excluded from
                     equality so parsed and encoded entries compare equal.
    """

    path: str
    value: str
    line_number: int | None = field(default=None, compare=False)

    @property
    def is_attribute(self) -> bool:
        return f"{STEP_SEPARATOR}{ATTRIBUTE_MARKER}" in self.path

    def to_line(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Render as a single line.

        Raises:
            FormatError: If the path contains the delimiter or the value
                contains a line break; neither survives the line format.
        """
        if delimiter in self.path:
            raise FormatError(f"path contains delimiter {delimiter!r}", path=self.path)
        if "\n" in self.value or "\r" in self.value:
            raise FormatError("value contains a line break", path=self.path)
        return f"{self.path}{delimiter}{self.value}"

    @classmethod
    def from_line(
        cls,
        line: str,
        delimiter: str = DEFAULT_DELIMITER,
        line_number: int | None = None,
    ) -> FlatEntry:
        """Parse one ``path|value`` line.

        Raises:
            FormatError: If the line has no delimiter.
        """
        path, sep, value = line.partition(delimiter)
        if not sep:
            raise FormatError(
                f"missing delimiter {delimiter!r} in line {line!r}",
                line_number=line_number,
            )
        return cls(path, value, line_number)


def dumps_entries(entries: Iterable[FlatEntry], delimiter: str = DEFAULT_DELIMITER) -> str:
    """Join entries into newline-terminated text."""
    return "".join(f"{entry.to_line(delimiter)}\n" for entry in entries)


def loads_entries(text: str, delimiter: str = DEFAULT_DELIMITER) -> list[FlatEntry]:
    """Parse newline-separated text into entries, skipping blank lines.

    Fails on the first malformed line; ``TreeBuilder`` handles raw lines
    itself when every malformed line should be reported.
    """
    return [
        FlatEntry.from_line(line, delimiter, number)
        for number, line in enumerate(split_lines(text), start=1)
        if line.strip()
    ]


def split_lines(text: str) -> list[str]:
    """Split on line feeds only, dropping a trailing carriage return per line."""
    # Only "\n" ends a line; str.splitlines would also split values on
    # characters such as "\x1c" or "\u2028".
    return [line.removesuffix("\r") for line in text.split("\n")]
