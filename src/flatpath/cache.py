"""StepCache: LRU-backed memo for parsed path steps.

Large flat files repeat the same steps on every line (``/Fund``,
``Position[17]``, ``Amount``), so parsing each distinct segment once saves
most of the regex work during tree rebuilding.

Each ``StepCache`` instance owns its own ``LRUCache``. There is no
class-level shared state, so two builders never interfere with each other.

Example::

    from flatpath.cache import StepCache

    cache = StepCache(max_size=256)
    cache.parse("Item[2]")   # Step(name="Item", index=2), parsed
    cache.parse("Item[2]")   # served from memory
"""

from __future__ import annotations

from cachetools import LRUCache

from flatpath.codec.paths import Step, parse_step

__all__ = ["StepCache"]


class StepCache:
    """Per-instance LRU cache in front of ``parse_step``.

    Invalid segments are never cached; they raise ``FormatError`` on every
    call, exactly as ``parse_step`` does.

    Args:
        max_size: Maximum number of distinct segments held. When exceeded the
            least-recently-used entry is silently evicted. Defaults to 1024.
    """

    def __init__(self, max_size: int = 1024) -> None:
        self._cache: LRUCache[str, Step] = LRUCache(maxsize=max_size)
        self.hits = 0
        self.misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of segments this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of segments stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self, segment: str) -> Step:
        """Return the parsed Step for ``segment``, parsing it at most once."""
        step = self._cache.get(segment)
        if step is not None:
            self.hits += 1
            return step
        self.misses += 1
        step = parse_step(segment)
        self._cache[segment] = step
        return step
