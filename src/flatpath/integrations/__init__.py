"""Integrations subpackage for flatpath.

Contains the pytest plugin (auto-discovered via the pytest11 entry point),
which provides the ``assert_flat_roundtrip`` fixture.
"""

from __future__ import annotations

__all__: list[str] = []
