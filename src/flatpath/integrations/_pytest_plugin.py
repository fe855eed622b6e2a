"""pytest plugin for flatpath.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from flatpath import CodecConfig, flatten, unflatten
from flatpath.tree.nodes import Node, structurally_equal


@pytest.fixture(scope="session")
def assert_flat_roundtrip() -> Any:
    """Fixture that returns a callable round-trip asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to flatten()/unflatten() which create fresh instances per call).

    Usage in tests::

        def test_fund_document(assert_flat_roundtrip):
            assert_flat_roundtrip(parse_xml(FUND_XML))

    Returns:
        A callable ``_assert(root, config=None) -> Node`` that raises
        ``AssertionError`` when the rebuilt tree differs from ``root`` or
        re-encoding it yields a different entry set. Returns the rebuilt tree.
    """

    def _assert(root: Node, config: CodecConfig | None = None) -> Node:
        """Assert that ``root`` survives flatten -> unflatten -> flatten.

        Args:
            root:   Tree to round-trip.
            config: Optional CodecConfig forwarded to both directions.

        Raises:
            AssertionError: With the entries present only on one side.
        """
        entries = flatten(root, config=config)
        rebuilt = unflatten(entries, config=config)
        again = flatten(rebuilt, config=config)

        original_set = set(entries)
        rebuilt_set = set(again)
        if not structurally_equal(root, rebuilt) or original_set != rebuilt_set:
            only_original = sorted(e.path for e in original_set - rebuilt_set)
            only_rebuilt = sorted(e.path for e in rebuilt_set - original_set)
            raise AssertionError(
                f"flat round trip changed the tree rooted at {root.name!r}\n"
                f"  entries: {len(entries)} -> {len(again)}\n"
                f"  only_original: {only_original}\n"
                f"  only_rebuilt:  {only_rebuilt}"
            )
        return rebuilt

    return _assert
