"""Deterministic tree generators for performance benchmarks.

All generators produce fixed, reproducible trees. No random values.
Three tiers shaped like fund reports: ~100, ~1,000 and ~10,000 entries.
Each tier provides the tree and its flat text, so the encode and decode
directions are timed on the same document.
"""

from __future__ import annotations

import pytest

from flatpath import Node, dumps


def generate_fund_report(num_funds: int, positions_per_fund: int) -> Node:
    """Build a report with ``num_funds`` funds of ``positions_per_fund`` positions.

    Each position emits four entries (one attribute and three leaves), so the
    flat form holds roughly ``4 * num_funds * positions_per_fund`` lines.
    """
    funds = []
    for i in range(num_funds):
        positions = tuple(
            Node(
                "Position",
                {"isin": f"AT{i:04d}{j:06d}"},
                children=(
                    Node("Quantity", text=str(j * 10)),
                    Node("Price", text=f"{100 + j % 7}.{j % 100:02d}"),
                    Node("Currency", text="EUR" if j % 3 else "USD"),
                ),
            )
            for j in range(positions_per_fund)
        )
        funds.append(
            Node(
                "Fund",
                {"code": f"F{i}"},
                children=(
                    Node("Names", children=(Node("OfficialName", text=f"Fund {i}"),)),
                    Node("Positions", children=positions),
                ),
            )
        )
    return Node(
        "FundsXML4",
        {"version": "4.2"},
        children=(
            Node("ControlData", children=(Node("UniqueDocumentID", text="DOC-1"),)),
            Node("Funds", children=tuple(funds)),
        ),
    )


def generate_deep_chain(depth: int) -> Node:
    """A single path ``depth`` levels deep ending in one leaf."""
    node = Node("Leaf", text="bottom")
    for _ in range(depth - 1):
        node = Node("Level", children=(node,))
    return node


# --- Fixtures for each size tier ---


@pytest.fixture
def report_100() -> Node:
    """~100 entries: 5 funds x 5 positions."""
    return generate_fund_report(5, 5)


@pytest.fixture
def report_1k() -> Node:
    """~1,000 entries: 10 funds x 25 positions."""
    return generate_fund_report(10, 25)


@pytest.fixture
def report_10k() -> Node:
    """~10,000 entries: 25 funds x 100 positions."""
    return generate_fund_report(25, 100)


@pytest.fixture
def report_10k_text(report_10k: Node) -> str:
    """Flat text of the 10,000-entry report."""
    return dumps(report_10k)


@pytest.fixture
def chain_2000() -> Node:
    """A 2,000-level chain, beyond the default recursion limit."""
    return generate_deep_chain(2000)
