"""End-to-end tests for the two layout entry points."""

import math

import numpy as np
import pytest

from py_assetwheel.core.layout import packing_layout, partition_layout
from py_assetwheel.core.options import PackingOptions, PartitionOptions

HOLDINGS = {
    "Ethereum": {"ETH": 1.5, "USDC": 420.0, "PEPE": 1e6},
    "Solana": {"SOL": 12.0, "BONK": 3e5},
    "Base": {"ETH": 0.2},
}
PRICES = {
    "Ethereum": {"ETH": 4800.0, "USDC": 420.0},
    "Solana": {"SOL": 1700.0},
}
COLORS = {"Ethereum": "#627eea", "Solana": "#14f195", "Base": "#0052ff"}


class TestPartitionLayout:
    """Test the nested Voronoi layout."""

    def test_single_group_single_item(self):
        """Test that one item fills the whole disk."""
        layout = partition_layout({"Ethereum": {"ETH": 1.0}}, prices={"Ethereum": {"ETH": 100.0}})

        assert len(layout.items) == 1
        assert len(layout.labels) == 1
        assert layout.items[0].visual_weight == 100.0
        assert layout.items[0].area == pytest.approx(math.pi * 200.0 ** 2, rel=1e-3)
        assert layout.items[0].area == pytest.approx(layout.group_cells["Ethereum"].area, rel=1e-9)
        np.testing.assert_allclose(layout.labels[0].anchor, [0.0, 0.0], atol=1e-6)

    def test_no_positive_holdings(self):
        """Test that nothing to draw gives an empty layout."""
        layout = partition_layout({"Ethereum": {"ETH": 0}, "Solana": {}})

        assert layout.items == []
        assert layout.labels == []
        assert layout.coverage == 0.0

    def test_every_item_and_label_present(self):
        layout = partition_layout(HOLDINGS, PRICES, COLORS)

        assert len(layout.items) == 6
        assert [label.group_id for label in layout.labels] == ["Ethereum", "Solana", "Base"]
        assert layout.labels[1].color == "#14f195"
        assert layout.coverage >= 0.99

    def test_items_cover_disk(self):
        layout = partition_layout(HOLDINGS, PRICES, COLORS)
        total = sum(item.area for item in layout.items)

        assert total == pytest.approx(sum(cell.area for cell in layout.group_cells.values()), rel=1e-6)

    def test_items_stay_in_their_group_cell(self):
        layout = partition_layout(HOLDINGS, PRICES, COLORS)

        for item in layout.items:
            cell = layout.group_cells[item.group_id]
            for vertex in item.polygon.points:
                assert cell.contains(vertex, tolerance=1e-6)

    def test_deterministic(self):
        """Test that the same seed gives the same layout."""
        options = PartitionOptions(seed=42)
        a = partition_layout(HOLDINGS, PRICES, COLORS, options)
        b = partition_layout(HOLDINGS, PRICES, COLORS, options)

        assert [(i.group_id, i.item_id) for i in a.items] == [(i.group_id, i.item_id) for i in b.items]
        for ia, ib in zip(a.items, b.items):
            np.testing.assert_array_equal(ia.polygon.points, ib.polygon.points)


class TestPackingLayout:
    """Test the circle packing entry point."""

    def test_one_circle_per_item(self):
        layout = packing_layout(HOLDINGS, PRICES, COLORS, PackingOptions(seed=3))

        assert len(layout.nodes) == 6
        assert set(layout.pointer_targets) == {"Ethereum", "Solana", "Base"}

    def test_empty(self):
        layout = packing_layout({})
        assert layout.nodes == []

    def test_colors_applied(self):
        layout = packing_layout(HOLDINGS, PRICES, COLORS, PackingOptions(seed=3))
        for node in layout.nodes:
            assert node.color == COLORS[node.group_id]
