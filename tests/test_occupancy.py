"""Tests for engine/occupancy.py — band boundaries and occupancy ratio."""

from __future__ import annotations

import pytest

from parking_pricing.engine.occupancy import occupancy_band, occupancy_multiplier, occupancy_ratio
from parking_pricing.errors import ValidationError


@pytest.mark.parametrize(
    "ratio, expected",
    [
        (1.0, 1.50),
        (0.90, 1.50),
        (0.8999, 1.25),
        (0.75, 1.25),
        (0.7499, 1.10),
        (0.50, 1.10),
        (0.4999, 1.00),
        (0.2501, 1.00),
        (0.25, 0.90),
        (0.0, 0.90),
    ],
)
def test_band_boundaries(ratio: float, expected: float):
    assert occupancy_multiplier(ratio) == expected


def test_band_labels_are_distinct():
    labels = {occupancy_band(r)[0] for r in (0.95, 0.8, 0.6, 0.3, 0.1)}
    assert len(labels) == 5


@pytest.mark.parametrize("ratio", [-0.01, 1.01, 90])
def test_out_of_range_ratio_rejected(ratio: float):
    with pytest.raises(ValidationError):
        occupancy_multiplier(ratio)


class TestOccupancyRatio:
    def test_occupied_and_reserved_count_as_taken(self):
        statuses = ["occupied", "reserved", "available", "maintenance"]
        assert occupancy_ratio(statuses) == 0.5

    def test_no_spots_is_zero(self):
        assert occupancy_ratio([]) == 0.0

    def test_unknown_status_counts_as_free(self):
        assert occupancy_ratio([None, "occupied"]) == 0.5

    def test_accepts_generator(self):
        assert occupancy_ratio(s for s in ["occupied"] * 3) == 1.0
