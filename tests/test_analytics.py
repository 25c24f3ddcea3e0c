"""Pricing performance analytics — bands, elasticity and recommendations."""

from __future__ import annotations

import pytest

from parking_pricing.engine.analytics import analyze_pricing_performance
from parking_pricing.models import BookingRecord


def bookings(*amounts: float) -> list[BookingRecord]:
    return [BookingRecord(total_amount=a) for a in amounts]


class TestPriceBands:
    def test_totals(self):
        perf = analyze_pricing_performance(bookings(40, 60, 80, 250), 0.6)
        assert perf.total_bookings == 4
        assert perf.total_revenue == pytest.approx(430.0)
        assert perf.average_booking_value == pytest.approx(107.5)

    def test_bands_ordered_by_price(self):
        perf = analyze_pricing_performance(bookings(250, 120, 40, 60), 0.6)
        assert [b.band for b in perf.price_bands] == ["0-50", "50-100", "100-150", "200+"]
        assert perf.price_bands[-1].upper is None

    def test_lower_edge_is_inclusive(self):
        perf = analyze_pricing_performance(bookings(50, 100), 0.6)
        assert [b.band for b in perf.price_bands] == ["50-100", "100-150"]

    def test_optimal_band_by_revenue(self):
        perf = analyze_pricing_performance(bookings(10, 20, 30, 180), 0.6)
        assert perf.optimal_price_band == "150-200"

    def test_no_bookings(self):
        perf = analyze_pricing_performance([], 0.6)
        assert perf.total_bookings == 0
        assert perf.average_booking_value == 0
        assert perf.price_bands == []
        assert perf.optimal_price_band is None
        assert perf.price_elasticity == 0


class TestRecommendations:
    def test_high_occupancy(self):
        perf = analyze_pricing_performance(bookings(60), 0.85)
        assert perf.recommendations == ["Consider increasing prices during peak hours due to high occupancy"]

    def test_low_occupancy(self):
        perf = analyze_pricing_performance(bookings(60), 0.3)
        assert perf.recommendations == ["Consider promotional pricing to increase occupancy"]

    def test_single_band_has_no_elasticity_advice(self):
        perf = analyze_pricing_performance(bookings(60, 70), 0.6)
        assert perf.price_elasticity == 0
        assert perf.recommendations == []

    def test_elastic(self):
        # 10 cheap vs 2 dearer bookings: (−8/6) / (50/50) ≈ −1.33
        perf = analyze_pricing_performance(bookings(*[40] * 10, 80, 80), 0.6)
        assert perf.price_elasticity == pytest.approx(-1.3333, abs=1e-4)
        assert any("elastic - small price decreases" in r for r in perf.recommendations)

    def test_inelastic(self):
        perf = analyze_pricing_performance(bookings(40, 40, 80, 80), 0.6)
        assert perf.price_elasticity == 0
        assert any("inelastic" in r for r in perf.recommendations)

    def test_between_thresholds(self):
        # (−4/8) / 1 = −0.5 → neither elastic nor inelastic
        perf = analyze_pricing_performance(bookings(*[40] * 10, *[80] * 6), 0.6)
        assert perf.price_elasticity == pytest.approx(-0.5)
        assert perf.recommendations == []
