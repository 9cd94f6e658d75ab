"""Tests for utility functions."""

import pytest

from sourcewise.utils import clamp, format_price, format_risk_level, mean, parse_price
from sourcewise.utils.helpers import format_duration_days


class TestParsePrice:
    """Tests for parse_price."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("₹12,00,000", 1_200_000),
            ("$1,500.50", 1500.5),
            ("12 lakh", 1_200_000),
            ("₹2.5 Lakh", 250_000),
            ("1.5 crore", 15_000_000),
            ("Rs. 5000", 5000),
            ("INR 75,000", 75_000),
            ("€ 900", 900),
            ("$10k", 10_000),
            ("1.5M", 1_500_000),
            ("2 million", 2_000_000),
            ("₹3 Cr", 30_000_000),
            ("₹5,000/-", 5000),
        ],
    )
    def test_currency_strings(self, text, expected):
        assert parse_price(text) == pytest.approx(expected)

    def test_numbers_pass_through(self):
        assert parse_price(2500) == 2500.0
        assert parse_price(99.5) == 99.5

    @pytest.mark.parametrize("text", [None, "", "negotiable", "₹", "10 bags", "5000 approx", "10kg"])
    def test_unreadable(self, text):
        assert parse_price(text) is None


class TestFormatting:
    """Tests for display helpers."""

    def test_format_price_whole_amount(self):
        assert format_price(1_200_000) == "₹12,00,000"

    def test_format_price_fraction_and_currency(self):
        assert format_price(1500.5, "usd") == "$1,500.50"

    def test_format_price_indian_grouping(self):
        assert format_price(15_000_000) == "₹1,50,00,000"
        assert format_price(999) == "₹999"
        assert format_price(1_234.5) == "₹1,234.50"

    def test_format_price_rounds_fraction(self):
        assert format_price(1500.999, "USD") == "$1,501"

    def test_format_price_unknown_currency(self):
        assert format_price(10, "CHF") == "CHF 10"

    @pytest.mark.parametrize("days, expected", [(3, "3 days"), (7, "7 days"), (21, "3 weeks")])
    def test_format_duration(self, days, expected):
        assert format_duration_days(days) == expected

    @pytest.mark.parametrize(
        "score, level",
        [(0.1, "Low"), (0.3, "Moderate"), (0.5, "Elevated"), (0.7, "High"), (0.9, "Critical")],
    )
    def test_format_risk_level(self, score, level):
        assert format_risk_level(score)[0] == level


class TestMath:
    def test_clamp(self):
        assert clamp(1.4) == 1.0
        assert clamp(-0.2) == 0.0
        assert clamp(120, 0, 100) == 100

    def test_mean(self):
        assert mean([1.0, 2.0, 4.5]) == pytest.approx(2.5)
