"""Utility functions for the sourcing engine."""

from .helpers import clamp, format_price, format_risk_level, mean, parse_price

__all__ = ["parse_price", "format_price", "format_risk_level", "clamp", "mean"]
