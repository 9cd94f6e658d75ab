"""Negotiation path: market analysis, supplier risk and strategy."""

from .market import MarketAnalyzer
from .risk import RiskAggregator
from .strategist import NegotiationStrategist

__all__ = ["MarketAnalyzer", "RiskAggregator", "NegotiationStrategist"]
