"""Sourcewise - supplier discovery and negotiation intelligence engine."""

__version__ = "1.0.0"
