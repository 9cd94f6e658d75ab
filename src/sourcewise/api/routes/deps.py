"""Shared route dependencies."""

from fastapi import Request

from sourcewise.engine import SourcingEngine


def get_engine(request: Request) -> SourcingEngine:
    """The engine the application was created with."""
    return request.app.state.engine
