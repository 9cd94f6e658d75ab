"""Collaborator implementations."""

from sourcewise.data.sources.api import HTTPMarketDataService
from sourcewise.data.sources.mock import (
    InMemoryRFQStore,
    InMemorySupplierDirectory,
    MockMarketDataService,
    sample_rfqs,
    sample_suppliers,
)

__all__ = [
    "HTTPMarketDataService",
    "InMemorySupplierDirectory",
    "InMemoryRFQStore",
    "MockMarketDataService",
    "sample_suppliers",
    "sample_rfqs",
]
