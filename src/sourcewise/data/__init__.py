"""Collaborator interfaces and implementations."""

from sourcewise.data.factory import Collaborators, build_collaborators
from sourcewise.data.interfaces import (
    IMarketDataService,
    IRFQStore,
    ISupplierDirectory,
    RFQResponseRecord,
    SupplierFilter,
    SupplierHistory,
)

__all__ = [
    "ISupplierDirectory",
    "IMarketDataService",
    "IRFQStore",
    "RFQResponseRecord",
    "SupplierHistory",
    "SupplierFilter",
    "Collaborators",
    "build_collaborators",
]
