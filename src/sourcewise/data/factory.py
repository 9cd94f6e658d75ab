"""Factory for creating collaborator instances based on settings."""
from dataclasses import dataclass

from sourcewise.data.interfaces import IMarketDataService, IRFQStore, ISupplierDirectory
from sourcewise.models import Settings


@dataclass
class Collaborators:
    """The external collaborators one engine talks to."""

    directory: ISupplierDirectory
    market_data: IMarketDataService
    rfq_store: IRFQStore


def build_collaborators(settings: Settings) -> Collaborators:
    """
    Create fresh collaborator instances for the configured data source.

    Args:
        settings: Application settings.

    Returns:
        Collaborators wired for ``settings.data_source``

    Raises:
        ValueError: If the data source type is unknown
    """
    from sourcewise.data.sources.mock import (
        InMemoryRFQStore,
        InMemorySupplierDirectory,
        MockMarketDataService,
    )

    if settings.data_source == "mock":
        return Collaborators(
            directory=InMemorySupplierDirectory(),
            market_data=MockMarketDataService(),
            rfq_store=InMemoryRFQStore(),
        )

    elif settings.data_source == "api":
        from sourcewise.data.sources.api import HTTPMarketDataService

        if not settings.market_data_url:
            raise ValueError("API data source requires market_data_url")
        # Supplier directory and RFQ store stay in-memory until a backing
        # service is configured; only market data is remote.
        return Collaborators(
            directory=InMemorySupplierDirectory(),
            market_data=HTTPMarketDataService(
                base_url=settings.market_data_url,
                api_key=settings.market_data_api_key or None,
                timeout=settings.collaborator_timeout_seconds,
            ),
            rfq_store=InMemoryRFQStore(),
        )

    else:
        raise ValueError(f"Unknown data source type: {settings.data_source}")
