"""
Adapters layer - External integrations (marketplace API).
"""

from .marketplace_client import MarketplaceClient
from .mock_marketplace_client import MockMarketplaceClient

__all__ = ["MarketplaceClient", "MockMarketplaceClient"]
