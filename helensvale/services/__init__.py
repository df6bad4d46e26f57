"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, BookingQuote, MarketplaceClientProtocol

__all__ = ["AvailabilityService", "BookingQuote", "MarketplaceClientProtocol"]
