"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import AvailabilityCalculator, compute_slots
from .exceptions import (
    ConnectError,
    InvalidInput,
    MarketplaceAPIError,
    NotFoundError,
    SlotUnavailableError,
)
from .models import (
    WEEKDAYS,
    Booking,
    Break,
    ClockRange,
    DayHours,
    OperatingHours,
    Service,
    TimeSlot,
    Vendor,
)

__all__ = [
    "AvailabilityCalculator",
    "compute_slots",
    "ConnectError",
    "InvalidInput",
    "MarketplaceAPIError",
    "NotFoundError",
    "SlotUnavailableError",
    "WEEKDAYS",
    "Booking",
    "Break",
    "ClockRange",
    "DayHours",
    "OperatingHours",
    "Service",
    "TimeSlot",
    "Vendor",
]
