"""
Application services for offering bookable slots.

The service fetches a vendor and its bookings through a marketplace client
adapter and delegates the slot derivation to the domain-level
``AvailabilityCalculator``. The client is typed against a protocol so the
HTTP adapter, the JSON-backed mock or a test stub can be plugged in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence

import pendulum

from ..config import BookingSettings
from ..domain.availability import AvailabilityCalculator
from ..domain.exceptions import InvalidInput, NotFoundError, SlotUnavailableError
from ..domain.models import Booking, Service, TimeSlot, Vendor, weekday_for

logger = logging.getLogger(__name__)


class MarketplaceClientProtocol(Protocol):
    """Protocol describing the marketplace client behaviour needed by the service."""

    def get_vendor(self, vendor_id: str) -> Vendor:
        """Return the vendor with its operating hours and services."""

    def get_bookings(self, vendor_id: str, day: date) -> List[Booking]:
        """Return the vendor's bookings on the given date."""


@dataclass(frozen=True)
class BookingQuote:
    """Price and slot confirmation for a prospective booking."""
    vendor_id: str
    service_id: str
    service_name: str
    booking_date: date
    slot: TimeSlot
    participants: int
    unit_price: float
    total_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendorId": self.vendor_id,
            "serviceId": self.service_id,
            "serviceName": self.service_name,
            "bookingDate": self.booking_date.isoformat(),
            "timeSlot": {"startTime": self.slot.start_time, "endTime": self.slot.end_time},
            "participants": self.participants,
            "unitPrice": self.unit_price,
            "totalAmount": self.total_amount,
        }


class AvailabilityService:
    """
    Orchestrates vendor/booking retrieval and slot calculation.
    """

    def __init__(
        self,
        marketplace_client: MarketplaceClientProtocol,
        calculator: Optional[AvailabilityCalculator] = None,
        settings: Optional[BookingSettings] = None,
        timezone: str = "Australia/Brisbane",
    ) -> None:
        self._settings = settings or BookingSettings()
        self._client = marketplace_client
        self._calculator = calculator or AvailabilityCalculator(
            stride_minutes=self._settings.slot_stride_minutes
        )
        self._timezone = timezone

    def find_slots(self, *, vendor_id: str, day: date, service_id: str) -> List[TimeSlot]:
        """Fetch the vendor and its bookings, then compute the day's slots."""
        vendor = self._client.get_vendor(vendor_id)
        service = self.resolve_service(vendor, service_id)
        return self._slots_for(vendor, day, service)

    def slots_payload(self, *, vendor_id: str, day: date, service_id: str) -> Dict[str, Any]:
        """
        Build the JSON body returned to the booking calendar.
        """
        vendor = self._client.get_vendor(vendor_id)
        service = self.resolve_service(vendor, service_id)
        slots = self._slots_for(vendor, day, service)

        return {
            "vendorId": vendor.id,
            "serviceId": service.id,
            "date": day.isoformat(),
            "weekday": weekday_for(day),
            "durationMinutes": service.duration_minutes,
            "slots": [slot.to_dict() for slot in slots],
        }

    def calculate_slots(
        self,
        *,
        vendor: Vendor,
        day: date,
        service: Service,
        bookings: Sequence[Booking],
    ) -> List[TimeSlot]:
        """Calculate slots from already fetched data."""
        return self._calculator.compute_slots(
            vendor.operating_hours,
            weekday_for(day),
            service.duration_minutes,
            self._blocking_bookings(bookings),
        )

    def open_dates(
        self,
        *,
        vendor_id: str,
        start: Optional[date] = None,
        days: Optional[int] = None,
    ) -> List[date]:
        """
        List the dates after ``start`` on which the vendor is open.

        Args:
            vendor_id: Vendor to look up
            start: Reference date, defaults to today in the configured timezone
            days: How many days ahead to look, defaults to the booking window
        """
        window = days if days is not None else self._settings.window_days
        if window <= 0:
            raise InvalidInput(f"Booking window must be positive, got {window}")

        vendor = self._client.get_vendor(vendor_id)
        reference = start or pendulum.today(self._timezone).date()
        current = pendulum.date(reference.year, reference.month, reference.day)

        open_days: List[date] = []
        for offset in range(1, window + 1):
            candidate = current.add(days=offset)
            if vendor.operating_hours.is_open_on(candidate):
                open_days.append(candidate)

        return open_days

    def check_slot(
        self,
        *,
        vendor_id: str,
        day: date,
        service_id: str,
        start_time: str,
    ) -> bool:
        """Check whether ``start_time`` is an offered and still available slot."""
        slots = self.find_slots(vendor_id=vendor_id, day=day, service_id=service_id)
        slot = self._find_slot(slots, start_time)
        return slot is not None and slot.available

    def quote_booking(
        self,
        *,
        vendor_id: str,
        day: date,
        service_id: str,
        start_time: str,
        participants: int = 1,
    ) -> BookingQuote:
        """
        Validate a prospective booking and price it.

        Raises:
            InvalidInput: If the participant count is out of range
            NotFoundError: If the vendor or service is unknown
            SlotUnavailableError: If the start time is not offered or taken
        """
        max_participants = self._settings.max_participants
        if isinstance(participants, bool) or not isinstance(participants, int) or not 1 <= participants <= max_participants:
            raise InvalidInput(
                f"Participants must be between 1 and {max_participants}, got {participants!r}"
            )

        vendor = self._client.get_vendor(vendor_id)
        service = self.resolve_service(vendor, service_id)
        slot = self._find_slot(self._slots_for(vendor, day, service), start_time)

        if slot is None:
            raise SlotUnavailableError(
                f"{start_time} is not an offered start time for {service.name} on {day.isoformat()}"
            )
        if not slot.available:
            raise SlotUnavailableError(f"Time slot {slot.start_time} - {slot.end_time} is already booked")

        return BookingQuote(
            vendor_id=vendor.id,
            service_id=service.id,
            service_name=service.name,
            booking_date=day,
            slot=slot,
            participants=participants,
            unit_price=service.price_amount,
            total_amount=round(service.price_amount * participants, 2),
        )

    @staticmethod
    def resolve_service(vendor: Vendor, service_id: str) -> Service:
        """Find an active service on the vendor's menu."""
        service = vendor.find_service(service_id)
        if service is None or not service.is_active:
            raise NotFoundError(f"Vendor {vendor.id} offers no active service {service_id!r}")
        return service

    def _slots_for(self, vendor: Vendor, day: date, service: Service) -> List[TimeSlot]:
        bookings = self._client.get_bookings(vendor.id, day)
        slots = self.calculate_slots(vendor=vendor, day=day, service=service, bookings=bookings)
        logger.debug(
            "Computed %d slots for vendor %s, service %s on %s",
            len(slots), vendor.id, service.id, day.isoformat(),
        )
        return slots

    def _blocking_bookings(self, bookings: Sequence[Booking]) -> List[Booking]:
        """
        Keep bookings whose status still holds their time slot.

        Cancelled, completed and no-show bookings free their slot again.
        """
        statuses = set(self._settings.blocking_statuses)
        return [
            booking for booking in bookings if booking.status in statuses
        ]

    @staticmethod
    def _find_slot(slots: Sequence[TimeSlot], start_time: str) -> Optional[TimeSlot]:
        for slot in slots:
            if slot.start_time == start_time:
                return slot
        return None
