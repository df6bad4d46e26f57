"""
Core business logic for deriving bookable time slots.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Every call is independent and side-effect free, so a
single calculator can be shared between concurrent requests.
"""

from typing import Any, Iterable, List, Mapping

from .exceptions import InvalidInput
from .models import ClockRange, DayHours, OperatingHours, TimeSlot, format_clock

DEFAULT_STRIDE_MINUTES = 30


class AvailabilityCalculator:
    """
    Calculates the bookable slots of one vendor on one day.

    Algorithm:
    1. Look up the operating hours for the weekday (closed day -> no slots)
    2. Starting at the opening time, emit a window of the service duration
       for as long as it ends by closing time
    3. Advance the start by a fixed stride, so windows overlap and the
       customer gets more start times to choose from
    4. Mark every window overlapping an existing booking or a break as
       unavailable, keeping it in the result
    """

    def __init__(self, stride_minutes: int = DEFAULT_STRIDE_MINUTES):
        if isinstance(stride_minutes, bool) or not isinstance(stride_minutes, int) or stride_minutes <= 0:
            raise InvalidInput(f"Slot stride must be a positive number of minutes, got {stride_minutes!r}")
        self.stride_minutes = stride_minutes

    def compute_slots(
        self,
        operating_hours: OperatingHours,
        weekday: str,
        service_duration_minutes: int,
        existing_bookings: Iterable[Any] = (),
    ) -> List[TimeSlot]:
        """
        Compute the slots for a weekday.

        Args:
            operating_hours: Weekly schedule of the vendor
            weekday: Weekday name, e.g. "monday"
            service_duration_minutes: Length of the chosen service
            existing_bookings: Reservations for the same vendor and date; each
                item is a ``Booking``, a ``ClockRange`` or a mapping with
                start/end times

        Returns:
            Slots in ascending start order, unavailable ones included

        Raises:
            InvalidInput: For a bad duration, a malformed time or a weekday
                missing from the schedule
        """
        day_hours = operating_hours.for_weekday(weekday)
        window = day_hours.window()

        if window is None:
            return []

        duration = self._validate_duration(service_duration_minutes)
        blocked = self._blocked_ranges(day_hours, existing_bookings)

        return [
            TimeSlot(
                start_time=format_clock(candidate.start),
                end_time=format_clock(candidate.end),
                available=not any(candidate.overlaps(other) for other in blocked),
            )
            for candidate in self._generate_candidates(window, duration)
        ]

    def _generate_candidates(self, window: ClockRange, duration: int) -> List[ClockRange]:
        """
        Generate staggered windows inside the opening window.

        Example (stride 30, duration 60):
        Open: 09:00 - 11:00
        Result: [09:00-10:00, 09:30-10:30, 10:00-11:00]
        """
        candidates: List[ClockRange] = []
        start = window.start

        while start + duration <= window.end:
            candidates.append(ClockRange(start=start, end=start + duration))
            start += self.stride_minutes

        return candidates

    def _blocked_ranges(
        self,
        day_hours: DayHours,
        existing_bookings: Iterable[Any],
    ) -> List[ClockRange]:
        blocked = day_hours.break_ranges()
        blocked.extend(self._to_range(booking) for booking in existing_bookings)
        return blocked

    @staticmethod
    def _to_range(booking: Any) -> ClockRange:
        if isinstance(booking, ClockRange):
            return booking

        if isinstance(booking, Mapping):
            start = booking.get("start_time", booking.get("startTime"))
            end = booking.get("end_time", booking.get("endTime"))
            return ClockRange.from_strings(start, end)

        try:
            return booking.as_range()
        except AttributeError as exc:
            raise InvalidInput(f"Cannot read start/end times from booking {booking!r}") from exc

    @staticmethod
    def _validate_duration(duration: int) -> int:
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise InvalidInput(f"Service duration must be a positive number of minutes, got {duration!r}")
        return duration


_default_calculator = AvailabilityCalculator()


def compute_slots(
    operating_hours: OperatingHours,
    weekday: str,
    service_duration_minutes: int,
    existing_bookings: Iterable[Any] = (),
) -> List[TimeSlot]:
    """Compute slots with the standard 30 minute stride."""
    return _default_calculator.compute_slots(
        operating_hours,
        weekday,
        service_duration_minutes,
        existing_bookings,
    )
