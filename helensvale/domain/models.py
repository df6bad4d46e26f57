"""
Domain models for vendor operating hours, services, bookings and slots.

Times of day travel through the system as zero-padded 24-hour "HH:MM"
strings and are converted to minute-of-day integers for arithmetic.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from .exceptions import InvalidInput

WEEKDAYS: Tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_CLOCK_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")


def parse_clock(value: str) -> int:
    """
    Parse an "HH:MM" string into minutes after midnight.

    Raises:
        InvalidInput: If the value is not a valid zero-padded 24-hour time
    """
    if not isinstance(value, str) or not _CLOCK_PATTERN.fullmatch(value):
        raise InvalidInput(f"Malformed time {value!r}, expected HH:MM")

    hours, minutes = int(value[:2]), int(value[3:])
    if hours > 23 or minutes > 59:
        raise InvalidInput(f"Time out of range: {value!r}")

    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Format minutes after midnight as "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_weekday(weekday: str) -> str:
    """Lower-case a weekday name and make sure it is one of the seven known days."""
    key = str(weekday).strip().lower()
    if key not in WEEKDAYS:
        raise InvalidInput(f"Unknown weekday: {weekday!r}")
    return key


def weekday_for(day: date) -> str:
    """Return the weekday name ("monday" ... "sunday") for a date."""
    return WEEKDAYS[day.weekday()]


@dataclass(frozen=True)
class ClockRange:
    """
    Half-open range of minutes within a single day.

    Invariant: start must be before end.
    """
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInput(
                f"Start {format_clock(self.start)} must be before end {format_clock(self.end)}"
            )

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "ClockRange":
        return cls(start=parse_clock(start_time), end=parse_clock(end_time))

    def duration_minutes(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "ClockRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{format_clock(self.start)} - {format_clock(self.end)}"


@dataclass(frozen=True)
class Break:
    """A pause inside a vendor's opening hours (lunch, school run, ...)."""
    start_time: str
    end_time: str
    reason: str = ""

    def __post_init__(self):
        # Validates the times eagerly
        self.as_range()

    def as_range(self) -> ClockRange:
        return ClockRange.from_strings(self.start_time, self.end_time)


@dataclass(frozen=True)
class DayHours:
    """
    Opening hours for one weekday.

    When ``is_open`` is false the open and close times are ignored. When it is
    true both must be present and the day must open before it closes; hours
    crossing midnight are rejected.
    """
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    breaks: Tuple[Break, ...] = ()

    def __post_init__(self):
        if not self.is_open:
            return

        if self.open_time is None or self.close_time is None:
            raise InvalidInput("Open days need both an open and a close time")

        opens = parse_clock(self.open_time)
        closes = parse_clock(self.close_time)
        if closes <= opens:
            raise InvalidInput(
                f"Close time {self.close_time} must be after open time {self.open_time}; "
                "overnight hours are not supported"
            )

    @classmethod
    def closed(cls) -> "DayHours":
        return cls(is_open=False)

    def window(self) -> Optional[ClockRange]:
        """Return the open window, or None on a closed day."""
        if not self.is_open:
            return None
        return ClockRange.from_strings(self.open_time, self.close_time)

    def break_ranges(self) -> List[ClockRange]:
        return [b.as_range() for b in self.breaks]


@dataclass(frozen=True)
class OperatingHours:
    """
    Weekly opening schedule keyed by weekday name.
    """
    days: Dict[str, DayHours] = field(default_factory=dict)

    def __post_init__(self):
        for weekday in self.days:
            if weekday not in WEEKDAYS:
                raise InvalidInput(f"Unknown weekday in operating hours: {weekday!r}")

    @classmethod
    def weekly(
        cls,
        open_time: str,
        close_time: str,
        closed_days: Tuple[str, ...] = ("sunday",),
    ) -> "OperatingHours":
        """Build a schedule with the same hours every day except ``closed_days``."""
        closed = {normalize_weekday(d) for d in closed_days}
        return cls(days={
            weekday: DayHours.closed() if weekday in closed
            else DayHours(is_open=True, open_time=open_time, close_time=close_time)
            for weekday in WEEKDAYS
        })

    def for_weekday(self, weekday: str) -> DayHours:
        """
        Look up the hours for a weekday.

        Raises:
            InvalidInput: If the weekday is unknown or missing from the schedule
        """
        key = normalize_weekday(weekday)
        if key not in self.days:
            raise InvalidInput(f"No operating hours configured for {key}")
        return self.days[key]

    def for_date(self, day: date) -> DayHours:
        return self.for_weekday(weekday_for(day))

    def is_open_on(self, day: date) -> bool:
        hours = self.days.get(weekday_for(day))
        return hours is not None and hours.is_open


@dataclass(frozen=True)
class Service:
    """A bookable service offered by a vendor."""
    id: str
    name: str
    duration_minutes: int
    price_amount: float = 0.0
    is_active: bool = True

    def __post_init__(self):
        if not isinstance(self.duration_minutes, int) or self.duration_minutes <= 0:
            raise InvalidInput(
                f"Service {self.id!r} needs a positive duration, got {self.duration_minutes!r}"
            )
        if self.price_amount < 0:
            raise InvalidInput(f"Service {self.id!r} has a negative price")


@dataclass(frozen=True)
class Booking:
    """An existing reservation, consulted read-only to mark conflicts."""
    start_time: str
    end_time: str
    status: str = "confirmed"
    booking_date: Optional[date] = None
    id: str = ""

    def as_range(self) -> ClockRange:
        return ClockRange.from_strings(self.start_time, self.end_time)


@dataclass(frozen=True)
class TimeSlot:
    """
    A candidate bookable window for one (vendor, date, service) query.

    Unavailable slots are kept so callers can render them as disabled.
    """
    start_time: str
    end_time: str
    available: bool = True

    def to_dict(self) -> Dict[str, object]:
        """Serialize with the key names the calendar widget expects."""
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "available": self.available,
        }


@dataclass
class Vendor:
    """A marketplace vendor with its schedule and service menu."""
    id: str
    name: str
    operating_hours: OperatingHours
    services: List[Service] = field(default_factory=list)

    def find_service(self, service_id: str) -> Optional[Service]:
        for service in self.services:
            if service.id == service_id:
                return service
        return None
