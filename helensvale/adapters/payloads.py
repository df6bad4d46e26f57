"""
Parsers mapping marketplace API JSON into domain models.

The marketplace stores operating hours in two shapes: vendors keep a list of
``{"day", "isOpen", "openTime", "closeTime", "breaks"}`` entries while stores
keep a mapping of ``{"monday": {"open", "close", "closed"}}``. Both parse to
the same ``OperatingHours``.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

import pendulum

from ..domain.exceptions import MarketplaceAPIError
from ..domain.models import (
    WEEKDAYS,
    Booking,
    Break,
    DayHours,
    OperatingHours,
    Service,
    Vendor,
    format_clock,
    normalize_weekday,
    parse_clock,
)

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_DURATION = 60
LAST_MINUTE_OF_DAY = 23 * 60 + 59


def _document_id(raw: Mapping[str, Any]) -> str:
    identifier = raw.get("_id", raw.get("id"))
    return "" if identifier is None else str(identifier)


def parse_day_hours(raw: Mapping[str, Any], weekday: str = "") -> DayHours:
    """Parse one weekday entry in either the vendor or the store shape."""
    if "isOpen" in raw:
        is_open = bool(raw["isOpen"])
    else:
        is_open = not raw.get("closed", False)

    if not is_open:
        return DayHours.closed()

    open_time = raw.get("openTime", raw.get("open"))
    close_time = raw.get("closeTime", raw.get("close"))
    if not open_time or not close_time:
        logger.warning(
            "Treating %s as closed: open day without open and close times",
            weekday or raw.get("day") or "weekday",
        )
        return DayHours.closed()

    breaks = tuple(
        Break(
            start_time=item.get("startTime"),
            end_time=item.get("endTime"),
            reason=item.get("reason") or "",
        )
        for item in raw.get("breaks") or []
    )

    return DayHours(
        is_open=True,
        open_time=open_time,
        close_time=close_time,
        breaks=breaks,
    )


def parse_operating_hours(raw: Any) -> OperatingHours:
    """
    Parse operating hours; weekdays absent from the payload are closed.

    Raises:
        MarketplaceAPIError: If the payload is neither a list nor a mapping
        InvalidInput: If a weekday or time inside it is malformed
    """
    days: Dict[str, DayHours] = {weekday: DayHours.closed() for weekday in WEEKDAYS}

    if raw is None:
        return OperatingHours(days=days)

    if isinstance(raw, list):
        for entry in raw:
            key = normalize_weekday(entry.get("day", ""))
            days[key] = parse_day_hours(entry, key)
    elif isinstance(raw, Mapping):
        for weekday, entry in raw.items():
            key = normalize_weekday(weekday)
            days[key] = parse_day_hours(entry or {}, key)
    else:
        raise MarketplaceAPIError(f"Unexpected operating hours payload: {type(raw).__name__}")

    return OperatingHours(days=days)


def parse_service(raw: Mapping[str, Any]) -> Service:
    duration = raw.get("duration") or DEFAULT_SERVICE_DURATION
    if isinstance(duration, float) and duration.is_integer():
        duration = int(duration)

    return Service(
        id=_document_id(raw),
        name=raw.get("name", ""),
        duration_minutes=duration,
        price_amount=float(raw.get("price") or 0),
        is_active=bool(raw.get("isActive", True)),
    )


def parse_vendor(raw: Any) -> Vendor:
    """
    Parse a vendor document.

    Services that fail validation are skipped with a warning so one bad menu
    entry does not hide the whole vendor.
    """
    if not isinstance(raw, Mapping):
        raise MarketplaceAPIError(f"Unexpected vendor payload: {type(raw).__name__}")

    services: List[Service] = []
    for item in raw.get("services") or []:
        try:
            services.append(parse_service(item))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping service %s: %s", _document_id(item), e)

    return Vendor(
        id=_document_id(raw),
        name=raw.get("businessName") or raw.get("name") or "",
        operating_hours=parse_operating_hours(raw.get("operatingHours")),
        services=services,
    )


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return pendulum.parse(value).date()
    except ValueError as exc:
        raise MarketplaceAPIError(f"Could not parse booking date: {value!r}") from exc


def parse_booking(raw: Mapping[str, Any]) -> Booking:
    """
    Parse a booking document.

    Bookings carry their times either as ``timeSlot: {startTime, endTime}`` or
    as a ``serviceTime`` start plus a ``duration`` in minutes.
    """
    slot = raw.get("timeSlot") or {}
    start_time = slot.get("startTime", raw.get("startTime"))
    end_time = slot.get("endTime", raw.get("endTime"))

    if start_time is None and raw.get("serviceTime"):
        start_time = raw["serviceTime"]
        duration = int(raw.get("duration") or DEFAULT_SERVICE_DURATION)
        end = parse_clock(start_time) + duration
        if end > LAST_MINUTE_OF_DAY:
            logger.warning(
                "Booking %s runs past midnight; clamping its end to %s",
                _document_id(raw), format_clock(LAST_MINUTE_OF_DAY),
            )
            end = LAST_MINUTE_OF_DAY
        end_time = format_clock(end)

    if start_time is None or end_time is None:
        raise MarketplaceAPIError(f"Booking {_document_id(raw)!r} has no time slot")

    return Booking(
        id=_document_id(raw),
        start_time=start_time,
        end_time=end_time,
        status=str(raw.get("status") or "pending").lower(),
        booking_date=_parse_date(raw.get("bookingDate") or raw.get("serviceDate")),
    )


def parse_bookings(raw: Any) -> List[Booking]:
    if not isinstance(raw, list):
        raise MarketplaceAPIError(f"Unexpected bookings payload: {type(raw).__name__}")
    return [parse_booking(item) for item in raw]
