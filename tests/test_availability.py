"""
Tests for the availability calculator.
"""

import pytest

from helensvale.domain.availability import AvailabilityCalculator, compute_slots
from helensvale.domain.exceptions import InvalidInput
from helensvale.domain.models import (
    WEEKDAYS,
    Booking,
    Break,
    ClockRange,
    DayHours,
    OperatingHours,
    TimeSlot,
    parse_clock,
)


def _hours(open_time="09:00", close_time="11:00", breaks=()):
    days = {
        weekday: DayHours(is_open=True, open_time=open_time, close_time=close_time, breaks=breaks)
        for weekday in WEEKDAYS
    }
    days["sunday"] = DayHours.closed()
    return OperatingHours(days=days)


class TestComputeSlots:
    """Tests for slot generation and conflict marking."""

    def test_staggered_slots_reach_closing_time(self):
        """Test the 30 minute stride; the last slot ends exactly at close."""
        slots = compute_slots(_hours(), "monday", 60, [])

        assert slots == [
            TimeSlot(start_time="09:00", end_time="10:00", available=True),
            TimeSlot(start_time="09:30", end_time="10:30", available=True),
            TimeSlot(start_time="10:00", end_time="11:00", available=True),
        ]

    def test_booking_marks_every_overlapping_slot(self):
        """Test that a 10:00-11:00 booking blocks the 09:30 and 10:00 slots."""
        bookings = [Booking(start_time="10:00", end_time="11:00")]

        slots = compute_slots(_hours(), "monday", 60, bookings)

        # 09:30-10:30 shares 10:00-10:30 with the booking
        assert [(s.start_time, s.available) for s in slots] == [
            ("09:00", True),
            ("09:30", False),
            ("10:00", False),
        ]

    def test_touching_booking_does_not_block(self):
        """Test that a booking ending exactly at a slot's start leaves it free."""
        bookings = [Booking(start_time="08:00", end_time="09:00")]

        slots = compute_slots(_hours(), "monday", 60, bookings)

        assert all(slot.available for slot in slots)

    def test_overlap_blocks_staggered_neighbours(self):
        """Test that a booking in the middle blocks every slot it touches."""
        bookings = [Booking(start_time="09:45", end_time="10:15")]

        slots = compute_slots(_hours(), "monday", 60, bookings)

        assert [s.available for s in slots] == [False, False, False]

    def test_duration_longer_than_window_yields_no_slots(self):
        """Test that a 150 minute service does not fit into a two hour day."""
        assert compute_slots(_hours(), "monday", 150, []) == []

    @pytest.mark.parametrize("duration", [0, -30])
    def test_non_positive_duration_raises_invalid_input(self, duration):
        """Test that the duration must be positive."""
        with pytest.raises(InvalidInput):
            compute_slots(_hours(), "monday", duration, [])

    @pytest.mark.parametrize("duration", [0, -30, 60, 150])
    def test_closed_day_is_empty_regardless_of_inputs(self, duration):
        """Test that a closed weekday always returns no slots."""
        bookings = [Booking(start_time="09:00", end_time="10:00")]

        assert compute_slots(_hours(), "sunday", duration, bookings) == []

    def test_missing_weekday_raises_invalid_input(self):
        """Test that a weekday absent from the schedule is a caller error."""
        hours = OperatingHours(days={"monday": DayHours.closed()})

        with pytest.raises(InvalidInput):
            compute_slots(hours, "friday", 60, [])

    def test_malformed_booking_time_raises_invalid_input(self):
        """Test that malformed booking times fail fast."""
        with pytest.raises(InvalidInput):
            compute_slots(_hours(), "monday", 60, [{"startTime": "10", "endTime": "11:00"}])

    def test_accepts_mappings_and_ranges(self):
        """Test that bookings may be passed as API mappings or clock ranges."""
        bookings = [
            {"startTime": "09:00", "endTime": "09:30"},
            ClockRange.from_strings("10:30", "11:00"),
        ]

        slots = compute_slots(_hours(), "monday", 60, bookings)

        assert [s.available for s in slots] == [False, True, False]

    def test_breaks_mark_slots_unavailable(self):
        """Test that a vendor's break blocks overlapping slots but keeps them listed."""
        hours = _hours("09:00", "12:00", breaks=(Break(start_time="10:30", end_time="11:00", reason="Lunch"),))

        slots = compute_slots(hours, "tuesday", 60, [])

        assert [(s.start_time, s.available) for s in slots] == [
            ("09:00", True),
            ("09:30", True),
            ("10:00", False),
            ("10:30", False),
            ("11:00", True),
        ]

    def test_slots_stay_within_operating_hours(self):
        """Test that every slot starts at or after open and ends by close."""
        hours = _hours("08:15", "17:40")

        for duration in (15, 45, 60, 90, 200):
            slots = compute_slots(hours, "wednesday", duration, [])
            assert slots
            for slot in slots:
                assert parse_clock(slot.start_time) >= parse_clock("08:15")
                assert parse_clock(slot.end_time) <= parse_clock("17:40")
                assert parse_clock(slot.end_time) - parse_clock(slot.start_time) == duration

    def test_slots_are_in_ascending_order(self):
        """Test that slots come back sorted by start time."""
        slots = compute_slots(_hours("09:00", "17:00"), "monday", 45, [])
        starts = [parse_clock(s.start_time) for s in slots]

        assert starts == sorted(starts)
        assert len(set(starts)) == len(starts)

    def test_identical_inputs_give_identical_output(self):
        """Test that repeated calls do not share hidden state."""
        hours = _hours("09:00", "17:00")
        bookings = [Booking(start_time="13:00", end_time="14:00")]

        assert compute_slots(hours, "monday", 60, bookings) == compute_slots(hours, "monday", 60, bookings)


class TestAvailabilityCalculator:
    """Tests for the configurable calculator."""

    def test_custom_stride(self):
        """Test that the stride controls the gap between start times."""
        calculator = AvailabilityCalculator(stride_minutes=60)

        slots = calculator.compute_slots(_hours(), "monday", 60, [])

        assert [s.start_time for s in slots] == ["09:00", "10:00"]

    @pytest.mark.parametrize("stride", [0, -15])
    def test_invalid_stride_raises_invalid_input(self, stride):
        """Test that the stride must be positive."""
        with pytest.raises(InvalidInput):
            AvailabilityCalculator(stride_minutes=stride)
