"""
Mock marketplace client for running without the Express API.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import NotFoundError
from ..domain.models import Booking, Vendor
from .payloads import parse_booking, parse_vendor


class MockMarketplaceClient:
    """
    Mock client that serves vendors and bookings from a JSON file.

    The file holds ``{"vendors": [...], "bookings": [...]}`` in the same shape
    the API returns, with each booking naming its vendor under ``"vendor"``.
    """

    def __init__(self, data_file: Optional[Path] = None):
        self.data_file = data_file or Path(__file__).parent / "mock_marketplace_data.json"
        self._load_data()

    def _load_data(self):
        """Load mock marketplace data from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                data: Dict[str, Any] = json.load(f)
        else:
            data = {}

        self.vendors: List[Dict[str, Any]] = data.get("vendors", [])
        self.bookings: List[Dict[str, Any]] = data.get("bookings", [])

    def get_vendor(self, vendor_id: str) -> Vendor:
        for raw in self.vendors:
            if str(raw.get("_id", raw.get("id"))) == vendor_id:
                return parse_vendor(raw)
        raise NotFoundError(f"Unknown vendor {vendor_id}")

    def get_bookings(self, vendor_id: str, day: date) -> List[Booking]:
        bookings: List[Booking] = []

        for raw in self.bookings:
            if str(raw.get("vendor")) != vendor_id:
                continue

            booking = parse_booking(raw)
            if booking.booking_date == day:
                bookings.append(booking)

        return bookings
