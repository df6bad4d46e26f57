"""
Marketplace API client for fetching vendors and their bookings.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import MarketplaceAPIError, NotFoundError
from ..domain.models import Booking, Vendor
from .payloads import parse_bookings, parse_vendor

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class MarketplaceClient:
    """
    Client for the Helensvale Connect Express API.

    Every endpoint answers with the envelope ``{"success": bool, "data": ...}``.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 10.0,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """
        Initialize the marketplace client.

        Args:
            base_url: Root URL of the API, e.g. https://api.example.com
            token: Optional bearer token for protected routes
            timeout: Request timeout in seconds
            page_size: Bookings requested per page
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        if page_size <= 0:
            raise ValueError(f"page_size must be greater than zero, got {page_size}")
        self.page_size = page_size
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def get_vendor(self, vendor_id: str) -> Vendor:
        """
        Fetch a vendor with operating hours and services.

        Raises:
            NotFoundError: If the vendor does not exist
            MarketplaceAPIError: If the request fails
        """
        data = self._get(f"/api/vendors/{vendor_id}", resource=f"vendor {vendor_id}")
        return parse_vendor(data)

    def get_bookings(self, vendor_id: str, day: date) -> List[Booking]:
        """
        Fetch every booking of a vendor on a given date.

        The API pages its results, so pages are requested until one comes
        back short.
        """
        bookings: List[Booking] = []
        page = 1

        while True:
            params = {
                "vendor": vendor_id,
                "bookingDate": day.isoformat(),
                "limit": self.page_size,
                "page": page,
            }
            data = self._get("/api/bookings", params=params, resource=f"bookings of {vendor_id}")
            batch = parse_bookings(data or [])
            bookings.extend(batch)

            if len(batch) < self.page_size:
                return bookings
            page += 1

    def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        resource: str = "resource",
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise MarketplaceAPIError(f"Failed to reach marketplace API: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Unknown {resource}")

        try:
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.HTTPError as e:
            raise MarketplaceAPIError(f"Marketplace API error for {resource}: {e}") from e
        except ValueError as e:
            raise MarketplaceAPIError(f"Marketplace API returned invalid JSON for {resource}") from e

        if not isinstance(payload, dict) or not payload.get("success", False):
            message = payload.get("message") if isinstance(payload, dict) else None
            raise MarketplaceAPIError(message or f"Marketplace API rejected request for {resource}")

        return payload.get("data")
