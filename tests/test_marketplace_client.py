"""
Tests for the marketplace API client and its mock counterpart.
"""

import json
from datetime import date

import pytest
import requests

from helensvale.adapters.marketplace_client import MarketplaceClient
from helensvale.adapters.mock_marketplace_client import MockMarketplaceClient
from helensvale.domain.exceptions import MarketplaceAPIError, NotFoundError


class FakeResponse:
    """Stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


@pytest.fixture
def recorded_get(monkeypatch):
    """Patch requests.get and record the calls made."""
    calls = []
    responses = []

    def fake_get(url, headers=None, params=None, timeout=None):
        calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "get", fake_get)
    return calls, responses


class TestMarketplaceClient:
    """Tests for MarketplaceClient."""

    def test_get_vendor(self, recorded_get):
        """Test fetching and parsing a vendor."""
        calls, responses = recorded_get
        responses.append(FakeResponse(payload={"success": True, "data": {
            "_id": "v1",
            "businessName": "Helensvale Mobile Detailing",
            "operatingHours": [{"day": "monday", "isOpen": True, "openTime": "08:00", "closeTime": "17:00"}],
            "services": [{"_id": "s1", "name": "Express Wash", "price": 45, "duration": 60}],
        }}))
        client = MarketplaceClient("https://api.example.com/", token="secret", timeout=5)

        vendor = client.get_vendor("v1")

        assert vendor.name == "Helensvale Mobile Detailing"
        assert vendor.services[0].id == "s1"
        assert calls[0]["url"] == "https://api.example.com/api/vendors/v1"
        assert calls[0]["headers"]["Authorization"] == "Bearer secret"
        assert calls[0]["timeout"] == 5

    def test_get_bookings_sends_vendor_and_date(self, recorded_get):
        """Test the booking query parameters."""
        calls, responses = recorded_get
        responses.append(FakeResponse(payload={"success": True, "count": 1, "data": [
            {"_id": "b1", "timeSlot": {"startTime": "09:00", "endTime": "10:00"}, "status": "confirmed"},
        ]}))
        client = MarketplaceClient("https://api.example.com")

        bookings = client.get_bookings("v1", date(2026, 3, 16))

        assert [b.id for b in bookings] == ["b1"]
        assert calls[0]["params"] == {"vendor": "v1", "bookingDate": "2026-03-16", "limit": 100, "page": 1}
        assert len(calls) == 1
        assert "Authorization" not in calls[0]["headers"]

    def test_get_bookings_follows_pages(self, recorded_get):
        """Test that a full page triggers a request for the next one."""
        calls, responses = recorded_get

        def booking(n):
            return {"_id": f"b{n}", "timeSlot": {"startTime": "09:00", "endTime": "10:00"}, "status": "confirmed"}

        responses.append(FakeResponse(payload={"success": True, "data": [booking(1), booking(2)]}))
        responses.append(FakeResponse(payload={"success": True, "data": [booking(3)]}))
        client = MarketplaceClient("https://api.example.com", page_size=2)

        bookings = client.get_bookings("v1", date(2026, 3, 16))

        assert [b.id for b in bookings] == ["b1", "b2", "b3"]
        assert [call["params"]["page"] for call in calls] == [1, 2]
        assert all(call["params"]["limit"] == 2 for call in calls)

    def test_404_raises_not_found(self, recorded_get):
        """Test that an unknown vendor maps to NotFoundError."""
        _, responses = recorded_get
        responses.append(FakeResponse(status_code=404, payload={"success": False}))

        with pytest.raises(NotFoundError):
            MarketplaceClient("https://api.example.com").get_vendor("missing")

    def test_server_error_raises_api_error(self, recorded_get):
        """Test that HTTP errors surface as MarketplaceAPIError."""
        _, responses = recorded_get
        responses.append(FakeResponse(status_code=500))

        with pytest.raises(MarketplaceAPIError):
            MarketplaceClient("https://api.example.com").get_vendor("v1")

    def test_connection_error_raises_api_error(self, recorded_get):
        """Test that transport failures surface as MarketplaceAPIError."""
        _, responses = recorded_get
        responses.append(requests.exceptions.ConnectionError("refused"))

        with pytest.raises(MarketplaceAPIError, match="Failed to reach"):
            MarketplaceClient("https://api.example.com").get_vendor("v1")

    def test_invalid_json_raises_api_error(self, recorded_get):
        """Test that a non-JSON body surfaces as MarketplaceAPIError."""
        _, responses = recorded_get
        responses.append(FakeResponse(text="<html>oops</html>"))

        with pytest.raises(MarketplaceAPIError, match="invalid JSON"):
            MarketplaceClient("https://api.example.com").get_vendor("v1")

    def test_unsuccessful_envelope_raises_api_error(self, recorded_get):
        """Test that success=false carries the server message."""
        _, responses = recorded_get
        responses.append(FakeResponse(payload={"success": False, "message": "Vendor suspended"}))

        with pytest.raises(MarketplaceAPIError, match="Vendor suspended"):
            MarketplaceClient("https://api.example.com").get_vendor("v1")


class TestMockMarketplaceClient:
    """Tests for the JSON-backed mock client."""

    def test_bundled_data(self):
        """Test the bundled vendors and date filtering of bookings."""
        client = MockMarketplaceClient()

        vendor = client.get_vendor("v-detailing")
        bookings = client.get_bookings("v-detailing", date(2026, 3, 16))

        assert vendor.find_service("s-express") is not None
        assert {b.id for b in bookings} == {"b-1001", "b-1002", "b-1003"}
        assert client.get_bookings("v-detailing", date(2026, 3, 17)) == []

    def test_unknown_vendor_raises_not_found(self):
        """Test that unknown vendors raise NotFoundError."""
        with pytest.raises(NotFoundError):
            MockMarketplaceClient().get_vendor("nope")

    def test_custom_data_file(self, tmp_path):
        """Test loading a custom data file."""
        data_file = tmp_path / "marketplace.json"
        data_file.write_text(json.dumps({
            "vendors": [{"id": "x", "name": "X", "operatingHours": {}}],
            "bookings": [{"vendor": "x", "bookingDate": "2026-01-05", "startTime": "09:00", "endTime": "09:30"}],
        }), encoding="utf-8")

        client = MockMarketplaceClient(data_file=data_file)

        assert client.get_vendor("x").name == "X"
        assert len(client.get_bookings("x", date(2026, 1, 5))) == 1

    def test_missing_data_file_means_no_vendors(self, tmp_path):
        """Test that a missing file behaves like an empty marketplace."""
        client = MockMarketplaceClient(data_file=tmp_path / "absent.json")

        with pytest.raises(NotFoundError):
            client.get_vendor("v-detailing")
