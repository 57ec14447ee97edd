"""
Tests for the nearby doctor lookup.
"""

import httpx
import pytest

from app.core.exceptions import ServiceUnavailableError
from app.core.places_client import PlacesClient, to_doctor_place, validate_coordinates

BASE_URL = "https://places.test/api/place"

DETAILS = {
    "p1": {
        "name": "City Clinic",
        "formatted_address": "1 Main Road",
        "formatted_phone_number": "+91 11 2345 6789",
        "rating": 4.5,
        "opening_hours": {"open_now": True},
        "geometry": {"location": {"lat": 28.61, "lng": 77.21}},
    },
    "p2": {
        "name": "Dr. Rao",
        "geometry": {"location": {"lat": 28.62, "lng": 77.22}},
    },
}


def make_client(handler, api_key: str = "test-key") -> PlacesClient:
    return PlacesClient(api_key=api_key, base_url=BASE_URL, transport=httpx.MockTransport(handler))


def places_api(search_status: str = "OK", place_ids=("p1", "p2"), failing=()):
    """Fake places API serving nearby search and details."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        params = request.url.params
        assert params["key"] == "test-key"

        if request.url.path.endswith("/nearbysearch/json"):
            return httpx.Response(200, json={
                "status": search_status,
                "results": [{"place_id": pid} for pid in place_ids],
            })

        place_id = params["place_id"]
        if place_id in failing:
            return httpx.Response(500)
        return httpx.Response(200, json={"status": "OK", "result": DETAILS[place_id]})

    handler.calls = calls
    return handler


class TestMapping:
    def test_full_details(self):
        place = to_doctor_place("p1", DETAILS["p1"])

        assert place.id == "p1"
        assert place.name == "City Clinic"
        assert place.latitude == 28.61
        assert place.longitude == 77.21
        assert place.rating == 4.5
        assert place.available is True
        assert place.type == "hospital"
        assert place.emergency_service is False

    def test_sparse_details(self):
        place = to_doctor_place("p2", DETAILS["p2"])

        assert place.address is None
        assert place.phone is None
        assert place.available is False

    @pytest.mark.parametrize("lat,lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_invalid_coordinates(self, lat, lng):
        with pytest.raises(ValueError):
            validate_coordinates(lat, lng)


class TestPlacesClient:
    """Test the places client against a mock transport."""

    async def test_finds_doctors_in_search_order(self):
        handler = places_api()
        places = await make_client(handler).find_nearby_doctors(28.6, 77.2)

        assert [p.id for p in places] == ["p1", "p2"]

        search = handler.calls[0].url.params
        assert search["location"] == "28.6,77.2"
        assert search["type"] == "doctor"
        assert search["rankby"] == "distance"

    async def test_details_request_fields(self):
        handler = places_api(place_ids=("p1",))
        await make_client(handler).find_nearby_doctors(28.6, 77.2)

        details = handler.calls[1].url.params
        assert details["place_id"] == "p1"
        assert "formatted_phone_number" in details["fields"].split(",")

    async def test_zero_results_is_empty(self):
        places = await make_client(places_api(search_status="ZERO_RESULTS", place_ids=())).find_nearby_doctors(0, 0)
        assert places == []

    async def test_failed_details_skipped(self):
        places = await make_client(places_api(failing=("p1",))).find_nearby_doctors(28.6, 77.2)
        assert [p.id for p in places] == ["p2"]

    async def test_denied_search_raises(self):
        with pytest.raises(ServiceUnavailableError) as exc_info:
            await make_client(places_api(search_status="REQUEST_DENIED")).find_nearby_doctors(28.6, 77.2)
        assert exc_info.value.service == "places"

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ServiceUnavailableError):
            await make_client(handler).find_nearby_doctors(28.6, 77.2)

    async def test_unconfigured(self):
        client = make_client(places_api(), api_key="")

        assert client.is_configured is False
        with pytest.raises(ServiceUnavailableError):
            await client.find_nearby_doctors(28.6, 77.2)

    async def test_invalid_coordinates_checked_first(self):
        with pytest.raises(ValueError):
            await make_client(places_api()).find_nearby_doctors(120, 0)
