"""
Nearby doctor lookup via the Google Places web service.

Runs a nearby search around the user's position, then fetches details for
every hit concurrently and maps them onto DoctorPlace records.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.exceptions import ServiceUnavailableError
from app.models.schemas import DoctorPlace
from app.utils.logger import get_logger

logger = get_logger("places_client")

SERVICE_NAME = "places"

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api/place"
DEFAULT_FIELDS = (
    "name",
    "formatted_address",
    "formatted_phone_number",
    "rating",
    "opening_hours",
    "geometry",
    "place_id",
)


def validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"Latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"Longitude out of range: {longitude}")


def to_doctor_place(place_id: str, details: Dict[str, Any]) -> DoctorPlace:
    """Map a place details result onto a DoctorPlace."""
    location = details.get("geometry", {}).get("location", {})
    return DoctorPlace(
        id=place_id,
        name=details.get("name", ""),
        latitude=location.get("lat", 0.0),
        longitude=location.get("lng", 0.0),
        address=details.get("formatted_address"),
        phone=details.get("formatted_phone_number"),
        rating=details.get("rating"),
        available=(details.get("opening_hours") or {}).get("open_now", False),
        type="hospital",
        emergency_service=False,
    )


class PlacesClient:
    """Google Places client for finding doctors near a position."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        place_type: str = "doctor",
        language: str = "en",
        region: str = "in",
        rank_by: str = "distance",
        fields: Sequence[str] = DEFAULT_FIELDS,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.place_type = place_type
        self.language = language
        self.region = region
        self.rank_by = rank_by
        self.fields = list(fields)
        self.timeout = timeout
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def find_nearby_doctors(self, latitude: float, longitude: float) -> List[DoctorPlace]:
        """
        Find doctors near a position.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            Places with details, nearest first; empty when none were found

        Raises:
            ValueError: If the coordinates are out of range
            ServiceUnavailableError: If the search itself fails
        """
        validate_coordinates(latitude, longitude)
        if not self.is_configured:
            raise ServiceUnavailableError(SERVICE_NAME, "Places service is not configured")

        logger.info("Searching for nearby doctors", latitude=latitude, longitude=longitude)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            data = await self._get(client, "nearbysearch", {
                "location": f"{latitude},{longitude}",
                "type": self.place_type,
                "language": self.language,
                "region": self.region,
                "rankby": self.rank_by,
            })

            status = data.get("status")
            if status == "ZERO_RESULTS":
                logger.info("No places found in the area")
                return []
            if status != "OK":
                raise ServiceUnavailableError(
                    SERVICE_NAME,
                    data.get("error_message") or f"Places search returned status {status}"
                )

            results = data.get("results", [])
            places = await asyncio.gather(
                *(self._details(client, place.get("place_id")) for place in results)
            )

        found = [place for place in places if place is not None]
        logger.info("Nearby doctors found", searched=len(results), with_details=len(found))
        return found

    async def _details(self, client: httpx.AsyncClient, place_id: Optional[str]) -> Optional[DoctorPlace]:
        """Fetch details for one place; None when the lookup fails."""
        if not place_id:
            return None
        try:
            data = await self._get(client, "details", {
                "place_id": place_id,
                "fields": ",".join(self.fields),
            })
        except ServiceUnavailableError as e:
            logger.warning("Place details lookup failed", place_id=place_id, error=e.message)
            return None

        if data.get("status") != "OK" or "result" not in data:
            logger.warning("Place details unavailable", place_id=place_id, status=data.get("status"))
            return None
        return to_doctor_place(place_id, data["result"])

    async def _get(self, client: httpx.AsyncClient, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "key": self.api_key}
        try:
            response = await client.get(f"{self.base_url}/{endpoint}/json", params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ServiceUnavailableError(SERVICE_NAME, f"Places request failed: {e}") from e

        if not isinstance(data, dict):
            raise ServiceUnavailableError(SERVICE_NAME, "Malformed places response")
        return data
