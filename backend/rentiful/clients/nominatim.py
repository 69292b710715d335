from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import settings
from ..geo import Coordinates, coordinates_or_none

log = logging.getLogger("rentiful.geocoding")


class NominatimClient:
    """
    Postal address -> (longitude, latitude) via the OpenStreetMap Nominatim search API.

    geocode() never raises: any transport/HTTP/payload problem is logged and
    returns None, and the caller falls back to the sentinel point.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base = (base_url or settings.nominatim_base_url).rstrip("/")
        self.user_agent = user_agent or settings.nominatim_user_agent
        self.timeout = float(timeout if timeout is not None else settings.geocoding_timeout_seconds)
        self.transport = transport

    def enabled(self) -> bool:
        return bool(settings.geocoding_enabled and self.base)

    def geocode(
        self,
        *,
        street: str,
        city: str,
        country: str,
        postal_code: str = "",
    ) -> Optional[Coordinates]:
        if not self.enabled():
            return None

        url = f"{self.base}/search"
        params: dict[str, Any] = {
            "street": street,
            "city": city,
            "country": country,
            "postalcode": postal_code,
            "format": "json",
            "limit": 1,
        }
        headers = {"User-Agent": self.user_agent}

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.get(url, params=params, headers=headers)
                r.raise_for_status()
                data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("geocoding failed for %s, %s: %s", street, city, e)
            return None

        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            log.info("geocoding returned no match for %s, %s", street, city)
            return None

        hit = data[0]
        coords = coordinates_or_none(hit.get("lon"), hit.get("lat"))
        if coords is None:
            log.warning("geocoding returned unusable coordinates: lon=%r lat=%r", hit.get("lon"), hit.get("lat"))
        return coords


def get_geocoder() -> NominatimClient:
    return NominatimClient()
