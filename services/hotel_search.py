"""
Hotel search through the RapidAPI TripAdvisor service: resolve the
destination to a geo id, then list hotels for that geo id.
"""
from datetime import date
from typing import Optional

import httpx

from config import RAPIDAPI_HOST, RAPIDAPI_KEY


def _headers() -> dict:
    return {
        "x-rapidapi-key": RAPIDAPI_KEY or "",
        "x-rapidapi-host": RAPIDAPI_HOST,
    }


async def search_location(query: str, timeout: float = 15.0) -> Optional[int]:
    """Return the first geo id for `query`, or None."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.get(
            f"https://{RAPIDAPI_HOST}/api/v1/hotels/searchLocation",
            params={"query": query},
            headers=_headers(),
        )
        resp.raise_for_status()
        data = resp.json()

    results = data.get("data") or []
    if results:
        return results[0].get("geoId")
    return None


async def search_hotels(geo_id: int, check_in: date, check_out: date, timeout: float = 15.0) -> list:
    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.get(
            f"https://{RAPIDAPI_HOST}/api/v1/hotels/searchHotels",
            params={
                "geoId": geo_id,
                "checkIn": check_in.isoformat(),
                "checkOut": check_out.isoformat(),
                "pageNumber": 1,
                "adults": 1,
                "currencyCode": "USD",
            },
            headers=_headers(),
        )
        resp.raise_for_status()
        data = resp.json()

    return (data.get("data") or {}).get("data") or []
