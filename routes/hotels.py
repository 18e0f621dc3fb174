from datetime import date, timedelta
from typing import Optional
from fastapi import APIRouter, HTTPException
import httpx

from services import hotel_search
from utils.logger import setup_api_logger

router = APIRouter(prefix="/hotels", tags=["Hotels"])
logger = setup_api_logger()


@router.get("/search")
async def search_hotels(
    destination: str = "",
    check_in: Optional[date] = None,
    check_out: Optional[date] = None,
):
    """Resolve the destination to a location, then list its hotels."""
    destination = destination.strip()
    if not destination:
        raise HTTPException(status_code=400, detail="Please enter a destination")

    check_in = check_in or date.today()
    check_out = check_out or check_in + timedelta(days=1)
    if check_out <= check_in:
        raise HTTPException(status_code=400, detail="Check-out must be after check-in")

    try:
        geo_id = await hotel_search.search_location(destination)
        if not geo_id:
            raise HTTPException(status_code=404, detail="Location not found")

        hotels = await hotel_search.search_hotels(geo_id, check_in, check_out)
    except httpx.HTTPError as e:
        logger.error("Hotel search failed for %r: %s", destination, e)
        raise HTTPException(status_code=502, detail="Failed to search hotels")

    if not hotels:
        raise HTTPException(status_code=404, detail="No hotels found")

    return {"destination": destination, "geo_id": geo_id, "hotels": hotels}
