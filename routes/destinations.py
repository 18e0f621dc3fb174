from fastapi import APIRouter, HTTPException

from schemas import DestinationSuggestion
from services import destinations
from utils.logger import setup_api_logger

router = APIRouter(prefix="/destinations", tags=["Destinations"])
logger = setup_api_logger()


@router.get("/random", response_model=DestinationSuggestion)
def random_destination():
    try:
        return destinations.random_destination()
    except Exception as e:
        logger.error("Destination suggestion failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to get destination suggestion")
