import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.config.settings import settings
from src.guestlist.errors import StorageError
from src.guestlist.repository.store import EventStore, get_event_store

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    storage: str
    environment: str
    version: str = "0.1.0"


@router.get("/", response_model=HealthCheckResponse)
async def health_check(store: EventStore = Depends(get_event_store)) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running and the blob store is readable.
    """
    try:
        await store.get_events()
        storage = "ok"
    except StorageError as e:
        logger.error("Health check could not read the store: %s", e)
        storage = "unavailable"
    return HealthCheckResponse(
        status="healthy" if storage == "ok" else "degraded",
        storage=storage,
        environment=settings.ENVIRONMENT,
    )
