from fastapi import Depends, Header, HTTPException

from src.guestlist.dtos import User
from src.guestlist.errors import StorageError
from src.guestlist.http_errors import http_error
from src.guestlist.repository.store import EventStore, get_event_store


async def get_current_actor(
    x_user_id: str = Header(..., description="Id of the acting user (self-asserted)"),
    store: EventStore = Depends(get_event_store),
) -> User:
    """Dependency resolving the ``X-User-Id`` header to a stored user."""
    try:
        user = await store.get_user_by_id(x_user_id)
    except StorageError as e:
        raise http_error(e) from e
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
