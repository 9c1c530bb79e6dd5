from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.guestlist.dtos import ListType
from src.guestlist.errors import EventNotFoundError, GuestListError
from src.guestlist.features.public_registration.write_model import (
    PublicRegistrationWriteModel,
)
from src.guestlist.http_errors import http_error
from src.guestlist.permissions import event_stats
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.schemas import NonBlankStr, PublicEventResponse
from src.guestlist.urls import PUBLIC_EVENT_URL, PUBLIC_REGISTRATION_URL

router = APIRouter()


class PublicRegistrationRequest(BaseModel):
    name: NonBlankStr
    phone: NonBlankStr
    email: EmailStr | None = None
    list_type: ListType = ListType.NORMAL


class PublicRegistrationResponse(BaseModel):
    guest_id: str
    name: str
    event_name: str
    confirmation_code: str
    confirmation_link: str


def get_public_registration_write_model(
    store: EventStore = Depends(get_event_store),
) -> PublicRegistrationWriteModel:
    """Dependency to get public registration write model instance."""
    return PublicRegistrationWriteModel(store=store)


@router.get(PUBLIC_EVENT_URL, response_model=PublicEventResponse)
async def get_public_event(
    event_id: str,
    store: EventStore = Depends(get_event_store),
) -> PublicEventResponse:
    """Event details for the public registration and promoter invite pages."""
    try:
        event = await store.get_event_by_id(event_id)
    except GuestListError as e:
        raise http_error(e) from e
    if event is None:
        raise http_error(EventNotFoundError(event_id))

    stats = event_stats(event)
    return PublicEventResponse(
        id=event.id,
        name=event.name,
        date=event.date,
        location=event.location,
        remaining_spots=stats.remaining_spots,
        status=stats.status,
        accepts_promoters=event.settings.allow_promoter_invites,
    )


@router.post(PUBLIC_REGISTRATION_URL, response_model=PublicRegistrationResponse, status_code=201)
async def register_guest(
    event_id: str,
    request: PublicRegistrationRequest,
    write_model: PublicRegistrationWriteModel = Depends(get_public_registration_write_model),
) -> PublicRegistrationResponse:
    """
    Put yourself on an event's list through its public link.
    The confirmation code in the response is what the guest uses to confirm.
    """
    try:
        result = await write_model.register(
            event_id=event_id,
            name=request.name,
            phone=request.phone,
            email=request.email,
            list_type=request.list_type,
        )
    except GuestListError as e:
        raise http_error(e) from e
    return PublicRegistrationResponse(
        guest_id=result.guest.id,
        name=result.guest.name,
        event_name=result.event.name,
        confirmation_code=result.guest.confirmation_code,
        confirmation_link=result.confirmation_link,
    )
