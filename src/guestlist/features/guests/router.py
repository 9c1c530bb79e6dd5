from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.guestlist.dependencies import get_current_actor
from src.guestlist.dtos import Event, GuestStatus, ListType, User
from src.guestlist.errors import GuestListError
from src.guestlist.features.events.router import get_accessible_event
from src.guestlist.features.guests.write_model import GuestUpdateDTO, GuestWriteModel
from src.guestlist.http_errors import http_error
from src.guestlist.permissions import filter_visible_guests, resolve_permissions
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.schemas import GuestResponse, NonBlankStr
from src.guestlist.urls import (
    GUEST_CHECK_IN_URL,
    GUEST_CONFIRMATION_URL,
    GUEST_URL,
    GUESTS_URL,
)

router = APIRouter()


class AddGuestRequest(BaseModel):
    name: NonBlankStr
    phone: str = ""
    email: EmailStr | None = None
    list_type: ListType = ListType.NORMAL


class UpdateGuestRequest(BaseModel):
    name: NonBlankStr | None = None
    phone: str | None = None
    email: EmailStr | None = None
    list_type: ListType | None = None


class ConfirmationRequest(BaseModel):
    confirmed: bool


class CheckInRequest(BaseModel):
    checked_in: bool


def get_guest_write_model(store: EventStore = Depends(get_event_store)) -> GuestWriteModel:
    """Dependency to get guest write model instance."""
    return GuestWriteModel(store=store)


@router.get(GUESTS_URL, response_model=list[GuestResponse])
async def list_guests(
    list_type: ListType | None = None,
    status: GuestStatus | None = None,
    search: str | None = None,
    event: Event = Depends(get_accessible_event),
    actor: User = Depends(get_current_actor),
) -> list[GuestResponse]:
    """
    List the guests the actor may see, in the order they were added.
    Optional filters narrow by list type, status or a name/phone search.
    """
    guests = filter_visible_guests(event, actor, resolve_permissions(actor, event))
    if list_type is not None:
        guests = [g for g in guests if g.list_type == list_type]
    if status is not None:
        guests = [g for g in guests if g.status == status]
    if search:
        needle = search.strip().lower()
        guests = [g for g in guests if needle in g.name.lower() or needle in g.phone]
    return [GuestResponse.from_dto(g) for g in guests]


@router.post(GUESTS_URL, response_model=GuestResponse, status_code=201)
async def add_guest(
    event_id: str,
    request: AddGuestRequest,
    actor: User = Depends(get_current_actor),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    try:
        guest = await write_model.add_guest(
            actor=actor,
            event_id=event_id,
            name=request.name,
            phone=request.phone,
            email=request.email,
            list_type=request.list_type,
        )
    except GuestListError as e:
        raise http_error(e) from e
    return GuestResponse.from_dto(guest)


@router.patch(GUEST_URL, response_model=GuestResponse)
async def update_guest(
    event_id: str,
    guest_id: str,
    request: UpdateGuestRequest,
    actor: User = Depends(get_current_actor),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    changes = GuestUpdateDTO(
        name=request.name,
        phone=request.phone,
        email=request.email,
        list_type=request.list_type,
    )
    try:
        guest = await write_model.update_guest(actor, event_id, guest_id, changes)
    except GuestListError as e:
        raise http_error(e) from e
    return GuestResponse.from_dto(guest)


@router.put(GUEST_CONFIRMATION_URL, response_model=GuestResponse)
async def set_guest_confirmation(
    event_id: str,
    guest_id: str,
    request: ConfirmationRequest,
    actor: User = Depends(get_current_actor),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    try:
        guest = await write_model.set_confirmed(actor, event_id, guest_id, request.confirmed)
    except GuestListError as e:
        raise http_error(e) from e
    return GuestResponse.from_dto(guest)


@router.put(GUEST_CHECK_IN_URL, response_model=GuestResponse)
async def set_guest_check_in(
    event_id: str,
    guest_id: str,
    request: CheckInRequest,
    actor: User = Depends(get_current_actor),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> GuestResponse:
    try:
        guest = await write_model.set_checked_in(actor, event_id, guest_id, request.checked_in)
    except GuestListError as e:
        raise http_error(e) from e
    return GuestResponse.from_dto(guest)


@router.delete(GUEST_URL, status_code=204)
async def delete_guest(
    event_id: str,
    guest_id: str,
    actor: User = Depends(get_current_actor),
    write_model: GuestWriteModel = Depends(get_guest_write_model),
) -> None:
    try:
        await write_model.delete_guest(actor, event_id, guest_id)
    except GuestListError as e:
        raise http_error(e) from e
