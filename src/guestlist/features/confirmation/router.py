from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.guestlist.dtos import GuestLookupDTO, GuestStatus
from src.guestlist.errors import GuestListError, GuestNotFoundError
from src.guestlist.features.confirmation.write_model import ConfirmationWriteModel
from src.guestlist.http_errors import http_error
from src.guestlist.repository.read_models import (
    GuestLookupReadModel,
    StoreGuestLookupReadModel,
)
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.urls import (
    CONFIRM_BY_CODE_URL,
    CONFIRM_BY_TOKEN_URL,
    CONFIRMATION_BY_CODE_URL,
    CONFIRMATION_BY_TOKEN_URL,
    DECLINE_BY_CODE_URL,
    DECLINE_BY_TOKEN_URL,
)

router = APIRouter()


class InvitationResponse(BaseModel):
    """What a guest sees when opening their confirmation link or typing their code."""

    guest_name: str
    status: GuestStatus
    confirmation_code: str
    confirmed_at: datetime | None = None
    event_id: str
    event_name: str
    event_date: str
    event_location: str

    @classmethod
    def from_dto(cls, found: GuestLookupDTO) -> "InvitationResponse":
        return cls(
            guest_name=found.guest.name,
            status=found.guest.status,
            confirmation_code=found.guest.confirmation_code,
            confirmed_at=found.guest.confirmed_at,
            event_id=found.event.id,
            event_name=found.event.name,
            event_date=found.event.date,
            event_location=found.event.location,
        )


class ConfirmResponse(BaseModel):
    message: str
    already_confirmed: bool
    invitation: InvitationResponse


class DeclineResponse(BaseModel):
    message: str
    event_name: str


def get_guest_lookup_read_model(
    store: EventStore = Depends(get_event_store),
) -> GuestLookupReadModel:
    """Dependency to get guest lookup read model instance."""
    return StoreGuestLookupReadModel(store=store)


def get_confirmation_write_model(
    store: EventStore = Depends(get_event_store),
) -> ConfirmationWriteModel:
    """Dependency to get confirmation write model instance."""
    return ConfirmationWriteModel(store=store)


async def _lookup(found_coro, identifier: str) -> InvitationResponse:
    try:
        found = await found_coro
    except GuestListError as e:
        raise http_error(e) from e
    if found is None:
        raise http_error(GuestNotFoundError(identifier))
    return InvitationResponse.from_dto(found)


@router.get(CONFIRMATION_BY_TOKEN_URL, response_model=InvitationResponse)
async def get_invitation_by_token(
    token: str,
    read_model: GuestLookupReadModel = Depends(get_guest_lookup_read_model),
) -> InvitationResponse:
    return await _lookup(read_model.get_by_token(token), token)


@router.get(CONFIRMATION_BY_CODE_URL, response_model=InvitationResponse)
async def get_invitation_by_code(
    code: str,
    read_model: GuestLookupReadModel = Depends(get_guest_lookup_read_model),
) -> InvitationResponse:
    """Codes are matched case-insensitively."""
    return await _lookup(read_model.get_by_code(code), code)


async def _confirm(result_coro) -> ConfirmResponse:
    try:
        result = await result_coro
    except GuestListError as e:
        raise http_error(e) from e
    return ConfirmResponse(
        message=result.message,
        already_confirmed=result.already_confirmed,
        invitation=InvitationResponse.from_dto(
            GuestLookupDTO(guest=result.guest, event=result.event)
        ),
    )


async def _decline(declined_coro) -> DeclineResponse:
    try:
        declined = await declined_coro
    except GuestListError as e:
        raise http_error(e) from e
    return DeclineResponse(
        message="You have been removed from the list",
        event_name=declined.event.name,
    )


@router.post(CONFIRM_BY_TOKEN_URL, response_model=ConfirmResponse)
async def confirm_by_token(
    token: str,
    write_model: ConfirmationWriteModel = Depends(get_confirmation_write_model),
) -> ConfirmResponse:
    """
    Confirm presence. Holding the token is the only credential.
    Confirming twice is harmless and reports already_confirmed.
    """
    return await _confirm(write_model.confirm_by_token(token))


@router.post(CONFIRM_BY_CODE_URL, response_model=ConfirmResponse)
async def confirm_by_code(
    code: str,
    write_model: ConfirmationWriteModel = Depends(get_confirmation_write_model),
) -> ConfirmResponse:
    return await _confirm(write_model.confirm_by_code(code))


@router.post(DECLINE_BY_TOKEN_URL, response_model=DeclineResponse)
async def decline_by_token(
    token: str,
    write_model: ConfirmationWriteModel = Depends(get_confirmation_write_model),
) -> DeclineResponse:
    """Decline the invitation, which removes the guest from the list."""
    return await _decline(write_model.decline_by_token(token))


@router.post(DECLINE_BY_CODE_URL, response_model=DeclineResponse)
async def decline_by_code(
    code: str,
    write_model: ConfirmationWriteModel = Depends(get_confirmation_write_model),
) -> DeclineResponse:
    return await _decline(write_model.decline_by_code(code))
