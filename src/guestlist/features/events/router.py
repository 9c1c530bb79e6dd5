from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.guestlist.dependencies import get_current_actor
from src.guestlist.dtos import Event, EventSettings, User
from src.guestlist.errors import EventNotFoundError, GuestListError
from src.guestlist.features.events.write_model import EventUpdateDTO, EventWriteModel
from src.guestlist.http_errors import http_error
from src.guestlist.permissions import (
    accessible_events,
    event_stats,
    filter_visible_guests,
    resolve_permissions,
)
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.schemas import (
    EventDetailResponse,
    EventSettingsBody,
    EventStatsResponse,
    EventSummaryResponse,
    GuestResponse,
    NonBlankStr,
    PermissionSetResponse,
    PromoterResponse,
)
from src.guestlist.urls import EVENT_STATS_URL, EVENT_URL, EVENTS_URL

router = APIRouter()


class CreateEventRequest(BaseModel):
    name: NonBlankStr
    date: NonBlankStr
    location: NonBlankStr
    max_capacity: int = Field(default=100, gt=0)
    settings: EventSettingsBody = EventSettingsBody()


class UpdateEventRequest(BaseModel):
    name: NonBlankStr | None = None
    date: NonBlankStr | None = None
    location: NonBlankStr | None = None
    max_capacity: int | None = Field(default=None, gt=0)
    settings: EventSettingsBody | None = None


class DeleteEventResponse(BaseModel):
    deleted_event_id: str
    selected_event_id: str | None = None


def get_event_write_model(store: EventStore = Depends(get_event_store)) -> EventWriteModel:
    """Dependency to get event write model instance."""
    return EventWriteModel(store=store)


def _settings_from_body(body: EventSettingsBody) -> EventSettings:
    return EventSettings(
        allow_promoter_invites=body.allow_promoter_invites,
        enable_check_in=body.enable_check_in,
    )


def event_detail(event: Event, actor: User) -> EventDetailResponse:
    permissions = resolve_permissions(actor, event)
    summary = EventSummaryResponse.from_dto(event)
    promoters = event.promoters if permissions.can_manage_promoters else ()
    return EventDetailResponse(
        **summary.model_dump(),
        permissions=PermissionSetResponse.from_dto(permissions),
        guests=[GuestResponse.from_dto(g) for g in filter_visible_guests(event, actor, permissions)],
        promoters=[PromoterResponse.from_dto(p) for p in promoters],
        stats=EventStatsResponse.from_dto(event_stats(event)),
    )


async def get_accessible_event(
    event_id: str,
    actor: User = Depends(get_current_actor),
    store: EventStore = Depends(get_event_store),
) -> Event:
    """Dependency loading an event the actor owns or promotes."""
    try:
        event = await store.get_event_by_id(event_id)
    except GuestListError as e:
        raise http_error(e) from e
    if event is None:
        raise http_error(EventNotFoundError(event_id))
    permissions = resolve_permissions(actor, event)
    if not (permissions.is_owner or permissions.is_promoter):
        raise HTTPException(status_code=403, detail="No access to this event")
    return event


@router.get(EVENTS_URL, response_model=list[EventSummaryResponse])
async def list_events(
    actor: User = Depends(get_current_actor),
    store: EventStore = Depends(get_event_store),
) -> list[EventSummaryResponse]:
    """List the events the actor owns or promotes."""
    try:
        events = await store.get_events()
    except GuestListError as e:
        raise http_error(e) from e
    return [EventSummaryResponse.from_dto(e) for e in accessible_events(actor, events)]


@router.post(EVENTS_URL, response_model=EventDetailResponse, status_code=201)
async def create_event(
    request: CreateEventRequest,
    actor: User = Depends(get_current_actor),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventDetailResponse:
    try:
        event = await write_model.create_event(
            actor=actor,
            name=request.name,
            date=request.date,
            location=request.location,
            max_capacity=request.max_capacity,
            settings=_settings_from_body(request.settings),
        )
    except GuestListError as e:
        raise http_error(e) from e
    return event_detail(event, actor)


@router.get(EVENT_URL, response_model=EventDetailResponse)
async def get_event(
    event: Event = Depends(get_accessible_event),
    actor: User = Depends(get_current_actor),
) -> EventDetailResponse:
    """
    Get an event as the actor sees it.
    Promoters only get the guests they added unless they may view all guests.
    """
    return event_detail(event, actor)


@router.get(EVENT_STATS_URL, response_model=EventStatsResponse)
async def get_event_stats(event: Event = Depends(get_accessible_event)) -> EventStatsResponse:
    return EventStatsResponse.from_dto(event_stats(event))


@router.patch(EVENT_URL, response_model=EventDetailResponse)
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    actor: User = Depends(get_current_actor),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventDetailResponse:
    changes = EventUpdateDTO(
        name=request.name,
        date=request.date,
        location=request.location,
        max_capacity=request.max_capacity,
        settings=_settings_from_body(request.settings) if request.settings else None,
    )
    try:
        event = await write_model.update_event(actor, event_id, changes)
    except GuestListError as e:
        raise http_error(e) from e
    return event_detail(event, actor)


@router.delete(EVENT_URL, response_model=DeleteEventResponse)
async def delete_event(
    event_id: str,
    selected_event_id: str | None = None,
    actor: User = Depends(get_current_actor),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> DeleteEventResponse:
    """
    Delete an event with all its guests and promoters.
    Returns the event the client should select next.
    """
    try:
        result = await write_model.delete_event(actor, event_id, selected_event_id)
    except GuestListError as e:
        raise http_error(e) from e
    return DeleteEventResponse(
        deleted_event_id=result.deleted_event_id,
        selected_event_id=result.selected_event_id,
    )
