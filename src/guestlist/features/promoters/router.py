from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field

from src.guestlist.dependencies import get_current_actor
from src.guestlist.dtos import Event, PromoterPermissions, User
from src.guestlist.errors import GuestListError, PromoterNotFoundError
from src.guestlist.features.events.router import get_accessible_event
from src.guestlist.features.promoters.write_model import (
    UNLIMITED,
    PromoterUpdateDTO,
    PromoterWriteModel,
)
from src.guestlist.http_errors import http_error
from src.guestlist.permissions import promoter_stats, resolve_permissions
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.schemas import (
    NonBlankStr,
    PermissionsBody,
    PromoterResponse,
    PromoterStatsResponse,
    UserResponse,
)
from src.guestlist.urls import (
    PROMOTER_INVITE_URL,
    PROMOTER_STATS_URL,
    PROMOTER_URL,
    PROMOTERS_URL,
)

router = APIRouter()


class AddPromoterRequest(BaseModel):
    name: NonBlankStr
    email: EmailStr
    phone: str = ""
    user_id: str | None = None
    permissions: PermissionsBody = PermissionsBody()
    guest_quota: int | None = Field(default=None, ge=0)


class UpdatePromoterRequest(BaseModel):
    name: NonBlankStr | None = None
    email: EmailStr | None = None
    phone: str | None = None
    permissions: PermissionsBody | None = None
    guest_quota: int | None = Field(default=None, ge=0)
    remove_quota: bool = False


class PromoterInviteRequest(BaseModel):
    name: NonBlankStr
    phone: NonBlankStr
    email: EmailStr | None = None


class PromoterInviteResponse(BaseModel):
    promoter: PromoterResponse
    user: UserResponse
    event_name: str


def get_promoter_write_model(
    store: EventStore = Depends(get_event_store),
) -> PromoterWriteModel:
    """Dependency to get promoter write model instance."""
    return PromoterWriteModel(store=store)


def _permissions_from_body(body: PermissionsBody) -> PromoterPermissions:
    return PromoterPermissions(**body.model_dump())


@router.get(PROMOTERS_URL, response_model=list[PromoterResponse])
async def list_promoters(
    event: Event = Depends(get_accessible_event),
    actor: User = Depends(get_current_actor),
) -> list[PromoterResponse]:
    if not resolve_permissions(actor, event).can_manage_promoters:
        raise HTTPException(status_code=403, detail="Permission denied: can_manage_promoters")
    return [PromoterResponse.from_dto(p) for p in event.promoters]


@router.post(PROMOTERS_URL, response_model=PromoterResponse, status_code=201)
async def add_promoter(
    event_id: str,
    request: AddPromoterRequest,
    actor: User = Depends(get_current_actor),
    write_model: PromoterWriteModel = Depends(get_promoter_write_model),
) -> PromoterResponse:
    try:
        promoter = await write_model.add_promoter(
            actor=actor,
            event_id=event_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            user_id=request.user_id,
            permissions=_permissions_from_body(request.permissions),
            guest_quota=request.guest_quota,
        )
    except GuestListError as e:
        raise http_error(e) from e
    return PromoterResponse.from_dto(promoter)


@router.patch(PROMOTER_URL, response_model=PromoterResponse)
async def update_promoter(
    event_id: str,
    promoter_id: str,
    request: UpdatePromoterRequest,
    actor: User = Depends(get_current_actor),
    write_model: PromoterWriteModel = Depends(get_promoter_write_model),
) -> PromoterResponse:
    changes = PromoterUpdateDTO(
        name=request.name,
        email=request.email,
        phone=request.phone,
        permissions=_permissions_from_body(request.permissions) if request.permissions else None,
        guest_quota=UNLIMITED if request.remove_quota else request.guest_quota,
    )
    try:
        promoter = await write_model.update_promoter(actor, event_id, promoter_id, changes)
    except GuestListError as e:
        raise http_error(e) from e
    return PromoterResponse.from_dto(promoter)


@router.delete(PROMOTER_URL, status_code=204)
async def delete_promoter(
    event_id: str,
    promoter_id: str,
    actor: User = Depends(get_current_actor),
    write_model: PromoterWriteModel = Depends(get_promoter_write_model),
) -> None:
    """
    Remove a promoter from the event.
    What happens to their guests follows the configured promoter delete policy.
    """
    try:
        await write_model.delete_promoter(actor, event_id, promoter_id)
    except GuestListError as e:
        raise http_error(e) from e


@router.get(PROMOTER_STATS_URL, response_model=PromoterStatsResponse)
async def get_promoter_stats(
    promoter_id: str,
    event: Event = Depends(get_accessible_event),
    actor: User = Depends(get_current_actor),
) -> PromoterStatsResponse:
    """Guest counts and remaining quota for one promoter; owner or that promoter only."""
    promoter = event.get_promoter(promoter_id)
    if promoter is None:
        raise http_error(PromoterNotFoundError(promoter_id))
    permissions = resolve_permissions(actor, event)
    if not permissions.is_owner and promoter.user_id != actor.id:
        raise HTTPException(status_code=403, detail="Permission denied: promoter stats")
    return PromoterStatsResponse.from_dto(promoter_stats(promoter, event))


@router.post(PROMOTER_INVITE_URL, response_model=PromoterInviteResponse, status_code=201)
async def register_promoter(
    event_id: str,
    request: PromoterInviteRequest,
    write_model: PromoterWriteModel = Depends(get_promoter_write_model),
) -> PromoterInviteResponse:
    """
    Register as a promoter through the event's invite link.
    Creates a promoter user whose id is returned for later requests.
    """
    try:
        registration = await write_model.register_via_invite(
            event_id=event_id,
            name=request.name,
            phone=request.phone,
            email=request.email or "",
        )
    except GuestListError as e:
        raise http_error(e) from e
    return PromoterInviteResponse(
        promoter=PromoterResponse.from_dto(registration.promoter),
        user=UserResponse.from_dto(registration.user),
        event_name=registration.event.name,
    )
