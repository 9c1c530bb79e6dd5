"""Request field types and response bodies shared by the guest list routers."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, StringConstraints

from src.guestlist.codes import (
    confirmation_link,
    promoter_invite_link,
    public_registration_link,
)
from src.guestlist.dtos import (
    Event,
    EventStatsDTO,
    EventStatus,
    Guest,
    GuestStatus,
    ListType,
    PermissionSet,
    Promoter,
    PromoterStatsDTO,
    User,
    UserRole,
)

# Surrounding whitespace is stripped before the length check
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    role: UserRole
    created_at: datetime

    @classmethod
    def from_dto(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            created_at=user.created_at,
        )


class PermissionsBody(BaseModel):
    can_add_guests: bool = True
    can_confirm_guests: bool = True
    can_check_in_guests: bool = True
    can_view_all_guests: bool = False
    can_edit_guests: bool = False
    can_delete_guests: bool = False


class GuestResponse(BaseModel):
    id: str
    name: str
    phone: str
    email: str | None = None
    list_type: ListType
    status: GuestStatus
    confirmed: bool
    checked_in: bool
    added_by: str  # "owner", "promoter" or "public_link"
    promoter_id: str | None = None
    confirmation_code: str
    confirmation_link: str
    timestamp: datetime
    confirmed_at: datetime | None = None

    @classmethod
    def from_dto(cls, guest: Guest) -> "GuestResponse":
        return cls(
            id=guest.id,
            name=guest.name,
            phone=guest.phone,
            email=guest.email,
            list_type=guest.list_type,
            status=guest.status,
            confirmed=guest.confirmed,
            checked_in=guest.checked_in,
            added_by=guest.added_by.kind,
            promoter_id=guest.promoter_id,
            confirmation_code=guest.confirmation_code,
            confirmation_link=confirmation_link(guest.confirmation_token),
            timestamp=guest.timestamp,
            confirmed_at=guest.confirmed_at,
        )


class PromoterResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    name: str
    email: str
    phone: str
    permissions: PermissionsBody
    guest_quota: int | None = None
    guests_added: int
    invited_by: str
    created_at: datetime

    @classmethod
    def from_dto(cls, promoter: Promoter) -> "PromoterResponse":
        perms = promoter.permissions
        return cls(
            id=promoter.id,
            user_id=promoter.user_id,
            event_id=promoter.event_id,
            name=promoter.name,
            email=promoter.email,
            phone=promoter.phone,
            permissions=PermissionsBody(
                can_add_guests=perms.can_add_guests,
                can_confirm_guests=perms.can_confirm_guests,
                can_check_in_guests=perms.can_check_in_guests,
                can_view_all_guests=perms.can_view_all_guests,
                can_edit_guests=perms.can_edit_guests,
                can_delete_guests=perms.can_delete_guests,
            ),
            guest_quota=promoter.guest_quota,
            guests_added=promoter.guests_added,
            invited_by=promoter.invited_by,
            created_at=promoter.created_at,
        )


class PromoterStatsResponse(BaseModel):
    total: int
    confirmed: int
    checked_in: int
    has_quota: bool
    remaining: int | None = None

    @classmethod
    def from_dto(cls, stats: PromoterStatsDTO) -> "PromoterStatsResponse":
        return cls(
            total=stats.total,
            confirmed=stats.confirmed,
            checked_in=stats.checked_in,
            has_quota=stats.has_quota,
            remaining=stats.remaining,
        )


class EventStatsResponse(BaseModel):
    confirmed_count: int
    checked_in_count: int
    total_guests: int
    remaining_spots: int
    fill_percentage: float
    status: EventStatus

    @classmethod
    def from_dto(cls, stats: EventStatsDTO) -> "EventStatsResponse":
        return cls(
            confirmed_count=stats.confirmed_count,
            checked_in_count=stats.checked_in_count,
            total_guests=stats.total_guests,
            remaining_spots=stats.remaining_spots,
            fill_percentage=stats.fill_percentage,
            status=stats.status,
        )


class PermissionSetResponse(BaseModel):
    is_owner: bool
    is_promoter: bool
    is_guest: bool
    can_add_guests: bool
    can_confirm_guests: bool
    can_check_in_guests: bool
    can_view_all_guests: bool
    can_edit_guests: bool
    can_delete_guests: bool
    can_manage_promoters: bool
    can_edit_event: bool
    can_delete_event: bool
    promoter_id: str | None = None

    @classmethod
    def from_dto(cls, permissions: PermissionSet) -> "PermissionSetResponse":
        return cls(
            is_owner=permissions.is_owner,
            is_promoter=permissions.is_promoter,
            is_guest=permissions.is_guest,
            can_add_guests=permissions.can_add_guests,
            can_confirm_guests=permissions.can_confirm_guests,
            can_check_in_guests=permissions.can_check_in_guests,
            can_view_all_guests=permissions.can_view_all_guests,
            can_edit_guests=permissions.can_edit_guests,
            can_delete_guests=permissions.can_delete_guests,
            can_manage_promoters=permissions.can_manage_promoters,
            can_edit_event=permissions.can_edit_event,
            can_delete_event=permissions.can_delete_event,
            promoter_id=permissions.promoter.id if permissions.promoter else None,
        )


class EventSettingsBody(BaseModel):
    allow_promoter_invites: bool = True
    enable_check_in: bool = True


class EventSummaryResponse(BaseModel):
    id: str
    name: str
    date: str
    location: str
    max_capacity: int
    owner_id: str
    owner_name: str
    settings: EventSettingsBody
    created_at: datetime
    public_registration_link: str
    promoter_invite_link: str

    @classmethod
    def from_dto(cls, event: Event) -> "EventSummaryResponse":
        return cls(
            id=event.id,
            name=event.name,
            date=event.date,
            location=event.location,
            max_capacity=event.max_capacity,
            owner_id=event.owner_id,
            owner_name=event.owner_name,
            settings=EventSettingsBody(
                allow_promoter_invites=event.settings.allow_promoter_invites,
                enable_check_in=event.settings.enable_check_in,
            ),
            created_at=event.created_at,
            public_registration_link=public_registration_link(event.id),
            promoter_invite_link=promoter_invite_link(event.id),
        )


class EventDetailResponse(EventSummaryResponse):
    """An event as one actor sees it: only the guests they may view."""

    permissions: PermissionSetResponse
    guests: list[GuestResponse]
    promoters: list[PromoterResponse]
    stats: EventStatsResponse


class PublicEventResponse(BaseModel):
    """What the public registration page shows."""

    id: str
    name: str
    date: str
    location: str
    remaining_spots: int
    status: EventStatus
    accepts_promoters: bool
