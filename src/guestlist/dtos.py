"""Guest list entities.

Entities are immutable snapshots: every mutation builds new objects with
``dataclasses.replace`` and the whole events collection is written back.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class UserRole(str, Enum):
    OWNER = "owner"
    PROMOTER = "promoter"
    GUEST = "guest"


class ListType(str, Enum):
    NORMAL = "Normal"
    VIP = "VIP"
    PARTNERS = "Parceiros"


class GuestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"


class EventStatus(str, Enum):
    OPEN = "open"
    ALMOST_FULL = "almost_full"
    FULL = "full"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole
    phone: str = ""
    created_at: datetime = field(default_factory=utcnow)


# Who put a guest on the list. Visibility for promoters only ever matches
# PromoterAdded, so guests from the public link stay hidden from them.
@dataclass(frozen=True)
class OwnerAdded:
    user_id: str
    kind: Literal["owner"] = "owner"


@dataclass(frozen=True)
class PromoterAdded:
    promoter_id: str
    kind: Literal["promoter"] = "promoter"


@dataclass(frozen=True)
class PublicLinkAdded:
    owner_id: str
    kind: Literal["public_link"] = "public_link"


AddedBy = Annotated[OwnerAdded | PromoterAdded | PublicLinkAdded, Field(discriminator="kind")]


@dataclass(frozen=True)
class Guest:
    id: str
    name: str
    phone: str
    added_by: AddedBy
    confirmation_token: str
    confirmation_code: str = ""
    email: str | None = None
    confirmed: bool = False
    checked_in: bool = False
    list_type: ListType = ListType.NORMAL
    promoter_id: str | None = None
    timestamp: datetime = field(default_factory=utcnow)
    confirmed_at: datetime | None = None

    @property
    def status(self) -> GuestStatus:
        if self.checked_in:
            return GuestStatus.CHECKED_IN
        if self.confirmed:
            return GuestStatus.CONFIRMED
        return GuestStatus.PENDING


@dataclass(frozen=True)
class PromoterPermissions:
    can_add_guests: bool = True
    can_confirm_guests: bool = True
    can_check_in_guests: bool = True
    can_view_all_guests: bool = False
    can_edit_guests: bool = False
    can_delete_guests: bool = False


DEFAULT_PROMOTER_PERMISSIONS = PromoterPermissions()


@dataclass(frozen=True)
class Promoter:
    id: str
    user_id: str
    event_id: str
    name: str
    invited_by: str
    email: str = ""
    phone: str = ""
    permissions: PromoterPermissions = DEFAULT_PROMOTER_PERMISSIONS
    guest_quota: int | None = None
    guests_added: int = 0
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class EventSettings:
    allow_promoter_invites: bool = True
    enable_check_in: bool = True


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    date: str
    location: str
    max_capacity: int
    owner_id: str
    owner_name: str
    guests: tuple[Guest, ...] = ()
    promoters: tuple[Promoter, ...] = ()
    settings: EventSettings = EventSettings()
    created_at: datetime = field(default_factory=utcnow)

    @property
    def confirmed_count(self) -> int:
        return sum(1 for guest in self.guests if guest.confirmed)

    def get_guest(self, guest_id: str) -> Guest | None:
        return next((g for g in self.guests if g.id == guest_id), None)

    def get_promoter(self, promoter_id: str) -> Promoter | None:
        return next((p for p in self.promoters if p.id == promoter_id), None)


@dataclass(frozen=True)
class PermissionSet:
    """Effective capabilities of one user over one event."""

    is_owner: bool = False
    is_promoter: bool = False
    is_guest: bool = False
    can_add_guests: bool = False
    can_confirm_guests: bool = False
    can_check_in_guests: bool = False
    can_view_all_guests: bool = False
    can_edit_guests: bool = False
    can_delete_guests: bool = False
    can_manage_promoters: bool = False
    can_edit_event: bool = False
    can_delete_event: bool = False
    # Bound promoter record, used for quota and visibility
    promoter: Promoter | None = None


@dataclass(frozen=True)
class QuotaDTO:
    has_quota: bool
    # None means unlimited
    remaining: int | None

    @property
    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 0


@dataclass(frozen=True)
class PromoterStatsDTO:
    total: int
    confirmed: int
    checked_in: int
    has_quota: bool
    remaining: int | None


@dataclass(frozen=True)
class EventStatsDTO:
    confirmed_count: int
    checked_in_count: int
    total_guests: int
    remaining_spots: int
    fill_percentage: float
    status: EventStatus


@dataclass(frozen=True)
class GuestLookupDTO:
    """A guest found through a public confirmation identifier, with its event."""

    guest: Guest
    event: Event


@dataclass(frozen=True)
class ConfirmationResultDTO:
    guest: Guest
    event: Event
    already_confirmed: bool
    message: str


@dataclass(frozen=True)
class RegistrationResultDTO:
    guest: Guest
    event: Event
    confirmation_link: str


@dataclass(frozen=True)
class PromoterRegistrationDTO:
    promoter: Promoter
    user: User
    event: Event


@dataclass(frozen=True)
class DeleteEventResultDTO:
    deleted_event_id: str
    # Event to show next, None when the actor has no accessible event left
    selected_event_id: str | None
