"""In-memory models for testing - no database required."""

import asyncio
from collections.abc import Sequence

from src.guestlist.dtos import (
    Event,
    EventSettings,
    Guest,
    OwnerAdded,
    Promoter,
    PromoterAdded,
    PromoterPermissions,
    PublicLinkAdded,
    User,
    UserRole,
)
from src.guestlist.repository.store import EventStore


class InMemoryEventStore(EventStore):
    """Event store keeping its blobs in instance attributes."""

    def __init__(
        self,
        events: Sequence[Event] = (),
        users: Sequence[User] = (),
        current_user: User | None = None,
    ) -> None:
        super().__init__(lock=asyncio.Lock())
        self.events: list[Event] = list(events)
        self.users: list[User] = list(users)
        self.current_user = current_user
        self.save_count = 0

    async def get_events(self) -> list[Event]:
        return list(self.events)

    async def save_events(self, events: Sequence[Event]) -> None:
        self.events = list(events)
        self.save_count += 1

    async def get_current_user(self) -> User | None:
        return self.current_user

    async def set_current_user(self, user: User | None) -> None:
        self.current_user = user

    async def get_users(self) -> list[User]:
        return list(self.users)

    async def save_users(self, users: Sequence[User]) -> None:
        self.users = list(users)

    async def clear_all(self) -> None:
        self.events = []
        self.users = []
        self.current_user = None


# =============================================================================
# Factories
# =============================================================================


def make_user(user_id: str = "owner-1", role: UserRole = UserRole.OWNER, name: str = "Olivia") -> User:
    return User(id=user_id, name=name, email=f"{user_id}@example.com", role=role)


def make_promoter(
    promoter_id: str = "promoter-a",
    user_id: str = "user-a",
    event_id: str = "event-1",
    permissions: PromoterPermissions = PromoterPermissions(),
    guest_quota: int | None = None,
    guests_added: int = 0,
) -> Promoter:
    return Promoter(
        id=promoter_id,
        user_id=user_id,
        event_id=event_id,
        name=f"Promoter {promoter_id}",
        email=f"{user_id}@example.com",
        invited_by="owner-1",
        permissions=permissions,
        guest_quota=guest_quota,
        guests_added=guests_added,
    )


def make_guest(
    guest_id: str,
    added_by: OwnerAdded | PromoterAdded | PublicLinkAdded,
    confirmed: bool = False,
    checked_in: bool = False,
    code: str | None = None,
) -> Guest:
    promoter_id = added_by.promoter_id if isinstance(added_by, PromoterAdded) else None
    return Guest(
        id=guest_id,
        name=f"Guest {guest_id}",
        phone="+5511999990000",
        added_by=added_by,
        promoter_id=promoter_id,
        confirmed=confirmed,
        checked_in=checked_in,
        confirmation_token=f"token-{guest_id}",
        confirmation_code=code if code is not None else f"CONF-{guest_id[-6:].upper():0>6}",
    )


def make_event(
    event_id: str = "event-1",
    owner_id: str = "owner-1",
    guests: Sequence[Guest] = (),
    promoters: Sequence[Promoter] = (),
    max_capacity: int = 100,
    settings: EventSettings = EventSettings(),
) -> Event:
    return Event(
        id=event_id,
        name=f"Party {event_id}",
        date="2026-12-31",
        location="Club Aurora",
        max_capacity=max_capacity,
        owner_id=owner_id,
        owner_name="Olivia",
        guests=tuple(guests),
        promoters=tuple(promoters),
        settings=settings,
    )
