"""Lookups over the stored events.

Both confirmation lookups scan every guest of every event and return the first
match, so they cost O(events x guests). That is fine for a single blob; a
larger deployment would need an index keyed by token and by code.
"""

import abc
from collections.abc import Iterable

from src.guestlist.codes import normalize_code
from src.guestlist.dtos import Event, GuestLookupDTO
from src.guestlist.repository.store import EventStore


def find_guest_by_token(events: Iterable[Event], token: str) -> GuestLookupDTO | None:
    for event in events:
        for guest in event.guests:
            if guest.confirmation_token == token:
                return GuestLookupDTO(guest=guest, event=event)
    return None


def find_guest_by_code(events: Iterable[Event], code: str) -> GuestLookupDTO | None:
    wanted = normalize_code(code)
    if not wanted:
        return None
    for event in events:
        for guest in event.guests:
            if guest.confirmation_code and normalize_code(guest.confirmation_code) == wanted:
                return GuestLookupDTO(guest=guest, event=event)
    return None


class GuestLookupReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_by_token(self, token: str) -> GuestLookupDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_by_code(self, code: str) -> GuestLookupDTO | None:
        raise NotImplementedError


class StoreGuestLookupReadModel(GuestLookupReadModel):
    """Guest lookups against the event store."""

    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def get_by_token(self, token: str) -> GuestLookupDTO | None:
        return find_guest_by_token(await self.store.get_events(), token)

    async def get_by_code(self, code: str) -> GuestLookupDTO | None:
        return find_guest_by_code(await self.store.get_events(), code)
