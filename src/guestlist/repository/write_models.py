"""Helpers shared by every write model.

Mutations never patch stored state in place: they locate the target event in
the full collection, build a transformed copy and return a new collection for
``EventStore.mutate_events`` to persist.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from uuid import uuid4

from src.guestlist.dtos import Event, Guest, PermissionSet, User
from src.guestlist.errors import (
    EventNotFoundError,
    GuestNotFoundError,
    PermissionDeniedError,
)
from src.guestlist.permissions import is_guest_visible, resolve_permissions

logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex}"


def find_event(events: Sequence[Event], event_id: str) -> Event:
    for event in events:
        if event.id == event_id:
            return event
    raise EventNotFoundError(event_id)


def replace_event(
    events: Sequence[Event], event_id: str, transform: Callable[[Event], Event]
) -> list[Event]:
    """New collection with the event ``event_id`` swapped for ``transform(event)``."""
    find_event(events, event_id)
    return [transform(event) if event.id == event_id else event for event in events]


def adjust_guests_added(event: Event, promoter_id: str | None, delta: int) -> Event:
    """Move a promoter's ``guests_added`` counter by ``delta``, never below zero.

    Every path that adds or removes a promoter's guest goes through here.
    Unknown promoters (already deleted) are ignored.
    """
    if promoter_id is None or event.get_promoter(promoter_id) is None:
        return event
    promoters = tuple(
        replace(p, guests_added=max(0, p.guests_added + delta)) if p.id == promoter_id else p
        for p in event.promoters
    )
    return replace(event, promoters=promoters)


def remove_guest(event: Event, guest: Guest) -> Event:
    """Drop ``guest`` from ``event`` and release its promoter's counter."""
    event = replace(event, guests=tuple(g for g in event.guests if g.id != guest.id))
    return adjust_guests_added(event, guest.promoter_id, -1)


def replace_guest(event: Event, guest: Guest) -> Event:
    return replace(
        event,
        guests=tuple(guest if g.id == guest.id else g for g in event.guests),
    )


def require_permission(
    actor: User | None, event: Event, capability: str
) -> PermissionSet:
    """Resolve the actor's permissions on ``event`` and demand ``capability``."""
    permissions = resolve_permissions(actor, event)
    if not getattr(permissions, capability):
        logger.warning(
            "Refused %s on event %s for user %s",
            capability,
            event.id,
            actor.id if actor else None,
        )
        raise PermissionDeniedError(capability)
    return permissions


def require_visible_guest(event: Event, guest_id: str, permissions: PermissionSet) -> Guest:
    """Guest ``guest_id`` of ``event``, provided the actor can see it.

    Guests outside the actor's view are reported as missing.
    """
    guest = event.get_guest(guest_id)
    if guest is None or not is_guest_visible(guest, permissions):
        raise GuestNotFoundError(guest_id)
    return guest
