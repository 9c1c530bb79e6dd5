"""Write model for events: create, update, delete and legacy code backfill."""

import logging
from dataclasses import dataclass, replace

from src.guestlist.codes import generate_unique_identifiers
from src.guestlist.dtos import DeleteEventResultDTO, Event, EventSettings, User, UserRole
from src.guestlist.errors import PermissionDeniedError
from src.guestlist.permissions import accessible_events
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import (
    find_event,
    new_id,
    replace_event,
    require_permission,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventUpdateDTO:
    """Fields to change on an event; None leaves a field as it is."""

    name: str | None = None
    date: str | None = None
    location: str | None = None
    max_capacity: int | None = None
    settings: EventSettings | None = None


class EventWriteModel:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def create_event(
        self,
        actor: User,
        name: str,
        date: str,
        location: str,
        max_capacity: int,
        settings: EventSettings | None = None,
    ) -> Event:
        if actor.role != UserRole.OWNER:
            logger.warning("User %s with role %s tried to create an event", actor.id, actor.role)
            raise PermissionDeniedError("create_event")

        event = Event(
            id=new_id("event"),
            name=name,
            date=date,
            location=location,
            max_capacity=max_capacity,
            owner_id=actor.id,
            owner_name=actor.name,
            settings=settings or EventSettings(),
        )
        await self.store.mutate_events(lambda events: ([*events, event], None))
        logger.info("Event %s created by %s", event.id, actor.id)
        return event

    async def update_event(self, actor: User, event_id: str, changes: EventUpdateDTO) -> Event:
        def mutation(events: list[Event]) -> tuple[list[Event], Event]:
            event = find_event(events, event_id)
            require_permission(actor, event, "can_edit_event")
            updates = {
                key: value
                for key, value in vars(changes).items()
                if value is not None
            }
            updated = replace(event, **updates)
            return replace_event(events, event_id, lambda _: updated), updated

        return await self.store.mutate_events(mutation)

    async def delete_event(
        self,
        actor: User,
        event_id: str,
        selected_event_id: str | None = None,
    ) -> DeleteEventResultDTO:
        """Delete an event together with its guests and promoters.

        When the deleted event was the selected one, the selection moves to the
        first event the actor can still access, or to none.
        """

        def mutation(events: list[Event]) -> tuple[list[Event], list[Event]]:
            event = find_event(events, event_id)
            require_permission(actor, event, "can_delete_event")
            remaining = [e for e in events if e.id != event_id]
            return remaining, remaining

        remaining = await self.store.mutate_events(mutation)
        logger.info("Event %s deleted by %s", event_id, actor.id)

        if selected_event_id is not None and selected_event_id != event_id:
            return DeleteEventResultDTO(
                deleted_event_id=event_id, selected_event_id=selected_event_id
            )
        fallback = accessible_events(actor, remaining)
        return DeleteEventResultDTO(
            deleted_event_id=event_id,
            selected_event_id=fallback[0].id if fallback else None,
        )

    async def backfill_confirmation_codes(self) -> int:
        """Give every stored guest without a confirmation code a fresh one."""

        def mutation(events: list[Event]) -> tuple[list[Event], int]:
            filled: list[str] = []
            new_events = []
            for event in events:
                guests = []
                for guest in event.guests:
                    if not guest.confirmation_code:
                        _, code = generate_unique_identifiers(events, reserved_codes=filled)
                        filled.append(code)
                        guest = replace(guest, confirmation_code=code)
                    guests.append(guest)
                new_events.append(replace(event, guests=tuple(guests)))
            return new_events, len(filled)

        count = await self.store.mutate_events(mutation)
        if count:
            logger.info("Backfilled %d confirmation codes", count)
        return count
