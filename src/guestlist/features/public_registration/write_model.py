"""Guest self-registration through an event's public link."""

import logging
from dataclasses import replace

from src.guestlist.codes import confirmation_link, generate_unique_identifiers
from src.guestlist.dtos import (
    Event,
    Guest,
    ListType,
    PublicLinkAdded,
    RegistrationResultDTO,
)
from src.guestlist.errors import CapacityExceededError
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import find_event, new_id, replace_event

logger = logging.getLogger(__name__)


class PublicRegistrationWriteModel:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def register(
        self,
        event_id: str,
        name: str,
        phone: str,
        email: str | None = None,
        list_type: ListType = ListType.NORMAL,
    ) -> RegistrationResultDTO:
        """Put a pending guest on the list.

        Only confirmed guests count against capacity: registration is refused
        once the confirmed count reaches ``max_capacity``. The check runs in the
        same locked cycle as the write.
        """

        def mutation(events: list[Event]) -> tuple[list[Event], RegistrationResultDTO]:
            event = find_event(events, event_id)
            if event.confirmed_count >= event.max_capacity:
                logger.warning("Registration refused, event %s is full", event_id)
                raise CapacityExceededError(event_id, event.max_capacity)

            token, code = generate_unique_identifiers(events)
            guest = Guest(
                id=new_id("guest"),
                name=name,
                phone=phone,
                email=email,
                list_type=list_type,
                added_by=PublicLinkAdded(event.owner_id),
                confirmation_token=token,
                confirmation_code=code,
            )
            new_events = replace_event(
                events, event_id, lambda e: replace(e, guests=(*e.guests, guest))
            )
            return new_events, RegistrationResultDTO(
                guest=guest,
                event=find_event(new_events, event_id),
                confirmation_link=confirmation_link(token),
            )

        result = await self.store.mutate_events(mutation)
        logger.info("Guest %s registered on event %s via public link", result.guest.id, event_id)
        return result
