"""Guest-facing confirmation workflow.

A guest is ``pending`` until confirmed. Declining removes the guest from the
event. The confirmation token or code is the only credential, so these
operations never resolve permissions.
"""

import logging
from collections.abc import Callable
from dataclasses import replace

from src.config.settings import settings
from src.guestlist.dtos import ConfirmationResultDTO, Event, GuestLookupDTO, utcnow
from src.guestlist.errors import GuestNotFoundError, InvalidTransitionError
from src.guestlist.repository.read_models import find_guest_by_code, find_guest_by_token
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import remove_guest, replace_event, replace_guest

logger = logging.getLogger(__name__)

Finder = Callable[[list[Event], str], GuestLookupDTO | None]


class ConfirmationWriteModel:
    def __init__(
        self,
        store: EventStore,
        allow_decline_after_confirm: bool | None = None,
    ) -> None:
        self.store = store
        if allow_decline_after_confirm is None:
            allow_decline_after_confirm = settings.ALLOW_DECLINE_AFTER_CONFIRM
        self.allow_decline_after_confirm = allow_decline_after_confirm

    async def _confirm(self, finder: Finder, identifier: str) -> ConfirmationResultDTO:
        def mutation(events: list[Event]) -> tuple[list[Event], ConfirmationResultDTO]:
            found = finder(events, identifier)
            if found is None:
                raise GuestNotFoundError(identifier)

            if found.guest.confirmed:
                return events, ConfirmationResultDTO(
                    guest=found.guest,
                    event=found.event,
                    already_confirmed=True,
                    message="Presence already confirmed",
                )

            guest = replace(found.guest, confirmed=True, confirmed_at=utcnow())
            new_events = replace_event(
                events, found.event.id, lambda e: replace_guest(e, guest)
            )
            event = next(e for e in new_events if e.id == found.event.id)
            return new_events, ConfirmationResultDTO(
                guest=guest,
                event=event,
                already_confirmed=False,
                message="Presence confirmed",
            )

        result = await self.store.mutate_events(mutation)
        if not result.already_confirmed:
            logger.info("Guest %s confirmed on event %s", result.guest.id, result.event.id)
        return result

    async def _decline(self, finder: Finder, identifier: str) -> GuestLookupDTO:
        def mutation(events: list[Event]) -> tuple[list[Event], GuestLookupDTO]:
            found = finder(events, identifier)
            if found is None:
                raise GuestNotFoundError(identifier)
            if found.guest.confirmed and not self.allow_decline_after_confirm:
                raise InvalidTransitionError("A confirmed guest cannot decline")
            new_events = replace_event(
                events, found.event.id, lambda e: remove_guest(e, found.guest)
            )
            return new_events, found

        declined = await self.store.mutate_events(mutation)
        logger.info(
            "Guest %s declined and left event %s", declined.guest.id, declined.event.id
        )
        return declined

    async def confirm_by_token(self, token: str) -> ConfirmationResultDTO:
        return await self._confirm(find_guest_by_token, token)

    async def confirm_by_code(self, code: str) -> ConfirmationResultDTO:
        return await self._confirm(find_guest_by_code, code)

    async def decline_by_token(self, token: str) -> GuestLookupDTO:
        return await self._decline(find_guest_by_token, token)

    async def decline_by_code(self, code: str) -> GuestLookupDTO:
        return await self._decline(find_guest_by_code, code)
