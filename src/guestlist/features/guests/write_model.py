"""Write model for guests managed by an event's owner or promoters."""

import logging
from dataclasses import dataclass, replace

from src.guestlist.codes import generate_unique_identifiers
from src.guestlist.dtos import (
    Event,
    Guest,
    ListType,
    OwnerAdded,
    PromoterAdded,
    User,
    utcnow,
)
from src.guestlist.errors import FeatureDisabledError, QuotaExceededError
from src.guestlist.permissions import compute_quota
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import (
    adjust_guests_added,
    find_event,
    new_id,
    remove_guest,
    replace_event,
    replace_guest,
    require_permission,
    require_visible_guest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestUpdateDTO:
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    list_type: ListType | None = None


class GuestWriteModel:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def add_guest(
        self,
        actor: User,
        event_id: str,
        name: str,
        phone: str,
        email: str | None = None,
        list_type: ListType = ListType.NORMAL,
    ) -> Guest:
        """Add a pending guest.

        Promoters are held to their quota and the guest is attributed to their
        promoter record; anyone else is recorded as the adding user.
        """

        def mutation(events: list[Event]) -> tuple[list[Event], Guest]:
            event = find_event(events, event_id)
            permissions = require_permission(actor, event, "can_add_guests")
            promoter = permissions.promoter if permissions.is_promoter else None

            if promoter is not None and compute_quota(promoter).exhausted:
                logger.warning("Promoter %s is out of quota on event %s", promoter.id, event_id)
                raise QuotaExceededError(promoter.id, promoter.guest_quota)

            token, code = generate_unique_identifiers(events)
            guest = Guest(
                id=new_id("guest"),
                name=name,
                phone=phone,
                email=email,
                list_type=list_type,
                added_by=PromoterAdded(promoter.id) if promoter else OwnerAdded(actor.id),
                promoter_id=promoter.id if promoter else None,
                confirmation_token=token,
                confirmation_code=code,
            )

            def transform(e: Event) -> Event:
                e = replace(e, guests=(*e.guests, guest))
                return adjust_guests_added(e, guest.promoter_id, 1)

            return replace_event(events, event_id, transform), guest

        guest = await self.store.mutate_events(mutation)
        logger.info("Guest %s added to event %s by %s", guest.id, event_id, actor.id)
        return guest

    async def update_guest(
        self, actor: User, event_id: str, guest_id: str, changes: GuestUpdateDTO
    ) -> Guest:
        def mutation(events: list[Event]) -> tuple[list[Event], Guest]:
            event = find_event(events, event_id)
            permissions = require_permission(actor, event, "can_edit_guests")
            guest = require_visible_guest(event, guest_id, permissions)
            updated = replace(
                guest, **{k: v for k, v in vars(changes).items() if v is not None}
            )
            return replace_event(events, event_id, lambda e: replace_guest(e, updated)), updated

        return await self.store.mutate_events(mutation)

    async def set_confirmed(
        self, actor: User, event_id: str, guest_id: str, confirmed: bool
    ) -> Guest:
        """Mark a guest confirmed or pending.

        Confirming an already confirmed guest keeps the first ``confirmed_at``.
        """

        def mutation(events: list[Event]) -> tuple[list[Event], Guest]:
            event = find_event(events, event_id)
            permissions = require_permission(actor, event, "can_confirm_guests")
            guest = require_visible_guest(event, guest_id, permissions)
            if guest.confirmed == confirmed:
                return events, guest
            updated = replace(
                guest,
                confirmed=confirmed,
                confirmed_at=utcnow() if confirmed else None,
            )
            return replace_event(events, event_id, lambda e: replace_guest(e, updated)), updated

        guest = await self.store.mutate_events(mutation)
        logger.info("Guest %s confirmed=%s by %s", guest_id, confirmed, actor.id)
        return guest

    async def set_checked_in(
        self, actor: User, event_id: str, guest_id: str, checked_in: bool
    ) -> Guest:
        def mutation(events: list[Event]) -> tuple[list[Event], Guest]:
            event = find_event(events, event_id)
            permissions = require_permission(actor, event, "can_check_in_guests")
            if not event.settings.enable_check_in:
                raise FeatureDisabledError(event_id, "check_in")
            guest = require_visible_guest(event, guest_id, permissions)
            updated = replace(guest, checked_in=checked_in)
            return replace_event(events, event_id, lambda e: replace_guest(e, updated)), updated

        guest = await self.store.mutate_events(mutation)
        logger.info("Guest %s checked_in=%s by %s", guest_id, checked_in, actor.id)
        return guest

    async def delete_guest(self, actor: User, event_id: str, guest_id: str) -> Guest:
        def mutation(events: list[Event]) -> tuple[list[Event], Guest]:
            event = find_event(events, event_id)
            permissions = require_permission(actor, event, "can_delete_guests")
            guest = require_visible_guest(event, guest_id, permissions)
            return replace_event(events, event_id, lambda e: remove_guest(e, guest)), guest

        guest = await self.store.mutate_events(mutation)
        logger.info("Guest %s deleted from event %s by %s", guest_id, event_id, actor.id)
        return guest
