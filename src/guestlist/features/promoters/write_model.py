"""Write model for promoters.

Owners add, edit and remove promoters; anyone holding an event's invite link
can register themselves as a promoter while the event allows it.
"""

import logging
from dataclasses import dataclass, replace

from src.config.settings import PromoterDeletePolicy, settings
from src.guestlist.dtos import (
    DEFAULT_PROMOTER_PERMISSIONS,
    Event,
    OwnerAdded,
    Promoter,
    PromoterPermissions,
    PromoterRegistrationDTO,
    User,
    UserRole,
)
from src.guestlist.errors import (
    EventNotFoundError,
    FeatureDisabledError,
    InvalidTransitionError,
    PromoterNotFoundError,
)
from src.guestlist.features.users.write_model import default_email
from src.guestlist.permissions import added_by_promoter
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import (
    find_event,
    new_id,
    replace_event,
    require_permission,
)

logger = logging.getLogger(__name__)

# Distinguishes "remove the quota" from "leave the quota alone"
UNLIMITED = -1


@dataclass(frozen=True)
class PromoterUpdateDTO:
    """Fields to change on a promoter; None leaves a field as it is.

    ``guest_quota=UNLIMITED`` removes the quota.
    """

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    permissions: PromoterPermissions | None = None
    guest_quota: int | None = None


def _check_new_promoter_user(event: Event, user_id: str) -> None:
    if user_id == event.owner_id:
        raise InvalidTransitionError("The event owner cannot be a promoter of the event")
    if any(p.user_id == user_id for p in event.promoters):
        raise InvalidTransitionError(f"User '{user_id}' is already a promoter of the event")


def _release_promoter_guests(
    event: Event, promoter: Promoter, policy: PromoterDeletePolicy
) -> Event:
    """Deal with the guests a promoter added before the promoter goes away."""
    own_guests = [
        g
        for g in event.guests
        if g.promoter_id == promoter.id or added_by_promoter(g, promoter.id)
    ]
    if not own_guests:
        return event

    if policy == PromoterDeletePolicy.FORBID:
        raise InvalidTransitionError(
            f"Promoter '{promoter.id}' still has {len(own_guests)} guests on the list"
        )
    if policy == PromoterDeletePolicy.CASCADE:
        own_ids = {g.id for g in own_guests}
        return replace(event, guests=tuple(g for g in event.guests if g.id not in own_ids))

    # Reassign to the owner so no guest points at a missing promoter
    own_ids = {g.id for g in own_guests}
    guests = tuple(
        replace(g, added_by=OwnerAdded(event.owner_id), promoter_id=None) if g.id in own_ids else g
        for g in event.guests
    )
    return replace(event, guests=guests)


def _promoter_user(name: str, email: str, phone: str) -> User:
    return User(
        id=new_id(UserRole.PROMOTER.value),
        name=name,
        email=email or default_email(name),
        phone=phone,
        role=UserRole.PROMOTER,
    )


class PromoterWriteModel:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def _save_user(self, user: User) -> None:
        await self.store.mutate_users(lambda users: ([*users, user], None))

    async def add_promoter(
        self,
        actor: User,
        event_id: str,
        name: str,
        email: str,
        phone: str = "",
        user_id: str | None = None,
        permissions: PromoterPermissions = DEFAULT_PROMOTER_PERMISSIONS,
        guest_quota: int | None = None,
    ) -> Promoter:
        """Add a promoter to an event.

        Without ``user_id`` a promoter user is created for the person.
        """
        event = await self.store.get_event_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        require_permission(actor, event, "can_manage_promoters")
        # Only stored once the promoter itself is
        new_user = _promoter_user(name, email, phone) if user_id is None else None
        if new_user is not None:
            user_id = new_user.id

        def mutation(events: list[Event]) -> tuple[list[Event], Promoter]:
            event = find_event(events, event_id)
            require_permission(actor, event, "can_manage_promoters")
            _check_new_promoter_user(event, user_id)
            promoter = Promoter(
                id=new_id("promoter"),
                user_id=user_id,
                event_id=event_id,
                name=name,
                email=email,
                phone=phone,
                permissions=permissions,
                guest_quota=guest_quota,
                invited_by=actor.id,
            )
            new_events = replace_event(
                events, event_id, lambda e: replace(e, promoters=(*e.promoters, promoter))
            )
            return new_events, promoter

        promoter = await self.store.mutate_events(mutation)
        if new_user is not None:
            await self._save_user(new_user)
        logger.info("Promoter %s added to event %s", promoter.id, event_id)
        return promoter

    async def update_promoter(
        self, actor: User, event_id: str, promoter_id: str, changes: PromoterUpdateDTO
    ) -> Promoter:
        def mutation(events: list[Event]) -> tuple[list[Event], Promoter]:
            event = find_event(events, event_id)
            require_permission(actor, event, "can_manage_promoters")
            promoter = event.get_promoter(promoter_id)
            if promoter is None:
                raise PromoterNotFoundError(promoter_id)

            updates = {k: v for k, v in vars(changes).items() if v is not None}
            if updates.get("guest_quota") == UNLIMITED:
                updates["guest_quota"] = None
            updated = replace(promoter, **updates)

            def transform(e: Event) -> Event:
                return replace(
                    e, promoters=tuple(updated if p.id == promoter_id else p for p in e.promoters)
                )

            return replace_event(events, event_id, transform), updated

        return await self.store.mutate_events(mutation)

    async def delete_promoter(
        self,
        actor: User,
        event_id: str,
        promoter_id: str,
        policy: PromoterDeletePolicy | None = None,
    ) -> Promoter:
        policy = policy or settings.PROMOTER_DELETE_POLICY

        def mutation(events: list[Event]) -> tuple[list[Event], Promoter]:
            event = find_event(events, event_id)
            require_permission(actor, event, "can_manage_promoters")
            promoter = event.get_promoter(promoter_id)
            if promoter is None:
                raise PromoterNotFoundError(promoter_id)

            def transform(e: Event) -> Event:
                e = _release_promoter_guests(e, promoter, policy)
                return replace(e, promoters=tuple(p for p in e.promoters if p.id != promoter_id))

            return replace_event(events, event_id, transform), promoter

        promoter = await self.store.mutate_events(mutation)
        logger.info(
            "Promoter %s removed from event %s (%s)", promoter_id, event_id, policy.value
        )
        return promoter

    async def register_via_invite(
        self, event_id: str, name: str, phone: str, email: str = ""
    ) -> PromoterRegistrationDTO:
        """Self-registration through an event's promoter invite link."""
        event = await self.store.get_event_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if not event.settings.allow_promoter_invites:
            raise FeatureDisabledError(event_id, "promoter_invites")

        user = _promoter_user(name, email, phone)

        def mutation(events: list[Event]) -> tuple[list[Event], PromoterRegistrationDTO]:
            event = find_event(events, event_id)
            if not event.settings.allow_promoter_invites:
                raise FeatureDisabledError(event_id, "promoter_invites")
            promoter = Promoter(
                id=new_id("promoter"),
                user_id=user.id,
                event_id=event_id,
                name=name,
                email=user.email,
                phone=phone,
                invited_by=event.owner_id,
            )
            new_events = replace_event(
                events, event_id, lambda e: replace(e, promoters=(*e.promoters, promoter))
            )
            return new_events, PromoterRegistrationDTO(
                promoter=promoter, user=user, event=find_event(new_events, event_id)
            )

        registration = await self.store.mutate_events(mutation)
        await self._save_user(user)
        logger.info(
            "Promoter %s registered on event %s via invite link",
            registration.promoter.id,
            event_id,
        )
        return registration
