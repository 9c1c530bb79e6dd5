"""Permission resolution and the read projections built on it.

Everything here is pure: callers resolve again from the latest snapshot
before every mutation instead of holding on to a ``PermissionSet``.
"""

from collections.abc import Iterable

from src.guestlist.dtos import (
    Event,
    EventStatsDTO,
    EventStatus,
    Guest,
    PermissionSet,
    Promoter,
    PromoterAdded,
    PromoterStatsDTO,
    QuotaDTO,
    User,
    UserRole,
)

ALMOST_FULL_PERCENTAGE = 80.0


def resolve_permissions(user: User | None, event: Event | None) -> PermissionSet:
    if user is None or event is None:
        return PermissionSet()

    # Ownership wins over any promoter record for the same user
    if user.id == event.owner_id:
        return PermissionSet(
            is_owner=True,
            can_add_guests=True,
            can_confirm_guests=True,
            can_check_in_guests=True,
            can_view_all_guests=True,
            can_edit_guests=True,
            can_delete_guests=True,
            can_manage_promoters=True,
            can_edit_event=True,
            can_delete_event=True,
        )

    promoter = next((p for p in event.promoters if p.user_id == user.id), None)
    if promoter is not None:
        permissions = promoter.permissions
        return PermissionSet(
            is_promoter=True,
            can_add_guests=permissions.can_add_guests,
            can_confirm_guests=permissions.can_confirm_guests,
            can_check_in_guests=permissions.can_check_in_guests,
            can_view_all_guests=permissions.can_view_all_guests,
            can_edit_guests=permissions.can_edit_guests,
            can_delete_guests=permissions.can_delete_guests,
            promoter=promoter,
        )

    return PermissionSet(is_guest=user.role == UserRole.GUEST)


def added_by_promoter(guest: Guest, promoter_id: str) -> bool:
    return isinstance(guest.added_by, PromoterAdded) and guest.added_by.promoter_id == promoter_id


def is_guest_visible(guest: Guest, permissions: PermissionSet) -> bool:
    if permissions.can_view_all_guests:
        return True
    if permissions.is_promoter and permissions.promoter is not None:
        return added_by_promoter(guest, permissions.promoter.id)
    return False


def filter_visible_guests(
    event: Event, user: User | None, permissions: PermissionSet
) -> list[Guest]:
    """Guests of ``event`` the actor may see, in insertion order."""
    if user is None:
        return []
    return [guest for guest in event.guests if is_guest_visible(guest, permissions)]


def compute_quota(promoter: Promoter) -> QuotaDTO:
    if promoter.guest_quota is None:
        return QuotaDTO(has_quota=False, remaining=None)
    # Can go negative if guests were added past the quota
    return QuotaDTO(has_quota=True, remaining=promoter.guest_quota - promoter.guests_added)


def promoter_stats(promoter: Promoter, event: Event) -> PromoterStatsDTO:
    own_guests = [g for g in event.guests if added_by_promoter(g, promoter.id)]
    quota = compute_quota(promoter)
    return PromoterStatsDTO(
        total=len(own_guests),
        confirmed=sum(1 for g in own_guests if g.confirmed),
        checked_in=sum(1 for g in own_guests if g.checked_in),
        has_quota=quota.has_quota,
        remaining=quota.remaining,
    )


def event_stats(event: Event) -> EventStatsDTO:
    confirmed = event.confirmed_count
    if event.max_capacity > 0:
        fill_percentage = confirmed * 100 / event.max_capacity
    else:
        fill_percentage = 100.0

    if fill_percentage >= 100:
        status = EventStatus.FULL
    elif fill_percentage >= ALMOST_FULL_PERCENTAGE:
        status = EventStatus.ALMOST_FULL
    else:
        status = EventStatus.OPEN

    return EventStatsDTO(
        confirmed_count=confirmed,
        checked_in_count=sum(1 for g in event.guests if g.checked_in),
        total_guests=len(event.guests),
        remaining_spots=event.max_capacity - confirmed,
        fill_percentage=fill_percentage,
        status=status,
    )


def accessible_events(user: User | None, events: Iterable[Event]) -> list[Event]:
    """Events ``user`` owns or promotes, in stored order."""
    if user is None:
        return []
    return [
        event
        for event in events
        if event.owner_id == user.id or any(p.user_id == user.id for p in event.promoters)
    ]
