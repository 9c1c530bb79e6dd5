"""Tests for GuestWriteModel."""

import pytest

from src.guestlist.dtos import (
    EventSettings,
    ListType,
    OwnerAdded,
    PromoterAdded,
    PromoterPermissions,
    PublicLinkAdded,
    UserRole,
)
from src.guestlist.errors import (
    FeatureDisabledError,
    GuestNotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
)
from src.guestlist.features.guests.write_model import GuestUpdateDTO, GuestWriteModel
from src.guestlist.tests.inmemory_models import (
    InMemoryEventStore,
    make_event,
    make_guest,
    make_promoter,
    make_user,
)

OWNER = make_user("owner-1")
PROMOTER_USER = make_user("user-a", UserRole.PROMOTER, name="Ana")
EDITOR_PERMISSIONS = PromoterPermissions(can_edit_guests=True, can_delete_guests=True)


def promoter_event(**promoter_kwargs):
    return make_event(promoters=[make_promoter(**promoter_kwargs)])


@pytest.mark.asyncio
async def test_owner_adds_pending_guest():
    store = InMemoryEventStore(events=[make_event()])

    guest = await GuestWriteModel(store).add_guest(
        OWNER, "event-1", "Carla", "+5511911112222", list_type=ListType.VIP
    )

    assert guest.added_by == OwnerAdded("owner-1")
    assert guest.promoter_id is None
    assert not guest.confirmed and not guest.checked_in
    assert guest.list_type == ListType.VIP
    assert guest.confirmation_code.startswith("CONF-")
    assert store.events[0].guests == (guest,)


@pytest.mark.asyncio
async def test_promoter_guest_is_attributed_and_counted():
    store = InMemoryEventStore(events=[promoter_event(guest_quota=2)])

    guest = await GuestWriteModel(store).add_guest(PROMOTER_USER, "event-1", "Carla", "+55")

    assert guest.added_by == PromoterAdded("promoter-a")
    assert guest.promoter_id == "promoter-a"
    assert store.events[0].promoters[0].guests_added == 1


@pytest.mark.asyncio
async def test_promoter_out_of_quota_is_refused():
    store = InMemoryEventStore(events=[promoter_event(guest_quota=1, guests_added=1)])

    with pytest.raises(QuotaExceededError):
        await GuestWriteModel(store).add_guest(PROMOTER_USER, "event-1", "Carla", "+55")

    assert store.events[0].guests == ()
    assert store.save_count == 0


@pytest.mark.asyncio
async def test_promoter_with_zero_quota_cannot_add():
    store = InMemoryEventStore(events=[promoter_event(guest_quota=0)])

    with pytest.raises(QuotaExceededError):
        await GuestWriteModel(store).add_guest(PROMOTER_USER, "event-1", "Carla", "+55")


@pytest.mark.asyncio
async def test_promoter_quota_fills_up():
    store = InMemoryEventStore(events=[promoter_event(guest_quota=2)])
    write_model = GuestWriteModel(store)

    await write_model.add_guest(PROMOTER_USER, "event-1", "One", "+55")
    await write_model.add_guest(PROMOTER_USER, "event-1", "Two", "+55")
    with pytest.raises(QuotaExceededError):
        await write_model.add_guest(PROMOTER_USER, "event-1", "Three", "+55")

    assert len(store.events[0].guests) == 2


@pytest.mark.asyncio
async def test_stranger_cannot_add_guest():
    store = InMemoryEventStore(events=[make_event()])

    with pytest.raises(PermissionDeniedError):
        await GuestWriteModel(store).add_guest(make_user("stranger"), "event-1", "Carla", "+55")


@pytest.mark.asyncio
async def test_update_guest_by_owner():
    event = make_event(guests=[make_guest("g1", PublicLinkAdded("owner-1"))])
    store = InMemoryEventStore(events=[event])

    updated = await GuestWriteModel(store).update_guest(
        OWNER, "event-1", "g1", GuestUpdateDTO(name="Renamed", email="r@example.com")
    )

    assert updated.name == "Renamed"
    assert updated.email == "r@example.com"
    assert updated.phone == event.guests[0].phone
    assert store.events[0].guests == (updated,)


@pytest.mark.asyncio
async def test_promoter_cannot_touch_guests_outside_their_view():
    event = make_event(
        guests=[make_guest("g-public", PublicLinkAdded("owner-1"))],
        promoters=[make_promoter(permissions=EDITOR_PERMISSIONS)],
    )
    store = InMemoryEventStore(events=[event])

    with pytest.raises(GuestNotFoundError):
        await GuestWriteModel(store).update_guest(
            PROMOTER_USER, "event-1", "g-public", GuestUpdateDTO(name="x")
        )


@pytest.mark.asyncio
async def test_default_promoter_cannot_edit():
    event = make_event(
        guests=[make_guest("g1", PromoterAdded("promoter-a"))],
        promoters=[make_promoter()],
    )
    store = InMemoryEventStore(events=[event])

    with pytest.raises(PermissionDeniedError):
        await GuestWriteModel(store).update_guest(
            PROMOTER_USER, "event-1", "g1", GuestUpdateDTO(name="x")
        )


@pytest.mark.asyncio
async def test_confirm_sets_and_keeps_confirmed_at():
    store = InMemoryEventStore(events=[make_event(guests=[make_guest("g1", OwnerAdded("owner-1"))])])
    write_model = GuestWriteModel(store)

    first = await write_model.set_confirmed(OWNER, "event-1", "g1", True)
    again = await write_model.set_confirmed(OWNER, "event-1", "g1", True)

    assert first.confirmed
    assert first.confirmed_at is not None
    assert again.confirmed_at == first.confirmed_at


@pytest.mark.asyncio
async def test_unconfirm_clears_confirmed_at():
    guest = make_guest("g1", OwnerAdded("owner-1"), confirmed=True)
    store = InMemoryEventStore(events=[make_event(guests=[guest])])

    updated = await GuestWriteModel(store).set_confirmed(OWNER, "event-1", "g1", False)

    assert not updated.confirmed
    assert updated.confirmed_at is None


@pytest.mark.asyncio
async def test_check_in_own_guest_as_promoter():
    event = make_event(
        guests=[make_guest("g1", PromoterAdded("promoter-a"), confirmed=True)],
        promoters=[make_promoter()],
    )
    store = InMemoryEventStore(events=[event])

    updated = await GuestWriteModel(store).set_checked_in(PROMOTER_USER, "event-1", "g1", True)

    assert updated.checked_in
    assert store.events[0].guests[0].checked_in


@pytest.mark.asyncio
async def test_check_in_disabled_for_event():
    event = make_event(
        guests=[make_guest("g1", OwnerAdded("owner-1"))],
        settings=EventSettings(enable_check_in=False),
    )
    store = InMemoryEventStore(events=[event])

    with pytest.raises(FeatureDisabledError):
        await GuestWriteModel(store).set_checked_in(OWNER, "event-1", "g1", True)


@pytest.mark.asyncio
async def test_delete_guest_releases_promoter_counter():
    event = make_event(
        guests=[make_guest("g1", PromoterAdded("promoter-a"))],
        promoters=[make_promoter(guest_quota=1, guests_added=1)],
    )
    store = InMemoryEventStore(events=[event])

    deleted = await GuestWriteModel(store).delete_guest(OWNER, "event-1", "g1")

    assert deleted.id == "g1"
    assert store.events[0].guests == ()
    assert store.events[0].promoters[0].guests_added == 0


@pytest.mark.asyncio
async def test_delete_guest_counter_never_goes_negative():
    event = make_event(
        guests=[make_guest("g1", PromoterAdded("promoter-a"))],
        promoters=[make_promoter(guests_added=0)],
    )
    store = InMemoryEventStore(events=[event])

    await GuestWriteModel(store).delete_guest(OWNER, "event-1", "g1")

    assert store.events[0].promoters[0].guests_added == 0


@pytest.mark.asyncio
async def test_delete_missing_guest():
    store = InMemoryEventStore(events=[make_event()])

    with pytest.raises(GuestNotFoundError):
        await GuestWriteModel(store).delete_guest(OWNER, "event-1", "nope")
