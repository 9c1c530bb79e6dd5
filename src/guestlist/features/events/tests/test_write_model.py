"""Tests for EventWriteModel."""

import pytest

from src.guestlist.dtos import EventSettings, OwnerAdded, PromoterAdded, UserRole
from src.guestlist.errors import EventNotFoundError, PermissionDeniedError
from src.guestlist.features.events.write_model import EventUpdateDTO, EventWriteModel
from src.guestlist.tests.inmemory_models import (
    InMemoryEventStore,
    make_event,
    make_guest,
    make_promoter,
    make_user,
)


@pytest.mark.asyncio
async def test_owner_creates_event():
    store = InMemoryEventStore()
    owner = make_user("owner-1")

    event = await EventWriteModel(store).create_event(
        owner, "New Year", "2026-12-31", "Club Aurora", 200
    )

    assert event.owner_id == "owner-1"
    assert event.owner_name == "Olivia"
    assert event.guests == ()
    assert event.settings == EventSettings()
    assert store.events == [event]


@pytest.mark.asyncio
async def test_promoter_cannot_create_event():
    store = InMemoryEventStore()

    with pytest.raises(PermissionDeniedError):
        await EventWriteModel(store).create_event(
            make_user("user-a", UserRole.PROMOTER), "Party", "2026-12-31", "Club", 10
        )
    assert store.events == []


@pytest.mark.asyncio
async def test_update_event_changes_only_given_fields():
    store = InMemoryEventStore(events=[make_event()])

    updated = await EventWriteModel(store).update_event(
        make_user("owner-1"),
        "event-1",
        EventUpdateDTO(max_capacity=50, settings=EventSettings(enable_check_in=False)),
    )

    assert updated.max_capacity == 50
    assert updated.name == "Party event-1"
    assert not updated.settings.enable_check_in
    assert store.events == [updated]


@pytest.mark.asyncio
async def test_promoter_cannot_update_event():
    store = InMemoryEventStore(events=[make_event(promoters=[make_promoter()])])

    with pytest.raises(PermissionDeniedError):
        await EventWriteModel(store).update_event(
            make_user("user-a", UserRole.PROMOTER), "event-1", EventUpdateDTO(name="Mine")
        )
    assert store.save_count == 0


@pytest.mark.asyncio
async def test_delete_event_removes_guests_and_promoters():
    event = make_event(
        guests=[make_guest("g1", PromoterAdded("promoter-a"))],
        promoters=[make_promoter()],
    )
    other = make_event("event-2")
    store = InMemoryEventStore(events=[event, other])

    result = await EventWriteModel(store).delete_event(make_user("owner-1"), "event-1")

    assert result.deleted_event_id == "event-1"
    assert store.events == [other]


@pytest.mark.asyncio
async def test_deleting_selected_event_falls_back_to_next_accessible():
    store = InMemoryEventStore(
        events=[make_event("event-1"), make_event("event-2", owner_id="someone"), make_event("event-3")]
    )

    result = await EventWriteModel(store).delete_event(
        make_user("owner-1"), "event-1", selected_event_id="event-1"
    )

    assert result.selected_event_id == "event-3"


@pytest.mark.asyncio
async def test_deleting_other_event_keeps_selection():
    store = InMemoryEventStore(events=[make_event("event-1"), make_event("event-2")])

    result = await EventWriteModel(store).delete_event(
        make_user("owner-1"), "event-2", selected_event_id="event-1"
    )

    assert result.selected_event_id == "event-1"


@pytest.mark.asyncio
async def test_deleting_last_event_clears_selection():
    store = InMemoryEventStore(events=[make_event()])

    result = await EventWriteModel(store).delete_event(
        make_user("owner-1"), "event-1", selected_event_id="event-1"
    )

    assert result.selected_event_id is None
    assert store.events == []


@pytest.mark.asyncio
async def test_delete_missing_event():
    with pytest.raises(EventNotFoundError):
        await EventWriteModel(InMemoryEventStore()).delete_event(make_user(), "event-x")


@pytest.mark.asyncio
async def test_promoter_cannot_delete_event():
    store = InMemoryEventStore(events=[make_event(promoters=[make_promoter()])])

    with pytest.raises(PermissionDeniedError):
        await EventWriteModel(store).delete_event(
            make_user("user-a", UserRole.PROMOTER), "event-1"
        )
    assert len(store.events) == 1


@pytest.mark.asyncio
async def test_backfill_fills_only_missing_codes():
    event = make_event(
        guests=[
            make_guest("g1", OwnerAdded("owner-1"), code=""),
            make_guest("g2", OwnerAdded("owner-1"), code="CONF-KEEPME"),
            make_guest("g3", OwnerAdded("owner-1"), code=""),
        ]
    )
    store = InMemoryEventStore(events=[event])
    write_model = EventWriteModel(store)

    assert await write_model.backfill_confirmation_codes() == 2

    codes = [g.confirmation_code for g in store.events[0].guests]
    assert codes[1] == "CONF-KEEPME"
    assert all(code.startswith("CONF-") for code in codes)
    assert len(set(codes)) == 3
    assert await write_model.backfill_confirmation_codes() == 0
