import pytest

from src.guestlist.dtos import OwnerAdded, PromoterAdded, PublicLinkAdded, UserRole
from src.guestlist.features.events.router import get_event_write_model
from src.guestlist.features.events.write_model import EventWriteModel
from src.guestlist.repository.store import get_event_store
from src.guestlist.tests.inmemory_models import (
    InMemoryEventStore,
    make_event,
    make_guest,
    make_promoter,
    make_user,
)
from src.guestlist.urls import EVENT_STATS_URL, EVENT_URL, EVENTS_URL

OWNER_HEADERS = {"X-User-Id": "owner-1"}
PROMOTER_HEADERS = {"X-User-Id": "user-a"}


def seed(store, *events):
    store.users = [make_user("owner-1"), make_user("user-a", UserRole.PROMOTER, name="Ana")]
    store.events = list(events)


@pytest.mark.asyncio
async def test_create_event(client, store):
    seed(store)

    response = await client.post(
        EVENTS_URL,
        headers=OWNER_HEADERS,
        json={"name": "New Year", "date": "2026-12-31", "location": "Club Aurora", "max_capacity": 150},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["owner_id"] == "owner-1"
    assert data["max_capacity"] == 150
    assert data["permissions"]["is_owner"] is True
    assert data["stats"]["status"] == "open"
    assert data["public_registration_link"].endswith(f"/rsvp/{data['id']}")
    assert len(store.events) == 1


@pytest.mark.asyncio
async def test_promoter_cannot_create_event(client, store):
    seed(store)

    response = await client.post(
        EVENTS_URL,
        headers=PROMOTER_HEADERS,
        json={"name": "Mine", "date": "2026-12-31", "location": "Bar"},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_list_events_only_accessible(client, store):
    seed(
        store,
        make_event("event-1"),
        make_event("event-2", promoters=[make_promoter(event_id="event-2")]),
        make_event("event-3", owner_id="someone-else"),
    )

    owner = await client.get(EVENTS_URL, headers=OWNER_HEADERS)
    promoter = await client.get(EVENTS_URL, headers=PROMOTER_HEADERS)

    assert [e["id"] for e in owner.json()] == ["event-1", "event-2"]
    assert [e["id"] for e in promoter.json()] == ["event-2"]


@pytest.mark.asyncio
async def test_promoter_view_of_event(client, store):
    seed(
        store,
        make_event(
            guests=[
                make_guest("g-own", PromoterAdded("promoter-a")),
                make_guest("g-public", PublicLinkAdded("owner-1")),
                make_guest("g-owner", OwnerAdded("owner-1"), confirmed=True),
            ],
            promoters=[make_promoter()],
        ),
    )

    response = await client.get(EVENT_URL.format(event_id="event-1"), headers=PROMOTER_HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert [g["id"] for g in data["guests"]] == ["g-own"]
    assert data["promoters"] == []
    assert data["permissions"]["is_promoter"] is True
    assert data["permissions"]["promoter_id"] == "promoter-a"
    assert data["permissions"]["can_manage_promoters"] is False
    assert data["stats"]["confirmed_count"] == 1


@pytest.mark.asyncio
async def test_owner_view_of_event(client, store):
    seed(
        store,
        make_event(
            guests=[make_guest("g-own", PromoterAdded("promoter-a"))],
            promoters=[make_promoter()],
        ),
    )

    data = (await client.get(EVENT_URL.format(event_id="event-1"), headers=OWNER_HEADERS)).json()

    assert [g["id"] for g in data["guests"]] == ["g-own"]
    assert [p["id"] for p in data["promoters"]] == ["promoter-a"]


@pytest.mark.asyncio
async def test_stranger_has_no_access(client, store):
    seed(store, make_event(owner_id="someone-else"))

    response = await client.get(EVENT_URL.format(event_id="event-1"), headers=OWNER_HEADERS)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_missing_event(client, store):
    seed(store)

    response = await client.get(EVENT_URL.format(event_id="event-x"), headers=OWNER_HEADERS)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_event_stats(client, store):
    seed(
        store,
        make_event(
            max_capacity=5,
            guests=[
                make_guest(f"g{i}", OwnerAdded("owner-1"), confirmed=True) for i in range(4)
            ],
        ),
    )

    response = await client.get(EVENT_STATS_URL.format(event_id="event-1"), headers=OWNER_HEADERS)

    assert response.json() == {
        "confirmed_count": 4,
        "checked_in_count": 0,
        "total_guests": 4,
        "remaining_spots": 1,
        "fill_percentage": 80.0,
        "status": "almost_full",
    }


@pytest.mark.asyncio
async def test_update_event(client, store):
    seed(store, make_event())

    response = await client.patch(
        EVENT_URL.format(event_id="event-1"),
        headers=OWNER_HEADERS,
        json={"location": "Rooftop", "settings": {"enable_check_in": False}},
    )

    assert response.status_code == 200
    assert response.json()["location"] == "Rooftop"
    assert store.events[0].settings.enable_check_in is False
    assert store.events[0].settings.allow_promoter_invites is True


@pytest.mark.asyncio
async def test_delete_event_returns_next_selection(client, store):
    seed(store, make_event("event-1"), make_event("event-2"))

    response = await client.delete(
        EVENT_URL.format(event_id="event-1"),
        headers=OWNER_HEADERS,
        params={"selected_event_id": "event-1"},
    )

    assert response.status_code == 200
    assert response.json() == {"deleted_event_id": "event-1", "selected_event_id": "event-2"}


@pytest.mark.asyncio
async def test_delete_event_with_overridden_write_model(client_factory):
    store = InMemoryEventStore(events=[make_event()], users=[make_user()])
    overrides = {
        get_event_store: lambda: store,
        get_event_write_model: lambda: EventWriteModel(store),
    }

    async with client_factory(overrides) as client:
        response = await client.delete(EVENT_URL.format(event_id="event-1"), headers=OWNER_HEADERS)

    assert response.status_code == 200
    assert response.json()["selected_event_id"] is None
    assert store.events == []
