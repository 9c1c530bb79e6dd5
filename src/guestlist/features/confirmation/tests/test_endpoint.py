import pytest

from src.guestlist.dtos import OwnerAdded
from src.guestlist.features.confirmation.router import get_confirmation_write_model
from src.guestlist.features.confirmation.write_model import ConfirmationWriteModel
from src.guestlist.repository.store import get_event_store
from src.guestlist.tests.inmemory_models import InMemoryEventStore, make_event, make_guest
from src.guestlist.urls import (
    CONFIRM_BY_CODE_URL,
    CONFIRM_BY_TOKEN_URL,
    CONFIRMATION_BY_CODE_URL,
    CONFIRMATION_BY_TOKEN_URL,
    DECLINE_BY_CODE_URL,
    DECLINE_BY_TOKEN_URL,
)


def seed(store, **guest_kwargs):
    store.events = [make_event(guests=[make_guest("g1", OwnerAdded("owner-1"), **guest_kwargs)])]


@pytest.mark.asyncio
async def test_invitation_by_token(client, store):
    seed(store)

    response = await client.get(CONFIRMATION_BY_TOKEN_URL.format(token="token-g1"))

    assert response.status_code == 200
    data = response.json()
    assert data["guest_name"] == "Guest g1"
    assert data["status"] == "pending"
    assert data["event_name"] == "Party event-1"


@pytest.mark.asyncio
async def test_invitation_by_code_ignores_case(client, store):
    seed(store, code="CONF-AB12CD")

    response = await client.get(CONFIRMATION_BY_CODE_URL.format(code="conf-ab12cd"))

    assert response.status_code == 200
    assert response.json()["confirmation_code"] == "CONF-AB12CD"


@pytest.mark.asyncio
async def test_unknown_code(client, store):
    seed(store)

    response = await client.get(CONFIRMATION_BY_CODE_URL.format(code="CONF-ZZZZZZ"))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_confirm_twice(client, store):
    seed(store)
    url = CONFIRM_BY_TOKEN_URL.format(token="token-g1")

    first = await client.post(url)
    second = await client.post(url)

    assert first.json()["already_confirmed"] is False
    assert first.json()["invitation"]["status"] == "confirmed"
    assert second.json()["already_confirmed"] is True
    assert second.json()["message"] == "Presence already confirmed"
    assert store.events[0].confirmed_count == 1


@pytest.mark.asyncio
async def test_confirm_by_code(client, store):
    seed(store, code="CONF-AB12CD")

    response = await client.post(CONFIRM_BY_CODE_URL.format(code="conf-ab12cd"))

    assert response.status_code == 200
    assert store.events[0].guests[0].confirmed


@pytest.mark.asyncio
async def test_decline_removes_guest(client, store):
    seed(store)

    response = await client.post(DECLINE_BY_TOKEN_URL.format(token="token-g1"))

    assert response.status_code == 200
    assert response.json()["event_name"] == "Party event-1"
    assert store.events[0].guests == ()


@pytest.mark.asyncio
async def test_confirmed_guest_cannot_decline(client_factory):
    store = InMemoryEventStore(
        events=[make_event(guests=[make_guest("g1", OwnerAdded("owner-1"), confirmed=True)])]
    )
    overrides = {
        get_event_store: lambda: store,
        get_confirmation_write_model: lambda: ConfirmationWriteModel(
            store, allow_decline_after_confirm=False
        ),
    }

    async with client_factory(overrides) as client:
        response = await client.post(DECLINE_BY_CODE_URL.format(code="CONF-0000G1"))

    assert response.status_code == 409
    assert len(store.events[0].guests) == 1
