import pytest

from src.guestlist.urls import ME_URL, USERS_URL


@pytest.mark.asyncio
async def test_create_user_then_who_am_i(client, store):
    response = await client.post(USERS_URL, json={"role": "owner", "name": " Olivia "})

    assert response.status_code == 201
    user = response.json()
    assert user["name"] == "Olivia"
    assert user["role"] == "owner"
    assert user["email"] == "olivia@example.com"
    assert [u.id for u in store.users] == [user["id"]]

    me = await client.get(ME_URL, headers={"X-User-Id": user["id"]})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


@pytest.mark.asyncio
async def test_create_user_rejects_unknown_role(client):
    response = await client.post(USERS_URL, json={"role": "admin", "name": "Eve"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_user_header(client):
    response = await client.get(ME_URL, headers={"X-User-Id": "owner-nobody"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Unknown user"


@pytest.mark.asyncio
async def test_missing_user_header(client):
    response = await client.get(ME_URL)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_user_rejects_blank_name(client, store):
    response = await client.post(USERS_URL, json={"role": "owner", "name": "   "})

    assert response.status_code == 422
    assert store.users == []
