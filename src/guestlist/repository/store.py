"""Blob store for the guest list.

The whole events collection is one document. Every mutation reads it,
transforms it and writes it back through ``EventStore.mutate_events``, which
serializes those cycles behind a single lock.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from functools import partial
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.database import async_session_manager
from src.config.table_names import BlobKeys
from src.guestlist.dtos import Event, User
from src.guestlist.errors import StorageError
from src.models.blob import KeyValueBlob

logger = logging.getLogger(__name__)

T = TypeVar("T")

EventsMutation = Callable[[list[Event]], tuple[list[Event], T]]
UsersMutation = Callable[[list[User]], tuple[list[User], T]]

EVENTS_ADAPTER = TypeAdapter(list[Event])
USERS_ADAPTER = TypeAdapter(list[User])
USER_ADAPTER = TypeAdapter(User | None)

# One writer at a time for the whole process
_store_lock = asyncio.Lock()


class EventStore(ABC):
    """Key/value persistence for events, users and the current session user."""

    def __init__(self, lock: asyncio.Lock | None = None) -> None:
        self._lock = lock or _store_lock

    @abstractmethod
    async def get_events(self) -> list[Event]:
        raise NotImplementedError

    @abstractmethod
    async def save_events(self, events: Sequence[Event]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_current_user(self) -> User | None:
        raise NotImplementedError

    @abstractmethod
    async def set_current_user(self, user: User | None) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_users(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    async def save_users(self, users: Sequence[User]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def clear_all(self) -> None:
        raise NotImplementedError

    async def get_event_by_id(self, event_id: str) -> Event | None:
        events = await self.get_events()
        return next((e for e in events if e.id == event_id), None)

    async def get_user_by_id(self, user_id: str) -> User | None:
        users = await self.get_users()
        return next((u for u in users if u.id == user_id), None)

    async def mutate_events(self, mutation: EventsMutation[T]) -> T:
        """Apply ``mutation`` to the stored events and persist its result.

        ``mutation`` receives the current collection and returns the new
        collection plus a value handed back to the caller. If it raises,
        nothing is written.
        """
        async with self._lock:
            events = await self.get_events()
            new_events, result = mutation(events)
            await self.save_events(new_events)
            return result

    async def mutate_users(self, mutation: UsersMutation[T]) -> T:
        async with self._lock:
            users = await self.get_users()
            new_users, result = mutation(users)
            await self.save_users(new_users)
            return result


class SqlEventStore(EventStore):
    """``EventStore`` backed by the ``kv_blobs`` table."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        lock: asyncio.Lock | None = None,
    ) -> None:
        super().__init__(lock=lock)
        self.session_overwrite = session_overwrite

    async def _read(self, key: BlobKeys) -> str | None:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                result = await session.execute(
                    select(KeyValueBlob.value).where(KeyValueBlob.key == key.value)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Could not read blob '%s': %s", key.value, e)
            raise StorageError(f"Could not read '{key.value}'") from e

    async def _write(self, key: BlobKeys, value: str | None) -> None:
        try:
            async with self.async_session_manager(
                session_overwrite=self.session_overwrite
            ) as session:
                result = await session.execute(
                    select(KeyValueBlob).where(KeyValueBlob.key == key.value)
                )
                blob = result.scalar_one_or_none()
                if value is None:
                    if blob is not None:
                        await session.delete(blob)
                elif blob is None:
                    session.add(KeyValueBlob(key=key.value, value=value))
                else:
                    blob.value = value
                await session.flush()
        except SQLAlchemyError as e:
            logger.error("Could not write blob '%s': %s", key.value, e)
            raise StorageError(f"Could not write '{key.value}'") from e

    async def _load(self, key: BlobKeys, adapter: TypeAdapter, default):
        raw = await self._read(key)
        if raw is None:
            return default
        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.error("Corrupt blob '%s': %s", key.value, e)
            raise StorageError(f"Stored '{key.value}' could not be decoded") from e

    async def get_events(self) -> list[Event]:
        return await self._load(BlobKeys.EVENTS, EVENTS_ADAPTER, [])

    async def save_events(self, events: Sequence[Event]) -> None:
        await self._write(BlobKeys.EVENTS, EVENTS_ADAPTER.dump_json(list(events)).decode())

    async def get_current_user(self) -> User | None:
        return await self._load(BlobKeys.CURRENT_USER, USER_ADAPTER, None)

    async def set_current_user(self, user: User | None) -> None:
        if user is None:
            await self._write(BlobKeys.CURRENT_USER, None)
        else:
            await self._write(BlobKeys.CURRENT_USER, USER_ADAPTER.dump_json(user).decode())

    async def get_users(self) -> list[User]:
        return await self._load(BlobKeys.USERS, USERS_ADAPTER, [])

    async def save_users(self, users: Sequence[User]) -> None:
        await self._write(BlobKeys.USERS, USERS_ADAPTER.dump_json(list(users)).decode())

    async def clear_all(self) -> None:
        for key in BlobKeys:
            await self._write(key, None)


def get_event_store() -> EventStore:
    """Dependency to get the event store instance."""
    return SqlEventStore()
