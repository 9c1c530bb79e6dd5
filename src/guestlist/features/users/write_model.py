"""Write model for users.

Roles are self-asserted: picking a role creates a user with that label and
nothing verifies it.
"""

import logging

from src.guestlist.dtos import User, UserRole
from src.guestlist.errors import UserNotFoundError
from src.guestlist.repository.store import EventStore
from src.guestlist.repository.write_models import new_id

logger = logging.getLogger(__name__)


def default_email(name: str) -> str:
    return f"{''.join(name.split()).lower()}@example.com"


class UserWriteModel:
    def __init__(self, store: EventStore) -> None:
        self.store = store

    async def create_user(
        self,
        role: UserRole,
        name: str,
        email: str | None = None,
        phone: str = "",
    ) -> User:
        user = User(
            id=new_id(role.value),
            name=name,
            email=email or default_email(name),
            phone=phone,
            role=role,
        )
        await self.store.mutate_users(lambda users: ([*users, user], None))
        logger.info("Created %s user %s", role.value, user.id)
        return user

    async def login(self, user_id: str) -> User:
        """Make ``user_id`` the current session user."""
        user = await self.store.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        await self.store.set_current_user(user)
        return user

    async def logout(self) -> None:
        await self.store.set_current_user(None)
