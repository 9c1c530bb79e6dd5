from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy_utils import UUIDType

# Metadata alembic autogenerates against
BaseModel = declarative_base()


class Base(BaseModel):
    """Abstract table keyed by a random UUID."""

    __abstract__ = True

    uuid: Mapped[UUID] = mapped_column(UUIDType(binary=False), primary_key=True, default=uuid4)


class TimeStamp(BaseModel):
    """Abstract table whose rows carry database-side creation and update times."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        onupdate=sa.func.current_timestamp(),
        nullable=False,
    )
