from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.config.table_names import TableNames
from src.models.base import Base, TimeStamp


class KeyValueBlob(Base, TimeStamp):
    """One JSON document per key; the whole document is replaced on every write."""

    __tablename__ = TableNames.KV_BLOBS.value

    key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<KeyValueBlob {self.key}>"
