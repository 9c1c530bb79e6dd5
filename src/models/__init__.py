from .base import Base, BaseModel, TimeStamp
from .blob import KeyValueBlob

__all__ = [
    "Base",
    "BaseModel",
    "TimeStamp",
    "KeyValueBlob",
]
