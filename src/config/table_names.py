from enum import Enum


class TableNames(str, Enum):
    KV_BLOBS = "kv_blobs"


class BlobKeys(str, Enum):
    EVENTS = "events"
    CURRENT_USER = "current_user"
    USERS = "users"
