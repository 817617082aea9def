from .base import BaseModel, TimeStamp
from .kv_entry import KeyValueEntry

__all__ = [
    "BaseModel",
    "TimeStamp",
    "KeyValueEntry",
]
