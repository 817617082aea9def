from enum import Enum


class TableNames(str, Enum):
    KV_ENTRIES = "kv_entries"
