from sqlalchemy import LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from rsvp_engine.config.table_names import TableNames
from rsvp_engine.models.base import TimeStamp


class KeyValueEntry(TimeStamp):
    __tablename__ = TableNames.KV_ENTRIES.value

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    def __repr__(self) -> str:
        return f"<KeyValueEntry {self.key} ({len(self.value)} bytes)>"
