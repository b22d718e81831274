import logging
from typing import Iterator, Optional

from sql_localizer.models import Entry, GeneratedRecord

logger = logging.getLogger(__name__)

KEY_FIELDS = ("key1", "key2")
TRANSLATION_PREFIX = "translations."


class EntryStore:
    """Generated entries for one session, most recent first."""

    def __init__(self, entries=None):
        self._entries: list[Entry] = list(entries or [])

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def create(self, record: GeneratedRecord) -> Entry:
        entry = Entry.from_record(record)
        self._entries.insert(0, entry)
        return entry

    def update(self, entry_id: str, field: str, value: str) -> bool:
        """Replace one field (``key1``, ``key2`` or ``translations.<lang>``) on one entry.

        Returns False without touching anything when the id or the field is unknown.
        """
        if field in KEY_FIELDS:
            change = lambda e: e.with_key(field, value)
        elif field.startswith(TRANSLATION_PREFIX) and field[len(TRANSLATION_PREFIX):]:
            lang = field[len(TRANSLATION_PREFIX):]
            change = lambda e: e.with_translation(lang, value)
        else:
            logger.warning("Ignoring update of unknown field %r", field)
            return False

        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                self._entries[i] = change(entry)
                return True
        return False

    def delete(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.id != entry_id]
        return len(self._entries) != before

    def clear(self) -> None:
        self._entries = []
