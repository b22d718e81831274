import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime


def _with_english(translations) -> dict[str, str]:
    data = dict(translations or {})
    data.setdefault("en", "")
    return data


@dataclass(frozen=True)
class GeneratedRecord:
    """What a generate call returns before the entry gets an id and a timestamp."""
    key1: str
    key2: str
    translations: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "translations", _with_english(self.translations))


@dataclass(frozen=True)
class Entry:
    """One localization row: two keys plus text per language.

    Edits never mutate an entry; ``with_key`` and ``with_translation``
    return a new value that owns its own copy of ``translations``.
    """
    id: str
    created_at: datetime
    key1: str
    key2: str
    translations: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "translations", _with_english(self.translations))

    @classmethod
    def from_record(cls, record: GeneratedRecord) -> "Entry":
        return cls(
            id=str(uuid.uuid4()),
            created_at=datetime.now(),
            key1=record.key1,
            key2=record.key2,
            translations=record.translations,
        )

    @property
    def english(self) -> str:
        return self.translations.get("en", "")

    def with_key(self, name: str, value: str) -> "Entry":
        return replace(self, **{name: value})

    def with_translation(self, lang: str, value: str) -> "Entry":
        return replace(self, translations={**self.translations, lang: value})
