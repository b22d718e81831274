"""
Tests for the entry store
"""
from sql_localizer.models import Entry, GeneratedRecord
from sql_localizer.store import EntryStore


def record(key1="BANK", key2="DEPOSIT", **translations):
    return GeneratedRecord(key1=key1, key2=key2, translations=translations or {"en": "Deposit", "cn": "充值"})


class TestCreate:

    def test_create_prepends(self):
        store = EntryStore()
        first = store.create(record(key2="ONE"))
        second = store.create(record(key2="TWO"))
        assert [e.id for e in store] == [second.id, first.id]

    def test_create_assigns_unique_ids(self):
        store = EntryStore()
        ids = {store.create(record()).id for _ in range(5)}
        assert len(ids) == 5

    def test_duplicate_keys_are_allowed(self):
        store = EntryStore()
        store.create(record())
        store.create(record())
        assert len(store) == 2

    def test_english_always_present(self):
        entry = EntryStore().create(GeneratedRecord(key1="A", key2="B", translations={"cn": "x"}))
        assert entry.translations["en"] == ""


class TestUpdate:

    def test_unknown_id_is_noop(self):
        store = EntryStore()
        entry = store.create(record())
        before = store.entries
        assert store.update("missing", "key1", "NEW") is False
        assert store.entries == before
        assert store.get(entry.id).key1 == "BANK"

    def test_update_key(self):
        store = EntryStore()
        entry = store.create(record())
        assert store.update(entry.id, "key2", "WITHDRAW")
        updated = store.get(entry.id)
        assert updated.key2 == "WITHDRAW"
        assert updated.key1 == "BANK"
        assert updated.translations == entry.translations

    def test_update_translation_touches_one_language(self):
        store = EntryStore()
        other = store.create(record(key2="OTHER"))
        entry = store.create(record())
        store.update(entry.id, "translations.cn", "存款")

        updated = store.get(entry.id)
        assert updated.translations == {"en": "Deposit", "cn": "存款"}
        assert store.get(other.id).translations == {"en": "Deposit", "cn": "充值"}

    def test_update_does_not_alias_previous_value(self):
        store = EntryStore()
        entry = store.create(record())
        store.update(entry.id, "translations.th", "ฝากเงิน")
        assert "th" not in entry.translations
        assert store.get(entry.id).translations is not entry.translations

    def test_update_adds_new_language(self):
        store = EntryStore()
        entry = store.create(record())
        store.update(entry.id, "translations.de", "Einzahlung")
        assert store.get(entry.id).translations["de"] == "Einzahlung"

    def test_unknown_field_is_ignored(self):
        store = EntryStore()
        entry = store.create(record())
        assert store.update(entry.id, "id", "hijack") is False
        assert store.update(entry.id, "translations.", "x") is False
        assert store.get(entry.id) == entry

    def test_entry_keeps_identity_and_timestamp(self):
        store = EntryStore()
        entry = store.create(record())
        store.update(entry.id, "key1", "GAME")
        updated = store.get(entry.id)
        assert isinstance(updated, Entry)
        assert (updated.id, updated.created_at) == (entry.id, entry.created_at)


class TestDeleteAndClear:

    def test_delete(self):
        store = EntryStore()
        keep = store.create(record())
        gone = store.create(record())
        assert store.delete(gone.id)
        assert [e.id for e in store] == [keep.id]

    def test_delete_unknown(self):
        store = EntryStore()
        store.create(record())
        assert store.delete("missing") is False
        assert len(store) == 1

    def test_clear(self):
        store = EntryStore()
        store.create(record())
        store.create(record())
        store.clear()
        assert len(store) == 0
        assert not store
