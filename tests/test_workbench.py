"""
Tests for the per-session workbench
"""
import random
from unittest.mock import MagicMock

from sql_localizer.config import DEFAULT_HEADER, DEFAULT_LABELS, DEFAULT_MAPPING, GENERATE_FAILED, REFINE_FAILED
from sql_localizer.errors import ServiceError
from sql_localizer.models import GeneratedRecord
from sql_localizer.services.mock import MockClient
from sql_localizer.sql import PLACEHOLDER_SQL
from sql_localizer.workbench import GENERATE_FLAG, Workbench, refine_flag


def workbench():
    return Workbench(MockClient(delay=0, rng=random.Random(1)))


class TestGenerate:

    def test_generate_prepends_entry(self):
        wb = workbench()
        first = wb.generate("Deposit")
        second = wb.generate("Withdraw")
        assert [e.id for e in wb.store] == [second.id, first.id]
        assert first.translations["cn"] == "充值"

    def test_blank_input_is_ignored(self):
        wb = workbench()
        wb.client = MagicMock()
        assert wb.generate("   ") is None
        wb.client.generate.assert_not_called()

    def test_image_only_is_sent(self):
        wb = workbench()
        wb.client = MagicMock()
        wb.client.generate.return_value = GeneratedRecord("A", "B", {"en": "x"})
        assert wb.generate("", image=(b"png", "image/png")) is not None
        assert wb.client.generate.call_args.kwargs["image"] == (b"png", "image/png")

    def test_passes_generation_languages(self):
        wb = workbench()
        wb.select_all_languages(False)
        wb.client = MagicMock()
        wb.client.generate.return_value = GeneratedRecord("A", "B", {"en": "x"})
        wb.generate("Deposit")
        assert wb.client.generate.call_args.args == ("Deposit", ["en"])

    def test_failure_sets_message_and_keeps_state(self):
        wb = workbench()
        wb.generate("Deposit")
        before = wb.store.entries
        wb.client = MagicMock()
        wb.client.generate.side_effect = ServiceError("down")

        assert wb.generate("Withdraw") is None
        assert wb.error == GENERATE_FAILED
        assert wb.store.entries == before
        assert not wb.is_busy(GENERATE_FLAG)

    def test_success_clears_previous_error(self):
        wb = workbench()
        wb.error = GENERATE_FAILED
        wb.generate("Deposit")
        assert wb.error is None

    def test_duplicate_submission_ignored(self):
        wb = workbench()
        wb.client = MagicMock()
        wb.in_flight.add(GENERATE_FLAG)
        assert wb.generate("Deposit") is None
        wb.client.generate.assert_not_called()


class TestRefine:

    def test_refine_uses_english_context(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.client = MagicMock()
        wb.client.refine.return_value = "存款"

        assert wb.refine(entry.id, "cn")
        wb.client.refine.assert_called_once_with("cn", "充值", "Deposit")
        assert wb.store.get(entry.id).translations["cn"] == "存款"
        assert wb.store.get(entry.id).translations["th"] == "ฝากเงิน"

    def test_refine_unknown_entry(self):
        wb = workbench()
        wb.client = MagicMock()
        assert wb.refine("missing", "cn") is False
        wb.client.refine.assert_not_called()

    def test_response_for_deleted_entry_is_dropped(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        keep = wb.generate("Withdraw")

        def delete_then_answer(lang, current, context):
            wb.delete(entry.id)
            return "late"

        wb.client = MagicMock()
        wb.client.refine.side_effect = delete_then_answer
        assert wb.refine(entry.id, "cn") is False
        assert [e.id for e in wb.store] == [keep.id]
        assert wb.store.get(keep.id).translations["cn"] == "提现"

    def test_refine_failure(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.client = MagicMock()
        wb.client.refine.side_effect = RuntimeError("timeout")
        assert wb.refine(entry.id, "cn") is False
        assert wb.error == REFINE_FAILED
        assert wb.store.get(entry.id) == entry

    def test_flags_are_per_language(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.in_flight.add(refine_flag(entry.id, "cn"))
        wb.client = MagicMock()
        wb.client.refine.return_value = "Gửi"
        assert wb.refine(entry.id, "cn") is False
        assert wb.refine(entry.id, "vn") is True


class TestEdits:

    def test_edit_key_uppercases(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.edit_key(entry.id, "key1", "bank")
        assert wb.store.get(entry.id).key1 == "BANK"

    def test_edit_translation(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.edit_translation(entry.id, "en", "Top up")
        assert wb.store.get(entry.id).english == "Top up"

    def test_delete_and_clear(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.generate("Spin")
        wb.delete(entry.id)
        assert len(wb.store) == 1
        wb.clear()
        assert wb.sql() == PLACEHOLDER_SQL


class TestLanguages:

    def test_toggle(self):
        wb = workbench()
        wb.toggle_language("cn")
        assert "cn" not in wb.gen_languages
        wb.toggle_language("cn")
        assert wb.gen_languages[-1] == "cn"

    def test_select_all(self):
        wb = workbench()
        wb.select_all_languages(False)
        assert wb.gen_languages == ["en"]
        wb.select_all_languages(True)
        assert wb.gen_languages == list(DEFAULT_LABELS)

    def test_add_language(self):
        wb = workbench()
        assert wb.add_language(" DE", "German") == "de"
        assert wb.labels.label_for("de") == "German"
        assert wb.gen_languages[-1] == "de"
        assert wb.mapping.endswith(", de")
        assert wb.header.endswith(",[pk],[de]) VALUES")

    def test_add_language_twice(self):
        wb = workbench()
        wb.add_language("de", "German")
        header, mapping, langs = wb.header, wb.mapping, list(wb.gen_languages)
        wb.add_language("de", "Deutsch")
        assert (wb.header, wb.mapping, wb.gen_languages) == (header, mapping, langs)
        assert wb.labels.label_for("de") == "Deutsch"

    def test_add_language_requires_code_and_label(self):
        wb = workbench()
        assert wb.add_language("de", "") is None
        assert "de" not in wb.labels

    def test_restore_defaults(self):
        wb = workbench()
        wb.add_language("de", "German")
        wb.restore_defaults()
        assert (wb.header, wb.mapping) == (DEFAULT_HEADER, DEFAULT_MAPPING)
        assert wb.gen_languages == list(DEFAULT_LABELS)
        assert "de" in wb.labels

    def test_entry_languages_order(self):
        wb = workbench()
        wb.mapping = "key1, key2, th, cn"
        entry = wb.generate("Deposit")
        langs = wb.entry_languages(entry)
        assert langs[:3] == ["en", "th", "cn"]
        assert set(langs) == set(DEFAULT_LABELS)


class TestSql:

    def test_uses_template_and_view_mode(self):
        wb = workbench()
        wb.header = "INSERT INTO t([key1],[cn]) VALUES"
        wb.mapping = "key1, cn"
        wb.generate("Deposit")
        assert wb.sql() == "INSERT INTO t([key1],[cn]) VALUES\n('BANKING',N'充值');"
        wb.annotated = True
        assert wb.sql().startswith("-- ---")
        assert wb.sql(annotated=False).endswith("('BANKING',N'充值');")

    def test_export_languages_include_entry_translations(self):
        wb = workbench()
        entry = wb.generate("Deposit")
        wb.edit_translation(entry.id, "de", "Einzahlung")
        langs = wb.export_languages()
        # "vn" is labelled but the default mapping spells it "vnt"
        assert "vn" in langs
        assert "de" in langs
        assert langs[0] == "en"
        assert len(langs) == len(set(langs))

    def test_export_languages_follow_mapping_order(self):
        wb = workbench()
        wb.mapping = "key1, key2, th, cn"
        assert wb.export_languages()[:3] == ["en", "th", "cn"]
