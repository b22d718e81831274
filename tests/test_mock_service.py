"""
Tests for the offline dictionary backend
"""
import random
import re

from sql_localizer.services.mock import MockClient, detect_category, match_term


def client():
    return MockClient(delay=0, rng=random.Random(7))


class TestGenerate:

    def test_dictionary_match(self):
        record = client().generate("Deposit", ["cn", "th"])
        assert record.key1 == "BANKING"
        assert record.translations == {"cn": "充值", "th": "ฝากเงิน", "en": "Deposit"}

    def test_key2_format(self):
        record = client().generate("Spin the wheel", ["cn"])
        assert record.key1 == "GAMES"
        assert re.fullmatch(r"GME_SPIN_THE_[1-9]\d{2}", record.key2)

    def test_substring_match(self):
        record = client().generate("Please complete KYC Verification", ["my"])
        assert record.translations["my"] == "Pengesahan KYC"

    def test_fallback_placeholders(self):
        record = client().generate("Hello world", ["cn", "kh", "de"])
        assert record.key1 == "COMMON"
        assert record.key2.startswith("COM_HELLO_WORLD_")
        assert record.translations["cn"] == "[ZH] Hello world"
        assert record.translations["kh"] == "[KH] Hello world"
        assert record.translations["de"] == "[DE] Hello world"

    def test_language_missing_from_dictionary(self):
        record = client().generate("Bonus", ["fr"])
        assert record.translations["fr"] == "[FR] Bonus"

    def test_empty_text(self):
        record = client().generate("", ["cn"])
        assert record.translations["en"] == "Untitled Action"
        assert record.key2.startswith("COM_ACTION_")

    def test_only_requested_languages(self):
        record = client().generate("Deposit", [])
        assert list(record.translations) == ["en"]


class TestRefine:

    def test_canned_variants(self):
        assert client().refine("cn", "确认", "Confirm") in ("确 认", "确定提交", "立即执行")

    def test_generic_variants(self):
        assert client().refine("fr", "Valider", "Confirm") in ("Valider (Official)", "Valider (System)")


class TestHelpers:

    def test_detect_category(self):
        assert detect_category("Claim your VIP gift") == "PROMO"
        assert detect_category("Network error") == "SYSTEM"

    def test_match_prefers_exact(self):
        assert match_term("balance") == "Balance"
        assert match_term("nothing here") is None
