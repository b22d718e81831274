"""
Per-session state and the user actions that change it.

The Streamlit page keeps one Workbench in ``st.session_state`` and calls
into it from widget callbacks. Nothing here imports Streamlit, so every
action can be exercised directly.
"""
import logging
from contextlib import contextmanager
from typing import Optional

from sql_localizer.config import (
    DEFAULT_GEN_LANGS,
    DEFAULT_HEADER,
    DEFAULT_LABELS,
    DEFAULT_MAPPING,
    GENERATE_FAILED,
    REFINE_FAILED,
)
from sql_localizer.languages import LanguageLabels, sort_languages
from sql_localizer.models import Entry
from sql_localizer.services.base import ImagePayload, LocalizationClient
from sql_localizer.sql import add_language_column, parse_mapping, render_sql
from sql_localizer.store import EntryStore

logger = logging.getLogger(__name__)

GENERATE_FLAG = "generate"


def refine_flag(entry_id: str, lang: str) -> str:
    return f"refine:{entry_id}:{lang}"


class Workbench:
    def __init__(self, client: LocalizationClient):
        self.client = client
        self.store = EntryStore()
        self.labels = LanguageLabels(DEFAULT_LABELS)
        self.gen_languages: list[str] = list(DEFAULT_GEN_LANGS)
        self.header = DEFAULT_HEADER
        self.mapping = DEFAULT_MAPPING
        self.annotated = False
        self.error: Optional[str] = None
        self.in_flight: set[str] = set()

    # ─────────────────────────────────────────────────────────
    # in-flight flags
    # ─────────────────────────────────────────────────────────
    def is_busy(self, flag: str) -> bool:
        return flag in self.in_flight

    @contextmanager
    def _flight(self, flag: str):
        self.in_flight.add(flag)
        try:
            yield
        finally:
            self.in_flight.discard(flag)

    # ─────────────────────────────────────────────────────────
    # service-backed actions
    # ─────────────────────────────────────────────────────────
    def generate(self, text: str, image: Optional[ImagePayload] = None) -> Optional[Entry]:
        """Ask the backend for a new entry and prepend it. Returns None when nothing was added."""
        if not (text or "").strip() and image is None:
            return None
        if self.is_busy(GENERATE_FLAG):
            logger.debug("generate already in flight; ignoring")
            return None

        self.error = None
        with self._flight(GENERATE_FLAG):
            try:
                record = self.client.generate(text, self.gen_languages, image=image)
            except Exception:
                logger.exception("Generation failed")
                self.error = GENERATE_FAILED
                return None
        return self.store.create(record)

    def refine(self, entry_id: str, lang: str) -> bool:
        """Refine one language of one entry, using its English text as context."""
        entry = self.store.get(entry_id)
        flag = refine_flag(entry_id, lang)
        if entry is None or self.is_busy(flag):
            return False

        self.error = None
        with self._flight(flag):
            try:
                refined = self.client.refine(lang, entry.translations.get(lang, ""), entry.english)
            except Exception:
                logger.exception("Refinement of %s for entry %s failed", lang, entry_id)
                self.error = REFINE_FAILED
                return False
        # The entry may have been deleted while the call was out; update() is then a no-op.
        return self.store.update(entry_id, f"translations.{lang}", refined)

    # ─────────────────────────────────────────────────────────
    # edits
    # ─────────────────────────────────────────────────────────
    def edit_key(self, entry_id: str, name: str, value: str) -> bool:
        return self.store.update(entry_id, name, (value or "").upper())

    def edit_translation(self, entry_id: str, lang: str, value: str) -> bool:
        return self.store.update(entry_id, f"translations.{lang}", value)

    def delete(self, entry_id: str) -> bool:
        return self.store.delete(entry_id)

    def clear(self) -> None:
        self.store.clear()

    # ─────────────────────────────────────────────────────────
    # languages & template
    # ─────────────────────────────────────────────────────────
    def toggle_language(self, code: str) -> None:
        if code in self.gen_languages:
            self.gen_languages = [c for c in self.gen_languages if c != code]
        else:
            self.gen_languages = [*self.gen_languages, code]

    def select_all_languages(self, enable: bool) -> None:
        self.gen_languages = self.labels.codes() if enable else ["en"]

    def add_language(self, code: str, label: str) -> Optional[str]:
        if not (code or "").strip() or not (label or "").strip():
            return None
        code = self.labels.add(code, label)
        if code not in self.gen_languages:
            self.gen_languages = [*self.gen_languages, code]
        self.header, self.mapping = add_language_column(self.header, self.mapping, code)
        return code

    def restore_defaults(self) -> None:
        self.header = DEFAULT_HEADER
        self.mapping = DEFAULT_MAPPING
        self.gen_languages = list(DEFAULT_LABELS)

    # ─────────────────────────────────────────────────────────
    # views
    # ─────────────────────────────────────────────────────────
    def sort_order(self) -> list[str]:
        return [t.lower() for t in parse_mapping(self.mapping)]

    def entry_languages(self, entry: Entry) -> list[str]:
        return sort_languages([*self.labels.codes(), *entry.translations], self.sort_order())

    def export_languages(self) -> list[str]:
        """Every labelled language plus any language an entry carries text for."""
        codes = self.labels.codes()
        for entry in self.store:
            codes.extend(entry.translations)
        return sort_languages(codes, self.sort_order())

    def sql(self, annotated: Optional[bool] = None) -> str:
        return render_sql(
            self.header,
            self.mapping,
            self.store,
            annotated=self.annotated if annotated is None else annotated,
        )
