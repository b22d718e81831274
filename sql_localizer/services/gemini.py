import json
import logging
import re
from typing import Optional, Sequence

import google.genai as genai
from google.genai.errors import APIError
from google.genai.types import GenerateContentConfig, Part

from sql_localizer.config import DEFAULT_MODEL
from sql_localizer.errors import ServiceError, ServiceNotConfigured
from sql_localizer.models import GeneratedRecord
from sql_localizer.services.base import ImagePayload, with_english

logger = logging.getLogger(__name__)

GENERATE_INSTRUCTION = """
You are an expert iGaming CMS Localization Tool.

TASK:
Generate unique SQL keys and translations for a gambling/casino platform.
Key 1 is the Category (uppercase, short).
Key 2 is the Descriptive Code (uppercase, short).

CONTEXT:
The input might be an image of a game UI or a text description.
Ensure translations are professional and context-aware (e.g., 'Bet' vs 'Wager').
"""

REFINE_INSTRUCTION = """
Refine this iGaming text for language: {lang}.
Context: {context}
Return ONLY the corrected/refined text. No quotes, no preamble.
"""

IMAGE_ONLY_PROMPT = "Extract meaning from image and translate."


def build_schema(languages: Sequence[str]) -> dict:
    """JSON response schema asking for both keys and one string per language."""
    return {
        "type": "OBJECT",
        "properties": {
            "key1": {
                "type": "STRING",
                "description": "Category code (e.g. BANK, GAME, PROMO). Max 6 chars.",
            },
            "key2": {
                "type": "STRING",
                "description": "Action or content code (e.g. DEPOSIT, SPIN). Max 8 chars.",
            },
            "translations": {
                "type": "OBJECT",
                "properties": {
                    lang: {"type": "STRING", "description": f"iGaming localized string for: {lang}"}
                    for lang in languages
                },
                "required": list(languages),
            },
        },
        "required": ["key1", "key2", "translations"],
    }


def _clean_code_fence(text: str) -> str:
    text = text.strip()
    text = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", text)
    text = re.sub(r"\s*```$", "", text)
    return text.strip()


def _extract_json_block(text: str):
    cleaned = _clean_code_fence(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end != -1 and end > start:
        return cleaned[start:end + 1]
    return None


def parse_record(raw: str, languages: Sequence[str]) -> GeneratedRecord:
    block = _extract_json_block(raw or "")
    if block is None:
        raise ServiceError("Gemini response did not contain a JSON object")
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise ServiceError(f"Gemini response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ServiceError("Gemini response is not a JSON object")

    raw_translations = data.get("translations") or {}
    if not isinstance(raw_translations, dict):
        raw_translations = {}
    translations = {lang: str(raw_translations.get(lang) or "") for lang in languages}
    for lang, value in raw_translations.items():
        translations.setdefault(lang, str(value or ""))

    return GeneratedRecord(
        key1=str(data.get("key1") or "").upper() or "NEW",
        key2=str(data.get("key2") or "").upper() or "KEY",
        translations=translations,
    )


class GeminiClient:
    """google-genai backed client."""

    def __init__(self, api_key: str = "", model: str = DEFAULT_MODEL, client=None):
        if client is None:
            if not api_key:
                raise ServiceNotConfigured("GEMINI_API_KEY is not set")
            client = genai.Client(api_key=api_key)
        self.client = client
        self.model = model

    def generate(
        self,
        text: str,
        languages: Sequence[str],
        image: Optional[ImagePayload] = None,
    ) -> GeneratedRecord:
        langs = with_english(languages)
        contents = []
        if image is not None:
            data, mime_type = image
            contents.append(Part.from_bytes(data=data, mime_type=mime_type))
        contents.append((text or "").strip() or IMAGE_ONLY_PROMPT)

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=GenerateContentConfig(
                    system_instruction=GENERATE_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=build_schema(langs),
                ),
            )
        except APIError as e:
            raise ServiceError(f"Gemini API error: {e}") from e

        record = parse_record(response.text or "", langs)
        logger.info("Generated %s/%s with %d languages", record.key1, record.key2, len(record.translations))
        return record

    def refine(self, lang: str, current_text: str, english_context: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=current_text or english_context,
                config=GenerateContentConfig(
                    system_instruction=REFINE_INSTRUCTION.format(lang=lang, context=english_context),
                ),
            )
        except APIError as e:
            raise ServiceError(f"Gemini API error: {e}") from e
        return (response.text or "").strip() or current_text
