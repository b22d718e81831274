import os
from dataclasses import dataclass

from dotenv import load_dotenv

# ─────────────────────────────────────────────────────────────
# DEFAULTS
# ─────────────────────────────────────────────────────────────
DEFAULT_LABELS: dict[str, str] = {
    "en": "English",
    "cn": "Simplified Chinese",
    "kh": "Khmer",
    "id": "Indonesian",
    "vn": "Vietnamese",
    "th": "Thai",
    "my": "Malay",
    "lo": "Lao",
    "hk": "Trad. Chinese (HK)",
    "ar": "Arabic",
    "fr": "French",
    "ja": "Japanese",
    "es": "Spanish",
    "pt": "Portuguese",
    "tr": "Turkish",
    "ru": "Russian",
    "kr": "Korean",
    "mm": "Burmese",
    "hi": "Hindi",
    "mn": "Mongolian",
    "ph": "Filipino",
    "bd": "Bengali",
    "ne": "Nepali",
    "pk": "Urdu",
}

# Generate every default language unless the user narrows it down
DEFAULT_GEN_LANGS: list[str] = list(DEFAULT_LABELS)

DEFAULT_HEADER = (
    "INSERT INTO [dbo].[BackOffice]([key1],[key2],[Translated],[en],[cn],[kh],[id],[vn],[th],[my],"
    "[lo],[hk],[ar],[fr],[ja],[es],[pt],[tr],[ru],[kr],[mm],[hi],[mn],[ph],[bd],[ne],[pk]) VALUES"
)
DEFAULT_MAPPING = (
    "key1, key2, empty, en, cn, kh, id, vnt, th, my, lo, hk, ar, fr, ja, es, pt, tr, ru, kr, "
    "mm, hi, mn, ph, bd, ne, pk"
)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MOCK_DELAY = 0.8

GENERATE_FAILED = "Generation failed. Please try again."
REFINE_FAILED = "Refinement failed. Please try again."

BACKENDS = ("gemini", "mock")


# ─────────────────────────────────────────────────────────────
# ENV
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    backend: str = "gemini"
    mock_delay: float = DEFAULT_MOCK_DELAY
    log_level: str = "INFO"


def _float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


def load_settings(dotenv: bool = True) -> Settings:
    """Read settings from the environment (and a .env file unless disabled)."""
    if dotenv:
        load_dotenv()
    backend = (os.getenv("SQL_LOCALIZER_BACKEND") or "gemini").strip().lower()
    if backend not in BACKENDS:
        backend = "gemini"
    return Settings(
        api_key=(os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip(),
        model=(os.getenv("GEMINI_MODEL") or DEFAULT_MODEL).strip() or DEFAULT_MODEL,
        backend=backend,
        mock_delay=_float_env("SQL_LOCALIZER_MOCK_DELAY", DEFAULT_MOCK_DELAY),
        log_level=(os.getenv("SQL_LOCALIZER_LOG_LEVEL") or "INFO").strip().upper(),
    )
