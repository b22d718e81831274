import logging

from sql_localizer.config import Settings
from sql_localizer.services.base import ImagePayload, LocalizationClient
from sql_localizer.services.gemini import GeminiClient
from sql_localizer.services.mock import MockClient

logger = logging.getLogger(__name__)

__all__ = ("ImagePayload", "LocalizationClient", "GeminiClient", "MockClient", "build_client")


def build_client(settings: Settings) -> LocalizationClient:
    """Gemini when configured with a key, the offline dictionary otherwise."""
    if settings.backend == "gemini":
        if settings.api_key:
            return GeminiClient(api_key=settings.api_key, model=settings.model)
        logger.warning("GEMINI_API_KEY is not set; falling back to the offline mock backend")
    return MockClient(delay=settings.mock_delay)
